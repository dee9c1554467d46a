"""
Tests for the Query Engine and the Aggregator.
"""

from datetime import date

import pytest

from expense_ledger.models.entry import Entry, FilterSpec, SortKey
from expense_ledger.queries import QueryEngine, compute_totals, month_range


def entry(entry_id, amount=1, date="2024-03-01", desc="Item", category="Food"):
    return Entry(id=entry_id, desc=desc, amount=amount, category=category, date=date)


def legacy(entry_id, amount=1, date="2024-03-01", desc="Item", category="Food"):
    return Entry.from_stored(
        {"id": entry_id, "desc": desc, "amount": amount, "category": category, "date": date}
    )


@pytest.fixture
def engine():
    return QueryEngine()


def ids(entries):
    return [item.id for item in entries]


class TestMonthRange:
    """Tests for month parsing."""

    def test_regular_month(self):
        assert month_range("2024-03") == (date(2024, 3, 1), date(2024, 3, 31))

    def test_leap_february(self):
        assert month_range("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))
        assert month_range("2023-02")[1] == date(2023, 2, 28)

    @pytest.mark.parametrize("month", ["", None, "2024-3", "2024/03", "March", "2024-13", "2024-00", "2024-03-01"])
    def test_anything_else_disables_filter(self, month):
        """Test that malformed or impossible months return None."""
        assert month_range(month) is None


class TestTextFilter:
    """Tests for free-text matching."""

    def test_matches_description_case_insensitive(self, engine, coffee_and_bus):
        result = engine.execute(coffee_and_bus, FilterSpec(text="cof"))
        assert ids(result) == ["e1"]

    def test_matches_category(self, engine, coffee_and_bus):
        result = engine.execute(coffee_and_bus, FilterSpec(text="TRANS"))
        assert ids(result) == ["e2"]

    def test_matches_across_the_joining_space(self, engine, coffee_and_bus):
        """Test that the needle can span description and category."""
        result = engine.execute(coffee_and_bus, FilterSpec(text="bus tr"))
        assert ids(result) == ["e2"]

    def test_missing_legacy_text_is_not_searchable(self, engine):
        """Test that a null description or category matches as empty text."""
        entries = [legacy("null", desc=None, category=None), entry("plain", desc="Nonesuch")]
        assert ids(engine.execute(entries, FilterSpec(text="none"))) == ["plain"]

    def test_empty_text_matches_all(self, engine, coffee_and_bus):
        assert len(engine.execute(coffee_and_bus, FilterSpec(text=""))) == 2


class TestMonthFilter:
    """Tests for calendar-month filtering."""

    def test_month_with_entries(self, engine, coffee_and_bus):
        result = engine.execute(coffee_and_bus, FilterSpec(month="2024-03"))
        assert ids(result) == ["e2", "e1"]

    def test_month_without_entries(self, engine, coffee_and_bus):
        assert engine.execute(coffee_and_bus, FilterSpec(month="2024-04")) == []

    def test_month_bounds_are_inclusive(self, engine):
        entries = [
            entry("first", date="2024-02-01"),
            entry("last", date="2024-02-29"),
            entry("before", date="2024-01-31"),
            entry("after", date="2024-03-01"),
        ]
        result = engine.execute(entries, FilterSpec(month="2024-02"))
        assert sorted(ids(result)) == ["first", "last"]

    def test_out_of_range_month_disables_filter(self, engine, coffee_and_bus):
        assert len(engine.execute(coffee_and_bus, FilterSpec(month="2024-13"))) == 2

    def test_unparseable_dates_excluded_when_filtering(self, engine):
        """Test that a legacy undated entry never lands in a month."""
        entries = [legacy("bad", date="someday"), entry("good", date="2024-03-05")]
        assert ids(engine.execute(entries, FilterSpec(month="2024-03"))) == ["good"]


class TestSorting:
    """Tests for ordering."""

    def test_date_desc_is_default(self, engine, coffee_and_bus):
        assert ids(engine.execute(coffee_and_bus)) == ["e2", "e1"]

    def test_date_asc(self, engine, coffee_and_bus):
        result = engine.execute(coffee_and_bus, FilterSpec(sort_key=SortKey.DATE_ASC))
        assert ids(result) == ["e1", "e2"]

    def test_amount_desc_and_asc(self, engine, coffee_and_bus):
        desc = engine.execute(coffee_and_bus, FilterSpec(sort_key="amount-desc"))
        asc = engine.execute(coffee_and_bus, FilterSpec(sort_key="amount-asc"))
        assert ids(desc) == ["e1", "e2"]
        assert ids(asc) == ["e2", "e1"]

    @pytest.mark.parametrize("sort_key", list(SortKey))
    def test_ties_keep_ledger_order(self, engine, sort_key):
        """Test that equal keys keep their relative order in every direction."""
        entries = [entry("a", amount=5), entry("b", amount=5), entry("c", amount=5)]
        assert ids(engine.execute(entries, FilterSpec(sort_key=sort_key))) == ["a", "b", "c"]

    @pytest.mark.parametrize("sort_key", [SortKey.DATE_DESC, SortKey.DATE_ASC])
    def test_undated_entries_sort_last(self, engine, sort_key):
        entries = [
            legacy("undated", date=""),
            entry("march", date="2024-03-01"),
            legacy("garbage", date="31/12/2024"),
            entry("april", date="2024-04-01"),
        ]
        result = ids(engine.execute(entries, FilterSpec(sort_key=sort_key)))
        assert result[2:] == ["undated", "garbage"]

    def test_non_numeric_amounts_sort_as_zero(self, engine):
        entries = [legacy("text", amount="abc"), entry("small", amount=0.5), legacy("neg", amount=-1)]
        result = engine.execute(entries, FilterSpec(sort_key=SortKey.AMOUNT_ASC))
        assert ids(result) == ["neg", "text", "small"]

    def test_input_is_not_mutated(self, engine, coffee_and_bus):
        original = list(coffee_and_bus)
        engine.execute(coffee_and_bus, FilterSpec(sort_key=SortKey.DATE_DESC))
        assert coffee_and_bus == original


class TestAggregator:
    """Tests for totals."""

    def test_totals_example(self):
        entries = [
            entry("1", amount=10, category="Food"),
            entry("2", amount=5, category="Food"),
            entry("3", amount=7, category="Transport"),
        ]
        totals = compute_totals(entries)
        assert totals.total == 22
        assert totals.by_category == {"Food": 15, "Transport": 7}
        assert totals.top_category == "Food"

    def test_empty_view(self):
        totals = compute_totals([])
        assert totals.total == 0
        assert totals.by_category == {}
        assert totals.top_category is None

    def test_category_sums_equal_total(self, coffee_and_bus):
        totals = compute_totals(coffee_and_bus)
        assert sum(totals.by_category.values()) == pytest.approx(totals.total)

    def test_categories_are_exact_strings(self):
        """Test that no case folding or trimming happens."""
        totals = compute_totals([
            entry("1", category="Food"),
            entry("2", category="food"),
            entry("3", category="Food "),
        ])
        assert set(totals.by_category) == {"Food", "food", "Food "}

    def test_garbage_amounts_count_as_zero(self):
        totals = compute_totals([legacy("x", amount="abc"), entry("y", amount=3)])
        assert totals.total == 3
        assert totals.by_category == {"Food": 3}

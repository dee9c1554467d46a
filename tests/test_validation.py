"""
Tests for creation-time validation and import decoding.
"""

import pytest

from expense_ledger.models.entry import EntryDraft, ImportRejection
from expense_ledger.validation import (
    EntryValidationError,
    EntryValidator,
    coerce_import_amount,
    parse_positive_amount,
)
from expense_ledger.validation.validator import (
    INVALID_AMOUNT,
    MISSING_CATEGORY,
    MISSING_DATE,
    MISSING_DESCRIPTION,
)


@pytest.fixture
def validator():
    return EntryValidator()


class TestParsePositiveAmount:
    """Tests for amount parsing at the creation boundary."""

    @pytest.mark.parametrize("value,expected", [
        ("12.50", 12.5),
        (" 3 ", 3.0),
        (7, 7.0),
        (0.01, 0.01),
    ])
    def test_accepts_positive_numbers(self, value, expected):
        """Test that positive finite amounts pass."""
        assert parse_positive_amount(value) == expected

    @pytest.mark.parametrize("value", [
        "", "   ", "abc", "0", 0, -5, "-1", "nan", "inf", float("inf"), None, True,
    ])
    def test_rejects_everything_else(self, value):
        """Test that zero, negatives, blanks and non-finite values fail."""
        assert parse_positive_amount(value) is None


class TestCoerceImportAmount:
    """Tests for amount conversion on restore."""

    @pytest.mark.parametrize("value,expected", [
        ("9.99", 9.99),
        (-5, -5.0),
        (12, 12.0),
    ])
    def test_numbers_become_floats(self, value, expected):
        assert coerce_import_amount(value) == expected

    def test_non_numbers_kept_verbatim(self):
        assert coerce_import_amount("abc") == "abc"
        assert coerce_import_amount([1, 2]) == [1, 2]


class TestValidateDraft:
    """Tests for the add-form rules."""

    def test_valid_draft(self, validator):
        """Test that a complete draft has no issues."""
        draft = EntryDraft(description="Coffee", amount="4.50", category="Food", date="2024-03-02")
        assert validator.validate_draft(draft).is_valid

    def test_whitespace_description_rejected(self, validator):
        """Test that a blank description is the first notice."""
        draft = EntryDraft(description="   ", amount="4.50", date="2024-03-02")
        result = validator.validate_draft(draft)
        assert result.first_message == MISSING_DESCRIPTION

    def test_issues_follow_form_order(self, validator):
        """Test that every problem is reported, description first."""
        draft = EntryDraft(description="", amount="-1", category="", date="")
        messages = [issue.message for issue in validator.validate_draft(draft).issues]
        assert messages == [MISSING_DESCRIPTION, INVALID_AMOUNT, MISSING_DATE, MISSING_CATEGORY]

    def test_build_entry_raises_with_user_message(self, validator):
        """Test that a refused draft raises the first notice."""
        draft = EntryDraft(description="Coffee", amount="0", date="2024-03-02")
        with pytest.raises(EntryValidationError) as excinfo:
            validator.build_entry(draft)
        assert excinfo.value.user_message == INVALID_AMOUNT
        assert [issue.field for issue in excinfo.value.issues] == ["amount"]

    def test_build_entry_normalises_fields(self, validator):
        """Test that a valid draft becomes a clean Entry."""
        draft = EntryDraft(
            description="  Coffee ",
            amount="4.50",
            category="Food",
            date="2024-03-02T09:00",
        )
        entry = validator.build_entry(draft)
        assert entry.description == "Coffee"
        assert entry.amount == 4.5
        assert entry.date == "2024-03-02"
        assert entry.id


class TestDecodeImportElement:
    """Tests for per-element restore decoding."""

    def test_accepts_complete_element(self, validator):
        """Test that a backup element is kept with its id."""
        decoded = validator.decode_import_element(0, {
            "id": "keep-me",
            "desc": "Coffee",
            "amount": 4.5,
            "category": "Food",
            "date": "2024-03-02",
        })
        assert decoded.id == "keep-me"
        assert decoded.description == "Coffee"

    def test_coerces_field_types(self, validator):
        """Test string/number coercion and date truncation."""
        decoded = validator.decode_import_element(0, {
            "desc": 42,
            "amount": "9.99",
            "category": "Snacks",
            "date": "2024-03-02T23:59:59.000Z",
        })
        assert decoded.description == "42"
        assert decoded.amount == 9.99
        assert decoded.category == "Snacks"
        assert decoded.date == "2024-03-02"
        assert decoded.id

    @pytest.mark.parametrize("missing", ["desc", "amount", "date", "category"])
    def test_rejects_missing_field(self, validator, missing):
        """Test that each required key must be truthy."""
        element = {"desc": "Coffee", "amount": 4.5, "category": "Food", "date": "2024-03-02"}
        element[missing] = ""
        decoded = validator.decode_import_element(3, element)
        assert isinstance(decoded, ImportRejection)
        assert decoded.index == 3
        assert missing in decoded.reason

    def test_rejects_zero_amount(self, validator):
        """Test that a zero amount is falsy and dropped."""
        decoded = validator.decode_import_element(
            0, {"desc": "Free", "amount": 0, "category": "Food", "date": "2024-03-02"}
        )
        assert isinstance(decoded, ImportRejection)

    def test_tolerates_legacy_amounts_and_descriptions(self, validator):
        """Test that creation rules are not applied to imported elements."""
        negative = validator.decode_import_element(
            0, {"desc": "Refund", "amount": -3, "category": "Food", "date": "2024-03-02"}
        )
        garbage = validator.decode_import_element(
            1, {"desc": "Odd", "amount": "abc", "category": "Food", "date": "2024-03-02"}
        )
        blank = validator.decode_import_element(
            2, {"desc": " ", "amount": 4, "category": "Food", "date": "2024-03-02"}
        )

        assert negative.amount == -3.0
        assert garbage.amount == "abc"
        assert garbage.amount_value() == 0.0
        assert blank.description == " "

    def test_rejects_non_objects(self, validator):
        """Test that scalars and nulls in the array are dropped."""
        for element in (None, 5, "entry", ["desc"]):
            assert isinstance(validator.decode_import_element(0, element), ImportRejection)

    def test_decode_import_keeps_order(self, validator):
        """Test that accepted entries keep document order."""
        report = validator.decode_import([
            {"id": "a", "desc": "A", "amount": 1, "category": "Food", "date": "2024-03-01"},
            {"id": "bad", "desc": "B", "category": "Food", "date": "2024-03-02"},
            {"id": "c", "desc": "C", "amount": 3, "category": "Food", "date": "2024-03-03"},
        ])
        assert [entry.id for entry in report.accepted] == ["a", "c"]
        assert [rejection.index for rejection in report.rejected] == [1]

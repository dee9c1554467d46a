"""
Query Engine

DESIGN DECISION: A view is a pure function of (entries, FilterSpec).
The engine never touches the store and never mutates its input, so the
same entry list can be queried repeatedly with different filters.

Steps, in order:
1. Text filter - case-insensitive substring of "description category"
2. Month filter - inclusive calendar range of a YYYY-MM month
3. Stable sort by the requested key

The engine must survive whatever is already stored: unparseable dates
and non-numeric amounts are handled, never raised.
"""

import calendar
import re
from datetime import date
from typing import Iterable, Optional

from expense_ledger.models.entry import Entry, FilterSpec, SortKey


MONTH_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}")


def month_range(month: Optional[str]) -> Optional[tuple[date, date]]:
    """
    First and last day of a `YYYY-MM` month.

    Returns None for anything else, including out-of-range months,
    which disables month filtering.
    """
    if not month or not MONTH_PATTERN.fullmatch(month):
        return None
    year, month_number = (int(part) for part in month.split("-"))
    if not 1 <= month_number <= 12 or year < 1:
        return None
    last_day = calendar.monthrange(year, month_number)[1]
    return date(year, month_number, 1), date(year, month_number, last_day)


class QueryEngine:
    """
    Produces filtered, ordered views of the ledger.
    """

    def execute(self, entries: Iterable[Entry], spec: Optional[FilterSpec] = None) -> list[Entry]:
        """
        Run a filter+sort specification over entries.

        Returns a new list; the input is left as it was.
        """
        spec = spec or FilterSpec()
        needle = spec.text.lower()
        bounds = month_range(spec.month)

        matched = [
            entry
            for entry in entries
            if self._matches_text(entry, needle) and self._in_month(entry, bounds)
        ]
        return self._sort(matched, spec.sort_key)

    def _matches_text(self, entry: Entry, needle: str) -> bool:
        if not needle:
            return True
        return needle in entry.search_text()

    def _in_month(self, entry: Entry, bounds: Optional[tuple[date, date]]) -> bool:
        if bounds is None:
            return True
        entry_date = entry.calendar_date()
        if entry_date is None:
            return False
        start, end = bounds
        return start <= entry_date <= end

    def _sort(self, entries: list[Entry], sort_key: SortKey) -> list[Entry]:
        """
        Stable sort. Python's sort keeps equal keys in input order even
        with reverse=True.
        """
        if sort_key in (SortKey.AMOUNT_DESC, SortKey.AMOUNT_ASC):
            return sorted(
                entries,
                key=lambda entry: entry.amount_value(),
                reverse=sort_key is SortKey.AMOUNT_DESC,
            )

        # Undated entries go last in both directions
        dated = [(entry.calendar_date(), entry) for entry in entries]
        undated = [entry for entry_date, entry in dated if entry_date is None]
        ordered = sorted(
            ((entry_date, entry) for entry_date, entry in dated if entry_date is not None),
            key=lambda pair: pair[0],
            reverse=sort_key is not SortKey.DATE_ASC,
        )
        return [entry for _, entry in ordered] + undated

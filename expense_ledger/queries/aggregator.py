"""
Aggregator

Sums over an arbitrary list of entries, usually the output of the query
engine. Categories are bucketed by exact string; no case folding and no
whitespace cleanup.
"""

from typing import Iterable

from expense_ledger.models.entry import Entry, Totals


def compute_totals(entries: Iterable[Entry]) -> Totals:
    """
    Total and per-category sums.

    Amounts that are not finite numbers contribute 0.
    """
    total = 0.0
    by_category: dict[str, float] = {}

    for entry in entries:
        amount = entry.amount_value()
        total += amount
        key = str(entry.category)
        by_category[key] = by_category.get(key, 0.0) + amount

    return Totals(total=total, by_category=by_category)

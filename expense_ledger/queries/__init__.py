"""Query execution package."""

from expense_ledger.queries.aggregator import compute_totals
from expense_ledger.queries.engine import QueryEngine, month_range

__all__ = ["QueryEngine", "compute_totals", "month_range"]

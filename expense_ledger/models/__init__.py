"""
Data Models Package

This package contains all Pydantic models used by the Expense Ledger.
All data flowing through the ledger must conform to these schemas.
"""

from expense_ledger.models.entry import (
    Entry,
    EntryCategory,
    EntryDraft,
    FilterSpec,
    ImportRejection,
    ImportReport,
    SortKey,
    Totals,
    ValidationIssue,
    ValidationResult,
    coerce_amount,
    new_entry_id,
    parse_calendar_date,
)
from expense_ledger.models.audit import (
    AuditSeverity,
    LedgerEvent,
    LedgerEventBuilder,
    LedgerEventType,
)

__all__ = [
    # Entry models
    "Entry",
    "EntryCategory",
    "EntryDraft",
    "FilterSpec",
    "ImportRejection",
    "ImportReport",
    "SortKey",
    "Totals",
    "ValidationIssue",
    "ValidationResult",
    "coerce_amount",
    "new_entry_id",
    "parse_calendar_date",
    # Audit models
    "AuditSeverity",
    "LedgerEvent",
    "LedgerEventBuilder",
    "LedgerEventType",
]

"""Entry validation package."""

from expense_ledger.validation.validator import (
    EntryValidationError,
    EntryValidator,
    coerce_import_amount,
    parse_positive_amount,
)

__all__ = [
    "EntryValidationError",
    "EntryValidator",
    "coerce_import_amount",
    "parse_positive_amount",
]

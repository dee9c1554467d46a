"""Services package."""

from expense_ledger.services.storage import (
    InMemorySlot,
    JsonFileSlot,
    PersistenceSlot,
    QuotaExceededError,
    StorageError,
)

__all__ = [
    # Storage services
    "InMemorySlot",
    "JsonFileSlot",
    "PersistenceSlot",
    "QuotaExceededError",
    "StorageError",
]

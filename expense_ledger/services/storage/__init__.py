"""
Storage Services Package

Provides the abstract persistence slot and its concrete implementations.
The JSON file slot is the default backend, but the store only ever sees
the interface, so it stays swappable.
"""

from expense_ledger.services.storage.interface import (
    PersistenceSlot,
    QuotaExceededError,
    StorageError,
)
from expense_ledger.services.storage.json_file import JsonFileSlot
from expense_ledger.services.storage.memory import InMemorySlot

__all__ = [
    # Interface
    "PersistenceSlot",
    # Exceptions
    "QuotaExceededError",
    "StorageError",
    # Implementations
    "InMemorySlot",
    "JsonFileSlot",
]

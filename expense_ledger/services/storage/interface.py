"""
Abstract Persistence Interface

DESIGN DECISION: The ledger never talks to a concrete storage backend.
It is handed a PersistenceSlot: one named, durable key holding the whole
ledger as a serialized document. This allows us to:
1. Use a JSON file on disk in normal runs
2. Use in-memory storage for testing
3. Simulate failing storage to exercise the recovery paths

The interface is intentionally tiny - read the whole document, write
the whole document. The ledger is small and always rewritten in full.
"""

from abc import ABC, abstractmethod
from typing import Optional

from expense_ledger.errors import LedgerError


class PersistenceSlot(ABC):
    """
    Abstract interface for the ledger's durable slot.

    Any storage implementation (JSON file, in-memory, ...) must
    implement these methods.
    """

    @property
    @abstractmethod
    def key(self) -> str:
        """Name of the slot."""
        pass

    @abstractmethod
    def read(self) -> Optional[str]:
        """
        Read the stored document.

        Returns:
            The serialized ledger, or None if nothing was ever written

        Raises:
            StorageError: If the slot exists but cannot be read
        """
        pass

    @abstractmethod
    def write(self, payload: str) -> None:
        """
        Replace the stored document.

        Args:
            payload: The serialized ledger

        Raises:
            StorageError: If the write fails
        """
        pass


class StorageError(LedgerError):
    """Base exception for storage operations."""
    pass


class QuotaExceededError(StorageError):
    """The slot refused a write because it is full."""
    pass

"""
In-Memory Storage Implementation

Used by tests and by callers embedding the ledger without a disk.
An optional byte quota mimics a browser-style storage limit so the
"write failed, keep going" path can be exercised.
"""

from typing import Optional

from expense_ledger.services.storage.interface import (
    PersistenceSlot,
    QuotaExceededError,
)


class InMemorySlot(PersistenceSlot):
    """Persistence slot holding its document in a Python string."""

    def __init__(
        self,
        key: str = "expense.entries.v1",
        initial: Optional[str] = None,
        max_bytes: Optional[int] = None,
    ):
        self._key = key
        self._payload = initial
        self._max_bytes = max_bytes
        self.write_count = 0

    @property
    def key(self) -> str:
        return self._key

    @property
    def payload(self) -> Optional[str]:
        """The last successfully written document."""
        return self._payload

    def read(self) -> Optional[str]:
        return self._payload

    def write(self, payload: str) -> None:
        size = len(payload.encode("utf-8"))
        if self._max_bytes is not None and size > self._max_bytes:
            raise QuotaExceededError(
                f"Slot {self._key} quota exceeded ({size} > {self._max_bytes} bytes)"
            )
        self._payload = payload
        self.write_count += 1

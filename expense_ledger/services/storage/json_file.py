"""
JSON File Storage Implementation

DESIGN DECISION: The ledger is stored as one JSON file per slot key
inside the configured data directory. This keeps the on-disk format
identical to the backup document, so a user can inspect or copy it.

TRADEOFFS:
- The whole ledger is rewritten on every mutation (fine for personal use)
- No locking (there is exactly one writer)

Writes go to a temporary file first and are moved into place, so a
crash mid-write leaves the previous ledger intact.
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

from expense_ledger.services.storage.interface import PersistenceSlot, StorageError


class JsonFileSlot(PersistenceSlot):
    """
    Persistence slot backed by `<directory>/<key>.json`.
    """

    def __init__(self, directory: Path, key: str):
        self._directory = Path(directory)
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    @property
    def path(self) -> Path:
        return self._directory / f"{self._key}.json"

    def read(self) -> Optional[str]:
        """Read the slot file, or None if it was never written."""
        path = self.path
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read {path}: {e}")

    def write(self, payload: str) -> None:
        """Atomically replace the slot file."""
        path = self.path
        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self._directory,
                prefix=f".{self._key}.",
                suffix=".tmp",
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    handle.write(payload)
                os.replace(tmp_name, path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}")

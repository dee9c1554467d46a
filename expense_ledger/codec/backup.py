"""
Backup and restore documents.

A backup is the full ledger (unfiltered, current order) as a pretty-printed
JSON array of `{id, desc, amount, category, date}` objects.

Restoring is all-or-nothing at the document level and lenient at the
element level:
- not JSON, or not a JSON array -> BackupFormatError, nothing applied
- otherwise each element is decoded on its own; bad elements are dropped
"""

import json
from typing import Iterable, Optional, Union

from expense_ledger.errors import LedgerError
from expense_ledger.models.entry import Entry, ImportReport
from expense_ledger.validation import EntryValidator


RESTORE_FAILED_MESSAGE = "Couldn't import that file."


class BackupFormatError(LedgerError):
    """The restore document is not a backup; the ledger was not touched."""

    def __init__(self, message: str):
        super().__init__(message, user_message=RESTORE_FAILED_MESSAGE)


def dump_backup(entries: Iterable[Entry]) -> str:
    """Serialize entries as a human-readable backup document."""
    return json.dumps(
        [entry.to_document() for entry in entries],
        indent=2,
        ensure_ascii=False,
    )


def decode_backup(
    text: Union[str, bytes],
    validator: Optional[EntryValidator] = None,
) -> ImportReport:
    """
    Decode a restore document into accepted entries and rejections.

    Raises:
        BackupFormatError: If the document is not a JSON array
    """
    validator = validator or EntryValidator()

    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise BackupFormatError(f"Backup is not UTF-8 text: {e}")

    try:
        document = json.loads(text)
    except (TypeError, ValueError, RecursionError) as e:
        raise BackupFormatError(f"Backup is not valid JSON: {e}")

    if not isinstance(document, list):
        raise BackupFormatError(
            f"Backup must be a JSON array, got {type(document).__name__}"
        )

    return validator.decode_import(document)

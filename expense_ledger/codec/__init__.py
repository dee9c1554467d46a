"""Import/export codec package."""

from expense_ledger.codec.backup import (
    RESTORE_FAILED_MESSAGE,
    BackupFormatError,
    decode_backup,
    dump_backup,
)
from expense_ledger.codec.tabular import (
    EXPORT_HEADER,
    ExportRow,
    export_csv,
    export_filename,
    format_raw_amount,
    read_export,
)

__all__ = [
    # Backup
    "RESTORE_FAILED_MESSAGE",
    "BackupFormatError",
    "decode_backup",
    "dump_backup",
    # Tabular export
    "EXPORT_HEADER",
    "ExportRow",
    "export_csv",
    "export_filename",
    "format_raw_amount",
    "read_export",
]

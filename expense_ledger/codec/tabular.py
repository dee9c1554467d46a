"""
Tabular (CSV) export.

Emits a view in its current order with the header
`Date,Description,Category,Amount`. Fields containing a comma, a double
quote or a line break are quoted with inner quotes doubled; everything
else is written bare. Amounts are raw numbers, never locale-formatted.
Rows are separated by "\\n" and there is no trailing newline.
"""

import csv
import io
import math
from typing import Any, Iterable, NamedTuple, Optional

from expense_ledger.models.entry import Entry


EXPORT_HEADER = ("Date", "Description", "Category", "Amount")
LINE_TERMINATOR = "\n"


class ExportRow(NamedTuple):
    """One data row read back from an export."""
    date: str
    description: str
    category: str
    amount: str


def format_raw_amount(value: Any) -> str:
    """
    Plain numeric rendering: integral values without a trailing `.0`,
    everything else as Python's shortest round-tripping repr.
    """
    if isinstance(value, bool) or value is None:
        return str(value)
    if isinstance(value, float):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return repr(value)
    return str(value)


def export_csv(entries: Iterable[Entry]) -> str:
    """Render entries as CSV text."""
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        lineterminator=LINE_TERMINATOR,
        quoting=csv.QUOTE_MINIMAL,
    )
    writer.writerow(EXPORT_HEADER)
    for entry in entries:
        writer.writerow([
            str(entry.date),
            str(entry.description),
            str(entry.category),
            format_raw_amount(entry.amount),
        ])

    text = buffer.getvalue()
    if text.endswith(LINE_TERMINATOR):
        text = text[: -len(LINE_TERMINATOR)]
    return text


def read_export(text: str) -> list[ExportRow]:
    """
    Parse CSV text produced by `export_csv` back into rows.

    The header row is skipped when present.
    """
    reader = csv.reader(io.StringIO(text, newline=""))
    rows = []
    for index, record in enumerate(reader):
        if index == 0 and tuple(record) == EXPORT_HEADER:
            continue
        if not record:
            continue
        rows.append(ExportRow(*record))
    return rows


def export_filename(month: Optional[str], prefix: str = "expenses") -> str:
    """File name for an export: the active month filter, or `all`."""
    return f"{prefix}_{month or 'all'}.csv"

"""
Entry Validation

DESIGN DECISION: Validation happens at two distinct boundaries:

CREATION (add form):
- Description present after trimming
- Amount is a finite number greater than zero
- Date present
- Category present
- Any failure rejects the whole add and surfaces one notice

IMPORT (restore document):
- Each element is decoded on its own into either an Entry or a
  rejection reason
- Only the required fields are checked; amounts that would fail the
  creation rules are tolerated, like any other legacy data
- Rejected elements are dropped silently; the report keeps the reasons
  so the policy can be inspected element by element

Data already in the ledger is never re-validated here. Legacy entries
are read leniently by the query layer instead.
"""

import math
from typing import Any, Optional, Union

from expense_ledger.errors import LedgerError
from expense_ledger.models.entry import (
    ISO_DATE_LENGTH,
    Entry,
    EntryDraft,
    ImportRejection,
    ImportReport,
    ValidationIssue,
    ValidationResult,
    new_entry_id,
)


MISSING_DESCRIPTION = "Please add a description."
INVALID_AMOUNT = "Amount must be a positive number."
MISSING_DATE = "Please select a date."
MISSING_CATEGORY = "Please choose a category."

# Keys an import element must carry with a truthy value
REQUIRED_IMPORT_KEYS = ("desc", "amount", "date", "category")


class EntryValidationError(LedgerError):
    """An add was refused; nothing was written."""

    def __init__(self, result: ValidationResult):
        self.issues = list(result.issues)
        message = result.first_message or "Invalid entry"
        super().__init__(message, user_message=message)


def parse_positive_amount(value: Any) -> Optional[float]:
    """
    Parse a user-supplied amount.

    Returns the amount, or None if it is not a finite number above zero.
    Blank input counts as zero and is therefore rejected.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        amount = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(amount) or amount <= 0:
        return None
    return amount


def coerce_import_amount(value: Any) -> Any:
    """
    Convert an imported amount to a float where possible.

    Values that are not numbers at all are kept as they are; the query
    layer reads them as 0.
    """
    try:
        return float(value)
    except (TypeError, ValueError):
        return value


class EntryValidator:
    """
    Validates drafts before they become entries, and decodes import
    elements one by one.
    """

    def validate_draft(self, draft: EntryDraft) -> ValidationResult:
        """
        Check a draft against the creation rules.

        Issues come back in the order the form shows its fields, so the
        first one is the notice to display.
        """
        issues = []

        if not draft.description.strip():
            issues.append(ValidationIssue(
                field="description",
                issue_type="missing",
                message=MISSING_DESCRIPTION,
            ))

        if parse_positive_amount(draft.amount) is None:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message=INVALID_AMOUNT,
            ))

        if not draft.date.strip():
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message=MISSING_DATE,
            ))

        if not draft.category.strip():
            issues.append(ValidationIssue(
                field="category",
                issue_type="missing",
                message=MISSING_CATEGORY,
            ))

        return ValidationResult(issues=issues)

    def build_entry(self, draft: EntryDraft) -> Entry:
        """
        Turn a draft into a new Entry.

        Raises:
            EntryValidationError: If the draft breaks any creation rule
        """
        result = self.validate_draft(draft)
        if not result.is_valid:
            raise EntryValidationError(result)

        return Entry(
            id=new_entry_id(),
            description=draft.description.strip(),
            amount=parse_positive_amount(draft.amount),
            category=draft.category,
            date=draft.date.strip()[:ISO_DATE_LENGTH],
        )

    def decode_import_element(self, index: int, element: Any) -> Union[Entry, ImportRejection]:
        """
        Decode one element of a restore document.

        Only the presence of the four required fields is checked. The
        creation rules are not applied, so legacy entries carried by a
        backup (negative or non-numeric amounts, blank descriptions)
        come back the way the store holds them.

        The element keeps its id when it has one; otherwise a fresh id
        is generated.
        """
        if not isinstance(element, dict):
            return ImportRejection(index=index, reason="not an object")

        for key in REQUIRED_IMPORT_KEYS:
            if not element.get(key):
                return ImportRejection(index=index, reason=f"missing {key}")

        return Entry.from_stored({
            "id": element.get("id"),
            "desc": str(element["desc"]),
            "amount": coerce_import_amount(element["amount"]),
            "category": str(element["category"]),
            "date": str(element["date"])[:ISO_DATE_LENGTH],
        })

    def decode_import(self, elements: list) -> ImportReport:
        """Decode every element of a restore document, keeping order."""
        report = ImportReport()
        for index, element in enumerate(elements):
            decoded = self.decode_import_element(index, element)
            if isinstance(decoded, ImportRejection):
                report.rejected.append(decoded)
            else:
                report.accepted.append(decoded)
        return report

"""
Core Data Models for the Expense Ledger

These models define the shapes flowing through the ledger:
1. Entry - the one persisted record
2. EntryDraft - what a caller submits (and gets back from an edit)
3. FilterSpec / SortKey - ephemeral query parameters
4. Totals - derived aggregates, never persisted
5. ValidationIssue / ImportRejection - why something was refused

DESIGN DECISION: New data is validated strictly, stored data is read
leniently. An Entry built by the add pipeline always has a positive,
finite amount and a 10-character date. An Entry rehydrated from storage
is taken as-is, so every consumer reads amounts and dates through
`amount_value()` and `calendar_date()`, which never raise.
"""

import datetime as dt
import math
from enum import Enum
from typing import Any, Optional, Union
from uuid import uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class EntryCategory(str, Enum):
    """
    Preset categories offered when recording an expense.

    Imported entries may carry any free-text category; this list is only
    the vocabulary the add form offers.
    """
    FOOD = "Food"
    TRANSPORT = "Transport"
    HOUSING = "Housing"
    UTILITIES = "Utilities"
    HEALTH = "Health"
    ENTERTAINMENT = "Entertainment"
    EDUCATION = "Education"
    SHOPPING = "Shopping"
    TRAVEL = "Travel"
    OTHER = "Other"


class SortKey(str, Enum):
    """Orderings a view can be sorted by."""
    DATE_DESC = "date-desc"
    DATE_ASC = "date-asc"
    AMOUNT_DESC = "amount-desc"
    AMOUNT_ASC = "amount-asc"


ISO_DATE_LENGTH = 10


def new_entry_id() -> str:
    """Generate an opaque, never-reused entry identifier."""
    return uuid4().hex


def coerce_amount(value: Any) -> float:
    """
    Read an amount leniently.

    Anything that is not a finite number (None, garbage strings, NaN,
    infinities, booleans) counts as 0.
    """
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def parse_calendar_date(value: Any) -> Optional[dt.date]:
    """Parse a stored ISO date string, returning None when it is unusable."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return dt.date.fromisoformat(value.strip()[:ISO_DATE_LENGTH])
    except ValueError:
        return None


# =============================================================================
# CORE ENTRY MODEL
# =============================================================================

class Entry(BaseModel):
    """
    One recorded expense.

    The document key for the description is `desc`; that is the key used
    in the persistence slot and in backup files.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(
        default_factory=new_entry_id,
        min_length=1,
        description="Opaque unique identifier"
    )
    description: str = Field(
        ...,
        alias="desc",
        description="Free-text description of the expense"
    )
    amount: float = Field(
        ...,
        description="Amount spent"
    )
    category: str = Field(
        ...,
        description="Category label (preset or free text)"
    )
    date: str = Field(
        ...,
        description="ISO calendar date, YYYY-MM-DD"
    )

    @field_validator('date', mode='before')
    @classmethod
    def truncate_date(cls, v: Any) -> Any:
        """Dates never carry a time-of-day component."""
        if isinstance(v, dt.date):
            return v.isoformat()
        if isinstance(v, str):
            return v[:ISO_DATE_LENGTH]
        return v

    @classmethod
    def from_stored(cls, raw: dict) -> "Entry":
        """
        Rehydrate an entry from the persistence slot without validation.

        Stored data may predate current validation rules; it is kept
        verbatim and read through the lenient accessors.
        """
        return cls.model_construct(
            id=str(raw.get("id") or new_entry_id()),
            description=raw.get("desc", ""),
            amount=raw.get("amount", 0),
            category=raw.get("category", ""),
            date=raw.get("date", ""),
        )

    def amount_value(self) -> float:
        """Amount as a finite float (0 for legacy garbage)."""
        return coerce_amount(self.amount)

    def calendar_date(self) -> Optional[dt.date]:
        """Entry date as a `date`, or None if it cannot be parsed."""
        return parse_calendar_date(self.date)

    def search_text(self) -> str:
        """Lowercased text the free-text filter matches against."""
        return f"{_as_text(self.description)} {_as_text(self.category)}".lower()

    def to_document(self) -> dict:
        """Convert to the backup/persistence document shape."""
        return {
            "id": self.id,
            "desc": self.description,
            "amount": self.amount,
            "category": self.category,
            "date": self.date,
        }

    def to_draft(self) -> "EntryDraft":
        """Hand this entry's values back as an editable draft."""
        amount = self.amount
        if isinstance(amount, bool) or not isinstance(amount, (int, float, str)):
            amount = None
        return EntryDraft(
            description=_as_text(self.description),
            amount=amount,
            category=_as_text(self.category),
            date=_as_text(self.date),
        )


class EntryDraft(BaseModel):
    """
    Values typed into the add form.

    Deliberately loose: the amount may still be the raw text the user
    entered. Validation happens in EntryValidator, not here, so a bad
    draft can be reported field by field.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    description: str = ""
    amount: Union[float, str, None] = None
    category: str = EntryCategory.FOOD.value
    date: str = ""

    @field_validator('date', mode='before')
    @classmethod
    def accept_date_objects(cls, v: Any) -> Any:
        if isinstance(v, dt.date):
            return v.isoformat()
        if v is None:
            return ""
        return v

    @field_validator('category', mode='before')
    @classmethod
    def accept_category_enum(cls, v: Any) -> Any:
        if isinstance(v, EntryCategory):
            return v.value
        if v is None:
            return ""
        return v


# =============================================================================
# QUERY MODELS
# =============================================================================

class FilterSpec(BaseModel):
    """
    Parameters of a ledger view.

    Never persisted. An empty `text` matches everything; a `month` that
    is not `YYYY-MM` disables month filtering.
    """

    text: str = ""
    month: str = ""
    sort_key: SortKey = SortKey.DATE_DESC

    @field_validator('sort_key', mode='before')
    @classmethod
    def fallback_sort_key(cls, v: Any) -> Any:
        """Unknown sort keys fall back to newest first."""
        if isinstance(v, SortKey):
            return v
        try:
            return SortKey(v)
        except ValueError:
            return SortKey.DATE_DESC

    @field_validator('text', 'month', mode='before')
    @classmethod
    def none_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class Totals(BaseModel):
    """Sum and per-category breakdown over a list of entries."""

    total: float = 0.0
    by_category: dict[str, float] = Field(
        default_factory=dict,
        description="Category -> summed amount, in first-seen order"
    )

    def ranked_categories(self) -> list[tuple[str, float]]:
        """Categories by descending sum; ties keep first-seen order."""
        return sorted(
            self.by_category.items(),
            key=lambda item: item[1],
            reverse=True,
        )

    @property
    def top_category(self) -> Optional[str]:
        """Category with the largest sum, or None for an empty view."""
        ranked = self.ranked_categories()
        if not ranked:
            return None
        return ranked[0][0]


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single reason a draft was refused."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_value')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


class ValidationResult(BaseModel):
    """Outcome of validating a draft."""

    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.issues

    @property
    def first_message(self) -> Optional[str]:
        """The notice shown to the user: the first problem found."""
        return self.issues[0].message if self.issues else None


class ImportRejection(BaseModel):
    """Why one element of a restore document was dropped."""

    index: int = Field(
        ...,
        ge=0,
        description="Position of the element in the source document"
    )
    reason: str


class ImportReport(BaseModel):
    """Per-element outcome of decoding a backup document."""

    accepted: list[Entry] = Field(default_factory=list)
    rejected: list[ImportRejection] = Field(default_factory=list)

    @property
    def accepted_count(self) -> int:
        return len(self.accepted)

    @property
    def rejected_count(self) -> int:
        return len(self.rejected)

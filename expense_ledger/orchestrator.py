"""
Main Orchestrator for the Expense Ledger

This module ties together all the components and is the one surface the
UI glue talks to:
1. Mutations (add → validate → prepend → persist, remove, clear, edit)
2. Reads (filter → sort → aggregate → summary)
3. Documents (CSV export, JSON backup, restore)

DESIGN DECISION: The orchestrator owns no state of its own. The ledger
lives in the EntryStore; this class only sequences calls and records
what happened in the audit log.
"""

import math
from datetime import date
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from expense_ledger.audit import AuditLogger, configure_logging, create_audit_logger
from expense_ledger.codec import (
    BackupFormatError,
    decode_backup,
    dump_backup,
    export_csv,
    export_filename,
)
from expense_ledger.config import LedgerSettings, get_settings
from expense_ledger.models.entry import (
    Entry,
    EntryDraft,
    FilterSpec,
    ImportReport,
    SortKey,
    Totals,
)
from expense_ledger.queries import QueryEngine, compute_totals
from expense_ledger.services.storage import JsonFileSlot, PersistenceSlot
from expense_ledger.store import EntryStore


NO_VALUE = "—"


def format_display_amount(value: Any) -> str:
    """Two decimals with thousands separators; non-finite values show as a dash."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return NO_VALUE
    if not math.isfinite(number):
        return NO_VALUE
    return f"{number:,.2f}"


def today_iso(today: Optional[date] = None) -> str:
    """Default date for the add form."""
    return (today or date.today()).isoformat()


class CategoryRow(BaseModel):
    """One line of the per-category breakdown."""

    category: str
    amount: float
    display_amount: str


class LedgerSummary(BaseModel):
    """
    Everything the summary panel shows for one view.
    """

    total: float
    display_total: str
    month_label: str = Field(
        ...,
        description="'for <month>' or 'for —' when no month filter is set"
    )
    count: int = Field(ge=0)
    top_category: str = Field(
        ...,
        description="Largest category, or '—' for an empty view"
    )
    categories: list[CategoryRow] = Field(default_factory=list)

    @classmethod
    def build(cls, view: list[Entry], totals: Totals, month: str) -> "LedgerSummary":
        return cls(
            total=totals.total,
            display_total=format_display_amount(totals.total),
            month_label=f"for {month or NO_VALUE}",
            count=len(view),
            top_category=totals.top_category or NO_VALUE,
            categories=[
                CategoryRow(
                    category=category,
                    amount=amount,
                    display_amount=format_display_amount(amount),
                )
                for category, amount in totals.ranked_categories()
            ],
        )


class LedgerService:
    """
    Orchestrates every ledger operation.

    Flow for a read:
    1. QueryEngine filters and sorts the current entries
    2. compute_totals aggregates that view
    3. LedgerSummary packages both for display

    Flow for a restore:
    1. decode_backup validates the document shape (all-or-nothing)
    2. Each element is decoded; bad ones are dropped
    3. Survivors are prepended to the ledger and persisted
    """

    def __init__(
        self,
        store: EntryStore,
        query_engine: Optional[QueryEngine] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[LedgerSettings] = None,
    ):
        self._store = store
        self._query_engine = query_engine or QueryEngine()
        self._audit_logger = audit_logger
        self._settings = settings or get_settings()

    @property
    def store(self) -> EntryStore:
        return self._store

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_entry(self, draft: EntryDraft) -> Entry:
        """
        Record a new expense.

        Raises:
            EntryValidationError: Show `error.user_message` to the user
        """
        return self._store.add(draft)

    def remove_entry(self, entry_id: str) -> bool:
        """Delete an entry; unknown ids are ignored."""
        return self._store.remove(entry_id)

    def clear(self) -> int:
        """Delete every entry. Confirmation is the caller's job."""
        return self._store.clear()

    def begin_edit(self, entry_id: str) -> Optional[EntryDraft]:
        """
        Load an entry into the form for editing.

        The entry leaves the ledger immediately; submit the returned draft
        with `add_entry` to put it back.
        """
        return self._store.edit(entry_id)

    def new_draft(self, today: Optional[date] = None) -> EntryDraft:
        """A blank add form: default category, today's date."""
        return EntryDraft(
            category=self._settings.default_category.value,
            date=today_iso(today),
        )

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def default_filter(self, today: Optional[date] = None) -> FilterSpec:
        """The view shown on start: current month, newest first."""
        return FilterSpec(
            text="",
            month=today_iso(today)[:7],
            sort_key=SortKey.DATE_DESC,
        )

    def view(self, spec: Optional[FilterSpec] = None) -> list[Entry]:
        """Filtered, sorted entries."""
        return self._query_engine.execute(self._store.entries, spec)

    def totals(self, spec: Optional[FilterSpec] = None) -> Totals:
        """Totals over the filtered view."""
        return compute_totals(self.view(spec))

    def summary(self, spec: Optional[FilterSpec] = None) -> LedgerSummary:
        """Display-ready summary of the filtered view."""
        spec = spec or FilterSpec()
        view = self.view(spec)
        return LedgerSummary.build(view, compute_totals(view), spec.month)

    # -------------------------------------------------------------------------
    # Documents
    # -------------------------------------------------------------------------

    def export_csv(self, spec: Optional[FilterSpec] = None) -> tuple[str, str]:
        """
        Export the filtered view.

        Returns:
            (filename, csv_text)
        """
        spec = spec or FilterSpec()
        view = self.view(spec)
        filename = export_filename(spec.month, prefix=self._settings.export_filename_prefix)
        text = export_csv(view)

        if self._audit_logger:
            self._audit_logger.log_export_generated(filename, len(view))
        return filename, text

    def backup(self) -> tuple[str, str]:
        """
        Serialize the whole ledger, ignoring any filter.

        Returns:
            (filename, json_text)
        """
        entries = self._store.entries
        filename = self._settings.backup_filename
        text = dump_backup(entries)

        if self._audit_logger:
            self._audit_logger.log_backup_generated(filename, len(entries))
        return filename, text

    def restore(self, document: Union[str, bytes]) -> ImportReport:
        """
        Merge a backup document into the ledger.

        Imported entries go in front of the existing ones; nothing is
        removed or deduplicated.

        Raises:
            BackupFormatError: The ledger is unchanged; show
                               `error.user_message` to the user
        """
        try:
            report = decode_backup(document)
        except BackupFormatError as e:
            if self._audit_logger:
                self._audit_logger.log_import_failed(str(e))
            raise

        self._store.prepend_all(report.accepted)

        if self._audit_logger:
            self._audit_logger.log_import_applied(
                accepted=report.accepted_count,
                rejected=report.rejected_count,
            )
        return report

    def restore_from_path(self, path: Path) -> ImportReport:
        """
        Read a backup file in one shot and merge it.

        Raises:
            BackupFormatError: Unreadable file or bad document; the ledger
                               is unchanged
        """
        try:
            document = Path(path).read_bytes()
        except OSError as e:
            if self._audit_logger:
                self._audit_logger.log_import_failed(str(e))
            raise BackupFormatError(f"Could not read {path}: {e}")
        return self.restore(document)


def create_ledger_service(
    slot: Optional[PersistenceSlot] = None,
    settings: Optional[LedgerSettings] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> LedgerService:
    """
    Factory function to create the application components.

    Args:
        slot: Persistence slot to use. Defaults to a JSON file under the
              configured data directory.
        settings: Settings to use (cached settings if None)
        audit_logger: Audit logger to use (one sized from settings if None)

    Returns:
        A LedgerService whose store has already loaded the ledger
    """
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    audit_logger = audit_logger or create_audit_logger(settings.audit_history_size)
    slot = slot or JsonFileSlot(settings.data_directory, settings.storage_key)

    store = EntryStore(slot, audit_logger=audit_logger)
    return LedgerService(
        store,
        audit_logger=audit_logger,
        settings=settings,
    )

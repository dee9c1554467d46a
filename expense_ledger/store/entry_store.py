"""
Entry Store

The single owner of the ledger. Every mutation goes through here, and
every mutation ends with a write to the injected persistence slot.

GUARANTEES:
- Element 0 is always the result of the most recent add or import
- A refused add leaves the ledger untouched
- Storage failures never escape: an unreadable slot loads as an empty
  ledger, a failed write is logged and the in-memory ledger stays
  authoritative for the rest of the session

KNOWN HAZARD: `edit` removes the entry before the caller resubmits it.
If the caller never calls `add` with the returned draft, the entry is
gone for good. This matches how the ledger has always behaved.
"""

import json
from typing import Iterable, Iterator, Optional

from expense_ledger.audit import AuditLogger
from expense_ledger.models.entry import Entry, EntryDraft
from expense_ledger.services.storage import PersistenceSlot
from expense_ledger.validation import EntryValidationError, EntryValidator


class EntryStore:
    """
    Ordered, persisted collection of entries (the ledger).
    """

    def __init__(
        self,
        slot: PersistenceSlot,
        audit_logger: Optional[AuditLogger] = None,
        validator: Optional[EntryValidator] = None,
    ):
        """
        Initialize the store and rehydrate it from the slot.

        Args:
            slot: Durable storage for the serialized ledger
            audit_logger: Where mutations and recovered failures are recorded.
                          If None, nothing is audited.
            validator: Creation-time validator (a default one if None)
        """
        self._slot = slot
        self._audit_logger = audit_logger
        self._validator = validator or EntryValidator()
        self._entries: list[Entry] = self._load()

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    @property
    def entries(self) -> list[Entry]:
        """A copy of the ledger, newest action first."""
        return list(self._entries)

    def get(self, entry_id: str) -> Optional[Entry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(list(self._entries))

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add(self, draft: EntryDraft) -> Entry:
        """
        Validate a draft and put the new entry at the front.

        Raises:
            EntryValidationError: If the draft breaks a creation rule.
                                  The ledger is unchanged.
        """
        try:
            entry = self._validator.build_entry(draft)
        except EntryValidationError as e:
            if self._audit_logger:
                self._audit_logger.log_entry_rejected(
                    [issue.model_dump() for issue in e.issues]
                )
            raise

        self._entries.insert(0, entry)
        self._save()

        if self._audit_logger:
            self._audit_logger.log_entry_added(
                entry_id=entry.id,
                description=entry.description,
                amount=entry.amount,
                category=entry.category,
            )
        return entry

    def remove(self, entry_id: str) -> bool:
        """
        Remove the entry with this id, if any.

        An unknown id is not an error. The ledger is persisted either way.

        Returns:
            True if an entry was removed
        """
        removed = self._take(entry_id)
        self._save()

        if self._audit_logger:
            self._audit_logger.log_entry_removed(entry_id, found=removed is not None)
        return removed is not None

    def prepend_all(self, entries: Iterable[Entry]) -> int:
        """
        Put already-validated entries ahead of the existing ledger.

        Used by restore. Existing entries are never removed or replaced,
        and no deduplication happens.

        Returns:
            Number of entries added
        """
        incoming = list(entries)
        self._entries = incoming + self._entries
        self._save()
        return len(incoming)

    def clear(self) -> int:
        """
        Empty the ledger.

        Returns:
            Number of entries removed
        """
        removed_count = len(self._entries)
        self._entries = []
        self._save()

        if self._audit_logger:
            self._audit_logger.log_ledger_cleared(removed_count)
        return removed_count

    def edit(self, entry_id: str, updates: Optional[dict] = None) -> Optional[EntryDraft]:
        """
        Pull an entry out of the ledger so it can be edited.

        The entry is removed and persisted as removed *now*. Its values
        come back as a draft (with `updates` applied on top) for the
        caller to resubmit through `add`, which gives it a new id and
        puts it at the front.

        `updates` may use draft field names or the document key `desc`.

        Returns:
            The draft, or None if no entry has this id (nothing changes)

        Raises:
            ValueError: If `updates` names an unknown field. The entry is
                        left in the ledger.
        """
        updates = self._draft_updates(updates)
        entry = self._take(entry_id)
        if entry is None:
            return None

        self._save()

        if self._audit_logger:
            self._audit_logger.log_entry_edit_started(entry_id)

        draft = entry.to_draft()
        if updates:
            draft = EntryDraft.model_validate({**draft.model_dump(), **updates})
        return draft

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    @staticmethod
    def _draft_updates(updates: Optional[dict]) -> dict:
        """Map edit updates onto draft field names."""
        mapped = {}
        for key, value in (updates or {}).items():
            field = "description" if key == "desc" else key
            if field not in EntryDraft.model_fields:
                raise ValueError(f"Unknown entry field: {key}")
            mapped[field] = value
        return mapped

    def _take(self, entry_id: str) -> Optional[Entry]:
        """Remove and return the first entry with this id."""
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                return self._entries.pop(index)
        return None

    def _load(self) -> list[Entry]:
        """
        Read the ledger from the slot.

        Missing, unreadable, corrupt or wrongly shaped data all yield an
        empty ledger. Elements that are not objects are skipped.
        """
        try:
            raw = self._slot.read()
            if raw is None:
                return []
            document = json.loads(raw)
            if not isinstance(document, list):
                raise ValueError(f"expected a JSON array, got {type(document).__name__}")
            entries = [
                Entry.from_stored(item)
                for item in document
                if isinstance(item, dict)
            ]
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_ledger_load_failed(self._slot.key, str(e))
            return []

        if self._audit_logger:
            self._audit_logger.log_ledger_loaded(self._slot.key, len(entries))
        return entries

    def _save(self) -> bool:
        """
        Write the whole ledger to the slot.

        Fire-and-forget: failures are audited and swallowed.

        Returns:
            True if the write succeeded
        """
        try:
            payload = json.dumps(
                [entry.to_document() for entry in self._entries],
                ensure_ascii=False,
            )
            self._slot.write(payload)
            return True
        except Exception as e:
            if self._audit_logger:
                self._audit_logger.log_persist_failed(self._slot.key, str(e))
            return False

"""
Audit Models for the Expense Ledger

Every mutation of the ledger, and every failure the ledger recovers from
on its own, produces one LedgerEvent. Persistence and import errors are
never shown to the user, so this trail is the only place they surface.

DESIGN DECISION: Events are append-only. Nothing edits or removes them.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LedgerEventType(str, Enum):
    """
    Types of events we audit.
    """
    # Entry lifecycle
    ENTRY_ADDED = "entry_added"
    ENTRY_REJECTED = "entry_rejected"
    ENTRY_REMOVED = "entry_removed"
    ENTRY_EDIT_STARTED = "entry_edit_started"
    LEDGER_CLEARED = "ledger_cleared"

    # Persistence
    LEDGER_LOADED = "ledger_loaded"
    LEDGER_LOAD_FAILED = "ledger_load_failed"
    PERSIST_FAILED = "persist_failed"

    # Backup / export
    IMPORT_APPLIED = "import_applied"
    IMPORT_FAILED = "import_failed"
    EXPORT_GENERATED = "export_generated"
    BACKUP_GENERATED = "backup_generated"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class LedgerEvent(BaseModel):
    """
    A single audit event.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    event_type: LedgerEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Which entry this is about, if any
    entry_id: Optional[str] = Field(
        default=None,
        description="ID of the entry this event relates to"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entry_id": self.entry_id,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class LedgerEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = LedgerEventBuilder.entry_added(entry_id, "Coffee", 4.5)
        event = LedgerEventBuilder.persist_failed("disk full")
    """

    @staticmethod
    def entry_added(
        entry_id: str,
        description: str,
        amount: float,
        category: str,
    ) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ENTRY_ADDED,
            entry_id=entry_id,
            description=f"Entry added: {description[:100]}",
            details={
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def entry_rejected(issues: list[dict]) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ENTRY_REJECTED,
            severity=AuditSeverity.WARNING,
            description=f"Entry rejected with {len(issues)} validation issues",
            details={"issues": issues},
            is_user_action=True,
        )

    @staticmethod
    def entry_removed(entry_id: str, found: bool) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.ENTRY_REMOVED,
            entry_id=entry_id,
            description=(
                "Entry removed" if found else "Remove requested for unknown entry"
            ),
            details={"found": found},
            is_user_action=True,
        )

    @staticmethod
    def entry_edit_started(entry_id: str) -> LedgerEvent:
        # The entry is gone from the ledger until the draft is resubmitted.
        return LedgerEvent(
            event_type=LedgerEventType.ENTRY_EDIT_STARTED,
            severity=AuditSeverity.WARNING,
            entry_id=entry_id,
            description="Entry removed for editing; lost unless resubmitted",
            is_user_action=True,
        )

    @staticmethod
    def ledger_cleared(removed_count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_CLEARED,
            description=f"Ledger cleared ({removed_count} entries removed)",
            details={"removed_count": removed_count},
            is_user_action=True,
        )

    @staticmethod
    def ledger_loaded(storage_key: str, entry_count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_LOADED,
            description=f"Ledger loaded with {entry_count} entries",
            details={
                "storage_key": storage_key,
                "entry_count": entry_count,
            },
        )

    @staticmethod
    def ledger_load_failed(storage_key: str, error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.LEDGER_LOAD_FAILED,
            severity=AuditSeverity.WARNING,
            description="Stored ledger unreadable; starting empty",
            error_message=error_message,
            details={"storage_key": storage_key},
        )

    @staticmethod
    def persist_failed(storage_key: str, error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.PERSIST_FAILED,
            severity=AuditSeverity.ERROR,
            description="Ledger write failed; in-memory state kept",
            error_message=error_message,
            details={"storage_key": storage_key},
        )

    @staticmethod
    def import_applied(accepted: int, rejected: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.IMPORT_APPLIED,
            description=f"Backup restored: {accepted} entries imported, {rejected} skipped",
            details={
                "accepted": accepted,
                "rejected": rejected,
            },
            is_user_action=True,
        )

    @staticmethod
    def import_failed(error_message: str) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.IMPORT_FAILED,
            severity=AuditSeverity.WARNING,
            description="Backup restore rejected; ledger unchanged",
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def export_generated(filename: str, row_count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.EXPORT_GENERATED,
            description=f"CSV export generated: {filename}",
            details={
                "filename": filename,
                "row_count": row_count,
            },
            is_user_action=True,
        )

    @staticmethod
    def backup_generated(filename: str, entry_count: int) -> LedgerEvent:
        return LedgerEvent(
            event_type=LedgerEventType.BACKUP_GENERATED,
            description=f"Backup generated: {filename}",
            details={
                "filename": filename,
                "entry_count": entry_count,
            },
            is_user_action=True,
        )

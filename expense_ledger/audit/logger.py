"""
Audit Logger

DESIGN DECISION: Every significant action on the ledger is logged.
This provides:
1. Traceability of every mutation
2. The only record of storage failures (they are never shown to the user)
3. A recent-history view for debugging

The audit logger:
- Is synchronous, like the rest of the ledger
- Gracefully handles failures (doesn't crash the app if logging fails)
- Keeps a bounded in-memory trail of recent events
"""

import logging
from collections import deque
from typing import Optional

import structlog

from expense_ledger.config import get_settings
from expense_ledger.models.audit import LedgerEvent, LedgerEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Point the stdlib logger behind structlog at stderr.

    structlog renders the JSON line; stdlib only needs to pass the
    message through.
    """
    logging.basicConfig(format="%(message)s", level=getattr(logging, level, logging.INFO))


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. A bounded in-memory history (for inspection and tests)
    """

    def __init__(self, history_size: int = 500):
        """
        Initialize audit logger.

        Args:
            history_size: How many recent events to keep in memory.
                          0 disables the history.
        """
        self._history: deque[LedgerEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("expense_ledger.audit")

    def log(self, event: LedgerEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written to the local log.
        """
        self._history.append(event)

        log_dict = event.to_log_dict()
        try:
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception:
            # Log failure but don't raise
            return False

        return True

    def recent_events(self, limit: int = 100) -> list[LedgerEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        events = list(self._history)
        events.reverse()
        return events[:limit]

    def log_entry_added(
        self,
        entry_id: str,
        description: str,
        amount: float,
        category: str,
    ) -> None:
        """Log a new entry."""
        event = LedgerEventBuilder.entry_added(
            entry_id=entry_id,
            description=description,
            amount=amount,
            category=category,
        )
        self.log(event)

    def log_entry_rejected(self, issues: list[dict]) -> None:
        """Log an add refused by validation."""
        self.log(LedgerEventBuilder.entry_rejected(issues))

    def log_entry_removed(self, entry_id: str, found: bool) -> None:
        """Log a delete request."""
        self.log(LedgerEventBuilder.entry_removed(entry_id, found))

    def log_entry_edit_started(self, entry_id: str) -> None:
        """Log an entry pulled out of the ledger for editing."""
        self.log(LedgerEventBuilder.entry_edit_started(entry_id))

    def log_ledger_cleared(self, removed_count: int) -> None:
        """Log a full clear."""
        self.log(LedgerEventBuilder.ledger_cleared(removed_count))

    def log_ledger_loaded(self, storage_key: str, entry_count: int) -> None:
        """Log startup rehydration."""
        self.log(LedgerEventBuilder.ledger_loaded(storage_key, entry_count))

    def log_ledger_load_failed(self, storage_key: str, error_message: str) -> None:
        """Log an unreadable slot."""
        self.log(LedgerEventBuilder.ledger_load_failed(storage_key, error_message))

    def log_persist_failed(self, storage_key: str, error_message: str) -> None:
        """Log a swallowed write failure."""
        self.log(LedgerEventBuilder.persist_failed(storage_key, error_message))

    def log_import_applied(self, accepted: int, rejected: int) -> None:
        """Log a successful restore."""
        self.log(LedgerEventBuilder.import_applied(accepted, rejected))

    def log_import_failed(self, error_message: str) -> None:
        """Log a rejected restore document."""
        self.log(LedgerEventBuilder.import_failed(error_message))

    def log_export_generated(self, filename: str, row_count: int) -> None:
        """Log a CSV export."""
        self.log(LedgerEventBuilder.export_generated(filename, row_count))

    def log_backup_generated(self, filename: str, entry_count: int) -> None:
        """Log a backup download."""
        self.log(LedgerEventBuilder.backup_generated(filename, entry_count))


def create_audit_logger(history_size: Optional[int] = None) -> AuditLogger:
    """
    Create an audit logger sized from settings unless told otherwise.
    """
    if history_size is None:
        history_size = get_settings().audit_history_size
    return AuditLogger(history_size=history_size)

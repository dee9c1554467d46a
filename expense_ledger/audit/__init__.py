"""Audit logging package."""

from expense_ledger.audit.logger import AuditLogger, configure_logging, create_audit_logger

__all__ = ["AuditLogger", "configure_logging", "create_audit_logger"]

"""
Shared fixtures for Expense Ledger tests.

No test touches the real data directory: stores are built on in-memory
slots, and file-backed tests use pytest's tmp_path.
"""

import json

import pytest

from expense_ledger.audit import AuditLogger
from expense_ledger.config import LedgerSettings
from expense_ledger.models.entry import Entry
from expense_ledger.orchestrator import LedgerService
from expense_ledger.services.storage import InMemorySlot
from expense_ledger.store import EntryStore


@pytest.fixture
def audit_logger():
    return AuditLogger(history_size=100)


@pytest.fixture
def slot():
    return InMemorySlot()


@pytest.fixture
def store(slot, audit_logger):
    return EntryStore(slot, audit_logger=audit_logger)


@pytest.fixture
def settings(tmp_path):
    return LedgerSettings(data_directory=tmp_path)


@pytest.fixture
def service(store, audit_logger, settings):
    return LedgerService(store, audit_logger=audit_logger, settings=settings)


@pytest.fixture
def coffee_and_bus():
    """The two-entry ledger used throughout the filter examples."""
    return [
        Entry(id="e1", desc="Coffee", category="Food", amount=5, date="2024-03-02"),
        Entry(id="e2", desc="Bus", category="Transport", amount=3, date="2024-03-15"),
    ]


@pytest.fixture
def stored_slot():
    """Build an in-memory slot pre-filled with raw entry documents."""
    def build(documents) -> InMemorySlot:
        return InMemorySlot(initial=json.dumps(documents))
    return build

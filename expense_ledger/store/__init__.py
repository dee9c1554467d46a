"""Entry store package."""

from expense_ledger.store.entry_store import EntryStore

__all__ = ["EntryStore"]

"""
Exceptions shared across the ledger.

Each layer defines its own subclass next to the code that raises it;
this module only holds the common base so callers can catch everything
the ledger raises on purpose with one clause.
"""

from typing import Optional


class LedgerError(Exception):
    """Base exception for the expense ledger."""

    user_message: str = "Something went wrong."

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        if user_message is not None:
            self.user_message = user_message

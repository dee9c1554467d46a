"""
Expense Ledger - Source Package

A personal expense ledger: record dated, categorized expenses, query
them by text and month, total them per category, and back them up.

DESIGN PRINCIPLES:
1. New data is validated strictly, stored data is read leniently
2. Every mutation is persisted immediately
3. Storage failures never crash the app
4. Every mutation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Ledger Team"

"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the ledger models used by ``statement_ledger``.
"""

from .ledger import Base, SlMonthSummary, SlTransaction

__all__ = [
    "Base",
    "SlMonthSummary",
    "SlTransaction",
]

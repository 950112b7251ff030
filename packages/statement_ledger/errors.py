"""Exception types raised across ``statement_ledger``."""

from __future__ import annotations


class StatementLedgerError(Exception):
    """Base class for errors surfaced to callers of the ledger."""


class DocumentReadError(StatementLedgerError):
    """A source document could not be opened or its envelope is invalid."""


class StorageError(StatementLedgerError):
    """The transaction/summary store failed; the affected merge is aborted."""


__all__ = ["StatementLedgerError", "DocumentReadError", "StorageError"]

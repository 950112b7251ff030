# ruff: noqa: I001
"""Persistence contract for the ledger and its SQLAlchemy implementation.

The merge coordinator only needs three operations from storage (see
:class:`TransactionStore`). :class:`SqlTransactionStore` provides them over the
``sl_transactions`` / ``sl_month_summaries`` tables owned by ``libs/db``:

- ``insert_new``: one ``INSERT .. ON CONFLICT (fingerprint_sha256) DO NOTHING
  RETURNING ..`` statement. The database decides which rows are new, so two
  concurrent uploads of the same statement admit each row exactly once.
- ``increment_month_summary``: one ``INSERT .. ON CONFLICT (owner_id,
  month_key) DO UPDATE SET total_spend = total_spend + excluded.total_spend``
  statement; the read-modify-write happens inside the database.

Both PostgreSQL and SQLite (3.35+, for RETURNING) are supported. Commit and
rollback are the caller's job (``db.client.session_scope``).
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Protocol

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from db.models.ledger import SlMonthSummary, SlTransaction
from .errors import StorageError
from .models import MonthSummary, Transaction


class TransactionStore(Protocol):
    def insert_new(self, transactions: Sequence[Transaction]) -> list[Transaction]:
        """Insert rows whose fingerprint is unseen; return exactly those, in input order."""
        ...

    def get_month_summary(self, owner: str, month: str) -> MonthSummary | None: ...

    def increment_month_summary(
        self, owner: str, month: str, spend: Decimal, count: int
    ) -> MonthSummary:
        """Atomically add ``spend``/``count`` to the (owner, month) row, creating it."""
        ...


def _to_decimal_2(d: Decimal) -> Decimal:
    return d.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)


class SqlTransactionStore:
    """:class:`TransactionStore` over a SQLAlchemy ``Session``."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def _insert(self) -> Callable[[Any], Any]:
        dialect = self.session.get_bind().dialect.name
        if dialect == "postgresql":
            return pg_insert
        if dialect == "sqlite":
            return sqlite_insert
        raise StorageError(f"unsupported database dialect for ledger upserts: {dialect}")

    def insert_new(self, transactions: Sequence[Transaction]) -> list[Transaction]:
        if not transactions:
            return []
        payloads = [
            {
                "owner_id": tx.owner,
                "source_document": tx.source,
                "fingerprint_sha256": tx.fingerprint,
                "posting_date": date.fromisoformat(tx.posting_date),
                "month_key": tx.month,
                "description": tx.description,
                "amount": _to_decimal_2(tx.amount),
                "reference_number": tx.reference_number,
            }
            for tx in transactions
        ]
        stmt = self._insert()(SlTransaction).values(payloads)
        stmt = stmt.on_conflict_do_nothing(
            index_elements=[SlTransaction.fingerprint_sha256]
        ).returning(SlTransaction.fingerprint_sha256)
        try:
            inserted = set(self.session.execute(stmt).scalars().all())
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to insert transactions: {exc}") from exc
        return [tx for tx in transactions if tx.fingerprint in inserted]

    def get_month_summary(self, owner: str, month: str) -> MonthSummary | None:
        stmt = select(SlMonthSummary.total_spend, SlMonthSummary.transaction_count).where(
            (SlMonthSummary.owner_id == owner) & (SlMonthSummary.month_key == month)
        )
        try:
            row = self.session.execute(stmt).first()
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to read month summary {owner}/{month}: {exc}") from exc
        if row is None:
            return None
        return MonthSummary(
            owner=owner,
            month=month,
            total_spend=_to_decimal_2(Decimal(str(row[0]))),
            transaction_count=int(row[1]),
        )

    def increment_month_summary(
        self, owner: str, month: str, spend: Decimal, count: int
    ) -> MonthSummary:
        stmt = self._insert()(SlMonthSummary).values(
            owner_id=owner,
            month_key=month,
            total_spend=_to_decimal_2(spend),
            transaction_count=count,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[SlMonthSummary.owner_id, SlMonthSummary.month_key],
            set_={
                "total_spend": SlMonthSummary.total_spend + stmt.excluded.total_spend,
                "transaction_count": SlMonthSummary.transaction_count
                + stmt.excluded.transaction_count,
                "updated_at": func.current_timestamp(),
            },
        ).returning(SlMonthSummary.total_spend, SlMonthSummary.transaction_count)
        try:
            total, n = self.session.execute(stmt).one()
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to update month summary {owner}/{month}: {exc}") from exc
        return MonthSummary(
            owner=owner,
            month=month,
            total_spend=_to_decimal_2(Decimal(str(total))),
            transaction_count=int(n),
        )


__all__ = ["SqlTransactionStore", "TransactionStore"]

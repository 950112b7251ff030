from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    CHAR,
    BigInteger,
    CheckConstraint,
    Date,
    DateTime,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


# ---------------------------
# Core: sl_transactions
# ---------------------------


class SlTransaction(Base):
    __tablename__ = "sl_transactions"

    # BIGINT on Postgres; SQLite only autoincrements an INTEGER rowid PK.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"), primary_key=True, autoincrement=True
    )
    owner_id: Mapped[str] = mapped_column(String, nullable=False)
    # Source-document identity (e.g., the uploaded filename).
    source_document: Mapped[str] = mapped_column(String, nullable=False)
    # Dedup key. Concurrent uploads race on this unique index, never in Python.
    fingerprint_sha256: Mapped[str] = mapped_column(CHAR(64), nullable=False, unique=True)
    posting_date: Mapped[date] = mapped_column(Date, nullable=False)
    # YYYY-MM bucket of posting_date (UTC calendar).
    month_key: Mapped[str] = mapped_column(CHAR(7), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(18, 2), nullable=False)
    reference_number: Mapped[str | None] = mapped_column(String, nullable=True)
    # Owned by the category-assignment collaborator; the ledger never sets it.
    category: Mapped[str | None] = mapped_column(String, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )

    __table_args__ = (
        Index("ix_sl_tx_owner_month", "owner_id", "month_key"),
        CheckConstraint("length(month_key) = 7", name="ck_sl_tx_month_key"),
    )


# ---------------------------
# Aggregate: sl_month_summaries
# ---------------------------


class SlMonthSummary(Base):
    __tablename__ = "sl_month_summaries"

    owner_id: Mapped[str] = mapped_column(String, primary_key=True)
    month_key: Mapped[str] = mapped_column(CHAR(7), primary_key=True)
    # Running totals; incremented in a single statement, never rescanned.
    total_spend: Mapped[Decimal] = mapped_column(
        Numeric(18, 2), nullable=False, server_default=text("0")
    )
    transaction_count: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default=text("0")
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.current_timestamp()
    )

    __table_args__ = (
        CheckConstraint("transaction_count >= 0", name="ck_sl_month_count"),
    )


__all__ = [
    "Base",
    "SlTransaction",
    "SlMonthSummary",
]

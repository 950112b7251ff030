# ruff: noqa: I001
"""Ledger core tables: transactions and month summaries.

Revision ID: 0001_ledger_core
Revises: None
Create Date: 2025-11-02
"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "0001_ledger_core"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    # sl_transactions
    op.create_table(
        "sl_transactions",
        sa.Column(
            "id",
            sa.BigInteger().with_variant(sa.Integer(), "sqlite"),
            primary_key=True,
            autoincrement=True,
        ),
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("source_document", sa.String(), nullable=False),
        sa.Column("fingerprint_sha256", sa.CHAR(64), nullable=False),
        sa.Column("posting_date", sa.Date(), nullable=False),
        sa.Column("month_key", sa.CHAR(7), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("amount", sa.Numeric(18, 2), nullable=False),
        sa.Column("reference_number", sa.String(), nullable=True),
        sa.Column("category", sa.String(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.UniqueConstraint("fingerprint_sha256", name="uq_sl_tx_fingerprint"),
        sa.CheckConstraint("length(month_key) = 7", name="ck_sl_tx_month_key"),
    )
    op.create_index(
        "ix_sl_tx_owner_month",
        "sl_transactions",
        ["owner_id", "month_key"],
        unique=False,
    )

    # sl_month_summaries: one row per (owner, month), incremented in place
    op.create_table(
        "sl_month_summaries",
        sa.Column("owner_id", sa.String(), nullable=False),
        sa.Column("month_key", sa.CHAR(7), nullable=False),
        sa.Column(
            "total_spend", sa.Numeric(18, 2), nullable=False, server_default=sa.text("0")
        ),
        sa.Column(
            "transaction_count", sa.Integer(), nullable=False, server_default=sa.text("0")
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.current_timestamp(),
        ),
        sa.PrimaryKeyConstraint("owner_id", "month_key", name="pk_sl_month_summaries"),
        sa.CheckConstraint("transaction_count >= 0", name="ck_sl_month_count"),
    )


def downgrade() -> None:
    op.drop_table("sl_month_summaries")
    op.drop_index("ix_sl_tx_owner_month", table_name="sl_transactions")
    op.drop_table("sl_transactions")

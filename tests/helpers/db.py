"""DB helpers for tests: bootstrap a temporary SQLite ledger database."""

from __future__ import annotations

import os
from pathlib import Path

from db import Base
from db.client import get_engine, session_scope
from db.models.ledger import SlMonthSummary, SlTransaction
from sqlalchemy import func, select


def bootstrap_sqlite_db(db_file: Path, *, set_default_env: bool = False) -> str:
    """Create a SQLite database file, initialize schema, and return the URL.

    Using a file-backed SQLite DB ensures multiple SQLAlchemy connections share
    the same state (in-memory DBs are per-connection by default).
    """

    url = f"sqlite+pysqlite:///{db_file}"
    db_file.parent.mkdir(parents=True, exist_ok=True)
    engine = get_engine(database_url=url)
    Base.metadata.create_all(bind=engine)

    if set_default_env:
        os.environ.setdefault("DATABASE_URL", url)
    return url


def count_transactions(*, database_url: str, owner: str | None = None) -> int:
    with session_scope(database_url=database_url) as session:
        stmt = select(func.count()).select_from(SlTransaction)
        if owner is not None:
            stmt = stmt.where(SlTransaction.owner_id == owner)
        return int(session.execute(stmt).scalar_one())


def summary_rows(*, database_url: str) -> list[tuple[str, str, str, int]]:
    """Return ``(owner, month, total as 2dp text, count)`` for every summary row."""

    with session_scope(database_url=database_url) as session:
        rows = session.execute(
            select(
                SlMonthSummary.owner_id,
                SlMonthSummary.month_key,
                SlMonthSummary.total_spend,
                SlMonthSummary.transaction_count,
            ).order_by(SlMonthSummary.owner_id, SlMonthSummary.month_key)
        ).all()
    return [(o, m, f"{float(t):.2f}", int(n)) for o, m, t, n in rows]

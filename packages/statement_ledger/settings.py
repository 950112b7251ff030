"""Runtime settings for ``statement_ledger``.

Values come from the process environment, optionally seeded from a local
``.env`` via ``python-dotenv`` (never overriding variables that are already
set). Malformed values fall back to defaults rather than failing startup.

Recognized variables
--------------------
- ``DATABASE_URL``: SQLAlchemy URL consumed by ``db.client``.
- ``STATEMENT_LEDGER_DEFAULT_YEAR``: year applied to statement dates printed
  without one when no closing date is found (default ``2025``).
- ``STATEMENT_LEDGER_PAGE_WORKERS``: page reconstruction concurrency (default 1).
- ``STATEMENT_LEDGER_DOCUMENT_WORKERS``: documents parsed at once per upload
  batch (default 4).
- ``STATEMENT_LEDGER_CHAR_WIDTH``: estimated glyph width in page units (5.0).
- ``STATEMENT_LEDGER_COLUMN_GAP_CHARS``: gap, in character widths, treated as
  a column break (4).
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import find_dotenv, load_dotenv

_MAX_WORKERS = 32


def _env_int(name: str, default: int, *, minimum: int = 1, maximum: int | None = None) -> int:
    raw = os.getenv(name)
    try:
        value = int(raw) if raw else default
    except ValueError:
        value = default
    if value < minimum:
        value = default
    if maximum is not None:
        value = min(value, maximum)
    return value


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    try:
        value = float(raw) if raw else default
    except ValueError:
        return default
    return value if value > 0 else default


@dataclass(frozen=True, slots=True)
class Settings:
    database_url: str | None = None
    default_statement_year: int = 2025
    page_workers: int = 1
    document_workers: int = 4
    char_width: float = 5.0
    column_gap_chars: int = 4


def load_settings(*, dotenv: bool = True) -> Settings:
    """Build :class:`Settings` from the environment (and ``.env`` when asked)."""

    if dotenv:
        load_dotenv(find_dotenv(usecwd=True), override=False)
    return Settings(
        database_url=os.getenv("DATABASE_URL") or None,
        default_statement_year=_env_int("STATEMENT_LEDGER_DEFAULT_YEAR", 2025, minimum=1900),
        page_workers=_env_int("STATEMENT_LEDGER_PAGE_WORKERS", 1, maximum=_MAX_WORKERS),
        document_workers=_env_int("STATEMENT_LEDGER_DOCUMENT_WORKERS", 4, maximum=_MAX_WORKERS),
        char_width=_env_float("STATEMENT_LEDGER_CHAR_WIDTH", 5.0),
        column_gap_chars=_env_int("STATEMENT_LEDGER_COLUMN_GAP_CHARS", 4),
    )


__all__ = ["Settings", "load_settings"]

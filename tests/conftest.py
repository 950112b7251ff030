"""Pytest configuration for test isolation.

Settings are read from the process environment (and a local ``.env``), and the
database engine in ``db.client`` is process-wide. Either would leak state from
one test into the next, so an autouse fixture clears every
``STATEMENT_LEDGER_*`` variable plus ``DATABASE_URL`` and drops the shared
engine around each test.
"""

from __future__ import annotations

import os
from collections.abc import Iterator

import pytest
from db.client import reset_engine


@pytest.fixture(autouse=True)
def _isolate_env_and_engine(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in list(os.environ):
        if name.startswith("STATEMENT_LEDGER_"):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("DATABASE_URL", raising=False)
    reset_engine()
    yield
    reset_engine()

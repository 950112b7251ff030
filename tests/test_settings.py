from __future__ import annotations

import pytest

from statement_ledger.settings import Settings, load_settings


def test_defaults_without_environment():
    assert load_settings(dotenv=False) == Settings()


def test_reads_environment(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DATABASE_URL", "sqlite+pysqlite:///x.db")
    monkeypatch.setenv("STATEMENT_LEDGER_DEFAULT_YEAR", "2024")
    monkeypatch.setenv("STATEMENT_LEDGER_PAGE_WORKERS", "3")
    monkeypatch.setenv("STATEMENT_LEDGER_DOCUMENT_WORKERS", "500")
    monkeypatch.setenv("STATEMENT_LEDGER_CHAR_WIDTH", "4.5")
    monkeypatch.setenv("STATEMENT_LEDGER_COLUMN_GAP_CHARS", "6")
    s = load_settings(dotenv=False)
    assert s.database_url == "sqlite+pysqlite:///x.db"
    assert s.default_statement_year == 2024
    assert s.page_workers == 3
    assert s.document_workers == 32
    assert s.char_width == 4.5
    assert s.column_gap_chars == 6


def test_malformed_values_fall_back(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STATEMENT_LEDGER_DEFAULT_YEAR", "soon")
    monkeypatch.setenv("STATEMENT_LEDGER_PAGE_WORKERS", "0")
    monkeypatch.setenv("STATEMENT_LEDGER_CHAR_WIDTH", "-1")
    s = load_settings(dotenv=False)
    assert (s.default_statement_year, s.page_workers, s.char_width) == (2025, 1, 5.0)


def test_dotenv_does_not_override_environment(tmp_path, monkeypatch: pytest.MonkeyPatch):
    (tmp_path / ".env").write_text(
        "STATEMENT_LEDGER_DEFAULT_YEAR=2019\nSTATEMENT_LEDGER_PAGE_WORKERS=2\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)
    # Registered so the values loaded from .env are removed afterwards.
    monkeypatch.delenv("STATEMENT_LEDGER_DEFAULT_YEAR", raising=False)
    monkeypatch.setenv("STATEMENT_LEDGER_PAGE_WORKERS", "5")
    s = load_settings()
    assert s.default_statement_year == 2019
    assert s.page_workers == 5

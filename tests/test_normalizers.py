from __future__ import annotations

from decimal import Decimal

import pytest

from statement_ledger.normalizers import (
    format_amount,
    is_iso_date,
    normalize_amount,
    normalize_date,
    normalize_description,
    normalize_description_for_fingerprint,
)


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("45.67", Decimal("45.67")),
        ("$1,234.56", Decimal("1234.56")),
        ("-12.00", Decimal("-12.00")),
        ("$-5.25", Decimal("-5.25")),
        ("-$5.25", Decimal("-5.25")),
        ("(12.00)", Decimal("-12.00")),
        ("($1,000.10)", Decimal("-1000.10")),
        ("1.234.56", Decimal("1234.56")),
        ("", Decimal("0")),
        ("n/a", Decimal("0")),
    ],
)
def test_normalize_amount_text(text, expected):
    assert normalize_amount(text) == expected


def test_normalize_amount_numbers_pass_through():
    assert normalize_amount(Decimal("-3.10")) == Decimal("-3.10")
    assert normalize_amount(7) == Decimal(7)
    assert normalize_amount(0.1) == Decimal("0.1")
    with pytest.raises(TypeError):
        normalize_amount(True)


def test_format_amount_two_places_half_up():
    assert format_amount(Decimal("45.675")) == "45.68"
    assert format_amount(Decimal("-3")) == "-3.00"
    assert format_amount(Decimal("0.004")) == "0.00"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("01/03/2025", "2025-01-03"),
        ("1/3/2025", "2025-01-03"),
        ("01/03/25", "2025-01-03"),
        ("12/31/49", "2049-12-31"),
        ("12/31/50", "1950-12-31"),
        ("01/15/99", "1999-01-15"),
        ("01/15/20", "2020-01-15"),
        ("2025-01-03", "2025-01-03"),
        ("Jan 3, 2025", "2025-01-03"),
    ],
)
def test_normalize_date(text, expected):
    assert normalize_date(text) == expected


@pytest.mark.parametrize("text", ["02/30/2025", "not a date", "", "13/45/99x"])
def test_normalize_date_returns_unparseable_input_unchanged(text):
    assert normalize_date(text) == text


def test_normalize_date_is_idempotent():
    for text in ["01/03/25", "2025-01-03", "Mar 9 2024"]:
        once = normalize_date(text)
        assert normalize_date(once) == once


def test_is_iso_date():
    assert is_iso_date("2025-01-03")
    assert not is_iso_date("2025-02-30")
    assert not is_iso_date("01/03/2025")


def test_normalize_description_collapses_whitespace():
    assert normalize_description("  STARBUCKS \t STORE\n ") == "STARBUCKS STORE"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("STARBUCKS  STORE #123", "starbucks store"),
        ("UBER TRIP 88213344", "uber trip"),
        ("SQUARE COFFEE SQ", "square coffee"),
        ("SHELL OIL - X1Y2", "shell oil"),
        ("NETFLIX.COM", "netflix.com"),
    ],
)
def test_normalize_description_for_fingerprint(text, expected):
    assert normalize_description_for_fingerprint(text) == expected


@pytest.mark.parametrize("value", ["$-5.25", "(12.00)", "1,234.56", "abc", 3, 2.5, Decimal("-1.10")])
def test_normalize_amount_is_idempotent(value):
    once = normalize_amount(value)
    assert normalize_amount(once) == once


@pytest.mark.parametrize("text", ["15", "4821", "\x001", "March 3", "Jan 2025"])
def test_normalize_date_leaves_partial_dates_unparsed(text):
    assert normalize_date(text) == text
    assert not is_iso_date(normalize_date(text))

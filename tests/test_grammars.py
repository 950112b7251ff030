from __future__ import annotations

from datetime import date
from decimal import Decimal

from statement_ledger.grammars import (
    BankOfAmericaCreditGrammar,
    GenericGrammar,
    SignConvention,
    StatementCalendar,
)
from statement_ledger.models import RawTransaction

from tests.helpers.store import BOA_STATEMENT_LINES

CAL_2025 = StatementCalendar(default_year=2025)


# ---------------------------------------------------------------------------
# Bank of America purchases table
# ---------------------------------------------------------------------------


def test_boa_purchases_row():
    rows = BankOfAmericaCreditGrammar().extract(BOA_STATEMENT_LINES, calendar=CAL_2025)
    assert rows == [
        RawTransaction(
            posting_date="2025-01-03",
            description="STARBUCKS STORE",
            amount=Decimal("45.67"),
            reference_number="4821",
        )
    ]


def test_boa_ignores_rows_outside_the_table():
    lines = [
        "BANK OF AMERICA",
        "01/02 01/03 PAYMENT SUMMARY LOOKALIKE 1111 999.99",
        "Purchases and Adjustments",
        "Transaction Date  Posting Date  Description  Reference Number  Amount",
        "01/05 01/06 SHELL OIL 57444 3302 40.00",
        "   continued from previous line",
        "TOTAL PURCHASES AND ADJUSTMENTS FOR THIS PERIOD   40.00",
        "01/07 01/08 AFTER TOTAL 2222 1.00",
    ]
    rows = BankOfAmericaCreditGrammar().extract(lines, calendar=CAL_2025)
    assert [(r.description, r.reference_number, r.amount) for r in rows] == [
        ("SHELL OIL", "57444", Decimal("40.00")),
    ]


def test_boa_table_reopens_on_next_page_heading():
    lines = [
        "Purchases and Adjustments",
        "02/01 02/02 NETFLIX.COM 1001 15.49",
        "TOTAL PURCHASES AND ADJUSTMENTS",
        "",
        "Purchases and Adjustments (continued)",
        "02/10 02/11 SPOTIFY USA 1002 -10.99",
        "TOTAL PURCHASES AND ADJUSTMENTS",
    ]
    rows = BankOfAmericaCreditGrammar().extract(lines, calendar=CAL_2025)
    assert [(r.posting_date, r.amount) for r in rows] == [
        ("2025-02-02", Decimal("15.49")),
        ("2025-02-11", Decimal("-10.99")),
    ]


def test_boa_inverted_sign_convention():
    grammar = BankOfAmericaCreditGrammar(sign=SignConvention.INVERTED)
    rows = grammar.extract(BOA_STATEMENT_LINES, calendar=CAL_2025)
    assert rows[0].amount == Decimal("-45.67")


def test_boa_without_table_yields_nothing():
    assert BankOfAmericaCreditGrammar().extract(["BANK OF AMERICA", "hello"], calendar=CAL_2025) == []


# ---------------------------------------------------------------------------
# Generic grammar
# ---------------------------------------------------------------------------


def test_generic_signs_and_descriptions():
    lines = [
        "01/15/2025 COFFEE SHOP -4.50",
        "03/02 REFUND ($12.00)",
        "03/04 PARKING $-5.25",
        "2025-03-05 GROCERY MARKET 1,234.56",
        "Page 1 of 3",
        "Account summary",
    ]
    rows = GenericGrammar().extract(lines, calendar=CAL_2025)
    assert [(r.posting_date, r.description, r.amount) for r in rows] == [
        ("2025-01-15", "COFFEE SHOP", Decimal("-4.50")),
        ("2025-03-02", "REFUND", Decimal("-12.00")),
        ("2025-03-04", "PARKING", Decimal("-5.25")),
        ("2025-03-05", "GROCERY MARKET", Decimal("1234.56")),
    ]
    assert all(r.reference_number is None for r in rows)


def test_generic_skips_invalid_dates_and_bare_rows():
    lines = ["02/30 BAD DAY 1.00", "01/02 9.99"]
    assert GenericGrammar().extract(lines, calendar=CAL_2025) == []


# ---------------------------------------------------------------------------
# Statement calendar
# ---------------------------------------------------------------------------


def test_calendar_reads_closing_date_and_rolls_back_year():
    cal = StatementCalendar.from_text(
        "Statement Closing Date 01/24/2025\nother text", default_year=2030
    )
    assert cal.closing_date == date(2025, 1, 24)
    assert cal.resolve("12/28") == "2024-12-28"
    assert cal.resolve("01/03") == "2025-01-03"
    assert cal.resolve("06/30/2023") == "2023-06-30"


def test_calendar_without_closing_date_uses_default_year():
    cal = StatementCalendar.from_text("no dates here", default_year=2025)
    assert cal.closing_date is None
    assert cal.resolve("11/05") == "2025-11-05"


def test_boa_numeric_description_tail_reads_the_same_every_time():
    # With a numeric last description token, the optional account-suffix
    # column absorbs the 4-digit reference. The reading is stable, so
    # re-uploads still dedupe on it.
    lines = [
        "Purchases and Adjustments",
        "01/02 01/03 7-ELEVEN 35021 4821 12.00",
        "TOTAL PURCHASES AND ADJUSTMENTS",
    ]
    grammar = BankOfAmericaCreditGrammar()
    first = grammar.extract(lines, calendar=CAL_2025)
    assert [(r.description, r.reference_number, r.amount) for r in first] == [
        ("7-ELEVEN", "35021", Decimal("12.00")),
    ]
    assert grammar.extract(lines, calendar=CAL_2025) == first

from __future__ import annotations

import re
from decimal import Decimal

import pytest

from statement_ledger.fingerprint import fingerprint
from statement_ledger.models import RawTransaction, Transaction, month_key


def _tx(**kw) -> RawTransaction:
    base = {"posting_date": "2025-01-03", "description": "STARBUCKS STORE", "amount": Decimal("45.67")}
    base.update(kw)
    return RawTransaction(**base)


def test_is_deterministic_hex_sha256():
    tx = _tx()
    fp = fingerprint(tx, "u1", "jan.pdf")
    assert fp == fingerprint(tx, "u1", "jan.pdf")
    assert re.fullmatch(r"[0-9a-f]{64}", fp)


def test_insignificant_description_differences_collapse():
    a = _tx(description="STARBUCKS   STORE")
    b = _tx(description="starbucks store #881")
    assert fingerprint(a, "u1", "x") == fingerprint(b, "u1", "x")


def test_content_path_ignores_source_and_normalizes_amount_scale():
    a = _tx(amount=Decimal("45.6700"))
    assert fingerprint(a, "u1", "jan.pdf") == fingerprint(_tx(), "u1", "feb.pdf")


def test_owner_partitions_fingerprints():
    assert fingerprint(_tx(), "u1", "s") != fingerprint(_tx(), "u2", "s")


def test_field_boundaries_are_unambiguous():
    a = _tx(amount=Decimal("12"), description="3")
    b = _tx(amount=Decimal("1"), description="23")
    assert fingerprint(a, "u1", "s") != fingerprint(b, "u1", "s")


def test_reference_path_is_qualified_by_source():
    a = _tx(reference_number="4821")
    b = _tx(reference_number="4821", description="SOMETHING ELSE", amount=Decimal("1.00"))
    assert fingerprint(a, "u1", "jan.pdf") == fingerprint(b, "u1", "jan.pdf")
    assert fingerprint(a, "u1", "jan.pdf") != fingerprint(a, "u1", "feb.pdf")
    # Reference numbers compare case-insensitively.
    assert fingerprint(_tx(reference_number="ab12"), "u1", "s") == fingerprint(
        _tx(reference_number="AB12"), "u1", "s"
    )


def test_missing_identities_are_rejected():
    with pytest.raises(ValueError):
        fingerprint(_tx(), "", "s")
    with pytest.raises(ValueError):
        fingerprint(_tx(reference_number="1"), "u1", " ")


def test_transaction_from_raw_tags_month_and_fingerprint():
    raw = _tx(reference_number="4821")
    tx = Transaction.from_raw(raw, owner="u1", source="jan.pdf")
    assert tx.month == "2025-01" == month_key(raw.posting_date)
    assert tx.fingerprint == fingerprint(raw, "u1", "jan.pdf")
    assert tx.category is None

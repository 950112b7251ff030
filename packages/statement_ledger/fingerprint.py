"""Stable content fingerprints used as the ledger's dedup key.

Two paths, chosen per transaction:

- Reference path, when the statement prints a reference number for the row:
  ``owner | source | reference_number``. Reference numbers are unique within
  one statement; qualifying by source keeps a number reused in a later
  statement from colliding.
- Content path otherwise:
  ``owner | ISO date | amount (2dp) | description (fingerprint-normalized)``.

The joined string is upper-cased and hashed with SHA-256. Fields are joined
with the ASCII unit separator, which is scrubbed from every field first, so
``("12", "3")`` and ``("1", "23")`` can never produce the same input.
"""

from __future__ import annotations

import hashlib
from decimal import Decimal
from typing import TYPE_CHECKING

from .normalizers import (
    format_amount,
    normalize_amount,
    normalize_date,
    normalize_description_for_fingerprint,
)

if TYPE_CHECKING:
    from .models import RawTransaction

_SEP = "\x1f"


def _field(value: str) -> str:
    return value.replace(_SEP, " ").strip()


def _digest(*fields: str) -> str:
    base = _SEP.join(_field(f) for f in fields).upper()
    return hashlib.sha256(base.encode("utf-8")).hexdigest()


def fingerprint(transaction: RawTransaction, owner: str, source: str) -> str:
    """Return the 64-char hex fingerprint of ``transaction`` for ``owner``."""

    if not owner or not owner.strip():
        raise ValueError("owner identity is required for fingerprinting")

    reference = (transaction.reference_number or "").strip()
    if reference:
        if not source or not source.strip():
            raise ValueError("source identity is required for reference fingerprints")
        return _digest(owner, source, reference)

    amount = transaction.amount
    if not isinstance(amount, Decimal):
        amount = normalize_amount(amount)
    return _digest(
        owner,
        normalize_date(transaction.posting_date),
        format_amount(amount),
        normalize_description_for_fingerprint(transaction.description),
    )


__all__ = ["fingerprint"]

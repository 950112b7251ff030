"""Records flowing through the ledger pipeline.

``RawTransaction`` is what a grammar extracts; ``Transaction`` is the
persisted form (owner, source, month bucket and fingerprint added);
``MonthSummary`` is the per-owner, per-month running aggregate.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass, field, replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from .fingerprint import fingerprint
from .normalizers import normalize_amount

_CENT = Decimal("0.01")


def month_key(posting_date: str) -> str:
    """Return the ``YYYY-MM`` bucket for an ISO ``posting_date``.

    Posting dates are calendar dates without a time zone, so the bucket is the
    same in UTC as anywhere else.
    """

    return date.fromisoformat(posting_date).strftime("%Y-%m")


@dataclass(frozen=True, slots=True)
class RawTransaction:
    """A candidate row extracted from a statement, not yet deduplicated.

    ``amount`` is signed; negative is debit/spend by convention unless the
    grammar that produced it says otherwise.
    """

    posting_date: str
    description: str
    amount: Decimal
    reference_number: str | None = None


@dataclass(frozen=True, slots=True)
class Transaction:
    """A ledger row as stored: raw fields plus identity and bucket keys."""

    owner: str
    source: str
    posting_date: str
    description: str
    amount: Decimal
    month: str
    fingerprint: str
    reference_number: str | None = None
    # Assigned later by the categorization collaborator; never set here.
    category: str | None = field(default=None, compare=False)

    @classmethod
    def from_raw(cls, raw: RawTransaction, *, owner: str, source: str) -> Transaction:
        """Tag ``raw`` for storage; ``amount`` is rounded to cents here and only here."""

        cents = normalize_amount(raw.amount).quantize(_CENT, rounding=ROUND_HALF_UP)
        raw = replace(raw, amount=cents)
        return cls(
            owner=owner,
            source=source,
            posting_date=raw.posting_date,
            description=raw.description,
            amount=raw.amount,
            month=month_key(raw.posting_date),
            fingerprint=fingerprint(raw, owner, source),
            reference_number=raw.reference_number,
        )


@dataclass(frozen=True, slots=True)
class MonthSummary:
    owner: str
    month: str
    total_spend: Decimal = Decimal("0.00")
    transaction_count: int = 0

    @property
    def year(self) -> int:
        return int(self.month[:4])

    @property
    def name(self) -> str:
        """English month name, e.g. ``"January"``."""
        return calendar.month_name[int(self.month[5:7])]


@dataclass(frozen=True, slots=True)
class MergeResult:
    admitted: list[Transaction]
    updated_summaries: list[MonthSummary]


__all__ = [
    "MergeResult",
    "MonthSummary",
    "RawTransaction",
    "Transaction",
    "month_key",
]

"""Field normalizers for statement text: amounts, dates, descriptions.

All functions are pure and never raise on malformed input. A value that cannot
be parsed strictly is returned in a best-effort or original form, and the
extractor decides whether to keep the candidate (see :func:`is_iso_date`).
"""

from __future__ import annotations

import re
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal

from dateutil import parser as dtparse

# ---------------------------------------------------------------------------
# Amounts
# ---------------------------------------------------------------------------

# Leading "-", "$-", "-$" or "(" / "$(" mark a negative amount.
_NEGATIVE_PREFIX = re.compile(r"^(?:-|\$\s*-|\$?\s*\()")
_NON_NUMERIC = re.compile(r"[^\d.]")


def normalize_amount(value: str | int | float | Decimal) -> Decimal:
    """Return ``value`` as a signed ``Decimal``.

    Numbers pass through (floats via ``str`` to avoid binary artifacts). For
    text, every character except digits and ``.`` is dropped; when several
    dots remain, only the last one is kept as the decimal point. An empty
    result is zero.
    """

    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("amount must not be a bool")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value))

    s = value.strip()
    negative = bool(_NEGATIVE_PREFIX.match(s))
    digits = _NON_NUMERIC.sub("", s)
    if digits.count(".") > 1:
        head, _, tail = digits.rpartition(".")
        digits = head.replace(".", "") + "." + tail
    if digits in ("", "."):
        return Decimal(0)
    magnitude = Decimal(digits)
    return -magnitude if negative else magnitude


def format_amount(amount: Decimal) -> str:
    # Exactly two decimals; ASCII dot; leading minus for negatives.
    return f"{amount.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP):.2f}"


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------

_SLASH_DATE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4}|\d{2})$")
_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# dateutil happily parses bare words/numbers; require something date-shaped.
_HAS_DIGIT = re.compile(r"\d")

# dateutil fills missing fields from `default`; parsing against two defaults that
# differ in every field exposes any field the text did not supply.
_FILL_DEFAULTS = (datetime(2000, 1, 1), datetime(2001, 2, 2))

# Two-digit years at or above the pivot are 19xx, below it 20xx.
TWO_DIGIT_YEAR_PIVOT = 50


def _expand_year(raw: str) -> int:
    year = int(raw)
    if len(raw) == 2:
        year += 1900 if year >= TWO_DIGIT_YEAR_PIVOT else 2000
    return year


def normalize_date(text: str) -> str:
    """Return ``text`` as ``YYYY-MM-DD``, or unchanged when it cannot be parsed.

    ``MM/DD/YYYY`` and ``MM/DD/YY`` are handled directly; anything else goes
    through ``dateutil``'s general parser.
    """

    s = text.strip()
    m = _SLASH_DATE.match(s)
    if m:
        mm, dd, yy = m.groups()
        try:
            return date(_expand_year(yy), int(mm), int(dd)).isoformat()
        except ValueError:
            return text
    if not s or not _HAS_DIGIT.search(s):
        return text
    try:
        first, second = (dtparse.parse(s, default=d).date() for d in _FILL_DEFAULTS)
    except (ValueError, OverflowError):
        return text
    if first != second:
        # Year, month or day missing from the text.
        return text
    return first.isoformat()


def is_iso_date(text: str) -> bool:
    if not _ISO_DATE.match(text):
        return False
    try:
        date.fromisoformat(text)
    except ValueError:
        return False
    return True


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------

_WS = re.compile(r"\s+")

# One trailing volatile token: store/reference numbers, processor tags
# ("ref", "auth", "pos", "sq") and hyphenated codes like "- X1Y2".
_VOLATILE_SUFFIX = re.compile(r"\s+(?:#\d+|\d{4,}|ref|auth|pos|sq|-\s*\w+)$", re.IGNORECASE)


def normalize_description(text: str) -> str:
    return _WS.sub(" ", text).strip()


def normalize_description_for_fingerprint(text: str) -> str:
    """Aggressive form used only for hashing: lower-case, noise suffix dropped."""

    s = normalize_description(text).lower()
    return _VOLATILE_SUFFIX.sub("", s).strip()


__all__ = [
    "TWO_DIGIT_YEAR_PIVOT",
    "format_amount",
    "is_iso_date",
    "normalize_amount",
    "normalize_date",
    "normalize_description",
    "normalize_description_for_fingerprint",
]

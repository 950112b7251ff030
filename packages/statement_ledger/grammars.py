"""Line grammars that turn reconstructed statement text into transactions.

A grammar is a stateless strategy object. ``extract`` receives every line of
one document, in reading order, plus a :class:`StatementCalendar` that
supplies the year for dates printed as ``MM/DD``. Lines that do not look like
transaction rows are skipped silently; most lines in a statement are not
transactions.

Sign handling is configured per grammar (:class:`SignConvention`) because
institutions disagree on whether purchases print as positive or negative.
"""

from __future__ import annotations

import enum
import re
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from .logging_setup import get_logger
from .models import RawTransaction
from .normalizers import (
    is_iso_date,
    normalize_amount,
    normalize_date,
    normalize_description,
)

logger = get_logger("statement_ledger.grammars")


class SignConvention(enum.Enum):
    AS_PRINTED = "as_printed"
    # Statement prints debits as positive and credits as negative; flip both.
    INVERTED = "inverted"


# ---------------------------------------------------------------------------
# Statement calendar (year resolution for MM/DD dates)
# ---------------------------------------------------------------------------

_CLOSING_DATE = re.compile(
    r"\b(?:statement\s+closing|closing|statement)\s+date\s*:?\s*"
    r"(\d{1,2}/\d{1,2}/(?:\d{4}|\d{2}))\b",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class StatementCalendar:
    """Supplies years for dates printed without one.

    With a known closing date, a row month later than the closing month
    belongs to the previous year (December rows on a January statement).
    """

    default_year: int
    closing_date: date | None = None

    @classmethod
    def from_text(cls, text: str, *, default_year: int) -> StatementCalendar:
        m = _CLOSING_DATE.search(text)
        if m:
            iso = normalize_date(m.group(1))
            if is_iso_date(iso):
                return cls(default_year=default_year, closing_date=date.fromisoformat(iso))
        return cls(default_year=default_year)

    def year_for(self, month: int) -> int:
        if self.closing_date is None:
            return self.default_year
        if month > self.closing_date.month:
            return self.closing_date.year - 1
        return self.closing_date.year

    def resolve(self, token: str) -> str:
        """Normalize a ``M/D``, ``M-D`` or ``M/D/Y`` token to ISO (or return it as-is)."""

        parts = re.split(r"[/-]", token.strip())
        if len(parts) == 2 and all(p.isdigit() for p in parts):
            month, day = parts
            return normalize_date(f"{month}/{day}/{self.year_for(int(month))}")
        return normalize_date("/".join(parts))


# ---------------------------------------------------------------------------
# Grammar base
# ---------------------------------------------------------------------------


class StatementGrammar(ABC):
    name: str = "abstract"
    sign: SignConvention = SignConvention.AS_PRINTED

    def __init__(self, *, sign: SignConvention | None = None) -> None:
        if sign is not None:
            self.sign = sign

    @abstractmethod
    def extract(
        self, lines: Sequence[str], *, calendar: StatementCalendar
    ) -> list[RawTransaction]:
        raise NotImplementedError

    def _signed(self, amount: Decimal) -> Decimal:
        return -amount if self.sign is SignConvention.INVERTED else amount

    def __repr__(self) -> str:
        return f"{type(self).__name__}(sign={self.sign.value})"


# ---------------------------------------------------------------------------
# Generic grammar: any line with a date token followed by an amount token
# ---------------------------------------------------------------------------

_NUMBER = r"(?:\d{1,3}(?:,\d{3})+|\d+)\.\d{2}"
_GENERIC_ROW = re.compile(
    r"(?<![\d/.-])(\d{4}-\d{2}-\d{2}|\d{1,2}[/-]\d{1,2}(?:[/-](?:\d{4}|\d{2}))?)(?![\d/])"
    r".*?"
    rf"(?<![\w.,$-])(\(\$?{_NUMBER}\)|-?\$?-?{_NUMBER})(?!\d)"
)


class GenericGrammar(StatementGrammar):
    """Fallback for statements without a dedicated grammar.

    Negative amounts are a leading ``-``, ``$-``/``-$``, or full parentheses.
    The description is whatever remains of the line once the date and amount
    are removed.
    """

    name = "generic"

    def extract(
        self, lines: Sequence[str], *, calendar: StatementCalendar
    ) -> list[RawTransaction]:
        out: list[RawTransaction] = []
        for raw in lines:
            line = normalize_description(raw)
            m = _GENERIC_ROW.search(line)
            if not m:
                continue
            date_token, amount_token = m.group(1), m.group(2)
            posting_date = calendar.resolve(date_token)
            if not is_iso_date(posting_date):
                logger.debug("generic: unparsed date %r in line %r", date_token, line)
                continue
            description = normalize_description(
                line.replace(date_token, " ", 1).replace(amount_token, " ", 1)
            )
            if not description:
                continue
            out.append(
                RawTransaction(
                    posting_date=posting_date,
                    description=description,
                    amount=self._signed(normalize_amount(amount_token)),
                )
            )
        return out


# ---------------------------------------------------------------------------
# Bank of America credit card: the "Purchases and Adjustments" table
# ---------------------------------------------------------------------------


class TableState(enum.Enum):
    OUTSIDE_TABLE = "outside"
    INSIDE_TABLE = "inside"


# Transaction date, posting date, description, optional store number (not part
# of the description), reference number, optional account suffix, amount.
_BOA_ROW = re.compile(
    r"^(\d{2}/\d{2})\s+(\d{2}/\d{2})\s+(.+?)(?:\s+#\d+)?\s+(\d+)(?:\s+\d{4})?\s+(-?[\d,]+\.\d{2})$"
)


def _starts_table(line: str) -> bool:
    return line.lower().startswith("purchases and adjustments")


def _ends_table(line: str) -> bool:
    return line.lower().startswith("total purchases and adjustments")


class BankOfAmericaCreditGrammar(StatementGrammar):
    """Rows of the purchases table only; summary boxes elsewhere are ignored.

    The table opens at the "Purchases and Adjustments" heading and closes at
    its "TOTAL PURCHASES AND ADJUSTMENTS" line. A later heading (the table
    continued on the next page) reopens it. The posting date is authoritative.
    """

    name = "bank_of_america_credit"

    def extract(
        self, lines: Sequence[str], *, calendar: StatementCalendar
    ) -> list[RawTransaction]:
        out: list[RawTransaction] = []
        state = TableState.OUTSIDE_TABLE
        for raw in lines:
            line = raw.strip()
            if state is TableState.OUTSIDE_TABLE:
                if _starts_table(line):
                    state = TableState.INSIDE_TABLE
                continue

            # INSIDE_TABLE
            if _ends_table(line):
                state = TableState.OUTSIDE_TABLE
                continue
            m = _BOA_ROW.match(line)
            if not m:
                # Continuation text, column headers, page footers.
                continue
            _trans_date, post_date, description, reference, amount = m.groups()
            posting_date = calendar.resolve(post_date)
            clean = normalize_description(description)
            if not is_iso_date(posting_date) or not clean:
                logger.debug("boa: rejected row %r", line)
                continue
            out.append(
                RawTransaction(
                    posting_date=posting_date,
                    description=clean,
                    amount=self._signed(normalize_amount(amount)),
                    reference_number=reference.strip(),
                )
            )

        logger.info("%s: extracted %d transactions", self.name, len(out))
        return out


__all__ = [
    "BankOfAmericaCreditGrammar",
    "GenericGrammar",
    "SignConvention",
    "StatementCalendar",
    "StatementGrammar",
    "TableState",
]

"""Merge freshly extracted transactions into the ledger exactly once.

One merge is a single pass:

1. Tag each candidate with owner, source, month bucket and fingerprint.
2. Submit all of them with insert-or-ignore keyed by fingerprint; storage
   reports back the newly admitted subset. Re-uploading a statement admits
   nothing and is not an error.
3. Sum ``amount`` and count per month over the admitted subset only.
4. Add each month's increment to its summary row (atomically, in storage).

Month summaries therefore grow in proportion to new data and are never
rebuilt from a table scan. Storage failures abort the merge and propagate as
:class:`~statement_ledger.errors.StorageError`.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from decimal import Decimal

from .errors import StorageError
from .logging_setup import get_logger
from .models import MergeResult, MonthSummary, RawTransaction, Transaction
from .persistence import TransactionStore

logger = get_logger("statement_ledger.merge")


def monthly_increments(transactions: Iterable[Transaction]) -> dict[str, tuple[Decimal, int]]:
    """Return ``{month: (sum(amount), count)}`` for ``transactions``."""

    totals: dict[str, Decimal] = defaultdict(lambda: Decimal("0"))
    counts: dict[str, int] = defaultdict(int)
    for tx in transactions:
        totals[tx.month] += tx.amount
        counts[tx.month] += 1
    return {month: (totals[month], counts[month]) for month in totals}


class MergeCoordinator:
    def __init__(self, store: TransactionStore) -> None:
        self.store = store

    def prepare(
        self, candidates: Iterable[RawTransaction], *, owner: str, source: str
    ) -> list[Transaction]:
        """Fingerprint ``candidates``; repeats within the batch keep the first."""

        if not owner or not owner.strip():
            raise ValueError("owner identity is required")
        if not source or not source.strip():
            raise ValueError("source identity is required")

        seen: set[str] = set()
        prepared: list[Transaction] = []
        for raw in candidates:
            tx = Transaction.from_raw(raw, owner=owner, source=source)
            if tx.fingerprint in seen:
                logger.debug("Dropping in-batch duplicate %s (%s)", tx.fingerprint[:12], source)
                continue
            seen.add(tx.fingerprint)
            prepared.append(tx)
        return prepared

    def merge(
        self, candidates: Iterable[RawTransaction], *, owner: str, source: str
    ) -> MergeResult:
        prepared = self.prepare(candidates, owner=owner, source=source)
        try:
            admitted = self.store.insert_new(prepared)
            if not admitted:
                logger.info(
                    "No new transactions from %s (%d already recorded)", source, len(prepared)
                )
                return MergeResult(admitted=[], updated_summaries=[])

            updated: list[MonthSummary] = []
            for month, (spend, count) in sorted(monthly_increments(admitted).items()):
                updated.append(self.store.increment_month_summary(owner, month, spend, count))
        except StorageError:
            logger.error("Merge of %s aborted by storage failure", source, exc_info=True)
            raise

        logger.info(
            "Merged %s: admitted=%d duplicates=%d months=%s",
            source,
            len(admitted),
            len(prepared) - len(admitted),
            [s.month for s in updated],
        )
        return MergeResult(admitted=admitted, updated_summaries=updated)


def merge(
    candidates: Iterable[RawTransaction],
    owner: str,
    *,
    source: str,
    store: TransactionStore,
) -> MergeResult:
    """Module-level shorthand for ``MergeCoordinator(store).merge(...)``."""

    return MergeCoordinator(store).merge(candidates, owner=owner, source=source)


__all__ = ["MergeCoordinator", "merge", "monthly_increments"]

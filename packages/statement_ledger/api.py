"""Upload orchestration: extract documents and merge them into the ledger.

Parsing is independent per document and runs concurrently; merging runs
sequentially in input order against the shared store, so the summary
increments of one upload never interleave with another's within a batch.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .extract import ExtractionReport, extract_many, extract_report
from .glyphs import StatementDocument
from .logging_setup import get_logger
from .merge import MergeCoordinator
from .models import MergeResult
from .persistence import TransactionStore
from .selector import DEFAULT_GRAMMARS, GrammarEntry
from .settings import Settings

logger = get_logger("statement_ledger.api")


@dataclass(frozen=True, slots=True)
class IngestResult:
    source: str
    grammar: str
    extracted: int
    merge: MergeResult
    error: str | None = None

    @property
    def admitted(self) -> int:
        return len(self.merge.admitted)

    @property
    def duplicates(self) -> int:
        return self.extracted - self.admitted


_EMPTY = MergeResult(admitted=[], updated_summaries=[])


def _merge_report(
    report: ExtractionReport, *, owner: str, store: TransactionStore
) -> IngestResult:
    if report.error is not None or not report.transactions:
        return IngestResult(
            source=report.source,
            grammar=report.grammar,
            extracted=len(report.transactions),
            merge=_EMPTY,
            error=report.error,
        )
    result = MergeCoordinator(store).merge(
        report.transactions, owner=owner, source=report.source
    )
    return IngestResult(
        source=report.source,
        grammar=report.grammar,
        extracted=len(report.transactions),
        merge=result,
    )


def ingest_document(
    document: StatementDocument,
    *,
    owner: str,
    store: TransactionStore,
    statement_year: int | None = None,
    registry: tuple[GrammarEntry, ...] | None = None,
    settings: Settings | None = None,
) -> IngestResult:
    """Extract ``document`` and merge its transactions for ``owner``.

    Errors from extraction and storage propagate; a document that yields no
    transactions returns an empty result without touching ``store``.
    """

    report = extract_report(
        document,
        statement_year=statement_year,
        registry=registry or DEFAULT_GRAMMARS,
        settings=settings,
    )
    return _merge_report(report, owner=owner, store=store)


def ingest_documents(
    documents: Sequence[StatementDocument],
    *,
    owner: str,
    store: TransactionStore,
    statement_year: int | None = None,
    registry: tuple[GrammarEntry, ...] | None = None,
    settings: Settings | None = None,
    concurrency: int | None = None,
) -> list[IngestResult]:
    reports = extract_many(
        documents,
        statement_year=statement_year,
        registry=registry or DEFAULT_GRAMMARS,
        settings=settings,
        concurrency=concurrency,
    )
    results = [_merge_report(r, owner=owner, store=store) for r in reports]
    logger.info(
        "Ingested %d documents for %s: admitted=%d failed=%d",
        len(results),
        owner,
        sum(r.admitted for r in results),
        sum(1 for r in results if r.error is not None),
    )
    return results


__all__ = ["IngestResult", "ingest_document", "ingest_documents"]

"""Document → RawTransaction extraction: reconstruct, select grammar, apply.

``extract(document)`` is the plain entry point. ``extract_report`` returns the
same transactions together with the grammar used and the reconstruction
diagnostics. ``extract_many`` fans a whole upload batch out over threads; the
documents share no mutable state.

An empty result is a normal outcome (statements with no activity, or files
that are not statements at all) and is reported, not raised.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from .glyphs import LayoutOptions, ReconstructedDocument, StatementDocument, reconstruct_document
from .grammars import StatementCalendar
from .logging_setup import get_logger
from .models import RawTransaction
from .pmap import p_map
from .selector import DEFAULT_GRAMMARS, GrammarEntry, select_grammar
from .settings import Settings, load_settings

logger = get_logger("statement_ledger.extract")


@dataclass(frozen=True, slots=True)
class ExtractionReport:
    source: str
    grammar: str
    transactions: list[RawTransaction]
    reconstruction: ReconstructedDocument | None = None
    # Set when the whole document failed; per-page failures live on ``reconstruction``.
    error: str | None = None


def _calendar(text: str, statement_year: int | None, settings: Settings) -> StatementCalendar:
    if statement_year is not None:
        return StatementCalendar(default_year=statement_year)
    return StatementCalendar.from_text(text, default_year=settings.default_statement_year)


def extract_lines(
    lines: Sequence[str],
    *,
    source: str = "<lines>",
    statement_year: int | None = None,
    registry: tuple[GrammarEntry, ...] = DEFAULT_GRAMMARS,
    settings: Settings | None = None,
) -> ExtractionReport:
    """Select a grammar for already-reconstructed ``lines`` and apply it."""

    cfg = settings or load_settings(dotenv=False)
    text = "\n".join(lines)
    grammar = select_grammar(text, registry)
    transactions = grammar.extract(lines, calendar=_calendar(text, statement_year, cfg))
    if not transactions:
        logger.info("No transactions extracted from %s (grammar=%s)", source, grammar.name)
    return ExtractionReport(source=source, grammar=grammar.name, transactions=transactions)


def extract_report(
    document: StatementDocument,
    *,
    statement_year: int | None = None,
    registry: tuple[GrammarEntry, ...] = DEFAULT_GRAMMARS,
    settings: Settings | None = None,
    concurrency: int | None = None,
) -> ExtractionReport:
    cfg = settings or load_settings(dotenv=False)
    reconstruction = reconstruct_document(
        document,
        options=LayoutOptions(char_width=cfg.char_width, column_gap_chars=cfg.column_gap_chars),
        concurrency=concurrency or cfg.page_workers,
    )
    report = extract_lines(
        reconstruction.text_lines(),
        source=document.name,
        statement_year=statement_year,
        registry=registry,
        settings=cfg,
    )
    logger.info(
        "Extracted %d transactions from %s (grammar=%s engine=%s chars=%d skipped_pages=%s)",
        len(report.transactions),
        document.name,
        report.grammar,
        reconstruction.engine,
        reconstruction.char_count,
        list(reconstruction.skipped_pages),
    )
    return replace(report, reconstruction=reconstruction)


def extract(
    document: StatementDocument,
    *,
    statement_year: int | None = None,
    registry: tuple[GrammarEntry, ...] = DEFAULT_GRAMMARS,
    settings: Settings | None = None,
) -> list[RawTransaction]:
    """Return the transactions found in ``document`` (possibly none)."""

    return extract_report(
        document, statement_year=statement_year, registry=registry, settings=settings
    ).transactions


def extract_many(
    documents: Sequence[StatementDocument],
    *,
    statement_year: int | None = None,
    registry: tuple[GrammarEntry, ...] = DEFAULT_GRAMMARS,
    settings: Settings | None = None,
    concurrency: int | None = None,
) -> list[ExtractionReport]:
    """Parse ``documents`` concurrently; one report per document, in input order.

    A document that fails outright yields a report with ``error`` set and no
    transactions; the rest of the batch is unaffected.
    """

    cfg = settings or load_settings(dotenv=False)

    def _one(document: StatementDocument) -> ExtractionReport:
        try:
            return extract_report(
                document, statement_year=statement_year, registry=registry, settings=cfg
            )
        except Exception as exc:  # noqa: BLE001 - isolate one bad document per batch
            logger.warning("Failed to extract %s: %s", document.name, exc)
            return ExtractionReport(
                source=document.name, grammar="", transactions=[], error=str(exc)
            )

    return p_map(documents, _one, concurrency=concurrency or cfg.document_workers)


__all__ = ["ExtractionReport", "extract", "extract_lines", "extract_many", "extract_report"]

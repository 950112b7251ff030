"""Pick the grammar for a statement by institution marker.

The registry is an ordered, immutable tuple of ``(marker, grammar)`` pairs;
the first marker found in the lower-cased document text wins and the generic
grammar catches everything else. Supporting a new institution means building
a registry with one more entry, nothing else::

    registry = (*DEFAULT_GRAMMARS, GrammarEntry("chase", ChaseGrammar()))
"""

from __future__ import annotations

from typing import NamedTuple

from .grammars import BankOfAmericaCreditGrammar, GenericGrammar, StatementGrammar
from .logging_setup import get_logger

logger = get_logger("statement_ledger.selector")


class GrammarEntry(NamedTuple):
    marker: str
    grammar: StatementGrammar


GENERIC_GRAMMAR: StatementGrammar = GenericGrammar()

DEFAULT_GRAMMARS: tuple[GrammarEntry, ...] = (
    GrammarEntry("bank of america", BankOfAmericaCreditGrammar()),
)


def select_grammar(
    text: str,
    registry: tuple[GrammarEntry, ...] = DEFAULT_GRAMMARS,
    *,
    fallback: StatementGrammar = GENERIC_GRAMMAR,
) -> StatementGrammar:
    haystack = text.lower()
    for entry in registry:
        if entry.marker.lower() in haystack:
            logger.info("Detected %r statement; using %s grammar", entry.marker, entry.grammar.name)
            return entry.grammar
    logger.info("No institution marker found; using %s grammar", fallback.name)
    return fallback


__all__ = ["DEFAULT_GRAMMARS", "GENERIC_GRAMMAR", "GrammarEntry", "select_grammar"]

"""Public interface for the ``statement_ledger`` package.

This module exposes the package's API functions and public models/types as the
stable import surface. There is no runtime logic here, only symbol re-exports.
"""

from .api import IngestResult, ingest_document, ingest_documents
from .errors import DocumentReadError, StatementLedgerError, StorageError
from .extract import ExtractionReport, extract, extract_lines, extract_many, extract_report
from .fingerprint import fingerprint
from .glyphs import (
    GlyphDocument,
    GlyphRun,
    LayoutOptions,
    ReconstructedDocument,
    StatementDocument,
    TextLine,
    reconstruct_document,
    reconstruct_page,
)
from .grammars import (
    BankOfAmericaCreditGrammar,
    GenericGrammar,
    SignConvention,
    StatementCalendar,
    StatementGrammar,
)
from .merchants import (
    DEFAULT_MERCHANT_ALIASES,
    Category,
    MerchantAliases,
    clean_merchant,
    suggest_category,
)
from .merge import MergeCoordinator, merge
from .models import MergeResult, MonthSummary, RawTransaction, Transaction, month_key
from .normalizers import format_amount, normalize_amount, normalize_date, normalize_description
from .persistence import SqlTransactionStore, TransactionStore
from .selector import DEFAULT_GRAMMARS, GrammarEntry, select_grammar
from .settings import Settings, load_settings
from .sources import DumpedDocument, PdfDocument, load_glyph_dump, parse_glyph_dump

__all__ = [
    # API
    "ingest_document",
    "ingest_documents",
    "IngestResult",
    "extract",
    "extract_lines",
    "extract_many",
    "extract_report",
    "ExtractionReport",
    "merge",
    "MergeCoordinator",
    "fingerprint",
    "select_grammar",
    "reconstruct_document",
    "reconstruct_page",
    # Models / types
    "RawTransaction",
    "Transaction",
    "MonthSummary",
    "MergeResult",
    "month_key",
    "GlyphRun",
    "TextLine",
    "LayoutOptions",
    "ReconstructedDocument",
    "StatementDocument",
    "GlyphDocument",
    "PdfDocument",
    "DumpedDocument",
    "load_glyph_dump",
    "parse_glyph_dump",
    "StatementGrammar",
    "GenericGrammar",
    "BankOfAmericaCreditGrammar",
    "SignConvention",
    "StatementCalendar",
    "GrammarEntry",
    "DEFAULT_GRAMMARS",
    "TransactionStore",
    "SqlTransactionStore",
    # Normalizers
    "normalize_amount",
    "normalize_date",
    "normalize_description",
    "format_amount",
    # Merchants
    "MerchantAliases",
    "DEFAULT_MERCHANT_ALIASES",
    "Category",
    "clean_merchant",
    "suggest_category",
    # Config / errors
    "Settings",
    "load_settings",
    "StatementLedgerError",
    "DocumentReadError",
    "StorageError",
]

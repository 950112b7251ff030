"""Document sources that hand glyph runs to the reconstructor.

Two sources ship with the package:

- :class:`PdfDocument` reads text-layer PDFs with ``pdfplumber``. Each word
  becomes a ``GlyphRun`` whose ``y`` is measured from the page bottom, which
  matches the reconstructor's bottom-left origin.
- :func:`load_glyph_dump` reads a JSON dump of glyph runs (for example produced
  by a browser-side PDF.js pass, or saved as a test fixture).

Dump format::

    {"schema_version": 1, "source": "jan.pdf", "engine": "pdfjs",
     "pages": [{"runs": [{"text": "01/02", "x": 40.0, "y": 700.2, "width": 22.1}]}]}

The envelope is validated up front. Pages are validated only when the
reconstructor asks for them, so a single malformed page is skipped without
losing the rest of the document.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence
from io import BytesIO
from os import PathLike
from pathlib import Path
from typing import Any

import pdfplumber
from pydantic import BaseModel, ConfigDict, ValidationError

from .errors import DocumentReadError
from .glyphs import GlyphRun
from .logging_setup import get_logger

logger = get_logger("statement_ledger.sources")

SUPPORTED_DUMP_VERSIONS = frozenset({1})


# ---------------------------------------------------------------------------
# PDF (pdfplumber)
# ---------------------------------------------------------------------------


class PdfDocument:
    """A text-layer PDF opened with pdfplumber.

    Use as a context manager so the underlying file handle is released::

        with PdfDocument.open("jan.pdf") as doc:
            txs = extract(doc)
    """

    engine = "pdfplumber-words"

    def __init__(self, pdf: Any, *, name: str, x_tolerance: float = 1.5) -> None:
        self._pdf = pdf
        self.name = name
        self._x_tolerance = x_tolerance
        # pdfminer objects are not thread-safe; pages may be requested concurrently.
        self._lock = threading.Lock()

    @classmethod
    def open(
        cls,
        source: str | PathLike[str] | bytes,
        *,
        name: str | None = None,
    ) -> PdfDocument:
        if isinstance(source, bytes):
            stream: Any = BytesIO(source)
            display = name or "<bytes>"
        else:
            stream = Path(source)
            display = name or stream.name
        try:
            pdf = pdfplumber.open(stream)
        except Exception as exc:  # pdfminer raises a zoo of types for bad input
            raise DocumentReadError(f"cannot open PDF {display!r}: {exc}") from exc
        return cls(pdf, name=display)

    @property
    def page_count(self) -> int:
        return len(self._pdf.pages)

    def page_runs(self, index: int) -> Sequence[GlyphRun]:
        with self._lock:
            page = self._pdf.pages[index]
            height = float(page.height)
            try:
                words = page.extract_words(
                    x_tolerance=self._x_tolerance, keep_blank_chars=False
                )
            finally:
                # pdfplumber caches each page's parsed layout until the page is closed.
                page.close()
        return [
            GlyphRun(
                text=w["text"],
                x=float(w["x0"]),
                y=height - float(w["bottom"]),
                width=float(w["x1"]) - float(w["x0"]),
            )
            for w in words
        ]

    def close(self) -> None:
        self._pdf.close()

    def __enter__(self) -> PdfDocument:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# JSON glyph dumps (pydantic)
# ---------------------------------------------------------------------------


class GlyphRunIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str
    x: float
    y: float
    width: float | None = None


class GlyphPageIn(BaseModel):
    model_config = ConfigDict(extra="forbid")

    runs: list[GlyphRunIn]


class GlyphDumpFile(BaseModel):
    """Envelope of a glyph dump; ``pages`` stay raw until requested."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    schema_version: int
    source: str
    engine: str = "glyph-dump"
    pages: list[Any]


class DumpedDocument:
    def __init__(self, envelope: GlyphDumpFile) -> None:
        self.name = envelope.source
        self.engine = envelope.engine
        self._pages = envelope.pages

    @property
    def page_count(self) -> int:
        return len(self._pages)

    def page_runs(self, index: int) -> Sequence[GlyphRun]:
        # ValidationError propagates; the reconstructor logs and skips the page.
        page = GlyphPageIn.model_validate(self._pages[index])
        return [GlyphRun(text=r.text, x=r.x, y=r.y, width=r.width) for r in page.runs]


def parse_glyph_dump(text: str | bytes) -> DumpedDocument:
    try:
        envelope = GlyphDumpFile.model_validate_json(text)
    except (ValidationError, UnicodeDecodeError) as exc:
        raise DocumentReadError(f"invalid glyph dump: {exc}") from exc
    if envelope.schema_version not in SUPPORTED_DUMP_VERSIONS:
        raise DocumentReadError(
            f"unsupported glyph dump schema_version={envelope.schema_version}; "
            f"expected one of {sorted(SUPPORTED_DUMP_VERSIONS)}"
        )
    return DumpedDocument(envelope)


def load_glyph_dump(path: str | PathLike[str]) -> DumpedDocument:
    p = Path(path)
    try:
        raw = p.read_bytes()
    except OSError as exc:
        raise DocumentReadError(f"cannot read glyph dump {p}: {exc}") from exc
    doc = parse_glyph_dump(raw)
    logger.debug("Loaded glyph dump %s (%d pages)", p, doc.page_count)
    return doc


__all__ = [
    "DumpedDocument",
    "GlyphDumpFile",
    "PdfDocument",
    "load_glyph_dump",
    "parse_glyph_dump",
]

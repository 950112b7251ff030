"""Reading-order line reconstruction from positioned glyph runs.

PDF text extraction yields fragments (``GlyphRun``) with page-relative
coordinates in no particular order. This module rebuilds lines the way a
reader sees them:

1. Drop fragments that are blank after trimming.
2. Bucket fragments by baseline ``y`` rounded to the nearest unit, which
   absorbs sub-pixel jitter between fragments of the same visual line.
3. Emit buckets top-to-bottom. The origin is bottom-left, so a larger ``y`` is
   higher on the page and comes first.
4. Within a bucket, order fragments left-to-right and join them with a space,
   nothing, or a column marker depending on the horizontal gap. Wide gaps
   mark table columns, which a plain join would merge into one field.

A document is processed page by page. Pages are independent and may run
concurrently; a page that fails to load or reconstruct is logged and treated
as empty.
"""

from __future__ import annotations

import math
from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Protocol

from .logging_setup import get_logger
from .pmap import p_map

logger = get_logger("statement_ledger.glyphs")


@dataclass(frozen=True, slots=True)
class GlyphRun:
    """A text fragment at ``(x, y)``; ``width`` is its rendered width when known."""

    text: str
    x: float
    y: float
    width: float | None = None


@dataclass(frozen=True, slots=True)
class TextLine:
    """One reconstructed line. Page separators have ``y=None`` and no runs."""

    page: int
    y: int | None
    runs: tuple[GlyphRun, ...]
    text: str

    @property
    def is_separator(self) -> bool:
        return self.y is None


@dataclass(frozen=True, slots=True)
class LayoutOptions:
    # Rough advance of one character, in page units, when a run has no width.
    char_width: float = 5.0
    # Gaps wider than this many character widths are column breaks.
    column_gap_chars: int = 4
    column_marker: str = "   "

    @property
    def column_gap(self) -> float:
        return self.column_gap_chars * self.char_width


class StatementDocument(Protocol):
    """Anything that can hand out glyph runs page by page."""

    name: str
    engine: str

    @property
    def page_count(self) -> int: ...

    def page_runs(self, index: int) -> Sequence[GlyphRun]: ...


@dataclass(slots=True)
class GlyphDocument:
    """In-memory document: one sequence of runs per page."""

    name: str
    pages: Sequence[Sequence[GlyphRun]]
    engine: str = "glyph-runs"

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page_runs(self, index: int) -> Sequence[GlyphRun]:
        return self.pages[index]


@dataclass(frozen=True, slots=True)
class ReconstructedDocument:
    """Lines of a whole document plus diagnostics.

    ``engine`` and ``char_count`` are informational only; nothing downstream
    branches on them.
    """

    lines: list[TextLine]
    engine: str
    page_count: int
    skipped_pages: tuple[int, ...] = field(default=())

    @property
    def raw(self) -> str:
        return "\n".join(line.text for line in self.lines).strip()

    @property
    def char_count(self) -> int:
        return len(self.raw)

    def text_lines(self) -> list[str]:
        return [line.text for line in self.lines]


def _run_end(run: GlyphRun, char_width: float) -> float:
    if run.width is not None:
        return run.x + run.width
    return run.x + len(run.text) * char_width


def _join_runs(runs: Sequence[GlyphRun], options: LayoutOptions) -> str:
    parts: list[str] = []
    for current, following in zip(runs, [*runs[1:], None]):
        parts.append(current.text)
        if following is None:
            break
        gap = following.x - _run_end(current, options.char_width)
        if gap > options.column_gap:
            parts.append(options.column_marker)
        elif gap > 0:
            parts.append(" ")
    return "".join(parts).strip()


def reconstruct_page(
    runs: Iterable[GlyphRun],
    *,
    page: int = 0,
    options: LayoutOptions | None = None,
) -> list[TextLine]:
    """Group ``runs`` into lines ordered top-to-bottom, runs left-to-right."""

    opts = options or LayoutOptions()
    buckets: dict[int, list[GlyphRun]] = defaultdict(list)
    for run in runs:
        if not run.text.strip():
            continue
        buckets[math.floor(run.y + 0.5)].append(run)

    lines: list[TextLine] = []
    for y in sorted(buckets, reverse=True):
        ordered = tuple(sorted(buckets[y], key=lambda r: r.x))
        text = _join_runs(ordered, opts)
        if text:
            lines.append(TextLine(page=page, y=y, runs=ordered, text=text))
    return lines


def reconstruct_document(
    document: StatementDocument,
    *,
    options: LayoutOptions | None = None,
    concurrency: int = 1,
) -> ReconstructedDocument:
    """Reconstruct every page of ``document``.

    A blank separator line follows each page except the last; a page with no
    visible text contributes only that separator.
    """

    opts = options or LayoutOptions()
    page_count = document.page_count

    def _page(index: int) -> list[TextLine] | None:
        try:
            return reconstruct_page(document.page_runs(index), page=index, options=opts)
        except Exception as exc:  # noqa: BLE001 - one bad page must not sink the document
            logger.warning(
                "Skipping unreadable page %d of %s: %s", index + 1, document.name, exc
            )
            return None

    per_page = p_map(range(page_count), _page, concurrency=concurrency)

    lines: list[TextLine] = []
    skipped: list[int] = []
    for index, page_lines in enumerate(per_page):
        if page_lines is None:
            skipped.append(index)
        else:
            lines.extend(page_lines)
        if index < page_count - 1:
            lines.append(TextLine(page=index, y=None, runs=(), text=""))

    result = ReconstructedDocument(
        lines=lines,
        engine=f"{document.engine}-layout-aware",
        page_count=page_count,
        skipped_pages=tuple(skipped),
    )
    logger.debug(
        "Reconstructed %s: pages=%d lines=%d chars=%d skipped=%s",
        document.name,
        page_count,
        len(lines),
        result.char_count,
        list(skipped),
    )
    return result


__all__ = [
    "GlyphDocument",
    "GlyphRun",
    "LayoutOptions",
    "ReconstructedDocument",
    "StatementDocument",
    "TextLine",
    "reconstruct_document",
    "reconstruct_page",
]

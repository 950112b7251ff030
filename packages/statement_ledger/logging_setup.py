"""Logger wiring for ``statement_ledger``.

Every module logs through ``get_logger("statement_ledger.<module>")`` and never
installs handlers itself. Until the embedding service calls
:func:`configure_logging`, the ``statement_ledger`` logger carries only a
``NullHandler``, so importing the library prints nothing. Page skips,
per-document extraction failures and storage aborts are logged at
warning/error; per-upload counts at info; row rejections at debug.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import IO

_ROOT = "statement_ledger"
_LEVEL_ENV = "STATEMENT_LEDGER_LOG_LEVEL"
_DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"
_CONFIGURED = False


def _resolve_level(level: int | str | None) -> int:
    """``int`` as-is; names or digit strings looked up; ``None`` reads the env."""

    if level is None:
        level = os.getenv(_LEVEL_ENV) or logging.INFO
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    value = logging.getLevelNamesMapping().get(name)
    return value if value is not None else logging.INFO


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] = sys.stderr,
) -> None:
    """Send ``statement_ledger`` records to ``stream``; later calls are no-ops.

    ``level`` falls back to ``$STATEMENT_LEDGER_LOG_LEVEL`` and then ``INFO``.
    Records stop propagating to the root logger so a host that also configures
    the root does not print them twice.
    """

    global _CONFIGURED
    if _CONFIGURED:
        return

    root = logging.getLogger(_ROOT)
    for h in [h for h in root.handlers if isinstance(h, logging.NullHandler)]:
        root.removeHandler(h)

    resolved = _resolve_level(level)
    handler = logging.StreamHandler(stream)
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter(fmt or _DEFAULT_FORMAT))

    root.setLevel(resolved)
    root.addHandler(handler)
    root.propagate = False
    _CONFIGURED = True


def get_logger(name: str) -> logging.Logger:
    root = logging.getLogger(_ROOT)
    if not _CONFIGURED and not root.handlers:
        root.addHandler(logging.NullHandler())
    return logging.getLogger(name)


__all__ = ["configure_logging", "get_logger"]

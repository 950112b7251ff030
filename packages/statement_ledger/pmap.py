"""Order-preserving bounded concurrency over ``ThreadPoolExecutor``.

Pages of one document and documents of one upload batch are independent, so
both are fanned out through :func:`p_map`. Per-unit failures are the mapper's
business; any exception that escapes a mapper fails the whole call fast.

``concurrency=1`` runs inline on the calling thread, which keeps tracebacks
and log ordering simple for the common single-page case.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TypeVar

InT = TypeVar("InT")
OutT = TypeVar("OutT")


def p_map(
    iterable: Iterable[InT],
    mapper: Callable[[InT], OutT],
    *,
    concurrency: int,
) -> list[OutT]:
    """Map ``iterable`` through ``mapper`` with at most ``concurrency`` in flight.

    The result preserves input order. The first mapper error cancels
    not-yet-started work and is re-raised unchanged.
    """

    if isinstance(concurrency, bool) or not isinstance(concurrency, int) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    if concurrency == 1:
        return list(map(mapper, iterable))

    items = enumerate(iterable)
    results: dict[int, OutT] = {}
    pending: dict[Future, int] = {}

    with ThreadPoolExecutor(max_workers=concurrency) as pool:

        def _top_up() -> None:
            while len(pending) < concurrency:
                try:
                    idx, item = next(items)
                except StopIteration:
                    return
                pending[pool.submit(mapper, item)] = idx

        _top_up()
        while pending:
            done, _ = wait(pending, return_when=FIRST_COMPLETED)
            for fut in done:
                idx = pending.pop(fut)
                try:
                    results[idx] = fut.result()
                except Exception:
                    pool.shutdown(wait=False, cancel_futures=True)
                    raise
            _top_up()

    return [results[i] for i in sorted(results)]


__all__ = ["p_map"]

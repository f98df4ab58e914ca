"""Shared concurrency primitives for the aggregation engine.

Upstream load is bounded by processing work in fixed-size batches: every
item in a batch runs concurrently, the batch finishes only when all of its
items have finished (successfully or not), and a fixed pause separates one
batch from the next.  The worst case number of outstanding requests is
therefore the batch size, independent of how many items there are.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

import structlog

from src.utils.logging import get_logger

_T = TypeVar("_T")
_R = TypeVar("_R")

_logger: structlog.BoundLogger = get_logger(__name__)


def chunked(items: Sequence[_T], size: int) -> list[Sequence[_T]]:
    """Split *items* into consecutive slices of at most *size* elements."""
    if size < 1:
        raise ValueError("batch size must be at least 1")
    return [items[i : i + size] for i in range(0, len(items), size)]


async def gather_in_batches(
    items: Sequence[_T],
    worker: Callable[[_T], Awaitable[_R]],
    batch_size: int,
    pause_seconds: float = 0.0,
) -> list[_R | BaseException]:
    """Run *worker* over *items* in sequential, internally concurrent batches.

    Parameters
    ----------
    items:
        The inputs, processed in order.
    worker:
        Coroutine function applied to each item.
    batch_size:
        How many items run concurrently.
    pause_seconds:
        Delay between consecutive batches (not after the last one).

    Returns
    -------
    list[_R | BaseException]
        One entry per input, in input order.  A failed item yields its
        exception instead of aborting the batch, mirroring
        ``asyncio.gather(return_exceptions=True)``.
    """
    batches = chunked(items, batch_size)
    results: list[_R | BaseException] = []

    for index, batch in enumerate(batches):
        batch_results = await asyncio.gather(
            *(worker(item) for item in batch),
            return_exceptions=True,
        )
        results.extend(batch_results)
        _logger.debug(
            "batch_complete",
            batch=index + 1,
            total_batches=len(batches),
            size=len(batch),
        )
        if index + 1 < len(batches) and pause_seconds > 0:
            await asyncio.sleep(pause_seconds)

    return results

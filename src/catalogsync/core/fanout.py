"""Bounded parallel fan-out with per-item failure isolation.

Calls are run on a thread pool and their outcomes partitioned into
successes and failures, so one bad item never aborts the batch. A
`threading.Event` lets the caller cancel the whole fan-out cooperatively.
"""

from __future__ import annotations

import threading
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, TypeVar

from catalogsync.core.errors import SyncCancelledError

T = TypeVar("T")
R = TypeVar("R")

_CANCEL_POLL_SECONDS = 0.2


@dataclass(frozen=True)
class ItemFailure(Generic[T]):
    """Failure of one item in a fan-out."""

    item: T
    error: Exception


@dataclass(frozen=True)
class Partitioned(Generic[T, R]):
    """Outcome of a fan-out: successful results and per-item failures."""

    results: list[tuple[T, R]]
    failures: list[ItemFailure[T]]


def gather_partitioned(
    fn: Callable[[T], R],
    items: Iterable[T],
    max_parallel: int,
    *,
    cancel: threading.Event | None = None,
) -> Partitioned[T, R]:
    """
    Apply `fn` to every item in parallel and partition the outcomes.

    Args:
        fn: Callable applied to each item.
        items: Items to process. Order of results is not guaranteed.
        max_parallel: Maximum number of concurrent calls.
        cancel: Optional event; once set, pending calls are cancelled,
            running calls are abandoned and SyncCancelledError is raised.

    Returns:
        A Partitioned holding `(item, result)` pairs and ItemFailure records.
    """
    if max_parallel < 1:
        raise ValueError("max_parallel must be >= 1")
    items = list(items)
    if not items:
        return Partitioned(results=[], failures=[])

    results: list[tuple[T, R]] = []
    failures: list[ItemFailure[T]] = []

    pool = ThreadPoolExecutor(max_workers=max_parallel)
    try:
        futures: dict[Future, T] = {pool.submit(fn, item): item for item in items}
        pending = set(futures)

        while pending:
            if cancel is not None and cancel.is_set():
                raise SyncCancelledError(
                    f"Cancelled with {len(pending)} of {len(items)} calls outstanding."
                )
            done, pending = wait(
                pending, timeout=_CANCEL_POLL_SECONDS, return_when=FIRST_COMPLETED
            )
            for f in done:
                item = futures[f]
                exc = f.exception()
                if exc is None:
                    results.append((item, f.result()))
                elif isinstance(exc, Exception):
                    failures.append(ItemFailure(item=item, error=exc))
                else:
                    raise exc
    finally:
        pool.shutdown(wait=False, cancel_futures=True)

    return Partitioned(results=results, failures=failures)

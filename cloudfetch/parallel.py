"""Fan-out/fan-in task runner.

Runs one worker per item on a thread pool, waits for every worker, and
re-raises the first failure. Workers are never cancelled: once
:func:`run_parallel` returns or raises, nothing it started is still running.

Example:
    def fetch_location(bucket):
        ...

    run_parallel(buckets, fetch_location)
    run_parallel(buckets, fetch_location, max_workers=16)
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from typing import Callable, Dict, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_parallel(
    items: Sequence[T],
    work: Callable[[T], None],
    max_workers: Optional[int] = None,
    name: str = "task",
) -> None:
    """Run ``work(item)`` concurrently for every item.

    Args:
        items: Already-materialized work items, independent of each other
        work: Worker function; its side effects go to a sink with its own locking
        max_workers: Concurrency cap (None runs one thread per item)
        name: Label used in log messages

    Raises:
        ValueError: If ``max_workers`` is below 1
        Exception: The first error raised by a worker, in completion order,
            after all workers have finished
    """
    if max_workers is not None and max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    items = list(items)
    if not items:
        return

    workers = len(items) if max_workers is None else min(max_workers, len(items))
    logger.debug("Running %d %s worker(s) on %d thread(s)", len(items), name, workers)

    first_error: Optional[BaseException] = None
    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix=f"cloudfetch-{name}") as executor:
        futures: Dict[Future, T] = {executor.submit(work, item): item for item in items}
        for future in as_completed(futures):
            exc = future.exception()
            if exc is None:
                continue
            if first_error is None:
                first_error = exc
            else:
                logger.warning("Additional %s failure for %r: %s", name, futures[future], exc)

    if first_error is not None:
        raise first_error

"""Single-flight memoization for an expensive shared query."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

from .errors import SharedFetchError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SharedFetch(Generic[T]):
    """Run ``fn`` at most once and hand every caller the same outcome.

    The first caller executes ``fn`` while holding the lock; everyone else
    blocks on that lock and then reads the stored result. A failure is
    stored too and raised to every caller as the same
    :class:`SharedFetchError` instance. Nothing expires and nothing is
    retried; build a new instance to fetch again.

    Usage:
        buckets = SharedFetch(list_buckets_in_region, name="buckets")
        buckets.get()  # runs list_buckets_in_region
        buckets.get()  # returns the stored list
    """

    def __init__(self, fn: Callable[[], T], name: str = "shared"):
        self._fn = fn
        self._name = name
        self._lock = threading.Lock()
        self._done = False
        self._result: Optional[T] = None
        self._error: Optional[SharedFetchError] = None

    @property
    def done(self) -> bool:
        return self._done

    def get(self) -> T:
        with self._lock:
            if not self._done:
                self._run()
        if self._error is not None:
            raise self._error
        return self._result  # type: ignore[return-value]

    def _run(self) -> None:
        logger.debug("Running shared fetch %s", self._name)
        try:
            self._result = self._fn()
        except Exception as exc:
            logger.info("Shared fetch %s failed, caching error: %s", self._name, exc)
            error = SharedFetchError(self._name, exc)
            error.__cause__ = exc
            self._error = error
        # KeyboardInterrupt/SystemExit skip this line: the next caller runs fn again.
        self._done = True

"""In-process request counters.

``RequestMetrics`` is a middleware that counts what passes through it.
Hand the same instance to ``health_check(metrics=...)`` to publish the
counters on the health endpoint::

    metrics = RequestMetrics()
    router.use(health_check(metrics=metrics), metrics)
"""

import threading
import time
from collections.abc import Callable
from typing import Any

from wren.context import Context
from wren.http.response import Response
from wren.middleware.protocol import Next


class RequestMetrics:
    """Count requests, server errors and time spent downstream.

    A 5xx response and an exception escaping the chain both count as an
    error. Counters are shared across threads and guarded by a lock.
    """

    __slots__ = ("_clock", "_errors", "_in_flight", "_lock", "_requests", "_total_seconds")

    def __init__(self, *, clock: Callable[[], float] = time.perf_counter) -> None:
        self._clock = clock
        self._lock = threading.Lock()
        self._requests = 0
        self._errors = 0
        self._in_flight = 0
        self._total_seconds = 0.0

    async def __call__(self, ctx: Context, next: Next) -> Response:
        with self._lock:
            self._in_flight += 1
        start = self._clock()
        failed = True
        try:
            response = await next()
            failed = response.status >= 500
            return response
        finally:
            elapsed = self._clock() - start
            with self._lock:
                self._in_flight -= 1
                self._requests += 1
                self._total_seconds += elapsed
                if failed:
                    self._errors += 1

    def snapshot(self) -> dict[str, Any]:
        """Current counters; ``average_ms`` covers completed requests."""
        with self._lock:
            completed = self._requests
            average = (self._total_seconds / completed * 1000) if completed else 0.0
            return {
                "requests": completed,
                "errors": self._errors,
                "in_flight": self._in_flight,
                "average_ms": round(average, 3),
            }

    def reset(self) -> None:
        with self._lock:
            self._requests = 0
            self._errors = 0
            self._total_seconds = 0.0

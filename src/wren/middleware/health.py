"""Health check middleware.

Answers ``GET <path>`` itself and lets every other request through.
Only sees requests whose path some route matches; pair it with a
catch-all or register it as route middleware on the health route.
"""

import time
from collections.abc import Callable, Mapping
from typing import Any, TypeAlias

from wren.context import Context
from wren.http.response import Response
from wren.http.responses import json
from wren.middleware.metrics import RequestMetrics
from wren.middleware.protocol import Middleware, Next

HealthCheck: TypeAlias = Callable[[], bool]


def health_check(
    path: str = "/health",
    *,
    checks: Mapping[str, HealthCheck] | None = None,
    metrics: RequestMetrics | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> Middleware:
    """Short-circuit ``GET path`` with a JSON health report.

    Each entry of *checks* is a zero-argument callable returning True
    when healthy. Any failing check turns the report into a 503.
    With *metrics*, its current counters are included under ``"metrics"``.
    """
    started = clock()
    registered = dict(checks or {})

    async def health_middleware(ctx: Context, next: Next) -> Response:
        if ctx.method not in ("GET", "HEAD") or ctx.path != path:
            return await next()

        results: dict[str, Any] = {name: bool(check()) for name, check in registered.items()}
        healthy = all(results.values())
        body: dict[str, Any] = {
            "status": "healthy" if healthy else "unhealthy",
            "uptime": round(clock() - started, 3),
        }
        if results:
            body["checks"] = results
        if metrics is not None:
            body["metrics"] = metrics.snapshot()
        return json(body, status=200 if healthy else 503)

    return health_middleware

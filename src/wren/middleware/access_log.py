"""Request logging middleware.

Logs one line per request on the ``wren.access`` logger::

    GET /users/42 200 3.1ms
"""

import logging
import time

from wren.context import Context
from wren.http.response import Response
from wren.middleware.protocol import Next

logger = logging.getLogger("wren.access")


class RequestLoggingMiddleware:
    """Log method, path, status and duration of every request.

    5xx responses log at ERROR, 4xx at WARNING, everything else at INFO.
    A request that raises is logged at ERROR and the exception re-raised.
    """

    __slots__ = ("_logger",)

    def __init__(self, logger_name: str | None = None) -> None:
        self._logger = logging.getLogger(logger_name) if logger_name else logger

    async def __call__(self, ctx: Context, next: Next) -> Response:
        start = time.perf_counter()
        try:
            response = await next()
        except Exception:
            elapsed = (time.perf_counter() - start) * 1000
            self._logger.error("%s %s raised after %.1fms", ctx.method, ctx.path, elapsed)
            raise

        elapsed = (time.perf_counter() - start) * 1000
        if response.status >= 500:
            level = logging.ERROR
        elif response.status >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self._logger.log(
            level,
            "%s %s %d %.1fms",
            ctx.method,
            ctx.path,
            response.status,
            elapsed,
            extra={
                "method": ctx.method,
                "path": ctx.path,
                "status": response.status,
                "duration_ms": round(elapsed, 3),
                "request_id": ctx.state.get("request_id"),
            },
        )
        return response

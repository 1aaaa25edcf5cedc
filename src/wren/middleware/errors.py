"""Error-handling middleware — the pipeline's fault boundary.

The composer never catches exceptions. Install this middleware first
so it wraps everything else::

    router.use(ErrorHandlerMiddleware())

``HTTPError`` subclasses become JSON error responses with their status;
anything else becomes a 500. Middleware authoring defects
(``MiddlewareError``) are re-raised, never converted.
"""

import logging
import traceback
from dataclasses import dataclass

from wren.context import Context
from wren.errors import HTTPError, MiddlewareError
from wren.http.response import Response
from wren.http.responses import json
from wren.middleware.protocol import Next

logger = logging.getLogger("wren.server")


@dataclass(frozen=True, slots=True)
class ErrorHandlerConfig:
    """Error handler configuration.

    ``expose_errors`` puts the exception type, message and traceback
    in 500 bodies. Development only.
    """

    expose_errors: bool = False
    internal_error_message: str = "Internal Server Error"


class ErrorHandlerMiddleware:
    """Map exceptions raised downstream to responses."""

    __slots__ = ("config",)

    def __init__(self, config: ErrorHandlerConfig | None = None) -> None:
        self.config = config or ErrorHandlerConfig()

    async def __call__(self, ctx: Context, next: Next) -> Response:
        try:
            return await next()
        except MiddlewareError:
            raise
        except HTTPError as exc:
            return self.http_error_response(exc, ctx)
        except Exception as exc:
            return self.internal_error_response(exc, ctx)

    def http_error_response(self, exc: HTTPError, ctx: Context) -> Response:
        logger.debug("%d %s %s: %s", exc.status, ctx.method, ctx.path, exc.detail)
        response = json({"error": exc.detail or f"Error {exc.status}"}, status=exc.status)
        for name, value in exc.headers:
            response = response.with_header(name, value)
        return response

    def internal_error_response(self, exc: Exception, ctx: Context) -> Response:
        logger.exception("500 %s %s", ctx.method, ctx.path)
        body: dict[str, object] = {"error": self.config.internal_error_message}
        if self.config.expose_errors:
            body["type"] = type(exc).__name__
            body["message"] = str(exc)
            body["traceback"] = traceback.format_exception(exc)
        request_id = ctx.state.get("request_id")
        if request_id is not None:
            body["request_id"] = request_id
        return json(body, status=500)

"""Middleware — Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(ctx: Context, next: Next) -> Response | None

Built-in middleware:
    BodyParserMiddleware -- JSON / form / text bodies into ctx.state["body"]
    CORSMiddleware -- Cross-Origin Resource Sharing
    ErrorHandlerMiddleware -- Fault boundary mapping exceptions to responses
    RequestLoggingMiddleware -- One access-log line per request
    RequestMetrics -- Request, error and latency counters
    SecurityHeadersMiddleware -- X-Frame-Options, X-Content-Type-Options, Referrer-Policy
    StaticFiles -- Files from a directory, with ETag and 304 support
    health_check -- Answer a health endpoint in-chain
    request_id -- Per-request id in ctx.state and X-Request-ID
    timeout -- Deadline on the rest of the chain
    timing -- X-Response-Time header
"""

from wren.middleware.access_log import RequestLoggingMiddleware
from wren.middleware.builtin import request_id, timeout, timing
from wren.middleware.compose import compose
from wren.middleware.cors import CORSConfig, CORSMiddleware
from wren.middleware.errors import ErrorHandlerConfig, ErrorHandlerMiddleware
from wren.middleware.health import health_check
from wren.middleware.metrics import RequestMetrics
from wren.middleware.parsers import BodyParserConfig, BodyParserMiddleware
from wren.middleware.protocol import Handler, Middleware, Next
from wren.middleware.security_headers import (
    SecurityHeadersConfig,
    SecurityHeadersMiddleware,
)
from wren.middleware.static import StaticFiles

__all__ = [
    "BodyParserConfig",
    "BodyParserMiddleware",
    "CORSConfig",
    "CORSMiddleware",
    "ErrorHandlerConfig",
    "ErrorHandlerMiddleware",
    "Handler",
    "Middleware",
    "Next",
    "RequestLoggingMiddleware",
    "RequestMetrics",
    "SecurityHeadersConfig",
    "SecurityHeadersMiddleware",
    "StaticFiles",
    "compose",
    "health_check",
    "request_id",
    "timeout",
    "timing",
]

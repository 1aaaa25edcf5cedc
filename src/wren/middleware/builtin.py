"""Small built-in middleware: request id, response timing, timeouts.

Each factory returns a plain async function matching the middleware
protocol::

    router.use(request_id(), timing(), timeout(5.0))
"""

import logging
import re
import time
import uuid

import anyio

from wren.context import Context
from wren.http.response import Response
from wren.http.responses import error
from wren.middleware.protocol import Middleware, Next

logger = logging.getLogger("wren.server")

REQUEST_ID_HEADER = "X-Request-ID"

_REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._-]{1,128}")


def request_id(header: str = REQUEST_ID_HEADER, *, trust_incoming: bool = False) -> Middleware:
    """Tag each request with an id.

    The id is stored in ``ctx.state["request_id"]`` for downstream
    middleware and echoed in the response header, unless the handler
    already set that header. With *trust_incoming*, a client-supplied
    id is reused when it is 1-128 characters of ``[A-Za-z0-9._-]``;
    anything else gets a fresh id.
    """

    async def request_id_middleware(ctx: Context, next: Next) -> Response:
        incoming = ctx.request.headers.get(header) if trust_incoming else None
        if incoming is not None and not _REQUEST_ID_PATTERN.fullmatch(incoming):
            logger.debug("Ignoring malformed %s header on %s %s", header, ctx.method, ctx.path)
            incoming = None
        rid = incoming or str(uuid.uuid4())
        ctx.state["request_id"] = rid
        response = await next()
        return response.with_default_header(header, rid)

    return request_id_middleware


def timing(header: str = "X-Response-Time") -> Middleware:
    """Add the time spent downstream, in milliseconds, as a header."""

    async def timing_middleware(ctx: Context, next: Next) -> Response:
        start = time.perf_counter()
        response = await next()
        elapsed = (time.perf_counter() - start) * 1000
        return response.with_header(header, f"{elapsed:.1f}ms")

    return timing_middleware


def timeout(seconds: float) -> Middleware:
    """Race the rest of the chain against a deadline.

    On expiry the downstream work is cancelled and a 504 JSON response
    is returned. A ``TimeoutError`` raised by the handler itself is not
    a deadline hit and propagates unchanged.
    """
    if seconds <= 0:
        msg = f"timeout must be positive, got {seconds!r}"
        raise ValueError(msg)

    async def timeout_middleware(ctx: Context, next: Next) -> Response:
        with anyio.move_on_after(seconds):
            return await next()
        message = f"{ctx.method} {ctx.path} exceeded {seconds:g}s"
        logger.warning("%s", message)
        return error(message, 504)

    return timeout_middleware

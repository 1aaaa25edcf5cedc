"""Middleware and handler protocols, and the ``Next`` type alias.

A middleware is any callable matching::

    async def my_mw(ctx: Context, next: Next) -> Response | None: ...

No base class required. The composer checks the shape, not the lineage.
Plain ``def`` middleware and handlers work too.
"""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol, TypeAlias

from wren.context import Context
from wren.http.response import Response

# Runs the rest of the chain and returns its response
Next: TypeAlias = Callable[[], Awaitable[Response]]

# A composed chain: context in, response out
Dispatch: TypeAlias = Callable[[Context], Awaitable[Response]]


class Middleware(Protocol):
    """Protocol for wren middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(ctx: Context, next: Next) -> Response:
            start = time.monotonic()
            response = await next()
            elapsed = time.monotonic() - start
            return response.with_header("X-Time", f"{elapsed:.3f}")

        # Class middleware
        class RateLimiter:
            async def __call__(self, ctx: Context, next: Next) -> Response:
                ...

    Returning ``None`` hands the response over to the finalizer, which
    builds one from ``ctx.response``. A middleware that calls ``next()``
    should return its result (or a transformed copy).
    """

    def __call__(self, ctx: Context, next: Next) -> Any: ...


class Handler(Protocol):
    """Protocol for terminal route handlers: ``(ctx) -> Response | None``."""

    def __call__(self, ctx: Context) -> Any: ...

"""Middleware composition — the onion.

``compose(middleware, handler)`` turns an ordered middleware list and a
terminal handler into a single ``(ctx) -> Response`` coroutine function.
For middleware ``A, B`` and handler ``H`` the execution order is::

    A-before, B-before, H, B-after, A-after

Each call of the composed function owns its own cursor, so concurrent
requests never share dispatch state.
"""

from collections.abc import Awaitable, Sequence

from wren._internal.invoke import invoke
from wren.context import Context
from wren.errors import NextCalledTwice
from wren.finalize import coerce_response
from wren.http.response import Response
from wren.middleware.protocol import Dispatch, Handler, Middleware


def compose(middleware: Sequence[Middleware], handler: Handler) -> Dispatch:
    """Compose *middleware* around *handler*.

    Exceptions from any layer propagate unchanged; nothing here catches
    them. Install an error-handling middleware first in the list to get
    a fault boundary.
    """
    chain = tuple(middleware)

    async def composed(ctx: Context) -> Response:
        cursor = -1

        def dispatch(i: int) -> Awaitable[Response]:
            # Checked when next() is called, not when it is awaited, so a
            # duplicate call fails before anything downstream runs again.
            nonlocal cursor
            if i <= cursor:
                raise NextCalledTwice(i - 1)
            cursor = i
            return run(i)

        async def run(i: int) -> Response:
            if i == len(chain):
                result = await invoke(handler, ctx)
            else:
                result = await invoke(chain[i], ctx, lambda: dispatch(i + 1))
            return coerce_response(result, ctx)

        return await dispatch(0)

    return composed

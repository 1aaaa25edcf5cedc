"""ASGI adapter — the boundary between a server and the router.

The only component that touches raw ASGI. Converts scope dicts to
``Request`` objects, dispatches through ``Router.handle``, and sends
the ``Response`` back through ``send()``.

Usage::

    router = Router()
    ...
    app = ASGIAdapter(router)   # hand ``app`` to any ASGI server
"""

import logging

from wren._internal.asgi import Receive, Scope, Send
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.router import Router

logger = logging.getLogger("wren.server")


def _body_allowed(status: int) -> bool:
    """Whether an HTTP status code permits a response body."""
    # RFC: 1xx, 204, and 304 responses do not include a message body.
    return not (100 <= status < 200 or status in {204, 304})


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a Response into ASGI send() calls."""
    raw_headers: list[tuple[bytes, bytes]] = [
        (b"content-type", response.content_type.encode("latin-1")),
    ]
    for name, value in response.headers:
        raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

    body = response.body_bytes if _body_allowed(response.status) else b""
    raw_headers.append((b"content-length", str(len(body)).encode("latin-1")))

    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": raw_headers,
        }
    )
    await send(
        {
            "type": "http.response.body",
            "body": b"" if head else body,
        }
    )


class ASGIAdapter:
    """Serve a ``Router`` as an ASGI 3 application.

    Exceptions escaping ``Router.handle`` are logged and re-raised so
    the server applies its own failure response. Install
    ``ErrorHandlerMiddleware`` to render them instead.
    """

    __slots__ = ("router",)

    def __init__(self, router: Router) -> None:
        self.router = router

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        request = Request.from_asgi(scope, receive)
        try:
            response = await self.router.handle(request)
        except Exception:
            logger.exception("Unhandled error for %s %s", request.method, request.path)
            raise
        await send_response(response, send, head=request.method == "HEAD")

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

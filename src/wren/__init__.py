"""Wren — an HTTP request-dispatch pipeline.

A router that matches requests to handlers, and an onion-model
middleware composer that wraps each handler in an ordered chain.

Basic usage::

    from wren import Router, json

    router = Router()

    @router.get("/users/:id")
    async def show_user(ctx):
        return json({"id": ctx.params["id"]})

    response = await router.handle(Request.build("GET", "/users/42"))

Serve it with any ASGI server through ``wren.asgi.ASGIAdapter``.
"""

__version__ = "0.1.0"
__all__ = [
    "ANY",
    "ASGIAdapter",
    "ConfigurationError",
    "Context",
    "HTTPError",
    "Middleware",
    "MiddlewareError",
    "Next",
    "NextCalledTwice",
    "NotFound",
    "Request",
    "Response",
    "Route",
    "Router",
    "RouterConfig",
    "WrenError",
    "compose",
    "create_context",
    "finalize_response",
    "get_context",
    "json",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import wren`` fast while providing a clean top-level API.
    """
    if name in ("Router", "Route", "ANY"):
        from wren import routing as _routing

        return getattr(_routing, name)

    if name == "RouterConfig":
        from wren.config import RouterConfig

        return RouterConfig

    if name == "Request":
        from wren.http.request import Request

        return Request

    if name == "Response":
        from wren.http.response import Response

        return Response

    if name == "json":
        from wren.http.responses import json

        return json

    if name in ("Context", "create_context", "get_context"):
        from wren import context as _ctx

        return getattr(_ctx, name)

    if name == "finalize_response":
        from wren.finalize import finalize_response

        return finalize_response

    if name in ("Middleware", "Next", "compose"):
        from wren import middleware as _mw

        return getattr(_mw, name)

    if name == "ASGIAdapter":
        from wren.asgi import ASGIAdapter

        return ASGIAdapter

    if name in (
        "WrenError",
        "ConfigurationError",
        "HTTPError",
        "MiddlewareError",
        "NextCalledTwice",
        "NotFound",
    ):
        from wren import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)

"""Per-request context and its factory.

Provides:
- ``Context``: everything one request's middleware chain shares.
- ``create_context``: builds a fresh ``Context`` right before dispatch.
- ``current_context`` / ``get_context``: the context of the request
  being dispatched on this task.

Thread safety:
    A ``Context`` belongs to exactly one request and is never shared.
    ``ContextVar`` is task-local under asyncio, so ``get_context()``
    never sees another request's context.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

from wren.http.query import QueryParams
from wren.http.request import Request
from wren.http.url import URL


@dataclass(slots=True)
class StagedResponse:
    """Response fields that middleware set before any ``Response`` exists.

    Consumed by ``finalize_response`` when the chain returns nothing.
    """

    status: int = 200
    headers: dict[str, str] = field(default_factory=dict)
    body: str | bytes = ""
    content_type: str | None = None
    staged: bool = False

    def stage(
        self,
        status: int | None = None,
        *,
        body: str | bytes | None = None,
        content_type: str | None = None,
        headers: Mapping[str, str] | None = None,
    ) -> None:
        """Set several staged fields at once and mark the response staged."""
        self.staged = True
        if status is not None:
            self.status = status
        if body is not None:
            self.body = body
        if content_type is not None:
            self.content_type = content_type
        if headers:
            self.headers.update(headers)


@dataclass(slots=True)
class Context:
    """One request's view of the pipeline.

    ``state`` is the channel middleware use to hand data downstream::

        async def authenticate(ctx, next):
            ctx.state["user"] = await load_user(ctx.request)
            return await next()
    """

    request: Request
    url: URL
    params: dict[str, str]
    state: dict[str, Any] = field(default_factory=dict)
    response: StagedResponse = field(default_factory=StagedResponse)

    @property
    def method(self) -> str:
        return self.request.method

    @property
    def path(self) -> str:
        return self.url.path

    @property
    def query(self) -> QueryParams:
        return self.url.query

    def __repr__(self) -> str:
        return f"<Context {self.request.method} {self.url.raw!r} params={self.params!r}>"


def create_context(
    request: Request,
    params: Mapping[str, str] | None = None,
    *,
    url: URL | None = None,
) -> Context:
    """Build a fresh context for *request*.

    The URL view is built here unless the router already built one.
    No I/O happens: the body stays unread until someone asks for it.
    """
    return Context(
        request=request,
        url=url if url is not None else URL.of(request),
        params=dict(params or {}),
    )


# -- Current request context --

current_context: ContextVar[Context] = ContextVar("wren_context")
"""The context being dispatched. Set by ``Router.handle`` for the chain's duration."""


def get_context() -> Context:
    """Return the context of the request currently being dispatched.

    Raises ``LookupError`` if called outside a request.
    """
    return current_context.get()

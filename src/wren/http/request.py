"""Immutable HTTP request.

Frozen metadata with async body access. The request is honest about
what it is: received data that doesn't change.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncIterator, Mapping
from contextlib import aclosing
from dataclasses import dataclass, field, replace
from typing import Any
from urllib.parse import unquote

from wren._internal.asgi import Message, Receive, Scope
from wren.errors import PayloadTooLarge
from wren.http.forms import FormData, parse_form_data
from wren.http.headers import Headers
from wren.http.query import QueryParams


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, query, headers) is frozen at creation.
    ``path`` is percent-decoded, as ASGI servers deliver it; ``query``
    keeps the raw query string.
    Body is read lazily and asynchronously via ``.body()``, ``.json()``,
    ``.form()``; nothing is read until a middleware or handler asks.
    """

    method: str
    path: str
    headers: Headers
    query: QueryParams = field(default_factory=QueryParams)
    http_version: str = "1.1"
    server: tuple[str, int] | None = None
    client: tuple[str, int] | None = None

    # Private: ASGI receive callable for body streaming
    _receive: Receive | None = field(default=None, repr=False, compare=False)

    # Private: mutable cache for body and parsed form data
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def url(self) -> str:
        """Path plus query string, for display."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path

    @property
    def query_string(self) -> str:
        """The raw query string (without ``?``), or ``""``."""
        return self.query.raw

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    # -- Async body access --

    async def body(self, *, limit: int | None = None) -> bytes:
        """Read the full request body.

        Result is cached — the receive channel is consumed once, then
        the same bytes are returned on subsequent calls.

        With *limit*, reading stops with ``PayloadTooLarge`` as soon as
        more than *limit* bytes have arrived, whatever Content-Length
        claims. Nothing is cached in that case.
        """
        if "_body" in self._cache:
            cached: bytes = self._cache["_body"]
            if limit is not None and len(cached) > limit:
                raise PayloadTooLarge(f"Body of {len(cached)} bytes exceeds {limit}")
            return cached
        chunks: list[bytes] = []
        size = 0
        async with aclosing(self.stream()) as stream:
            async for chunk in stream:
                size += len(chunk)
                if limit is not None and size > limit:
                    raise PayloadTooLarge(f"Body exceeds {limit} bytes")
                chunks.append(chunk)
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncIterator[bytes]:
        """Stream the request body in chunks."""
        if "_body" in self._cache:
            if self._cache["_body"]:
                yield self._cache["_body"]
            return
        if self._receive is None:
            return
        while True:
            message = await self._receive()
            if message.get("type") == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def text(self) -> str:
        """Read the body as text (UTF-8)."""
        raw = await self.body()
        return raw.decode("utf-8")

    async def json(self) -> Any:
        """Parse the body as JSON."""
        raw = await self.body()
        return json_module.loads(raw)

    async def form(self) -> FormData:
        """Parse the body as form data (URL-encoded or multipart).

        Cached after the first call.

        Raises:
            ValueError: If Content-Type is not a form encoding.
        """
        if "_form" in self._cache:
            return self._cache["_form"]
        ct = self.content_type or "application/x-www-form-urlencoded"
        raw = await self.body()
        result = parse_form_data(raw, ct)
        self._cache["_form"] = result
        return result

    # -- Derivation --

    def with_path(self, path: str) -> Request:
        """Return a copy of this request for another *path*, same query.

        The copy shares the body channel and cache, so a body already
        read by an outer middleware stays readable.
        """
        return replace(self, path=path)

    # -- Factories --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable."""
        server = scope.get("server")
        client = scope.get("client")
        return cls(
            method=scope["method"].upper(),
            path=scope["path"] or "/",
            query=QueryParams(scope.get("query_string", b"")),
            headers=Headers(tuple((bytes(k), bytes(v)) for k, v in scope.get("headers", ()))),
            http_version=scope.get("http_version", "1.1"),
            server=tuple(server) if server else None,
            client=tuple(client) if client else None,
            _receive=receive,
        )

    @classmethod
    def build(
        cls,
        method: str,
        target: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes = b"",
    ) -> Request:
        """Create a Request without a server, from plain values.

        *target* is the request target as sent on the wire: it is split
        on the first ``?`` and the path is percent-decoded, the way an
        ASGI server would hand it over.
        """
        raw_path, _, query_string = target.partition("?")
        sent = False

        async def receive() -> Message:
            nonlocal sent
            if sent:
                return {"type": "http.disconnect"}
            sent = True
            return {"type": "http.request", "body": body, "more_body": False}

        return cls(
            method=method.upper(),
            path=unquote(raw_path) or "/",
            query=QueryParams(query_string),
            headers=Headers.from_mapping(headers),
            _receive=receive,
        )

"""The value every dispatch chain resolves to.

A ``Response`` is frozen; middleware decorate it on the way out by
deriving copies (``response.with_header(...)``). ``Content-Type`` always
lives in its own field, so the wire never carries it twice.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import TypeAlias

HeaderPairs: TypeAlias = Mapping[str, str] | Iterable[tuple[str, str]]


@dataclass(frozen=True, slots=True)
class Response:
    """Status, body, content type and extra headers.

    Header names keep the case they were given; lookups ignore it.
    """

    body: str | bytes = ""
    status: int = 200
    content_type: str = "text/plain; charset=utf-8"
    headers: tuple[tuple[str, str], ...] = ()

    def with_status(self, status: int) -> Response:
        return replace(self, status=status)

    def with_header(self, name: str, value: str) -> Response:
        """Append a header. A ``Content-Type`` header replaces the content type."""
        if name.lower() == "content-type":
            return replace(self, content_type=value)
        return replace(self, headers=(*self.headers, (name, value)))

    def with_headers(self, headers: HeaderPairs) -> Response:
        """Append several headers, in order, as ``with_header`` would."""
        pairs = headers.items() if isinstance(headers, Mapping) else headers
        response = self
        for name, value in pairs:
            response = response.with_header(name, value)
        return response

    def with_default_header(self, name: str, value: str) -> Response:
        """Add *name* only if the response does not carry it yet."""
        if self.has_header(name):
            return self
        return self.with_header(name, value)

    def without_header(self, name: str) -> Response:
        name_lower = name.lower()
        kept = tuple(pair for pair in self.headers if pair[0].lower() != name_lower)
        return replace(self, headers=kept)

    def with_content_type(self, content_type: str) -> Response:
        return replace(self, content_type=content_type)

    def has_header(self, name: str) -> bool:
        name_lower = name.lower()
        return name_lower == "content-type" or any(
            hname.lower() == name_lower for hname, _ in self.headers
        )

    def header(self, name: str, default: str | None = None) -> str | None:
        """First value of *name*, case-insensitive; ``content-type`` included."""
        name_lower = name.lower()
        if name_lower == "content-type":
            return self.content_type
        for hname, hvalue in self.headers:
            if hname.lower() == name_lower:
                return hvalue
        return default

    def header_list(self, name: str) -> list[str]:
        name_lower = name.lower()
        if name_lower == "content-type":
            return [self.content_type]
        return [hvalue for hname, hvalue in self.headers if hname.lower() == name_lower]

    @property
    def body_bytes(self) -> bytes:
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return self.body

    @property
    def text(self) -> str:
        if isinstance(self.body, bytes):
            return self.body.decode("utf-8")
        return self.body

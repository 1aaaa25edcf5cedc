"""The request target as seen by routing: a path plus its query.

Both halves come from the server already split (ASGI ``path`` and
``query_string``). Nothing here re-parses a target string, so a
percent-decoded ``?``, ``#`` or leading ``//`` stays part of the path.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from wren.http.query import QueryParams

if TYPE_CHECKING:
    from wren.http.request import Request


@dataclass(frozen=True, slots=True)
class URL:
    """Path and query of one request. Routing only ever looks at ``path``."""

    path: str
    query: QueryParams

    @classmethod
    def of(cls, request: Request) -> URL:
        """The URL of *request*."""
        return cls(path=request.path or "/", query=request.query)

    @property
    def raw(self) -> str:
        """``path?query``, for logs and reprs."""
        if self.query.raw:
            return f"{self.path}?{self.query.raw}"
        return self.path


"""Route and RouteMatch frozen dataclasses."""

from dataclasses import dataclass

from wren.middleware.protocol import Handler, Middleware
from wren.routing.pattern import PathPattern

ANY = "*"
"""Method wildcard: the route matches every HTTP verb."""

METHODS = frozenset({"GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"})


@dataclass(frozen=True, slots=True)
class Route:
    """One registered endpoint.

    Created by ``Router.register``; immutable afterwards.
    """

    method: str
    pattern: PathPattern
    handler: Handler
    middleware: tuple[Middleware, ...] = ()
    description: str | None = None

    @property
    def path(self) -> str:
        """The pattern as registered."""
        return self.pattern.source

    def matches_method(self, method: str) -> bool:
        return self.method == ANY or self.method == method


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful route match."""

    route: Route
    params: dict[str, str]

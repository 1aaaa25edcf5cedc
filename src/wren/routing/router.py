"""Router — ordered route table, first match wins.

Routes are matched in registration order: a general pattern registered
early shadows a specific one registered later. Register specific routes
first.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

from wren.config import RouterConfig
from wren.context import Context, create_context, current_context
from wren.errors import ConfigurationError
from wren.http.request import Request
from wren.http.response import Response
from wren.http.responses import not_found
from wren.http.url import URL
from wren.middleware.compose import compose
from wren.middleware.protocol import Handler, Middleware
from wren.routing.pattern import WILDCARD, compile_pattern
from wren.routing.route import ANY, METHODS, Route, RouteMatch

logger = logging.getLogger("wren.router")

RouteListener: TypeAlias = Callable[[Route], Any]


class Router:
    """An independent route table plus global middleware.

    Usage::

        router = Router()
        router.use(ErrorHandlerMiddleware())

        @router.get("/users/:id")
        async def show_user(ctx):
            return json({"id": ctx.params["id"]})

        api = router.mount("/api")
        api.get("/ping", lambda ctx: "pong")

        response = await router.handle(Request.build("GET", "/api/ping"))

    Thread safety:
        Registration is single-threaded setup work. Once traffic starts
        the table is only read, and every ``handle`` call owns its own
        context and dispatch cursor, so no locks are needed.
    """

    __slots__ = ("_listeners", "_middleware", "_routes", "config", "mount_path")

    def __init__(self, config: RouterConfig | None = None, *, mount_path: str = "") -> None:
        self.config: RouterConfig = config or RouterConfig()
        self.mount_path = mount_path
        self._routes: list[Route] = []
        self._middleware: list[Middleware] = []
        self._listeners: list[RouteListener] = []

    def __repr__(self) -> str:
        where = f" at {self.mount_path!r}" if self.mount_path else ""
        return f"<Router{where} routes={len(self._routes)} middleware={len(self._middleware)}>"

    # -- Setup --

    def use(self, *middleware: Middleware) -> Router:
        """Append global middleware. Runs, in order, before route middleware."""
        self._middleware.extend(middleware)
        return self

    def add_listener(self, listener: RouteListener) -> Router:
        """Call *listener* with every route registered from now on.

        A listener that raises is logged and ignored; it never fails
        registration.
        """
        self._listeners.append(listener)
        return self

    def register(
        self,
        method: str,
        path: str,
        handler: Handler,
        middleware: Sequence[Middleware] = (),
        *,
        description: str | None = None,
    ) -> Route:
        """Compile *path* and append a route.

        Raises ``ConfigurationError`` for an unknown verb or an invalid
        pattern. Nothing is deferred to request time.
        """
        verb = method.upper()
        if verb != ANY and verb not in METHODS:
            msg = f"Unknown HTTP method {method!r}. Expected '*' or one of: {', '.join(sorted(METHODS))}"
            raise ConfigurationError(msg)
        if not callable(handler):
            msg = f"Handler for {verb} {path} is not callable: {handler!r}"
            raise ConfigurationError(msg)

        route = Route(
            method=verb,
            pattern=compile_pattern(path),
            handler=handler,
            middleware=tuple(middleware),
            description=description,
        )
        self._routes.append(route)
        self._emit_registered(route)
        return route

    def route(
        self,
        path: str,
        *,
        methods: Sequence[str] = ("GET",),
        middleware: Sequence[Middleware] = (),
        description: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator registering one handler under several methods."""

        def decorator(handler: Handler) -> Handler:
            for method in methods:
                self.register(method, path, handler, middleware, description=description)
            return handler

        return decorator

    def get(self, path: str, handler: Handler | None = None, **options: Any) -> Any:
        """Register a GET route. Without *handler*, returns a decorator."""
        return self._shortcut("GET", path, handler, **options)

    def post(self, path: str, handler: Handler | None = None, **options: Any) -> Any:
        return self._shortcut("POST", path, handler, **options)

    def put(self, path: str, handler: Handler | None = None, **options: Any) -> Any:
        return self._shortcut("PUT", path, handler, **options)

    def patch(self, path: str, handler: Handler | None = None, **options: Any) -> Any:
        return self._shortcut("PATCH", path, handler, **options)

    def delete(self, path: str, handler: Handler | None = None, **options: Any) -> Any:
        return self._shortcut("DELETE", path, handler, **options)

    def head(self, path: str, handler: Handler | None = None, **options: Any) -> Any:
        return self._shortcut("HEAD", path, handler, **options)

    def options(self, path: str, handler: Handler | None = None, **options: Any) -> Any:
        return self._shortcut("OPTIONS", path, handler, **options)

    def all(self, path: str, handler: Handler | None = None, **options: Any) -> Any:
        """Register a route matching every HTTP method."""
        return self._shortcut(ANY, path, handler, **options)

    def _shortcut(
        self,
        method: str,
        path: str,
        handler: Handler | None,
        *,
        middleware: Sequence[Middleware] = (),
        description: str | None = None,
    ) -> Any:
        # With a handler: register and return self for chaining.
        # Without: act as a decorator and hand the function back unchanged.
        if handler is not None:
            self.register(method, path, handler, middleware, description=description)
            return self

        def decorator(fn: Handler) -> Handler:
            self.register(method, path, fn, middleware, description=description)
            return fn

        return decorator

    def mount(self, prefix: str) -> Router:
        """Create a child router served under *prefix*.

        Registers ``prefix + "/*"`` on this router as an ordinary
        any-method route, so it obeys registration order like any other.
        The child sees paths with the prefix stripped (``"/"`` when
        nothing remains), with the query string untouched, and never
        needs to know where it is mounted.

        The bare prefix is part of the mount: with ``mount("/api")``,
        ``/api`` itself reaches the child as ``/``, just like ``/api/``.
        Register a route for ``/api`` on the parent first to keep it there.
        """
        if not prefix.startswith("/"):
            msg = f"Mount prefix must start with '/': {prefix!r}"
            raise ConfigurationError(msg)
        prefix = prefix.rstrip("/")
        child = Router(self.config, mount_path=f"{self.mount_path}{prefix}")

        async def delegate(ctx: Context) -> Response:
            rest = ctx.params.get(WILDCARD, "")
            return await child.handle(ctx.request.with_path("/" + rest))

        delegate.__name__ = f"mount{prefix.replace('/', '_')}"
        self.register(ANY, f"{prefix}/*", delegate, description=f"mounted router at {prefix or '/'}")
        return child

    # -- Introspection --

    @property
    def routes(self) -> tuple[Route, ...]:
        """All registered routes, in match order."""
        return tuple(self._routes)

    @property
    def middleware(self) -> tuple[Middleware, ...]:
        """Global middleware, in execution order."""
        return tuple(self._middleware)

    def describe_routes(self) -> list[tuple[str, str, str]]:
        """``(method, path, description)`` rows for every route."""
        rows: list[tuple[str, str, str]] = []
        for route in self._routes:
            description = route.description or getattr(route.handler, "__name__", "")
            rows.append((route.method, f"{self.mount_path}{route.path}", description))
        return rows

    # -- Request time --

    def match(self, method: str, path: str) -> RouteMatch | None:
        """Find the first route matching *method* and *path*."""
        for route in self._routes:
            if not route.matches_method(method):
                continue
            params = route.pattern.match(path)
            if params is not None:
                return RouteMatch(route=route, params=params)
        return None

    async def handle(self, request: Request) -> Response:
        """Dispatch *request* and return its response.

        Unmatched requests get a 404 without running any middleware.
        Exceptions from middleware or handlers propagate to the caller.
        """
        url = URL.of(request)
        match = self.match(request.method, url.path)

        if match is None:
            message = self.config.not_found_message.format(method=request.method, path=url.path)
            logger.warning(
                "%s",
                message,
                extra={
                    "method": request.method,
                    "path": url.path,
                    "available_routes": len(self._routes),
                },
            )
            return not_found(message)

        ctx = create_context(request, match.params, url=url)
        dispatch = compose((*self._middleware, *match.route.middleware), match.route.handler)

        token = current_context.set(ctx)
        try:
            return await dispatch(ctx)
        finally:
            current_context.reset(token)

    # -- Internals --

    def _emit_registered(self, route: Route) -> None:
        if self.config.log_registrations:
            logger.log(
                self.config.registration_level,
                "Route registered: %s %s%s",
                route.method,
                self.mount_path,
                route.path,
                extra={
                    "method": route.method,
                    "pattern": f"{self.mount_path}{route.path}",
                    "description": route.description,
                },
            )
        for listener in self._listeners:
            try:
                listener(route)
            except Exception:
                logger.exception("Route listener %r failed for %s %s", listener, route.method, route.path)

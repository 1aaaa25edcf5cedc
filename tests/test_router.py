"""Tests for wren.routing.router — registration, matching, dispatch, mounting."""

import json
import logging

import pytest

from wren.config import RouterConfig
from wren.context import Context
from wren.errors import ConfigurationError
from wren.http.request import Request
from wren.http.response import Response
from wren.routing.route import ANY
from wren.routing.router import Router


def _text(body: str):
    def handler(ctx: Context) -> Response:
        return Response(body)

    return handler


class TestRegistration:
    def test_register_returns_route(self) -> None:
        r = Router()
        route = r.register("get", "/users/:id", _text("u"), description="show user")
        assert route.method == "GET"
        assert route.path == "/users/:id"
        assert route.description == "show user"
        assert r.routes == (route,)

    def test_unknown_method_rejected(self) -> None:
        r = Router()
        with pytest.raises(ConfigurationError, match="Unknown HTTP method"):
            r.register("FETCH", "/", _text("x"))

    def test_invalid_pattern_rejected_at_register(self) -> None:
        r = Router()
        with pytest.raises(ConfigurationError):
            r.register("GET", "/a/*/b", _text("x"))
        assert r.routes == ()

    def test_non_callable_handler_rejected(self) -> None:
        r = Router()
        with pytest.raises(ConfigurationError, match="not callable"):
            r.register("GET", "/", "nope")  # type: ignore[arg-type]

    def test_shortcuts_chain(self) -> None:
        r = Router()
        r.get("/a", _text("a")).post("/b", _text("b")).all("/c", _text("c"))
        assert [(route.method, route.path) for route in r.routes] == [
            ("GET", "/a"),
            ("POST", "/b"),
            (ANY, "/c"),
        ]

    def test_decorator_form_returns_function(self) -> None:
        r = Router()

        @r.put("/items/:id")
        def update(ctx: Context) -> Response:
            return Response("ok")

        assert callable(update)
        assert r.routes[0].handler is update
        assert r.routes[0].method == "PUT"

    def test_route_decorator_registers_each_method(self) -> None:
        r = Router()

        @r.route("/form", methods=["GET", "POST"])
        def form(ctx: Context) -> str:
            return "form"

        assert [route.method for route in r.routes] == ["GET", "POST"]

    def test_routers_are_independent(self) -> None:
        a = Router()
        b = Router()
        a.get("/only-a", _text("a"))
        assert b.routes == ()
        assert b.match("GET", "/only-a") is None

    def test_describe_routes(self) -> None:
        r = Router()
        r.get("/", _text("home"), description="home page")

        def listing(ctx: Context) -> str:
            return ""

        r.get("/list", listing)
        assert r.describe_routes() == [("GET", "/", "home page"), ("GET", "/list", "listing")]


class TestRegistrationEvents:
    def test_registration_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        r = Router()
        with caplog.at_level(logging.INFO, logger="wren.router"):
            r.get("/users/:id", _text("u"), description="show user")
        record = next(rec for rec in caplog.records if rec.name == "wren.router")
        assert record.getMessage() == "Route registered: GET /users/:id"
        assert record.method == "GET"
        assert record.pattern == "/users/:id"
        assert record.description == "show user"

    def test_registration_logging_can_be_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        r = Router(RouterConfig(log_registrations=False))
        with caplog.at_level(logging.DEBUG, logger="wren.router"):
            r.get("/", _text("x"))
        assert not [rec for rec in caplog.records if rec.name == "wren.router"]

    def test_listener_receives_routes(self) -> None:
        seen = []
        r = Router().add_listener(seen.append)
        route = r.register("GET", "/", _text("x"))
        assert seen == [route]

    def test_failing_listener_never_fails_registration(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        def broken(route: object) -> None:
            raise RuntimeError("listener down")

        r = Router().add_listener(broken)
        with caplog.at_level(logging.ERROR, logger="wren.router"):
            r.get("/", _text("x"))
        assert len(r.routes) == 1
        assert any("listener" in rec.getMessage() for rec in caplog.records)


class TestMatching:
    def test_parameter_extraction(self) -> None:
        r = Router()
        r.get("/users/:id", _text("u"))
        match = r.match("GET", "/users/42")
        assert match is not None
        assert match.params == {"id": "42"}
        assert r.match("GET", "/users/42/edit") is None

    def test_earlier_general_route_wins(self) -> None:
        r = Router()
        general = r.register("GET", "/users/:id", _text("general"))
        r.register("GET", "/users/me", _text("specific"))
        match = r.match("GET", "/users/me")
        assert match is not None
        assert match.route is general
        assert match.params == {"id": "me"}

    def test_specific_first_wins_when_registered_first(self) -> None:
        r = Router()
        specific = r.register("GET", "/users/me", _text("specific"))
        r.register("GET", "/users/:id", _text("general"))
        match = r.match("GET", "/users/me")
        assert match is not None
        assert match.route is specific
        assert match.params == {}

    @pytest.mark.parametrize("method", ["GET", "POST", "DELETE", "PATCH", "OPTIONS"])
    def test_any_method_route(self, method: str) -> None:
        r = Router()
        r.all("/ping", _text("pong"))
        assert r.match(method, "/ping") is not None

    def test_method_mismatch_falls_through(self) -> None:
        r = Router()
        r.post("/items", _text("create"))
        get_route = r.register("GET", "/items", _text("list"))
        match = r.match("GET", "/items")
        assert match is not None
        assert match.route is get_route
        assert r.match("PUT", "/items") is None


class TestHandle:
    @pytest.mark.anyio
    async def test_dispatches_to_handler_with_params(self) -> None:
        r = Router()

        @r.get("/users/:id")
        async def show(ctx: Context) -> Response:
            return Response(f"user {ctx.params['id']}")

        response = await r.handle(Request.build("GET", "/users/42?full=1"))
        assert response.status == 200
        assert response.text == "user 42"

    @pytest.mark.anyio
    async def test_unmatched_returns_404_without_middleware(self) -> None:
        calls: list[str] = []

        async def spy(ctx: Context, next):
            calls.append("spy")
            return await next()

        r = Router().use(spy)
        r.get("/exists", _text("x"))

        response = await r.handle(Request.build("GET", "/does-not-exist"))
        assert response.status == 404
        assert json.loads(response.text) == {"error": "Route not found: GET /does-not-exist"}
        assert calls == []

    @pytest.mark.anyio
    async def test_unmatched_is_logged_as_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        r = Router()
        with caplog.at_level(logging.WARNING, logger="wren.router"):
            await r.handle(Request.build("DELETE", "/nothing"))
        assert any(rec.getMessage() == "Route not found: DELETE /nothing" for rec in caplog.records)

    @pytest.mark.anyio
    async def test_custom_not_found_message(self) -> None:
        r = Router(RouterConfig(not_found_message="no {method} at {path}"))
        response = await r.handle(Request.build("GET", "/x"))
        assert json.loads(response.text) == {"error": "no GET at /x"}

    @pytest.mark.anyio
    async def test_global_then_route_middleware(self) -> None:
        order: list[str] = []

        def tag(name: str):
            async def mw(ctx: Context, next):
                order.append(name)
                return await next()

            return mw

        r = Router().use(tag("global-1"), tag("global-2"))
        r.get("/", _text("x"), middleware=[tag("route")])
        await r.handle(Request.build("GET", "/"))
        assert order == ["global-1", "global-2", "route"]

    @pytest.mark.anyio
    async def test_middleware_added_after_routes_still_applies(self) -> None:
        r = Router()
        r.get("/", _text("x"))

        async def stamp(ctx: Context, next):
            response = await next()
            return response.with_header("X-Stamp", "1")

        r.use(stamp)
        response = await r.handle(Request.build("GET", "/"))
        assert response.header("X-Stamp") == "1"

    @pytest.mark.anyio
    async def test_handler_exceptions_propagate(self) -> None:
        r = Router()

        def boom(ctx: Context) -> Response:
            raise LookupError("missing")

        r.get("/boom", boom)
        with pytest.raises(LookupError, match="missing"):
            await r.handle(Request.build("GET", "/boom"))

    @pytest.mark.anyio
    async def test_context_state_starts_empty_per_request(self) -> None:
        r = Router()
        seen: list[dict] = []

        async def remember(ctx: Context, next):
            seen.append(dict(ctx.state))
            ctx.state["visited"] = True
            return await next()

        r.use(remember)
        r.get("/", _text("x"))
        await r.handle(Request.build("GET", "/"))
        await r.handle(Request.build("GET", "/"))
        assert seen == [{}, {}]


class TestRequestTarget:
    @pytest.mark.anyio
    async def test_leading_double_slash_is_a_path(self) -> None:
        r = Router()
        r.get("/secret", _text("secret"))

        response = await r.handle(Request.build("GET", "//admin/secret"))
        assert response.status == 404

    @pytest.mark.anyio
    async def test_decoded_question_mark_stays_in_param(self) -> None:
        r = Router()
        seen: list[dict[str, str]] = []

        @r.get("/files/:name")
        def show(ctx: Context) -> Response:
            seen.append(ctx.params)
            return Response(ctx.query.get("v", "-"))

        scope = {
            "type": "http",
            "method": "GET",
            "path": "/files/a?b",
            "query_string": b"v=2",
            "headers": [],
        }

        async def receive() -> dict:
            return {"type": "http.request", "body": b"", "more_body": False}

        response = await r.handle(Request.from_asgi(scope, receive))
        assert seen == [{"name": "a?b"}]
        assert response.text == "2"

    @pytest.mark.anyio
    async def test_decoded_hash_stays_in_path(self) -> None:
        r = Router()
        r.get("/notes/:slug", lambda ctx: Response(ctx.params["slug"]))

        response = await r.handle(Request.build("GET", "/notes/c%23"))
        assert response.text == "c#"


class TestMount:
    @pytest.mark.anyio
    async def test_child_sees_rewritten_path(self) -> None:
        parent = Router()
        api = parent.mount("/api")

        @api.get("/ping")
        def ping(ctx: Context) -> Response:
            return Response(f"pong from {ctx.path}")

        response = await parent.handle(Request.build("GET", "/api/ping"))
        assert response.status == 200
        assert response.text == "pong from /ping"

    @pytest.mark.anyio
    async def test_bare_prefix_becomes_root(self) -> None:
        parent = Router()
        api = parent.mount("/api/")
        api.get("/", _text("api root"))

        assert (await parent.handle(Request.build("GET", "/api"))).text == "api root"
        assert (await parent.handle(Request.build("GET", "/api/"))).text == "api root"

    @pytest.mark.anyio
    async def test_parent_route_on_bare_prefix_wins_when_first(self) -> None:
        parent = Router()
        parent.get("/api", _text("parent"))
        api = parent.mount("/api")
        api.get("/", _text("child"))

        assert (await parent.handle(Request.build("GET", "/api"))).text == "parent"
        assert (await parent.handle(Request.build("GET", "/api/"))).text == "child"

    @pytest.mark.anyio
    async def test_query_string_is_preserved(self) -> None:
        parent = Router()
        api = parent.mount("/api")

        @api.get("/search")
        def search(ctx: Context) -> str:
            return ctx.query.get("q", "")

        response = await parent.handle(Request.build("GET", "/api/search?q=wren"))
        assert response.text == "wren"

    @pytest.mark.anyio
    async def test_child_404_comes_from_child(self) -> None:
        parent = Router()
        parent.mount("/api")
        response = await parent.handle(Request.build("GET", "/api/missing"))
        assert response.status == 404
        assert json.loads(response.text) == {"error": "Route not found: GET /missing"}

    @pytest.mark.anyio
    async def test_parent_middleware_wraps_child(self) -> None:
        order: list[str] = []

        async def outer(ctx: Context, next):
            order.append(f"parent:{ctx.path}")
            return await next()

        async def inner(ctx: Context, next):
            order.append(f"child:{ctx.path}")
            return await next()

        parent = Router().use(outer)
        child = parent.mount("/v1").use(inner)
        child.get("/items", _text("items"))
        await parent.handle(Request.build("GET", "/v1/items"))
        assert order == ["parent:/v1/items", "child:/items"]

    @pytest.mark.anyio
    async def test_nested_mounts(self) -> None:
        root = Router()
        v1 = root.mount("/api").mount("/v1")
        v1.get("/health", _text("ok"))
        response = await root.handle(Request.build("GET", "/api/v1/health"))
        assert response.text == "ok"

    @pytest.mark.anyio
    async def test_mount_obeys_registration_order(self) -> None:
        parent = Router()
        parent.all("/*", _text("catch-all"))
        api = parent.mount("/api")
        api.get("/ping", _text("pong"))
        response = await parent.handle(Request.build("GET", "/api/ping"))
        assert response.text == "catch-all"

    def test_mount_prefix_must_be_absolute(self) -> None:
        with pytest.raises(ConfigurationError):
            Router().mount("api")

    def test_child_shares_config_and_logs_full_path(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        config = RouterConfig(debug=True)
        parent = Router(config)
        child = parent.mount("/api")
        assert child.config is config
        with caplog.at_level(logging.INFO, logger="wren.router"):
            child.get("/ping", _text("pong"))
        assert any(rec.getMessage() == "Route registered: GET /api/ping" for rec in caplog.records)

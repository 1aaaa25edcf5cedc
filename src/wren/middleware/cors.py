"""CORS middleware.

Handles preflight requests and adds the appropriate headers to
every cross-origin response.
"""

from dataclasses import dataclass

from wren.context import Context
from wren.http.response import Response
from wren.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class CORSConfig:
    """CORS middleware configuration.

    All fields have secure defaults (nothing is allowed).
    Override what you need::

        CORSConfig(
            allow_origins=("https://example.com",),
            allow_methods=("GET", "POST"),
        )
    """

    allow_origins: tuple[str, ...] = ()
    allow_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")
    allow_headers: tuple[str, ...] = ()
    expose_headers: tuple[str, ...] = ()
    allow_credentials: bool = False
    max_age: int = 600  # 10 minutes


class CORSMiddleware:
    """Standards-compliant CORS middleware.

    Handles:
    - Preflight ``OPTIONS`` requests (returns 204 with CORS headers)
    - Simple and actual requests (adds CORS headers to response)
    - Credential support (``Access-Control-Allow-Credentials``)
    - Wildcard origins (``"*"``) when credentials are disabled

    Preflights only reach this middleware when some route matches
    ``OPTIONS`` for the path; unmatched requests bypass middleware.
    Register ``router.options("/*", no_content)`` to answer them all.
    """

    __slots__ = ("config",)

    def __init__(self, config: CORSConfig | None = None) -> None:
        self.config = config or CORSConfig()

    def _is_allowed_origin(self, origin: str) -> bool:
        if "*" in self.config.allow_origins:
            return True
        return origin in self.config.allow_origins

    def _add_cors_headers(self, response: Response, origin: str) -> Response:
        cfg = self.config

        if "*" in cfg.allow_origins and not cfg.allow_credentials:
            response = response.with_header("Access-Control-Allow-Origin", "*")
        else:
            response = response.with_header("Access-Control-Allow-Origin", origin)
            response = response.with_header("Vary", "Origin")

        if cfg.allow_credentials:
            response = response.with_header("Access-Control-Allow-Credentials", "true")

        if cfg.expose_headers:
            response = response.with_header(
                "Access-Control-Expose-Headers",
                ", ".join(cfg.expose_headers),
            )

        return response

    def _preflight_response(self, origin: str, request_method: str | None) -> Response:
        cfg = self.config
        response = self._add_cors_headers(Response(status=204), origin)

        if request_method:
            response = response.with_header(
                "Access-Control-Allow-Methods",
                ", ".join(cfg.allow_methods),
            )

        if cfg.allow_headers:
            response = response.with_header(
                "Access-Control-Allow-Headers",
                ", ".join(cfg.allow_headers),
            )

        return response.with_header("Access-Control-Max-Age", str(cfg.max_age))

    async def __call__(self, ctx: Context, next: Next) -> Response:
        origin = ctx.request.headers.get("origin")

        # Not a CORS request, or not one we serve
        if origin is None or not self._is_allowed_origin(origin):
            return await next()

        if ctx.method == "OPTIONS":
            request_method = ctx.request.headers.get("access-control-request-method")
            return self._preflight_response(origin, request_method)

        response = await next()
        return self._add_cors_headers(response, origin)

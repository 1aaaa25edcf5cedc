"""Security headers middleware — X-Frame-Options, X-Content-Type-Options, Referrer-Policy.

Adds common security headers to every response (clickjacking, MIME
sniffing, referrer leakage). CSP and HSTS are optional.
"""

from dataclasses import dataclass

from wren.context import Context
from wren.http.response import Response
from wren.middleware.protocol import Next


@dataclass(frozen=True, slots=True)
class SecurityHeadersConfig:
    """Configuration for security headers.

    All values are applied as-is. ``None`` disables a header.
    """

    x_frame_options: str | None = "DENY"
    x_content_type_options: str | None = "nosniff"
    referrer_policy: str | None = "strict-origin-when-cross-origin"
    content_security_policy: str | None = (
        "default-src 'self'; base-uri 'self'; frame-ancestors 'none'; object-src 'none'"
    )
    strict_transport_security: str | None = None

    def headers(self) -> dict[str, str]:
        """The configured headers, skipping disabled ones."""
        candidates = {
            "X-Frame-Options": self.x_frame_options,
            "X-Content-Type-Options": self.x_content_type_options,
            "Referrer-Policy": self.referrer_policy,
            "Content-Security-Policy": self.content_security_policy,
            "Strict-Transport-Security": self.strict_transport_security,
        }
        return {name: value for name, value in candidates.items() if value}


class SecurityHeadersMiddleware:
    """Add security headers to responses.

    Headers the response already carries are left alone, so a handler
    can override the policy for a single route.

    Usage::

        router.use(SecurityHeadersMiddleware())

        router.use(SecurityHeadersMiddleware(SecurityHeadersConfig(
            x_frame_options="SAMEORIGIN",
        )))
    """

    __slots__ = ("_headers",)

    def __init__(self, config: SecurityHeadersConfig | None = None) -> None:
        self._headers = (config or SecurityHeadersConfig()).headers()

    async def __call__(self, ctx: Context, next: Next) -> Response:
        response = await next()
        for name, value in self._headers.items():
            response = response.with_default_header(name, value)
        return response

"""Wren exception hierarchy.

Shared across Router, composer, and middleware so every module
raises and catches the same types.
"""


class WrenError(Exception):
    """Base for all wren-specific errors."""


class ConfigurationError(WrenError):
    """Raised when routes or configuration are invalid.

    Always raised at setup time (``register``, ``mount``, config parsing),
    never deferred to request time.
    """


class MiddlewareError(WrenError):
    """A middleware authoring defect detected while dispatching."""


class NextCalledTwice(MiddlewareError):  # noqa: N818
    """A middleware invoked its ``next()`` continuation more than once.

    Raised at the moment of the second call, before any downstream
    middleware or handler runs again.
    """

    def __init__(self, index: int) -> None:
        self.index = index
        super().__init__(f"next() invoked more than once (middleware #{index})")


class HTTPError(WrenError):
    """An error that maps directly to an HTTP status code.

    Raised by handlers or middleware. The core lets it propagate;
    ``ErrorHandlerMiddleware`` turns it into a response.

    ``status``, ``detail`` and ``headers`` are read-only. The exception
    itself stays an ordinary object so the interpreter and
    ``contextlib`` can attach tracebacks while it propagates.
    """

    def __init__(
        self,
        status: int,
        detail: str = "",
        headers: tuple[tuple[str, str], ...] = (),
    ) -> None:
        super().__init__(status, detail)
        self._status = status
        self._detail = detail
        self._headers = tuple(headers)

    @property
    def status(self) -> int:
        return self._status

    @property
    def detail(self) -> str:
        return self._detail

    @property
    def headers(self) -> tuple[tuple[str, str], ...]:
        return self._headers

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self._status!r}, detail={self._detail!r})"

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400 — the request could not be understood."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class Unauthorized(HTTPError):  # noqa: N818
    """401 — authentication required."""

    def __init__(self, detail: str = "Unauthorized") -> None:
        super().__init__(status=401, detail=detail)


class Forbidden(HTTPError):  # noqa: N818
    """403 — authenticated but not allowed."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)


class NotFound(HTTPError):  # noqa: N818
    """404 — the resource does not exist."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413 — request body exceeds the configured limit."""

    def __init__(self, detail: str = "Payload Too Large") -> None:
        super().__init__(status=413, detail=detail)


class GatewayTimeout(HTTPError):  # noqa: N818
    """504 — the downstream chain did not finish before its deadline."""

    def __init__(self, detail: str = "Gateway Timeout") -> None:
        super().__init__(status=504, detail=detail)

"""Responder helpers — build common ``Response`` shapes.

Usage::

    from wren.http.responses import json, not_found

    async def show_user(ctx):
        user = users.get(ctx.params["id"])
        if user is None:
            return not_found("No such user")
        return json(user)
"""

import json as json_module
from collections.abc import Mapping
from typing import Any

from wren.http.response import Response

JSON_CONTENT_TYPE = "application/json"


def json(data: Any, *, status: int = 200, headers: Mapping[str, str] | None = None) -> Response:
    """A JSON response."""
    response = Response(
        body=json_module.dumps(data, default=str),
        status=status,
        content_type=JSON_CONTENT_TYPE,
    )
    return response.with_headers(headers) if headers else response


def text(content: str, *, status: int = 200, headers: Mapping[str, str] | None = None) -> Response:
    """A plain-text response."""
    response = Response(body=content, status=status)
    return response.with_headers(headers) if headers else response


def html(content: str, *, status: int = 200, headers: Mapping[str, str] | None = None) -> Response:
    """An HTML response."""
    response = Response(body=content, status=status, content_type="text/html; charset=utf-8")
    return response.with_headers(headers) if headers else response


def redirect(url: str, status: int = 302) -> Response:
    """A redirect to *url*."""
    return Response(status=status).with_header("Location", url)


def no_content() -> Response:
    """An empty 204 response."""
    return Response(status=204)


def status(code: int, data: Any = None) -> Response:
    """An empty response with *code*, or a JSON one if *data* is given."""
    if data is None:
        return Response(status=code)
    return json(data, status=code)


def error(message: str, status: int) -> Response:
    """A JSON error body: ``{"error": message}``."""
    return json({"error": message}, status=status)


def bad_request(message: str = "Bad Request") -> Response:
    return error(message, 400)


def unauthorized(message: str = "Unauthorized") -> Response:
    return error(message, 401)


def forbidden(message: str = "Forbidden") -> Response:
    return error(message, 403)


def not_found(message: str = "Not Found") -> Response:
    return error(message, 404)


def internal_error(message: str = "Internal Server Error") -> Response:
    return error(message, 500)

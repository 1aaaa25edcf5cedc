"""Response finalization.

Guarantees the dispatch chain always yields a concrete ``Response``,
even when a middleware's only effect was mutating ``ctx.response``.
"""

import json as json_module
from typing import Any

from wren.context import Context
from wren.http.response import Response
from wren.http.responses import JSON_CONTENT_TYPE


def finalize_response(ctx: Context, result: Response | None = None) -> Response:
    """Return *result* verbatim, or build one from the staged fields.

    With nothing staged the result is an empty 200. A staged
    ``Content-Type`` header, in any case, sets the content type; the
    ``content_type`` field wins over it.
    """
    if result is not None:
        return result
    staged = ctx.response
    response = Response(body=staged.body, status=staged.status).with_headers(staged.headers)
    if staged.content_type is not None:
        response = response.with_content_type(staged.content_type)
    return response


def coerce_response(result: Any, ctx: Context) -> Response:
    """Turn a handler or middleware return value into a ``Response``.

    ``None`` defers to the staged response. Strings and bytes become
    the body, dicts and lists become JSON, and ``(body, status)`` tuples
    set the status as well.
    """
    if result is None or isinstance(result, Response):
        return finalize_response(ctx, result)

    if isinstance(result, tuple) and len(result) == 2 and isinstance(result[1], int):
        body, status = result
        return coerce_response(body, ctx).with_status(status)

    if isinstance(result, str | bytes):
        return Response(body=result)

    if isinstance(result, dict | list):
        return Response(body=json_module.dumps(result, default=str), content_type=JSON_CONTENT_TYPE)

    msg = (
        f"Cannot convert {type(result).__name__} to a Response. "
        "Return a Response, str, bytes, dict, list, (body, status) or None."
    )
    raise TypeError(msg)

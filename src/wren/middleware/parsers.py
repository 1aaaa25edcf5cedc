"""Body parsing middleware.

Reads the request body once and leaves the parsed value in
``ctx.state["body"]`` (and uploaded files in ``ctx.state["files"]``).
Handlers that want the raw bytes can still call ``ctx.request.body()``;
it is cached.
"""

import json as json_module
import logging
from dataclasses import dataclass

from wren.context import Context
from wren.errors import BadRequest, PayloadTooLarge
from wren.http.forms import is_form_content_type
from wren.http.response import Response
from wren.middleware.protocol import Next

logger = logging.getLogger("wren.server")

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


@dataclass(frozen=True, slots=True)
class BodyParserConfig:
    """Body parser configuration."""

    max_body_size: int = 16 * 1024 * 1024  # 16 MB
    parse_json: bool = True
    parse_forms: bool = True
    parse_text: bool = True


class BodyParserMiddleware:
    """Parse JSON, form and text bodies into ``ctx.state``.

    - ``application/json`` (and ``+json``) -> ``ctx.state["body"]`` is the decoded value
    - url-encoded / multipart forms -> a ``dict`` of first values;
      uploads in ``ctx.state["files"]``
    - ``text/*`` -> the decoded string

    Other content types are left alone. Malformed JSON raises
    ``BadRequest``; a body over ``max_body_size`` raises ``PayloadTooLarge``.
    """

    __slots__ = ("config",)

    def __init__(self, config: BodyParserConfig | None = None) -> None:
        self.config = config or BodyParserConfig()

    async def __call__(self, ctx: Context, next: Next) -> Response:
        if ctx.method in _BODY_METHODS:
            await self._parse(ctx)
        return await next()

    async def _parse(self, ctx: Context) -> None:
        request = ctx.request
        declared = request.content_length
        if declared is not None and declared > self.config.max_body_size:
            raise PayloadTooLarge(f"Body of {declared} bytes exceeds {self.config.max_body_size}")

        content_type = (request.content_type or "").lower()
        media_type = content_type.split(";")[0].strip()
        if not media_type:
            return

        raw = await request.body(limit=self.config.max_body_size)
        if not raw:
            return

        if self.config.parse_json and (media_type == "application/json" or media_type.endswith("+json")):
            try:
                ctx.state["body"] = json_module.loads(raw)
            except ValueError as exc:
                raise BadRequest(f"Malformed JSON body: {exc}") from exc
        elif self.config.parse_forms and is_form_content_type(media_type):
            try:
                form = await request.form()
            except ValueError as exc:
                raise BadRequest(f"Malformed form body: {exc}") from exc
            ctx.state["body"] = dict(form)
            ctx.state["files"] = dict(form.files)
        elif self.config.parse_text and media_type.startswith("text/"):
            try:
                ctx.state["body"] = raw.decode("utf-8")
            except UnicodeDecodeError as exc:
                raise BadRequest("Text body is not valid UTF-8") from exc
        else:
            logger.debug("Body of type %r left unparsed for %s %s", media_type, ctx.method, ctx.path)

"""Static file serving middleware.

Serves files from a directory for paths under a URL prefix, with
weak ETags, ``Last-Modified`` and ``304 Not Modified`` answers.
Everything else falls through to ``next()``.

Middleware only runs for requests some route matched, so give the
prefix a route and attach the middleware to it::

    router.get("/static/*", not_found_handler, middleware=[StaticFiles("./public")])
"""

import logging
import mimetypes
from email.utils import formatdate, parsedate_to_datetime
from os import stat_result
from pathlib import Path

from wren.context import Context
from wren.http.response import Response
from wren.http.responses import error, redirect
from wren.middleware.protocol import Next

logger = logging.getLogger("wren.server")


class StaticFiles:
    """Serve ``GET``/``HEAD`` requests under *prefix* from *directory*.

    - A path that resolves outside *directory* (``..``, symlinks) is a 403.
    - Dot-files and dot-directories fall through unless *serve_hidden*.
    - A directory serves its *index* file; without the trailing slash
      the client is redirected (301) to it first.
    - A file larger than *max_file_size* is a 413.
    - Missing files fall through.
    """

    __slots__ = (
        "_cache_control",
        "_directory",
        "_etag",
        "_index",
        "_max_file_size",
        "_prefix",
        "_serve_hidden",
    )

    def __init__(
        self,
        directory: str | Path,
        prefix: str = "/static",
        *,
        index: str = "index.html",
        cache_control: str = "public, max-age=3600",
        serve_hidden: bool = False,
        max_file_size: int | None = None,
        etag: bool = True,
    ) -> None:
        self._directory = Path(directory).resolve()
        self._index = index
        self._cache_control = cache_control
        self._serve_hidden = serve_hidden
        self._max_file_size = max_file_size
        self._etag = etag
        # "/" normalizes to "", meaning every path is a candidate.
        stripped = "/" + prefix.strip("/")
        self._prefix = stripped if stripped != "/" else ""

    async def __call__(self, ctx: Context, next: Next) -> Response:
        if ctx.method not in ("GET", "HEAD"):
            return await next()

        path = ctx.path
        if self._prefix:
            if path != self._prefix and not path.startswith(self._prefix + "/"):
                return await next()
            relative = path[len(self._prefix) :].lstrip("/")
        else:
            relative = path.lstrip("/")

        file_path = (self._directory / relative).resolve() if relative else self._directory
        if not file_path.is_relative_to(self._directory):
            logger.warning("Static path escapes %s: %s", self._directory, path)
            return error("Forbidden", 403)

        hidden = any(part.startswith(".") for part in file_path.relative_to(self._directory).parts)
        if hidden and not self._serve_hidden:
            return await next()

        if file_path.is_dir():
            index_path = file_path / self._index
            if not index_path.is_file():
                return await next()
            if not path.endswith("/"):
                return redirect(path + "/", 301)
            file_path = index_path

        if not file_path.is_file():
            return await next()
        return self._serve(ctx, file_path)

    def _serve(self, ctx: Context, file_path: Path) -> Response:
        stat = file_path.stat()
        if self._max_file_size is not None and stat.st_size > self._max_file_size:
            return error("File too large", 413)

        headers = {
            "Cache-Control": self._cache_control,
            "Last-Modified": formatdate(stat.st_mtime, usegmt=True),
        }
        if self._etag:
            headers["ETag"] = _weak_etag(stat)
        if self._not_modified(ctx, stat, headers.get("ETag")):
            return Response(status=304).with_headers(headers)

        content_type, _ = mimetypes.guess_type(file_path.name)
        return Response(
            body=file_path.read_bytes(),
            content_type=content_type or "application/octet-stream",
        ).with_headers(headers)

    @staticmethod
    def _not_modified(ctx: Context, stat: stat_result, etag: str | None) -> bool:
        headers = ctx.request.headers
        if_none_match = headers.get("if-none-match")
        if if_none_match is not None:
            if etag is None:
                return False
            candidates = {tag.strip() for tag in if_none_match.split(",")}
            return "*" in candidates or etag in candidates
        if_modified_since = headers.get("if-modified-since")
        if if_modified_since:
            try:
                since = parsedate_to_datetime(if_modified_since).timestamp()
            except (TypeError, ValueError):
                return False
            return int(stat.st_mtime) <= since
        return False


def _weak_etag(stat: stat_result) -> str:
    return f'W/"{stat.st_size:x}-{stat.st_mtime_ns:x}"'

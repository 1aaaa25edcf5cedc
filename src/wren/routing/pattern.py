"""Path pattern compilation.

Pattern syntax::

    "/users"            literal segments
    "/users/:id"        named capture of one path component
    "/files/*"          trailing wildcard: the prefix and everything after

Patterns compile to an anchored regex once, at registration time.
"""

import re
from dataclasses import dataclass

from wren.errors import ConfigurationError

WILDCARD = "*"
_WILDCARD_GROUP = "__wildcard__"
_PARAM_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True, slots=True)
class PathPattern:
    """A compiled path pattern.

    ``param_names`` lists the ``:name`` captures in order;
    ``has_wildcard`` is True for patterns ending in ``/*``.
    """

    source: str
    regex: re.Pattern[str]
    param_names: tuple[str, ...]
    has_wildcard: bool = False

    def match(self, path: str) -> dict[str, str] | None:
        """Match *path* (no query string) and return captured params.

        The wildcard capture is stored under ``"*"`` when it participated
        in the match and is absent otherwise.
        """
        m = self.regex.match(path)
        if m is None:
            return None
        params = {name: value for name, value in m.groupdict().items() if value is not None}
        if _WILDCARD_GROUP in params:
            params[WILDCARD] = params.pop(_WILDCARD_GROUP)
        return params

    def __str__(self) -> str:
        return self.source


def compile_pattern(pattern: str) -> PathPattern:
    """Compile *pattern* into a ``PathPattern``.

    Raises ``ConfigurationError`` for empty patterns, patterns not
    starting with ``/``, a ``*`` anywhere but the last segment, and
    missing, invalid or duplicate parameter names.

    Examples::

        compile_pattern("/users/:id").match("/users/42")       -> {"id": "42"}
        compile_pattern("/users/:id").match("/users/42/edit")  -> None
        compile_pattern("/api/*").match("/api/v1/ping")        -> {"*": "v1/ping"}
    """
    if not isinstance(pattern, str) or not pattern:
        msg = f"Route pattern must be a non-empty string, got {pattern!r}"
        raise ConfigurationError(msg)
    if not pattern.startswith("/"):
        msg = f"Route pattern must start with '/': {pattern!r}"
        raise ConfigurationError(msg)

    segments = pattern[1:].split("/")
    parts: list[str] = []
    names: list[str] = []
    has_wildcard = False

    for index, segment in enumerate(segments):
        is_last = index == len(segments) - 1

        if segment == WILDCARD:
            if not is_last:
                msg = f"Wildcard '*' must be the last segment: {pattern!r}"
                raise ConfigurationError(msg)
            has_wildcard = True
            break

        if WILDCARD in segment:
            msg = f"Wildcard '*' must be a whole segment: {pattern!r}"
            raise ConfigurationError(msg)

        if segment.startswith(":"):
            name = segment[1:]
            if not _PARAM_NAME.match(name):
                msg = f"Invalid parameter name {name!r} in route pattern {pattern!r}"
                raise ConfigurationError(msg)
            if name in names:
                msg = f"Duplicate parameter {name!r} in route pattern {pattern!r}"
                raise ConfigurationError(msg)
            names.append(name)
            parts.append(f"/(?P<{name}>[^/]+)")
        else:
            parts.append("/" + re.escape(segment))

    body = "".join(parts)
    if has_wildcard:
        # "/api/*" matches "/api", "/api/" and "/api/anything/below"
        regex = f"^{body}(?:/(?P<{_WILDCARD_GROUP}>.*))?$"
    else:
        regex = f"^{body}$"

    return PathPattern(
        source=pattern,
        regex=re.compile(regex),
        param_names=tuple(names),
        has_wildcard=has_wildcard,
    )

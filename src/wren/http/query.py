"""Query string parameters, decoded on first access."""

from collections.abc import Iterator, Mapping
from urllib.parse import parse_qsl


class QueryParams(Mapping[str, str]):
    """Immutable multi-value view of a query string.

    The raw string is kept as received and only decoded when a value is
    looked up, so a rewritten request (sub-router mounts) carries the
    same query along without re-encoding it.
    """

    __slots__ = ("_pairs", "_raw")

    def __init__(self, query_string: str | bytes = "") -> None:
        if isinstance(query_string, bytes):
            query_string = query_string.decode("latin-1")
        self._raw = query_string
        self._pairs: list[tuple[str, str]] | None = None

    def _decoded(self) -> list[tuple[str, str]]:
        if self._pairs is None:
            self._pairs = parse_qsl(self._raw, keep_blank_values=True)
        return self._pairs

    def __getitem__(self, key: str) -> str:
        for name, value in self._decoded():
            if name == key:
                return value
        raise KeyError(key)

    def __iter__(self) -> Iterator[str]:
        return iter(dict.fromkeys(name for name, _ in self._decoded()))

    def __len__(self) -> int:
        return len({name for name, _ in self._decoded()})

    def __repr__(self) -> str:
        return f"QueryParams({self._raw!r})"

    def get_list(self, key: str) -> list[str]:
        """Every value sent for *key*, in order (``?tag=a&tag=b``)."""
        return [value for name, value in self._decoded() if name == key]

    @property
    def raw(self) -> str:
        """The query string exactly as received, without ``?``."""
        return self._raw

"""Tests for wren.errors — exception hierarchy."""

from contextlib import contextmanager

import pytest

from wren.errors import (
    BadRequest,
    ConfigurationError,
    Forbidden,
    GatewayTimeout,
    HTTPError,
    MiddlewareError,
    NextCalledTwice,
    NotFound,
    PayloadTooLarge,
    Unauthorized,
    WrenError,
)


class TestHierarchy:
    def test_all_derive_from_wren_error(self) -> None:
        for cls in (ConfigurationError, MiddlewareError, NextCalledTwice, HTTPError):
            assert issubclass(cls, WrenError)

    def test_next_called_twice_is_middleware_error(self) -> None:
        assert issubclass(NextCalledTwice, MiddlewareError)
        assert not issubclass(NextCalledTwice, HTTPError)


class TestHTTPError:
    def test_str_with_detail(self) -> None:
        assert str(HTTPError(status=409, detail="Conflict")) == "409: Conflict"

    def test_str_without_detail(self) -> None:
        assert str(HTTPError(status=500)) == "500"

    @pytest.mark.parametrize(
        ("cls", "status"),
        [
            (BadRequest, 400),
            (Unauthorized, 401),
            (Forbidden, 403),
            (NotFound, 404),
            (PayloadTooLarge, 413),
            (GatewayTimeout, 504),
        ],
    )
    def test_subclass_status(self, cls: type[HTTPError], status: int) -> None:
        err = cls()
        assert err.status == status
        assert err.detail

    def test_custom_detail(self) -> None:
        assert NotFound("No such user").detail == "No such user"

    def test_raisable(self) -> None:
        with pytest.raises(HTTPError) as exc_info:
            raise Forbidden("nope")
        assert exc_info.value.status == 403


def test_next_called_twice_message() -> None:
    err = NextCalledTwice(2)
    assert err.index == 2
    assert "more than once" in str(err)
    assert "#2" in str(err)


class TestPropagation:
    def test_attributes_are_read_only(self) -> None:
        err = NotFound("gone")
        with pytest.raises(AttributeError):
            err.status = 500  # type: ignore[misc]

    def test_traceback_can_be_replaced(self) -> None:
        err = HTTPError(status=418)
        err.__traceback__ = None
        assert err.with_traceback(None) is err

    @pytest.mark.parametrize("cls", [HTTPError, NotFound, GatewayTimeout])
    def test_passes_through_contextmanager_unchanged(self, cls: type[HTTPError]) -> None:
        @contextmanager
        def span():
            yield

        err = cls(status=404) if cls is HTTPError else cls()
        with pytest.raises(cls) as exc_info:
            with span():
                raise err
        assert exc_info.value is err

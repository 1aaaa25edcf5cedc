"""Tests for wren.config — RouterConfig frozen dataclass."""

import logging

import pytest

from wren.config import RouterConfig
from wren.errors import ConfigurationError


class TestRouterConfig:
    def test_defaults(self) -> None:
        cfg = RouterConfig()

        assert cfg.debug is False
        assert cfg.log_registrations is True
        assert cfg.registration_log_level == "info"
        assert cfg.registration_level == logging.INFO
        assert cfg.not_found_message == "Route not found: {method} {path}"

    def test_override(self) -> None:
        cfg = RouterConfig(debug=True, registration_log_level="DEBUG")

        assert cfg.debug is True
        assert cfg.registration_level == logging.DEBUG

    def test_frozen(self) -> None:
        cfg = RouterConfig()

        with pytest.raises(AttributeError):
            cfg.debug = True  # type: ignore[misc]

    def test_unknown_level_rejected(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown log level"):
            RouterConfig(registration_log_level="loud")


class TestFromEnv:
    def test_unset_keeps_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("WREN_DEBUG", "WREN_LOG_REGISTRATIONS", "WREN_REGISTRATION_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        assert RouterConfig.from_env() == RouterConfig()

    def test_reads_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WREN_DEBUG", "yes")
        monkeypatch.setenv("WREN_LOG_REGISTRATIONS", "0")
        monkeypatch.setenv("WREN_REGISTRATION_LOG_LEVEL", "WARNING")

        cfg = RouterConfig.from_env()

        assert cfg.debug is True
        assert cfg.log_registrations is False
        assert cfg.registration_level == logging.WARNING

    def test_custom_prefix(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_DEBUG", "true")

        assert RouterConfig.from_env(prefix="API_").debug is True

    def test_bad_boolean(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WREN_DEBUG", "maybe")

        with pytest.raises(ConfigurationError, match="WREN_DEBUG"):
            RouterConfig.from_env()

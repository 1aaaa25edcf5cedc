"""Router configuration.

RouterConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from wren.errors import ConfigurationError

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})
_LEVELS = frozenset({"debug", "info", "warning", "error", "critical"})


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = RouterConfig(debug=True, registration_log_level="debug")
    """

    debug: bool = False

    # Registration events
    log_registrations: bool = True
    registration_log_level: str = "info"

    # Unmatched requests
    not_found_message: str = "Route not found: {method} {path}"

    def __post_init__(self) -> None:
        if self.registration_log_level.lower() not in _LEVELS:
            msg = (
                f"Unknown log level {self.registration_log_level!r}. "
                f"Expected one of: {', '.join(sorted(_LEVELS))}"
            )
            raise ConfigurationError(msg)

    @property
    def registration_level(self) -> int:
        """The registration log level as a ``logging`` constant."""
        return logging.getLevelNamesMapping()[self.registration_log_level.upper()]

    @classmethod
    def from_env(cls, prefix: str = "WREN_") -> RouterConfig:
        """Build a config from environment variables.

        Reads ``{prefix}DEBUG``, ``{prefix}LOG_REGISTRATIONS`` and
        ``{prefix}REGISTRATION_LOG_LEVEL``. Unset variables keep defaults.
        """
        defaults = cls()
        return cls(
            debug=_env_bool(f"{prefix}DEBUG", defaults.debug),
            log_registrations=_env_bool(f"{prefix}LOG_REGISTRATIONS", defaults.log_registrations),
            registration_log_level=os.environ.get(
                f"{prefix}REGISTRATION_LOG_LEVEL", defaults.registration_log_level
            ).lower(),
        )


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    msg = f"{name}={raw!r} is not a boolean (use one of: 1/0, true/false, yes/no, on/off)"
    raise ConfigurationError(msg)

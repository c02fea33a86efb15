# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for pinwire."""

from __future__ import annotations

import os
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

from .trust.models import PinningConfiguration
from .version import __version__

DEFAULT_USER_AGENT = f"pinwire/{__version__}"
DEFAULT_ENVIRONMENT = "production"


def _float_env(name: str, default: float) -> float:
    try:
        value = os.getenv(name)
        return float(value) if value is not None else default
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        value = os.getenv(name)
        return int(value) if value is not None else default
    except ValueError:
        return default


def _bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class NetworkSettings:
    """Transport defaults shared by every client built from this process."""

    timeout: float = 60.0
    allow_redirects: bool = True
    verify_ssl: bool = True
    certificate_pinning_enabled: bool = True
    user_agent: str = DEFAULT_USER_AGENT
    max_connections: int = 100
    max_keepalive_connections: int = 20

    @classmethod
    def from_env(cls) -> "NetworkSettings":
        """Create settings from environment variables (evaluated at call time)."""
        timeout = _float_env("PINWIRE_HTTP_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        max_connections = _int_env("PINWIRE_HTTP_MAX_CONNECTIONS", cls.max_connections)
        if max_connections <= 0:
            max_connections = cls.max_connections
        max_keepalive = _int_env("PINWIRE_HTTP_MAX_KEEPALIVE", cls.max_keepalive_connections)
        if max_keepalive < 0:
            max_keepalive = cls.max_keepalive_connections
        return cls(
            timeout=timeout,
            allow_redirects=_bool_env("PINWIRE_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("PINWIRE_HTTP_VERIFY_SSL", cls.verify_ssl),
            certificate_pinning_enabled=_bool_env("PINWIRE_CERTIFICATE_PINNING", cls.certificate_pinning_enabled),
            user_agent=os.getenv("PINWIRE_USER_AGENT", cls.user_agent),
            max_connections=max_connections,
            max_keepalive_connections=max_keepalive,
        )


def load_network_settings() -> NetworkSettings:
    """Load network settings from environment with sensible defaults."""
    return NetworkSettings.from_env()


@dataclass(frozen=True)
class NetworkingEnvironment:
    """
    A deployment target: where requests go and which keys its hosts must present.

    `allows_insecure_connections` keeps the pins in play but stops a mismatch
    from blocking the connection. It exists for non-production environments.
    """

    base_url: str
    certificate_pins: Mapping[str, Sequence[str]] = field(default_factory=dict)
    allows_insecure_connections: bool = False

    def pinning_configuration(self) -> PinningConfiguration:
        return PinningConfiguration.from_pins(
            self.certificate_pins,
            enforce_validation=not self.allows_insecure_connections,
        )

    def url_for(self, path: str) -> str:
        """Append `path` to the base URL as path components."""
        base = self.base_url.rstrip("/")
        tail = str(path or "").lstrip("/")
        return f"{base}/{tail}" if tail else f"{base}/"


class Environment(str, Enum):
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @property
    def base_url(self) -> str:
        return _BASE_URLS[self]

    @property
    def certificate_pins(self) -> dict[str, list[str]]:
        return {host: list(pins) for host, pins in _CERTIFICATE_PINS[self].items()}

    @property
    def allows_insecure_connections(self) -> bool:
        return self is Environment.DEVELOPMENT

    def networking_environment(self) -> NetworkingEnvironment:
        return NetworkingEnvironment(
            base_url=self.base_url,
            certificate_pins=self.certificate_pins,
            allows_insecure_connections=self.allows_insecure_connections,
        )


_BASE_URLS: dict[Environment, str] = {
    Environment.DEVELOPMENT: "https://dev-api.example.com",
    Environment.STAGING: "https://staging-api.example.com",
    Environment.PRODUCTION: "https://api.example.com",
}

_CERTIFICATE_PINS: dict[Environment, dict[str, tuple[str, ...]]] = {
    Environment.DEVELOPMENT: {
        "dev-api.example.com": (
            "AAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAAA=",
            "BBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBBB=",
        ),
    },
    Environment.STAGING: {
        "staging-api.example.com": (
            "CCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCCC=",
            "DDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDDD=",
        ),
    },
    Environment.PRODUCTION: {
        "api.example.com": (
            "EEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEEE=",
            "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFF=",
        ),
    },
}


def load_environment(name: str | None = None) -> NetworkingEnvironment:
    """Resolve a named environment preset (defaults to PINWIRE_ENVIRONMENT, then production)."""
    raw = (name or os.getenv("PINWIRE_ENVIRONMENT") or DEFAULT_ENVIRONMENT).strip().lower()
    try:
        preset = Environment(raw)
    except ValueError:
        known = ", ".join(member.value for member in Environment)
        raise ValueError(f"Unknown environment {raw!r} (expected one of: {known})") from None
    return preset.networking_environment()


__all__ = [
    "DEFAULT_USER_AGENT",
    "Environment",
    "NetworkSettings",
    "NetworkingEnvironment",
    "load_environment",
    "load_network_settings",
]

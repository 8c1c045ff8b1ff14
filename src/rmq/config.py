# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Configuration helpers for rmq."""

import os
from dataclasses import dataclass, field

from .version import __version__

DEFAULT_USER_AGENT = f"rmq/{__version__} (+RabbitMQ management api client)"
DEFAULT_MAX_BODY_BYTES = 1 << 20


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
    value = value.strip().lower()
    if value in {"1", "true", "yes", "on"}:
        return True
    if value in {"0", "false", "no", "off"}:
        return False
    return default


def _list_env(name: str) -> list[str]:
    value = os.getenv(name)
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


@dataclass
class HttpSettings:
    """HTTP transport defaults."""

    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    allow_redirects: bool = True
    verify_ssl: bool = True
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    @classmethod
    def from_env(cls) -> "HttpSettings":
        """Create settings from environment variables (evaluated at call time)."""
        max_body_bytes = _int_env("RMQ_HTTP_MAX_BODY_BYTES", cls.max_body_bytes)
        if max_body_bytes < -1:
            max_body_bytes = -1
        timeout = _float_env("RMQ_HTTP_TIMEOUT", cls.timeout)
        if timeout <= 0:
            timeout = cls.timeout
        return cls(
            timeout=timeout,
            user_agent=os.getenv("RMQ_USER_AGENT", cls.user_agent),
            allow_redirects=_bool_env("RMQ_HTTP_REDIRECTS", cls.allow_redirects),
            verify_ssl=_bool_env("RMQ_HTTP_VERIFY_SSL", cls.verify_ssl),
            max_body_bytes=max_body_bytes,
        )


@dataclass
class ApiConfig:
    """Connection and presentation settings for the RabbitMQ management api."""

    scheme: str = "http"
    host: str = "localhost"
    api_port: int = 15672
    vhost: str = "/"
    user: str = "guest"
    password: str = "guest"
    debug: bool = False
    pretty_print: bool = False
    columns: list[str] = field(default_factory=list)
    sort: str = ""
    sort_reverse: bool = False

    @property
    def base_url(self) -> str:
        return f"{self.scheme}://{self.host}:{self.api_port}/api/"

    @classmethod
    def from_env(cls) -> "ApiConfig":
        """Create an api config from RMQ_* environment variables."""
        return cls(
            scheme=os.getenv("RMQ_SCHEME", cls.scheme),
            host=os.getenv("RMQ_HOST", cls.host),
            api_port=_int_env("RMQ_API_PORT", cls.api_port),
            vhost=os.getenv("RMQ_VHOST", cls.vhost),
            user=os.getenv("RMQ_USER", cls.user),
            password=os.getenv("RMQ_PASSWORD", cls.password),
            debug=_bool_env("RMQ_DEBUG", cls.debug),
            pretty_print=_bool_env("RMQ_PRETTY_PRINT", cls.pretty_print),
            columns=_list_env("RMQ_COLUMNS"),
            sort=os.getenv("RMQ_SORT", cls.sort),
            sort_reverse=_bool_env("RMQ_SORT_REVERSE", cls.sort_reverse),
        )


def load_http_settings() -> HttpSettings:
    """Load HTTP settings from environment with sensible defaults."""
    return HttpSettings.from_env()


def load_api_config() -> ApiConfig:
    """Load the management api config from environment with sensible defaults."""
    return ApiConfig.from_env()

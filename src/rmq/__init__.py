# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""rmq: RabbitMQ management api client and fluent HTTP builder."""

from .config import ApiConfig, HttpSettings, load_api_config, load_http_settings
from .errors import (
    ConfigError,
    DecodeError,
    EncodeError,
    ErrorKind,
    ProcessorError,
    RmqError,
    StatusError,
    TransportError,
)
from .version import __version__

__all__ = [
    "ApiConfig",
    "ConfigError",
    "DecodeError",
    "EncodeError",
    "ErrorKind",
    "HttpSettings",
    "ProcessorError",
    "RmqError",
    "StatusError",
    "TransportError",
    "__version__",
    "load_api_config",
    "load_http_settings",
]

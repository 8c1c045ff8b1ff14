# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Logging setup for the rmq CLI."""

from __future__ import annotations

import logging
import os

LOG_LEVEL_ENV = "RMQ_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def resolve_log_level(level: str | None = None) -> int:
    """Map level, or RMQ_LOG_LEVEL when level is empty, to a logging level; unknown names give WARNING."""
    name = (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).strip().upper()
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.WARNING


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(level=resolve_log_level(level), format=LOG_FORMAT)


__all__ = ["resolve_log_level", "setup_logging"]

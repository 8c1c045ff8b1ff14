# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""rmq command line interface."""

from .main import build_parser, main

__all__ = ["build_parser", "main"]

# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Output helpers for api responses."""

from __future__ import annotations

import json
import sys
from typing import IO

from ..errors import DecodeError


def print_json(data: bytes, pretty: bool = False, out: IO[str] | None = None) -> None:
    """Write a JSON response body followed by a newline, re-indented when pretty is set."""
    out = out or sys.stdout
    text = data.decode("utf-8", errors="replace")
    if pretty and text.strip():
        try:
            text = json.dumps(json.loads(text), indent=2)
        except ValueError as exc:
            raise DecodeError(f"response is not valid JSON: {exc}", cause=exc) from exc
    out.write(text)
    out.write("\n")


def print_error(exc: BaseException, err: IO[str] | None = None) -> None:
    err = err or sys.stderr
    err.write(f"ERROR: {exc}\n")


__all__ = ["print_error", "print_json"]

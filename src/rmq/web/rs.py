# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Response configurators and status code validators."""

from __future__ import annotations

from collections.abc import Callable
from typing import IO, Any

import httpx

from .codec import ResponseEncoding
from .response import BodyHandler, Response, ResponseProcessor

Configure = Callable[[Response], Any]


def max_size(size: int) -> Configure:
    """Limit the number of body bytes passed to the body handler, -1 for no limit."""
    return lambda r: r.max_size(size)


def ensure(*processors: ResponseProcessor) -> Configure:
    return lambda r: r.ensure(*processors)


def body(handler: BodyHandler | None) -> Configure:
    return lambda r: r.body(handler)


def body_file(path: str) -> Configure:
    return lambda r: r.body_file(path)


def body_copy_to(writer: IO[bytes]) -> Configure:
    return lambda r: r.body_copy_to(writer)


def body_encoding(*encodings: ResponseEncoding) -> Configure:
    return lambda r: r.body_encoding(*encodings)


def body_decode(target: Any, *encodings: ResponseEncoding) -> Configure:
    return lambda r: r.body_decode(target, *encodings)


def _status_line(response: httpx.Response) -> str:
    return f"{response.status_code} {response.reason_phrase}".strip()


def _ensure_range(low: int, high: int) -> Configure:
    def check(response: httpx.Response) -> None:
        if not low <= response.status_code < high:
            raise ValueError(f"expected {low}-{high - 1} status, got {_status_line(response)}")

    return ensure(check)


def _ensure_exact(status_code: int) -> Configure:
    def check(response: httpx.Response) -> None:
        if response.status_code != status_code:
            expected = f"{int(status_code)} {httpx.codes.get_reason_phrase(status_code)}"
            raise ValueError(f"expected {expected} status, got {_status_line(response)}")

    return ensure(check)


def ensure_status(*expected_status_codes: int) -> Configure:
    """Ensure the response has one of the expected status codes."""

    def check(response: httpx.Response) -> None:
        if response.status_code not in expected_status_codes:
            raise ValueError(
                f"expected one of {list(expected_status_codes)} status codes but got {response.status_code}"
            )

    return ensure(check)


def ensure_status_ok() -> Configure:
    return _ensure_exact(httpx.codes.OK)


def ensure_status_created() -> Configure:
    return _ensure_exact(httpx.codes.CREATED)


def ensure_status_accepted() -> Configure:
    return _ensure_exact(httpx.codes.ACCEPTED)


def ensure_status_no_content() -> Configure:
    return _ensure_exact(httpx.codes.NO_CONTENT)


def ensure_status_informational() -> Configure:
    return _ensure_range(100, 200)


def ensure_status_success() -> Configure:
    return _ensure_range(200, 300)


def ensure_status_redirect() -> Configure:
    return _ensure_range(300, 400)


def ensure_status_client_error() -> Configure:
    return _ensure_range(400, 500)


def ensure_status_server_error() -> Configure:
    return _ensure_range(500, 600)

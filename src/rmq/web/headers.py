# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header normalization and redaction utilities.

HTTP header field names are case-insensitive (RFC 9110). Requests store their
headers under the canonical form of the key so that setting `content-type`
and `Content-Type` overwrite each other.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from urllib.parse import urlsplit, urlunsplit

SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "cookie",
        "proxy-authorization",
        "set-cookie",
    }
)

REDACTED_VALUE = "[REDACTED]"
REDACTED_PASSWORD = "xxxxx"


def canonical_header_key(key: str) -> str:
    """Return the canonical format of a header key: `x-trace-id` -> `X-Trace-Id`."""
    key = str(key).strip()
    if not key or any(ch.isspace() for ch in key):
        return key
    return "-".join(part[:1].upper() + part[1:].lower() for part in key.split("-"))


def header_value(headers: Mapping[str, str] | None, name: str, default: str = "") -> str:
    """Return a header value using case-insensitive key matching."""
    if not headers or not name:
        return default

    lower = name.lower()
    for key, value in headers.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


def media_type(content_type: str) -> str:
    """Strip parameters from a Content-Type value: `application/json; charset=utf-8` -> `application/json`."""
    return content_type.split(";", 1)[0].strip()


def redact_headers(headers: Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    """Replace the values of Authorization, Cookie and similar headers for safe logging."""
    return [(key, REDACTED_VALUE if key.lower() in SENSITIVE_HEADERS else value) for key, value in headers]


def redact_url(url: str) -> str:
    """Return url with any password in its userinfo replaced by xxxxx."""
    parts = urlsplit(str(url))
    if parts.password is None:
        return str(url)
    userinfo, _, hostinfo = parts.netloc.rpartition("@")
    user = userinfo.split(":", 1)[0]
    netloc = f"{user}:{REDACTED_PASSWORD}@{hostinfo}"
    return urlunsplit((parts.scheme, netloc, parts.path, parts.query, parts.fragment))


__all__ = [
    "REDACTED_VALUE",
    "SENSITIVE_HEADERS",
    "canonical_header_key",
    "header_value",
    "media_type",
    "redact_headers",
    "redact_url",
]

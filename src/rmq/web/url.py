# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""URL construction shared by request builders."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping, Sequence
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

from ..errors import ConfigError

DEFAULT_SCHEME = "https"

_CONTROL_CHARS_RE = re.compile(r"[\x00-\x1f\x7f]")
_BAD_ESCAPE_RE = re.compile(r"%(?![0-9A-Fa-f]{2})")
_PATH_SAFE = "/%:@!$&'()*+,;="


def path_escape(segment: str) -> str:
    """Escape a single path segment so it can be passed to Request.path, `/` becomes `%2F`."""
    return quote(str(segment), safe="")


def escape_path(path: str) -> str:
    """Escape characters that cannot appear in a URL path, keeping existing %XX escapes."""
    return quote(_BAD_ESCAPE_RE.sub("%25", path), safe=_PATH_SAFE)


def _remove_dot_segments(path: str) -> str:
    segments = path.split("/")
    output: list[str] = []
    for segment in segments:
        if segment == ".":
            continue
        if segment == "..":
            if len(output) > 1:
                output.pop()
            continue
        output.append(segment)
    if segments[-1] in (".", ".."):
        output.append("")
    return "/".join(output)


def resolve_path(base: str, ref: str) -> str:
    """
    Resolve ref against base the way a relative URL reference is resolved.

    An empty ref keeps base, a ref starting with `/` replaces base, anything
    else replaces the last segment of base:

      resolve_path("/api/", "queues") -> "/api/queues"
      resolve_path("/api/queues", "vhosts") -> "/api/vhosts"
      resolve_path("/api/", "/other") -> "/other"
    """
    if not ref:
        full = base
    elif ref.startswith("/"):
        full = ref
    else:
        full = base[: base.rfind("/") + 1] + ref
    if not full:
        return ""
    if not full.startswith("/"):
        full = "/" + full
    return _remove_dot_segments(full)


def _split_base(base_url: str):
    if _CONTROL_CHARS_RE.search(base_url):
        raise ConfigError(f"could not initialize with base URL {base_url!r}: invalid control character in URL")
    try:
        parts = urlsplit(base_url)
        parts.port  # noqa: B018 - validates the port
    except ValueError as exc:
        raise ConfigError(f"could not initialize with base URL {base_url!r}: {exc}", cause=exc) from exc
    if _BAD_ESCAPE_RE.search(base_url):
        raise ConfigError(f"could not initialize with base URL {base_url!r}: invalid URL escape")
    if any(ch.isspace() for ch in parts.netloc):
        raise ConfigError(f"could not initialize with base URL {base_url!r}: invalid character in host name")
    return parts


def encode_query(raw_query: str, params: Mapping[str, Sequence[str]]) -> str:
    """Merge params over raw_query (params win per name) and encode sorted by name."""
    merged: dict[str, list[str]] = {}
    for name, value in parse_qsl(raw_query, keep_blank_values=True):
        merged.setdefault(name, []).append(value)
    for name, values in params.items():
        merged[name] = list(values)
    return urlencode(sorted(merged.items()), doseq=True)


def build_url(
    base_url: str,
    *,
    scheme: str = "",
    host: str = "",
    paths: Iterable[str] = (),
    query: Mapping[str, Sequence[str]] | None = None,
    raw_query: str = "",
    fragment: str = "",
) -> str:
    """
    Combine a base URL with scheme/host overrides, path segments, query parameters and a fragment.

    A non-empty raw_query replaces the query of base_url and is sent as given;
    query parameters are appended after it, sorted by name.
    """
    parts = _split_base(base_url or "")

    netloc = parts.netloc
    if host:
        userinfo, sep, _ = netloc.rpartition("@")
        netloc = f"{userinfo}{sep}{host}"

    path = parts.path
    for segment in paths:
        path = resolve_path(path, segment)

    if raw_query:
        if query:
            raw_query = f"{raw_query}&{encode_query('', query)}"
    elif query:
        raw_query = encode_query(parts.query, query)
    else:
        raw_query = parts.query

    return urlunsplit(
        (
            scheme or parts.scheme or DEFAULT_SCHEME,
            netloc,
            escape_path(path),
            raw_query,
            fragment or parts.fragment,
        )
    )


__all__ = ["build_url", "encode_query", "escape_path", "path_escape", "resolve_path"]

# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Request configurators.

Each function returns a callable that applies one setting to a Request, so
requests can be configured inline:

    web.get(base_url, rq.path("queues"), rq.param("page", "2"))
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import IO, Any

from .body import GetBody
from .codec import RequestEncoding
from .request import Request, RequestProcessor

Configure = Callable[[Request], Any]


def method(method: str) -> Configure:
    return lambda r: r.method(method)


def base_url(base_url: str) -> Configure:
    return lambda r: r.base_url(base_url)


def scheme(scheme: str) -> Configure:
    return lambda r: r.scheme(scheme)


def host(host: str) -> Configure:
    return lambda r: r.host(host)


def hostf(template: str, *args: Any, **kwargs: Any) -> Configure:
    return lambda r: r.hostf(template, *args, **kwargs)


def host_and_port(host: str, port: int) -> Configure:
    return lambda r: r.host_and_port(host, port)


def path(path: str) -> Configure:
    """Append a path segment; a segment starting with `/` replaces the path."""
    return lambda r: r.path(path)


def pathf(template: str, *args: Any, **kwargs: Any) -> Configure:
    return lambda r: r.pathf(template, *args, **kwargs)


def param(name: str, *values: str) -> Configure:
    return lambda r: r.param(name, *values)


def raw_query(query: str) -> Configure:
    return lambda r: r.raw_query(query)


def fragment(fragment: str) -> Configure:
    return lambda r: r.fragment(fragment)


def content_type(content_type: str) -> Configure:
    return lambda r: r.content_type(content_type)


def accept(content_type: str) -> Configure:
    return lambda r: r.accept(content_type)


def accept_range(content_types: Mapping[str, float]) -> Configure:
    return lambda r: r.accept_range(content_types)


def basic_auth(user: str, password: str) -> Configure:
    return lambda r: r.basic_auth(user, password)


def bearer_auth(token: str) -> Configure:
    return lambda r: r.bearer_auth(token)


def header(key: str, *values: str) -> Configure:
    return lambda r: r.header(key, *values)


def body(get_body: GetBody | None) -> Configure:
    return lambda r: r.body(get_body)


def body_cached(get_body: GetBody) -> Configure:
    return lambda r: r.body_cached(get_body)


def body_reader(stream: IO[bytes]) -> Configure:
    return lambda r: r.body_reader(stream)


def body_bytes(body: bytes) -> Configure:
    return lambda r: r.body_bytes(body)


def body_string(body: str, encoding: str = "utf-8") -> Configure:
    return lambda r: r.body_string(body, encoding)


def body_form(form: Mapping[str, str | Sequence[str]]) -> Configure:
    return lambda r: r.body_form(form)


def body_file(path: str) -> Configure:
    return lambda r: r.body_file(path)


def body_encoding(encoding: RequestEncoding | None) -> Configure:
    return lambda r: r.body_encoding(encoding)


def body_encode(value: Any, encoding: RequestEncoding | None = None) -> Configure:
    return lambda r: r.body_encode(value, encoding)


def ensure(*processors: RequestProcessor) -> Configure:
    return lambda r: r.ensure(*processors)

# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fluent request configuration."""

from __future__ import annotations

import base64
from collections.abc import Callable, Mapping, Sequence
from typing import IO, Any, Protocol
from urllib.parse import urlencode

import httpx

from ..errors import ConfigError, RequestProcessorError
from .body import NO_BODY, BodySource, BytesBody, EncodedBody, FileBody, GeneratedBody, GetBody, cached, read_body
from .codec import RequestEncoding
from .context import Context, background
from .headers import canonical_header_key
from .quality import accept_value
from .url import build_url

# Called once on every httpx.Request after the builder constructed it. Raise to abort.
RequestProcessor = Callable[[httpx.Request], Any]

CONTEXT_EXTENSION = "rmq.context"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"


def request_context(request: httpx.Request | None) -> Context:
    """Return the Context a request was built with, or the background context."""
    if request is None:
        return background()
    ctx = request.extensions.get(CONTEXT_EXTENSION)
    return ctx if isinstance(ctx, Context) else background()


class Request(Protocol):
    def method(self, method: str) -> Request:
        """Set the request http method."""
        ...

    def base_url(self, base_url: str) -> Request:
        """Set the request base url, a missing trailing `/` is appended."""
        ...

    def scheme(self, scheme: str) -> Request: ...

    def host(self, host: str) -> Request: ...

    def hostf(self, template: str, *args: Any, **kwargs: Any) -> Request: ...

    def host_and_port(self, host: str, port: int) -> Request: ...

    def path(self, path: str) -> Request:
        """
        Append a path segment to the base url; a segment starting with `/`
        replaces the path accumulated so far.
        """
        ...

    def pathf(self, template: str, *args: Any, **kwargs: Any) -> Request: ...

    def param(self, name: str, *values: str) -> Request:
        """Set the values of a query parameter, overwriting existing values."""
        ...

    def raw_query(self, query: str) -> Request:
        """
        Set an already encoded query string, sent in its given order. Values
        set with param() are appended after it.
        """
        ...

    def fragment(self, fragment: str) -> Request: ...

    def content_type(self, content_type: str) -> Request: ...

    def accept(self, content_type: str) -> Request: ...

    def accept_range(self, content_types: Mapping[str, float]) -> Request:
        """Set the Accept header to the content types, ordered by quality value."""
        ...

    def basic_auth(self, user: str, password: str) -> Request: ...

    def bearer_auth(self, token: str) -> Request: ...

    def header(self, key: str, *values: str) -> Request:
        """Set a header, overwriting existing values."""
        ...

    def body(self, get_body: GetBody | None) -> Request:
        """
        Use get_body to produce the request body when the request is built.
        None sends no body.
        """
        ...

    def body_cached(self, get_body: GetBody) -> Request:
        """Call get_body once, replaying its bytes whenever the body is needed again."""
        ...

    def body_reader(self, stream: IO[bytes]) -> Request: ...

    def body_bytes(self, body: bytes) -> Request: ...

    def body_string(self, body: str, encoding: str = "utf-8") -> Request: ...

    def body_form(self, form: Mapping[str, str | Sequence[str]]) -> Request:
        """Send form as an `application/x-www-form-urlencoded` body."""
        ...

    def body_file(self, path: str) -> Request:
        """Send the contents of the file at path, opened when the request is built."""
        ...

    def body_encoding(self, encoding: RequestEncoding | None) -> Request:
        """Set the body encoding and the matching Content-Type header."""
        ...

    def body_encode(self, value: Any, encoding: RequestEncoding | None = None) -> Request:
        """
        Encode value as the request body. Without an encoding here one must
        be set with body_encoding before the request is built.
        """
        ...

    def ensure(self, *processors: RequestProcessor) -> Request:
        """Run processors, in order, on the built request before it is sent."""
        ...

    def url(self) -> str:
        """Return the configured url; raises ConfigError for an invalid base url."""
        ...

    def build(self, ctx: Context | None = None) -> httpx.Request: ...

    def clone(self) -> Request: ...


class _Request:
    def __init__(self) -> None:
        self._base_url = ""
        self._scheme = ""
        self._host = ""
        self._paths: list[str] = []
        self._query: dict[str, list[str]] = {}
        self._raw_query = ""
        self._fragment = ""

        self._method = ""
        self._headers: dict[str, list[str]] = {}
        self._body: BodySource | None = None

        self._encoding: RequestEncoding | None = None
        self._processors: list[RequestProcessor | None] = []

    def method(self, method: str) -> _Request:
        self._method = method
        return self

    def base_url(self, base_url: str) -> _Request:
        if base_url and not base_url.endswith("/"):
            base_url += "/"
        self._base_url = base_url
        return self

    def scheme(self, scheme: str) -> _Request:
        self._scheme = scheme
        return self

    def host(self, host: str) -> _Request:
        self._host = host
        return self

    def hostf(self, template: str, *args: Any, **kwargs: Any) -> _Request:
        return self.host(template.format(*args, **kwargs))

    def host_and_port(self, host: str, port: int) -> _Request:
        return self.hostf("{}:{:d}", host, port)

    def path(self, path: str) -> _Request:
        self._paths.append(path)
        return self

    def pathf(self, template: str, *args: Any, **kwargs: Any) -> _Request:
        return self.path(template.format(*args, **kwargs))

    def param(self, name: str, *values: str) -> _Request:
        self._query[name] = [str(v) for v in values]
        return self

    def raw_query(self, query: str) -> _Request:
        self._raw_query = query.lstrip("?")
        return self

    def fragment(self, fragment: str) -> _Request:
        self._fragment = fragment
        return self

    def content_type(self, content_type: str) -> _Request:
        return self.header("Content-Type", content_type)

    def accept(self, content_type: str) -> _Request:
        return self.header("Accept", content_type)

    def accept_range(self, content_types: Mapping[str, float]) -> _Request:
        return self.header("Accept", accept_value(content_types))

    def basic_auth(self, user: str, password: str) -> _Request:
        encoded = base64.b64encode(f"{user}:{password}".encode()).decode("ascii")
        return self.header("Authorization", "Basic " + encoded)

    def bearer_auth(self, token: str) -> _Request:
        return self.header("Authorization", "Bearer " + token)

    def header(self, key: str, *values: str) -> _Request:
        self._headers[canonical_header_key(key)] = list(values)
        return self

    def body(self, get_body: GetBody | None) -> _Request:
        self._body = None if get_body is None else GeneratedBody(get_body)
        return self

    def body_cached(self, get_body: GetBody) -> _Request:
        return self.body(cached(get_body))

    def body_reader(self, stream: IO[bytes]) -> _Request:
        return self.body(lambda: stream)

    def body_bytes(self, body: bytes) -> _Request:
        self._body = BytesBody(body)
        return self

    def body_string(self, body: str, encoding: str = "utf-8") -> _Request:
        self._body = BytesBody(body.encode(encoding))
        return self

    def body_form(self, form: Mapping[str, str | Sequence[str]]) -> _Request:
        items = {k: [v] if isinstance(v, str) else list(v) for k, v in form.items()}
        encoded = urlencode(sorted(items.items()), doseq=True)
        self._body = BytesBody(encoded.encode("ascii"))
        return self.content_type(FORM_CONTENT_TYPE)

    def body_file(self, path: str) -> _Request:
        self._body = FileBody(path)
        return self

    def body_encoding(self, encoding: RequestEncoding | None) -> _Request:
        self._encoding = encoding
        if encoding is not None:
            self.content_type(encoding.content_type())
        return self

    def body_encode(self, value: Any, encoding: RequestEncoding | None = None) -> _Request:
        if encoding is not None:
            self.body_encoding(encoding)
        self._body = EncodedBody(value)
        return self

    def ensure(self, *processors: RequestProcessor) -> _Request:
        self._processors.extend(processors)
        return self

    def url(self) -> str:
        """Compute the request url; raises ConfigError for an invalid base url."""
        return build_url(
            self._base_url,
            scheme=self._scheme,
            host=self._host,
            paths=self._paths,
            query=self._query,
            raw_query=self._raw_query,
            fragment=self._fragment,
        )

    def open_body(self) -> IO[bytes]:
        """Open the configured body source, NO_BODY when none is configured."""
        if self._body is None:
            return NO_BODY
        return self._body.open(self._encoding)

    def build(self, ctx: Context | None = None) -> httpx.Request:
        """Create an httpx.Request from the configured values and run the request processors."""
        ctx = ctx or background()
        url = self.url()
        content = read_body(self.open_body())

        extensions: dict[str, Any] = {CONTEXT_EXTENSION: ctx}
        remaining = ctx.remaining()
        if remaining is not None:
            extensions["timeout"] = httpx.Timeout(remaining).as_dict()

        try:
            request = httpx.Request(
                self._method or "GET",
                url,
                headers=self._header_items(),
                content=content or None,
                extensions=extensions,
            )
        except httpx.InvalidURL as exc:
            raise ConfigError(f"invalid request url {url!r}: {exc}", cause=exc) from exc

        self._process(request)
        return request

    def _header_items(self) -> list[tuple[str, str]]:
        return [(key, value) for key, values in self._headers.items() for value in values]

    def _process(self, request: httpx.Request) -> None:
        for processor in self._processors:
            if processor is None:
                continue
            try:
                processor(request)
            except Exception as exc:
                raise RequestProcessorError(str(exc) or "request processor failed", cause=exc) from exc

    def apply(self, *configure: Callable[[Request], Any] | None) -> None:
        for cfg in configure:
            if cfg is not None:
                cfg(self)

    def clone(self) -> _Request:
        """Create a copy whose paths, headers, query and processors are independent of this request."""
        clone = _Request.__new__(_Request)
        clone.__dict__.update(self.__dict__)
        clone._paths = list(self._paths)
        clone._headers = {k: list(v) for k, v in self._headers.items()}
        clone._query = {k: list(v) for k, v in self._query.items()}
        clone._processors = list(self._processors)
        return clone


def new_request() -> _Request:
    return _Request()


__all__ = [
    "CONTEXT_EXTENSION",
    "FORM_CONTENT_TYPE",
    "Request",
    "RequestProcessor",
    "new_request",
    "request_context",
]

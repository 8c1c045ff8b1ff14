# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Builder: the entry point of the web package.

A builder combines one request configuration and one response configuration
with an httpx client, so a request can be configured, sent and its response
validated and consumed in one chain:

    web.get("http://localhost:15672/api/", rq.path("overview"), rq.basic_auth("guest", "guest"))
       .response(rs.ensure_status_ok())
       .use_json(None, overview)
       .invoke()
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import suppress
from typing import Any, Protocol

import httpx

from ..errors import ConfigError, TransportError
from .codec import JSON, Codec
from .context import Context, background
from .headers import redact_url
from .request import Request, _Request, new_request, request_context
from .response import BodyHandler, Response, _Response, new_response
from .transport import default_http_client

logger = logging.getLogger(__name__)


class Builder(Protocol):
    def client(self, client: httpx.Client | None) -> Builder:
        """Set the httpx.Client used to send the request."""
        ...

    def transport(self, transport: httpx.BaseTransport) -> Builder:
        """
        Send through transport. Each call gets its own httpx.Client, closed
        once the call returns; this replaces any client set with client().
        """
        ...

    def codec(self, codec: Codec) -> Builder:
        """Use codec for the request body encoding and the response body decoding."""
        ...

    def use_codec(self, req: Any, rsp: Any, codec: Codec) -> Builder:
        """Encode req as the request body and decode the response body into rsp."""
        ...

    def use_json(self, req: Any, rsp: Any) -> Builder: ...

    def request(self, *configure: Callable[[Request], Any] | None) -> Builder: ...

    def response(self, *configure: Callable[[Response], Any] | None) -> Builder: ...

    def url(self) -> str:
        """Return the configured url; raises ConfigError when it cannot be built."""
        ...

    def http_request(self, ctx: Context | None = None) -> httpx.Request:
        """Return the configured and processed httpx.Request."""
        ...

    def do(self, request: httpx.Request) -> None:
        """Send request, then run the response processors and the body handler."""
        ...

    def invoke(self, ctx: Context | None = None, *handlers: BodyHandler) -> None:
        """
        Build the request and send it with do(). A handler given here replaces
        the configured body handling for this call only; more than one is an error.
        """
        ...

    def clone(self) -> Builder:
        """
        Copy this builder. Useful for many requests that differ only by path or
        query parameters.
        """
        ...


class _Builder:
    def __init__(self) -> None:
        self._client: httpx.Client | None = None
        self._transport: httpx.BaseTransport | None = None
        self._request: _Request = new_request()
        self._response: _Response = new_response()
        self._response.builder = self

    def client(self, client: httpx.Client | None) -> _Builder:
        self._client = client
        self._transport = None
        return self

    def transport(self, transport: httpx.BaseTransport) -> _Builder:
        self._client = None
        self._transport = transport
        return self

    def codec(self, codec: Codec) -> _Builder:
        self._request.body_encoding(codec)
        self._response.body_encoding(codec)
        return self

    def use_codec(self, req: Any, rsp: Any, codec: Codec) -> _Builder:
        if req is not None:
            self._request.body_encode(req, codec)
        self._response.body_decode(rsp, codec)
        return self

    def use_json(self, req: Any, rsp: Any) -> _Builder:
        return self.use_codec(req, rsp, JSON)

    def request(self, *configure: Callable[[Request], Any] | None) -> _Builder:
        self._request.apply(*configure)
        return self

    def response(self, *configure: Callable[[Response], Any] | None) -> _Builder:
        self._response.apply(*configure)
        return self

    def url(self) -> str:
        return self._request.url()

    def http_request(self, ctx: Context | None = None) -> httpx.Request:
        return self._request.build(ctx)

    def do(self, request: httpx.Request) -> None:
        request_context(request).check()
        if self._client is None and self._transport is not None:
            with httpx.Client(transport=self._transport) as client:
                self._send(client, request)
        else:
            self._send(self._client or default_http_client(), request)

    def _send(self, client: httpx.Client, request: httpx.Request) -> None:
        if "timeout" not in request.extensions:
            request.extensions["timeout"] = client.timeout.as_dict()
        for key, value in client.headers.items():
            request.headers.setdefault(key, value)

        url = redact_url(str(request.url))
        logger.debug("sending %s %s", request.method, url)
        try:
            response = client.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise TransportError(str(exc), cause=exc) from exc

        try:
            logger.debug("received %d %s for %s %s", response.status_code, response.reason_phrase, request.method, url)
            self._response.process(response)
            self._response.invoke_body_handler(response)
        finally:
            with suppress(httpx.HTTPError, OSError):
                response.close()

    def invoke(self, ctx: Context | None = None, *handlers: BodyHandler) -> None:
        if len(handlers) > 1:
            raise ConfigError("only one response handler allowed")

        request = self._request.build(ctx or background())

        builder = self
        if handlers:
            builder = self.clone()
            builder._response.body(handlers[0])
        builder.do(request)

    def clone(self) -> _Builder:
        clone = _Builder.__new__(_Builder)
        clone._client = self._client
        clone._transport = self._transport
        clone._request = self._request.clone()
        clone._response = self._response.clone()
        clone._response.builder = clone
        return clone


def new() -> Builder:
    return _Builder()


def _verb(method: str, base_url: str, configure: tuple[Callable[[Request], Any] | None, ...]) -> Builder:
    b = _Builder()
    b._request.method(method).base_url(base_url)
    b._request.apply(*configure)
    return b


def connect(base_url: str, *configure: Callable[[Request], Any] | None) -> Builder:
    return _verb("CONNECT", base_url, configure)


def delete(base_url: str, *configure: Callable[[Request], Any] | None) -> Builder:
    return _verb("DELETE", base_url, configure)


def get(base_url: str, *configure: Callable[[Request], Any] | None) -> Builder:
    return _verb("GET", base_url, configure)


def head(base_url: str, *configure: Callable[[Request], Any] | None) -> Builder:
    return _verb("HEAD", base_url, configure)


def options(base_url: str, *configure: Callable[[Request], Any] | None) -> Builder:
    return _verb("OPTIONS", base_url, configure)


def patch(base_url: str, *configure: Callable[[Request], Any] | None) -> Builder:
    return _verb("PATCH", base_url, configure)


def post(base_url: str, *configure: Callable[[Request], Any] | None) -> Builder:
    return _verb("POST", base_url, configure)


def put(base_url: str, *configure: Callable[[Request], Any] | None) -> Builder:
    return _verb("PUT", base_url, configure)


def trace(base_url: str, *configure: Callable[[Request], Any] | None) -> Builder:
    return _verb("TRACE", base_url, configure)


__all__ = [
    "Builder",
    "connect",
    "delete",
    "get",
    "head",
    "new",
    "options",
    "patch",
    "post",
    "put",
    "trace",
]

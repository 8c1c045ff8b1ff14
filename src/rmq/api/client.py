# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""RabbitMQ management api client built on the web builder."""

from __future__ import annotations

import io
import logging
from typing import Any

import httpx

from ..config import ApiConfig, HttpSettings, load_api_config, load_http_settings
from ..errors import ResponseProcessorError, StatusError
from ..web import JSON, Builder, Context, create_http_client, new, rq, rs
from ..web.headers import redact_headers, redact_url
from .query import PageFilter, Query

logger = logging.getLogger(__name__)


def trace_request(request: httpx.Request) -> None:
    logger.info(">==>==>==> %s %s", request.method, redact_url(str(request.url)))
    for key, value in redact_headers(request.headers.items()):
        logger.info("  %s: %s", key, value)


def trace_response(response: httpx.Response) -> None:
    logger.info("<==<==<==< %d %s", response.status_code, response.reason_phrase)
    for key, value in redact_headers(response.headers.items()):
        logger.info("  %s: %s", key, value)


def ensure_success(response: httpx.Response) -> None:
    """Raise StatusError for 4xx and 5xx responses."""
    if response.status_code >= httpx.codes.BAD_REQUEST:
        raise StatusError(response.status_code, response.reason_phrase, redact_url(str(response.request.url)))


class ApiClient:
    """
    Thin client for the management api at `{scheme}://{host}:{api_port}/api/`.

    Every request carries basic auth, a JSON Accept header and the global
    columns/sort query parameters from ApiConfig. Responses with a 4xx or 5xx
    status raise StatusError; bodies are returned as raw bytes.
    """

    def __init__(
        self,
        config: ApiConfig | None = None,
        settings: HttpSettings | None = None,
        http_client: httpx.Client | None = None,
    ):
        self.config = config or load_api_config()
        self.settings = settings or load_http_settings()
        self._owns_client = http_client is None
        self._client = http_client

    @property
    def http_client(self) -> httpx.Client:
        if self._client is None:
            self._client = create_http_client(self.settings)
        return self._client

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def global_query(self) -> Query:
        cfg = self.config
        q = Query()
        q.add_if(bool(cfg.columns), "columns", ",".join(cfg.columns))
        q.add_if(bool(cfg.sort), "sort", cfg.sort)
        q.add_if(cfg.sort_reverse, "sort_reverse", "true")
        return q

    def builder(self, method: str, path: str, query: Query | None = None, page: PageFilter | None = None) -> Builder:
        """Return a builder for path relative to the api root, with auth, query and validation applied."""
        q = Query().extend(query)
        if page is not None:
            q.extend(page.to_query())
        q.extend(self.global_query())

        b = (
            new()
            .client(self.http_client)
            .request(
                rq.method(method),
                rq.base_url(self.config.base_url),
                rq.path(path.lstrip("/")),
                rq.basic_auth(self.config.user, self.config.password),
                rq.accept(JSON.content_type()),
                rq.raw_query(q.string()),
            )
            .response(rs.max_size(self.settings.max_body_bytes))
        )
        if self.config.debug:
            b.request(rq.ensure(trace_request))
            b.response(rs.ensure(trace_response))
        return b.response(rs.ensure(ensure_success))

    def call(self, b: Builder, ctx: Context | None = None) -> bytes:
        """Invoke b and return the response body."""
        buf = io.BytesIO()
        try:
            b.invoke(ctx, lambda _ctx, reader: buf.write(reader.read()))
        except ResponseProcessorError as exc:
            if isinstance(exc.cause, StatusError):
                raise exc.cause from None
            raise
        return buf.getvalue()

    def get_json(
        self, path: str, query: Query | None = None, page: PageFilter | None = None, ctx: Context | None = None
    ) -> bytes:
        return self.call(self.builder("GET", path, query, page), ctx)

    def put_json(self, path: str, body: Any, ctx: Context | None = None) -> bytes:
        return self.call(self.builder("PUT", path).request(rq.body_encode(body, JSON)), ctx)

    def post_json(self, path: str, body: Any, ctx: Context | None = None) -> bytes:
        return self.call(self.builder("POST", path).request(rq.body_encode(body, JSON)), ctx)

    def delete(self, path: str, ctx: Context | None = None) -> bytes:
        return self.call(self.builder("DELETE", path), ctx)


__all__ = ["ApiClient", "ensure_success", "trace_request", "trace_response"]

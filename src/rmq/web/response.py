# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fluent response handling: validation, size limits and body consumption."""

from __future__ import annotations

import io
import logging
import shutil
from collections.abc import Callable, Iterator
from typing import IO, TYPE_CHECKING, Any, Protocol

import httpx

from ..errors import ConfigError, DecodeError, ResponseProcessorError, RmqError, TransportError
from .codec import ResponseEncoding
from .context import Context, background
from .headers import header_value, media_type
from .quality import quality_values
from .request import request_context

if TYPE_CHECKING:
    from .builder import _Builder

logger = logging.getLogger(__name__)

# 1 MiB; raise it explicitly when a larger body is expected.
DEFAULT_MAX_RESPONSE_SIZE = 1 << 20
_DRAIN_CHUNK_SIZE = 64 * 1024

# Called after the response has been received and before its body is read. Raise to abort.
ResponseProcessor = Callable[[httpx.Response], Any]
BodyHandler = Callable[[Context, IO[bytes]], Any]
_ResponseBodyHandler = Callable[["_Response", httpx.Response], Any]


class BodyReader(io.RawIOBase):
    """
    Read-only stream over response body chunks, capped at limit bytes.

    Bytes beyond the limit are never returned; reading simply ends there.
    `truncated` tells whether more data was available. The context is checked
    before every read so cancellation or an expired deadline stops reading.
    """

    def __init__(self, chunks: Iterator[bytes], limit: int = -1, ctx: Context | None = None):
        super().__init__()
        self._chunks = chunks
        self._remaining = limit
        self._ctx = ctx or background()
        self._pending = b""
        self._exhausted = False

    def readable(self) -> bool:
        return True

    def _next_chunk(self) -> bool:
        try:
            self._pending = next(self._chunks)
        except StopIteration:
            self._exhausted = True
            return False
        except httpx.HTTPError as exc:
            raise TransportError(str(exc), cause=exc) from exc
        return True

    def readinto(self, b) -> int:  # noqa: ANN001
        self._ctx.check()
        if self._remaining == 0:
            return 0
        while not self._pending:
            if self._exhausted or not self._next_chunk():
                return 0
        n = min(len(b), len(self._pending))
        if self._remaining > 0:
            n = min(n, self._remaining)
            self._remaining -= n
        b[:n] = self._pending[:n]
        self._pending = self._pending[n:]
        return n

    @property
    def truncated(self) -> bool:
        if self._remaining != 0:
            return False
        while not self._pending and not self._exhausted:
            self._next_chunk()
        return bool(self._pending)


class Response(Protocol):
    def max_size(self, size: int) -> Response:
        """
        Set the maximum number of body bytes passed on to the body handler.
        -1 disables the limit, 0 is valid when the body is expected to be empty.
        """
        ...

    def ensure(self, *processors: ResponseProcessor) -> Response:
        """
        Run processors, in order, after the response is received and before the
        body is processed. The first processor to raise aborts handling.
        """
        ...

    def body(self, handler: BodyHandler | None) -> Response:
        """Process the body with handler(ctx, reader); None discards the body."""
        ...

    def body_file(self, path: str) -> Response:
        """Save the body to path, truncating an existing file."""
        ...

    def body_copy_to(self, writer: IO[bytes]) -> Response: ...

    def body_encoding(self, *encodings: ResponseEncoding) -> Response:
        """
        Set the decoders accepted for the body and the Accept header. With more
        than one decoder the Accept header is a quality value list.
        """
        ...

    def body_decode(self, target: Any, *encodings: ResponseEncoding) -> Response:
        """
        Decode the body into target with the decoder matching the response
        Content-Type; the first decoder is used when Content-Type is missing.
        """
        ...

    def clone(self) -> Response: ...


class _Response:
    def __init__(self) -> None:
        self.builder: _Builder | None = None
        self._max_size = DEFAULT_MAX_RESPONSE_SIZE
        self._encodings: list[ResponseEncoding] = []
        self._processors: list[ResponseProcessor | None] = []
        self._body_handler: _ResponseBodyHandler | None = None

    def max_size(self, size: int) -> _Response:
        self._max_size = -1 if size < -1 else size
        return self

    def ensure(self, *processors: ResponseProcessor) -> _Response:
        self._processors.extend(processors)
        return self

    def body(self, handler: BodyHandler | None) -> _Response:
        if handler is None:
            self._body_handler = None
            return self

        def handle(rsp: _Response, response: httpx.Response) -> Any:
            ctx = request_context(_request_of(response))
            return handler(ctx, rsp.body_reader(response, ctx))

        self._body_handler = handle
        return self

    def body_file(self, path: str) -> _Response:
        def save(ctx: Context, reader: IO[bytes]) -> None:
            try:
                out = open(path, "wb")
            except OSError as exc:
                raise ConfigError(f"could not open file for writing '{path}': {exc}", cause=exc) from exc
            with out:
                shutil.copyfileobj(reader, out)

        return self.body(save)

    def body_copy_to(self, writer: IO[bytes]) -> _Response:
        return self.body(lambda ctx, reader: shutil.copyfileobj(reader, writer))

    def body_encoding(self, *encodings: ResponseEncoding) -> _Response:
        self._encodings = list(encodings)
        request = self.builder._request if self.builder is not None else None
        if request is not None and len(encodings) == 1:
            request.accept(encodings[0].content_type())
        elif request is not None and len(encodings) > 1:
            request.accept_range(quality_values(encodings))
        return self

    def body_decode(self, target: Any, *encodings: ResponseEncoding) -> _Response:
        if encodings:
            self.body_encoding(*encodings)
        self._body_handler = lambda rsp, response: rsp._decode(response, target)
        return self

    def _decode(self, response: httpx.Response, target: Any) -> None:
        content_type = media_type(header_value(response.headers, "Content-Type"))
        for encoding in self._encodings:
            if content_type and encoding.content_type().lower() != content_type.lower():
                continue
            ctx = request_context(_request_of(response))
            reader = self.body_reader(response, ctx)
            try:
                encoding.new_decoder(reader).decode(target)
            except RmqError:
                raise
            except Exception as exc:
                raise DecodeError(f"decoding the response failed: {exc}", cause=exc) from exc
            return
        raise ConfigError(f"no response encoding configured for content type {content_type}")

    def body_reader(self, response: httpx.Response, ctx: Context | None = None) -> BodyReader:
        return BodyReader(response.iter_bytes(), self._max_size, ctx)

    def process(self, response: httpx.Response) -> None:
        for processor in self._processors:
            if processor is None:
                continue
            try:
                processor(response)
            except Exception as exc:
                raise ResponseProcessorError(str(exc) or "response processor failed", cause=exc) from exc

    def invoke_body_handler(self, response: httpx.Response) -> None:
        if self._body_handler is not None:
            self._body_handler(self, response)
            return
        reader = self.body_reader(response, request_context(_request_of(response)))
        while reader.read(_DRAIN_CHUNK_SIZE):
            pass
        if reader.truncated:
            logger.debug("discarded response body exceeded %d bytes", self._max_size)

    def apply(self, *configure: Callable[[Response], Any] | None) -> None:
        for cfg in configure:
            if cfg is not None:
                cfg(self)

    def clone(self) -> _Response:
        clone = _Response.__new__(_Response)
        clone.__dict__.update(self.__dict__)
        clone._encodings = list(self._encodings)
        clone._processors = list(self._processors)
        return clone


def _request_of(response: httpx.Response) -> httpx.Request | None:
    try:
        return response.request
    except RuntimeError:
        return None


def new_response() -> _Response:
    return _Response()


__all__ = [
    "DEFAULT_MAX_RESPONSE_SIZE",
    "BodyHandler",
    "BodyReader",
    "Response",
    "ResponseProcessor",
    "new_response",
]

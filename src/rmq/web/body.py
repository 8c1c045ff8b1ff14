# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request body sources.

A body source is evaluated when a request is built, not when it is
configured. Sources are immutable, so cloned requests can share them.
"""

from __future__ import annotations

import io
import threading
from collections.abc import Callable
from typing import IO, Any

from ..errors import ConfigError, EncodeError
from .codec import RequestEncoding

GetBody = Callable[[], IO[bytes]]


class _NoBody(io.RawIOBase):
    """Empty, always readable stream; closing it is a no-op."""

    def readable(self) -> bool:
        return True

    def readinto(self, b) -> int:  # noqa: ANN001
        return 0

    def close(self) -> None:
        pass


NO_BODY = _NoBody()


def read_body(stream: IO[bytes] | None) -> bytes:
    """Drain and close a body stream."""
    if stream is None or stream is NO_BODY:
        return b""
    try:
        data = stream.read()
    finally:
        stream.close()
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data or b"")


def cached(get_body: GetBody) -> GetBody:
    """
    Wrap get_body so it is called at most once.

    Every call returns a fresh stream over the bytes of the first call. If the
    first call failed, its error is raised again instead of retrying.
    """
    lock = threading.Lock()
    state: dict[str, Any] = {}

    def get_cached_body() -> IO[bytes]:
        with lock:
            if "error" in state:
                raise state["error"]
            if "data" not in state:
                try:
                    state["data"] = read_body(get_body())
                except Exception as exc:
                    state["error"] = exc
                    raise
            return io.BytesIO(state["data"])

    return get_cached_body


class BodySource:
    def open(self, encoding: RequestEncoding | None) -> IO[bytes]:
        raise NotImplementedError


class BytesBody(BodySource):
    def __init__(self, data: bytes):
        self.data = data

    def open(self, encoding: RequestEncoding | None) -> IO[bytes]:
        return io.BytesIO(self.data)


class FileBody(BodySource):
    def __init__(self, path: str):
        self.path = path

    def open(self, encoding: RequestEncoding | None) -> IO[bytes]:
        try:
            return open(self.path, "rb")
        except OSError as exc:
            raise ConfigError(f"could not open file for reading '{self.path}': {exc}", cause=exc) from exc


class GeneratedBody(BodySource):
    def __init__(self, get_body: GetBody):
        self.get_body = get_body

    def open(self, encoding: RequestEncoding | None) -> IO[bytes]:
        stream = self.get_body()
        return NO_BODY if stream is None else stream


class EncodedBody(BodySource):
    """Encodes value with the request's body encoding at build time."""

    def __init__(self, value: Any):
        self.value = value

    def open(self, encoding: RequestEncoding | None) -> IO[bytes]:
        if encoding is None:
            raise ConfigError("no request encoder configured")
        buf = io.BytesIO()
        try:
            encoding.new_encoder(buf).encode(self.value)
        except Exception as exc:
            raise EncodeError(f"request body encoding failed: {exc}", cause=exc) from exc
        buf.seek(0)
        return buf


__all__ = [
    "NO_BODY",
    "BodySource",
    "BytesBody",
    "EncodedBody",
    "FileBody",
    "GeneratedBody",
    "GetBody",
    "cached",
    "read_body",
]

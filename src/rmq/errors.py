# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    CONFIG = "CONFIG"
    PROCESSOR = "PROCESSOR"
    TRANSPORT = "TRANSPORT"
    ENCODE = "ENCODE"
    DECODE = "DECODE"
    STATUS = "STATUS"
    UNKNOWN = "UNKNOWN"


class RmqError(Exception):
    """Base class for every error raised by rmq.

    `kind` classifies the failure without string matching, `cause` keeps the
    underlying exception (also chained as `__cause__` where raised with `from`).
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str = "", cause: BaseException | None = None):
        if not message and cause is not None:
            message = str(cause)
        super().__init__(message)
        self.cause = cause

    @property
    def message(self) -> str:
        return str(self)


class ConfigError(RmqError):
    """The builder, request or response was configured in a way that cannot work."""

    kind = ErrorKind.CONFIG


class ProcessorError(RmqError):
    """A caller supplied request or response processor rejected the exchange."""

    kind = ErrorKind.PROCESSOR


class RequestProcessorError(ProcessorError):
    pass


class ResponseProcessorError(ProcessorError):
    pass


class TransportError(RmqError):
    """Network level failure while sending the request or reading the body."""

    kind = ErrorKind.TRANSPORT


class ContextCancelledError(TransportError):
    pass


class DeadlineExceededError(TransportError):
    pass


class EncodeError(RmqError):
    kind = ErrorKind.ENCODE


class DecodeError(RmqError):
    kind = ErrorKind.DECODE


class StatusError(RmqError):
    """The broker answered, but with a status code outside 2xx/3xx."""

    kind = ErrorKind.STATUS

    def __init__(self, status_code: int, reason: str, url: str):
        super().__init__(f"request failed: {status_code} {reason} ( url: {url} )")
        self.status_code = status_code
        self.reason = reason
        self.url = url


def is_request_processor_error(exc: BaseException | None) -> bool:
    """Return True when exc was caused by a request processor raising."""
    return isinstance(exc, RequestProcessorError)


def is_response_processor_error(exc: BaseException | None) -> bool:
    """Return True when exc was caused by a response processor raising."""
    return isinstance(exc, ResponseProcessorError)


def categorize_exception(exc: BaseException) -> ErrorKind:
    """
    Map rmq and httpx exceptions to an ErrorKind.
    """
    import httpx

    if isinstance(exc, RmqError):
        return exc.kind

    if isinstance(exc, httpx.HTTPStatusError):
        return ErrorKind.STATUS

    if isinstance(exc, (httpx.HTTPError, httpx.InvalidURL, ConnectionError, TimeoutError)):
        return ErrorKind.TRANSPORT

    return ErrorKind.UNKNOWN


__all__ = [
    "ConfigError",
    "ContextCancelledError",
    "DeadlineExceededError",
    "DecodeError",
    "EncodeError",
    "ErrorKind",
    "ProcessorError",
    "RequestProcessorError",
    "ResponseProcessorError",
    "RmqError",
    "StatusError",
    "TransportError",
    "categorize_exception",
    "is_request_processor_error",
    "is_response_processor_error",
]

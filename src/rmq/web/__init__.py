# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Fluent HTTP request/response builder."""

from . import rq, rs
from .body import NO_BODY, GetBody, cached
from .builder import Builder, connect, delete, get, head, new, options, patch, post, put, trace
from .codec import JSON, Codec, Decoder, Encoder, JsonCodec, RequestEncoding, ResponseEncoding, ValueHolder
from .context import Context, background, with_cancel, with_timeout, with_value
from .request import Request, RequestProcessor
from .response import DEFAULT_MAX_RESPONSE_SIZE, BodyHandler, BodyReader, Response, ResponseProcessor
from .transport import create_http_client, default_http_client
from .url import path_escape

__all__ = [
    "DEFAULT_MAX_RESPONSE_SIZE",
    "JSON",
    "NO_BODY",
    "BodyHandler",
    "BodyReader",
    "Builder",
    "Codec",
    "Context",
    "Decoder",
    "Encoder",
    "GetBody",
    "JsonCodec",
    "Request",
    "RequestEncoding",
    "RequestProcessor",
    "Response",
    "ResponseEncoding",
    "ResponseProcessor",
    "ValueHolder",
    "background",
    "cached",
    "connect",
    "create_http_client",
    "default_http_client",
    "delete",
    "get",
    "head",
    "new",
    "options",
    "patch",
    "path_escape",
    "post",
    "put",
    "rq",
    "rs",
    "trace",
    "with_cancel",
    "with_timeout",
    "with_value",
]

# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Request encoders, response decoders and the codecs that pair them."""

from __future__ import annotations

import dataclasses
import json
from typing import IO, Any, Protocol


class Encoder(Protocol):
    def encode(self, value: Any) -> None:
        """Write the encoded form of value to the encoder's output stream."""
        ...


class Decoder(Protocol):
    def decode(self, target: Any) -> None:
        """Read the next encoded value from the input stream and store it in target."""
        ...


class RequestEncoding(Protocol):
    def content_type(self) -> str: ...

    def new_encoder(self, stream: IO[bytes]) -> Encoder: ...


class ResponseEncoding(Protocol):
    def content_type(self) -> str: ...

    def new_decoder(self, stream: IO[bytes]) -> Decoder: ...


class Codec(RequestEncoding, ResponseEncoding, Protocol):
    """Creates request body encoders and response body decoders for one content type."""


class ValueHolder:
    """Decode target for documents that are not objects, e.g. a JSON list or a number."""

    def __init__(self, value: Any = None):
        self.value = value

    def __repr__(self) -> str:
        return f"ValueHolder({self.value!r})"


def assign(target: Any, value: Any) -> None:
    """
    Store a decoded value in target.

    dicts are cleared and updated, lists get their contents replaced, a
    ValueHolder receives the whole value, any other object gets the keys of a
    decoded mapping as attributes.
    """
    if isinstance(target, ValueHolder):
        target.value = value
    elif isinstance(target, dict):
        if not isinstance(value, dict):
            raise TypeError(f"cannot decode {type(value).__name__} into dict")
        target.clear()
        target.update(value)
    elif isinstance(target, list):
        if not isinstance(value, list):
            raise TypeError(f"cannot decode {type(value).__name__} into list")
        target[:] = value
    elif isinstance(value, dict) and hasattr(target, "__dict__"):
        for key, item in value.items():
            setattr(target, key, item)
    else:
        raise TypeError(f"cannot decode {type(value).__name__} into {type(target).__name__}")


def _to_jsonable(value: Any) -> Any:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return dataclasses.asdict(value)
    if isinstance(value, ValueHolder):
        return value.value
    if hasattr(value, "__dict__"):
        return {k: v for k, v in vars(value).items() if not k.startswith("_")}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


class JsonEncoder:
    def __init__(self, stream: IO[bytes]):
        self._stream = stream

    def encode(self, value: Any) -> None:
        data = json.dumps(value, default=_to_jsonable, separators=(",", ":"))
        self._stream.write(data.encode("utf-8"))
        self._stream.write(b"\n")


class JsonDecoder:
    def __init__(self, stream: IO[bytes]):
        self._stream = stream

    def decode(self, target: Any) -> None:
        assign(target, json.load(self._stream))


class JsonCodec:
    """application/json using the standard library json module."""

    def content_type(self) -> str:
        return "application/json"

    def new_encoder(self, stream: IO[bytes]) -> JsonEncoder:
        return JsonEncoder(stream)

    def new_decoder(self, stream: IO[bytes]) -> JsonDecoder:
        return JsonDecoder(stream)


JSON = JsonCodec()


__all__ = [
    "JSON",
    "Codec",
    "Decoder",
    "Encoder",
    "JsonCodec",
    "RequestEncoding",
    "ResponseEncoding",
    "ValueHolder",
    "assign",
]

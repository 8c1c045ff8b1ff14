# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

import io

import httpx
import pytest

from rmq.errors import ConfigError, DecodeError, ResponseProcessorError, is_response_processor_error
from rmq.web import JSON, ValueHolder, get, rs
from rmq.web.response import BodyReader, new_response


def _client(handler):
    return httpx.Client(transport=httpx.MockTransport(handler))


def _serve(content=b"", status=200, headers=None, seen=None):
    def handler(request):
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, content=content, headers=headers)

    return _client(handler)


class TextCodec:
    def __init__(self, content_type="text/plain"):
        self._content_type = content_type

    def content_type(self):
        return self._content_type

    def new_decoder(self, stream):
        return TextDecoder(stream)


class TextDecoder:
    def __init__(self, stream):
        self._stream = stream

    def decode(self, target):
        target.value = self._stream.read().decode()


def test_max_size_zero_with_empty_body():
    received = []
    get("http://test/").client(_serve(b"")).response(
        rs.max_size(0), rs.body(lambda ctx, reader: received.append(reader.read()))
    ).invoke()
    assert received == [b""]


def test_small_max_size_truncates_body():
    received = []
    get("http://test/").client(_serve(b"0123456789")).response(
        rs.max_size(4), rs.body(lambda ctx, reader: received.append((reader.read(), reader.truncated)))
    ).invoke()
    assert received == [(b"0123", True)]


def test_body_exactly_at_limit_is_not_truncated():
    reader = BodyReader(iter([b"01", b"23"]), limit=4)
    assert reader.read() == b"0123"
    assert reader.truncated is False


def test_unlimited_reader_reads_everything():
    reader = BodyReader(iter([b"a" * 10, b"b" * 10]), limit=-1)
    assert reader.read() == b"a" * 10 + b"b" * 10
    assert reader.truncated is False


def test_failing_response_processor_blocks_body_handler():
    called = []
    builder = get("http://test/").client(_serve(b"gone", status=404)).response(
        rs.ensure_status_ok(), rs.body(lambda ctx, reader: called.append(reader.read()))
    )

    with pytest.raises(ResponseProcessorError) as exc_info:
        builder.invoke()

    assert is_response_processor_error(exc_info.value)
    assert str(exc_info.value) == "expected 200 OK status, got 404 Not Found"
    assert called == []


def test_last_body_mode_wins():
    called = []
    target = {}
    client = _serve(b'{"a": 1}', headers={"Content-Type": "application/json"})

    get("http://test/").client(client).response(
        rs.body(lambda ctx, reader: called.append(1)), rs.body_decode(target, JSON)
    ).invoke()
    assert called == []
    assert target == {"a": 1}

    target.clear()
    get("http://test/").client(client).response(
        rs.body_decode(target, JSON), rs.body(lambda ctx, reader: called.append(1))
    ).invoke()
    assert called == [1]
    assert target == {}


def test_decode_without_content_type_uses_first_decoder():
    target = ValueHolder()
    get("http://test/").client(_serve(b"[1, 2]")).response(rs.body_decode(target, JSON, TextCodec())).invoke()
    assert target.value == [1, 2]


def test_decode_picks_decoder_by_content_type():
    target = ValueHolder()
    client = _serve(b"plain words", headers={"Content-Type": "Text/Plain; charset=utf-8"})
    get("http://test/").client(client).response(rs.body_decode(target, JSON, TextCodec())).invoke()
    assert target.value == "plain words"


def test_decode_without_matching_decoder_is_config_error():
    client = _serve(b"<xml/>", headers={"Content-Type": "text/xml"})
    with pytest.raises(ConfigError, match="no response encoding configured for content type text/xml"):
        get("http://test/").client(client).response(rs.body_decode({}, JSON)).invoke()


def test_invalid_json_is_decode_error():
    client = _serve(b"{not json", headers={"Content-Type": "application/json"})
    with pytest.raises(DecodeError) as exc_info:
        get("http://test/").client(client).response(rs.body_decode({}, JSON)).invoke()
    assert isinstance(exc_info.value.cause, ValueError)


def test_decode_into_wrong_target_type_is_decode_error():
    client = _serve(b"[1]", headers={"Content-Type": "application/json"})
    with pytest.raises(DecodeError):
        get("http://test/").client(client).response(rs.body_decode({}, JSON)).invoke()


def test_body_encoding_sets_accept_header():
    seen = []
    client = _serve(b"{}", headers={"Content-Type": "application/json"}, seen=seen)
    get("http://test/").client(client).response(rs.body_decode({}, JSON, TextCodec("text/x-other"))).invoke()
    assert seen[0].headers["Accept"] == "application/json, text/x-other;q=0.667"


def test_body_decode_keeps_previous_encodings():
    target = ValueHolder()
    client = _serve(b"kept", headers={"Content-Type": "text/plain"})
    get("http://test/").client(client).response(rs.body_encoding(TextCodec()), rs.body_decode(target)).invoke()
    assert target.value == "kept"


def test_body_file_and_copy_to(tmp_path):
    path = tmp_path / "out.json"
    get("http://test/").client(_serve(b"saved")).response(rs.body_file(str(path))).invoke()
    assert path.read_bytes() == b"saved"

    buf = io.BytesIO()
    get("http://test/").client(_serve(b"copied")).response(rs.body_copy_to(buf)).invoke()
    assert buf.getvalue() == b"copied"


def test_body_file_unwritable_is_config_error(tmp_path):
    target = tmp_path / "missing-dir" / "out"
    with pytest.raises(ConfigError, match="could not open file for writing"):
        get("http://test/").client(_serve(b"x")).response(rs.body_file(str(target))).invoke()


def test_response_without_handler_is_drained():
    get("http://test/").client(_serve(b"x" * 200_000)).invoke()


@pytest.mark.parametrize(
    ("configure", "ok", "bad"),
    [
        (rs.ensure_status_ok, 200, 201),
        (rs.ensure_status_created, 201, 200),
        (rs.ensure_status_accepted, 202, 200),
        (rs.ensure_status_no_content, 204, 200),
        (rs.ensure_status_informational, 101, 200),
        (rs.ensure_status_success, 299, 300),
        (rs.ensure_status_redirect, 302, 200),
        (rs.ensure_status_client_error, 404, 500),
        (rs.ensure_status_server_error, 503, 404),
    ],
)
def test_status_validators(configure, ok, bad):
    response = new_response()
    configure()(response)
    response.process(httpx.Response(ok))
    with pytest.raises(ResponseProcessorError):
        response.process(httpx.Response(bad))


def test_ensure_status_accepts_any_listed_code():
    response = new_response()
    rs.ensure_status(200, 204)(response)
    response.process(httpx.Response(204))
    with pytest.raises(ResponseProcessorError, match=r"expected one of \[200, 204\] status codes but got 500"):
        response.process(httpx.Response(500))


def test_response_clone_has_own_processors():
    def reject(response):
        raise ValueError("no")

    original = new_response()
    clone = original.clone()
    original.ensure(reject)
    clone.process(httpx.Response(200))
    with pytest.raises(ResponseProcessorError):
        original.process(httpx.Response(200))

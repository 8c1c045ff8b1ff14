# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx

from rmq.web.headers import canonical_header_key, header_value, media_type, redact_headers, redact_url


def test_header_value_matches_case_insensitively():
    headers = {"content-TYPE": " application/json ", "X-Empty": None}
    assert header_value(headers, "Content-Type") == "application/json"
    assert header_value(headers, "x-empty", "none") == "none"
    assert header_value(headers, "Accept", "*/*") == "*/*"
    assert header_value(None, "Accept") == ""


def test_header_value_reads_httpx_headers():
    headers = httpx.Headers({"Content-Type": "text/plain; charset=utf-8"})
    assert media_type(header_value(headers, "content-type")) == "text/plain"
    assert media_type("") == ""


def test_canonical_header_key():
    assert canonical_header_key("x-trace-id") == "X-Trace-Id"
    assert canonical_header_key("CONTENT-type") == "Content-Type"
    assert canonical_header_key("bad key") == "bad key"


def test_redaction():
    assert redact_headers([("Authorization", "Basic abc"), ("Accept", "*/*")]) == [
        ("Authorization", "[REDACTED]"),
        ("Accept", "*/*"),
    ]
    assert redact_url("http://guest:secret@h:15672/api/") == "http://guest:xxxxx@h:15672/api/"
    assert redact_url("http://h/api/") == "http://h/api/"

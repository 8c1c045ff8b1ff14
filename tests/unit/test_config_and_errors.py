# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging

import httpx

from rmq import config
from rmq.config import DEFAULT_USER_AGENT, ApiConfig, HttpSettings
from rmq.errors import (
    ConfigError,
    ErrorKind,
    RequestProcessorError,
    ResponseProcessorError,
    RmqError,
    StatusError,
    TransportError,
    categorize_exception,
    is_request_processor_error,
    is_response_processor_error,
)
from rmq.log import resolve_log_level, setup_logging


def test_http_settings_env_overrides(monkeypatch):
    monkeypatch.setenv("RMQ_HTTP_TIMEOUT", "5.5")
    monkeypatch.setenv("RMQ_HTTP_VERIFY_SSL", "0")
    monkeypatch.setenv("RMQ_HTTP_REDIRECTS", "false")
    monkeypatch.setenv("RMQ_HTTP_MAX_BODY_BYTES", "2048")
    monkeypatch.setenv("RMQ_USER_AGENT", "CustomAgent/1.0")

    settings = config.load_http_settings()

    assert settings.timeout == 5.5
    assert settings.verify_ssl is False
    assert settings.allow_redirects is False
    assert settings.max_body_bytes == 2048
    assert settings.user_agent == "CustomAgent/1.0"


def test_http_settings_invalid_env_fall_back(monkeypatch):
    monkeypatch.setenv("RMQ_HTTP_TIMEOUT", "not-a-number")
    monkeypatch.setenv("RMQ_HTTP_MAX_BODY_BYTES", "lots")
    monkeypatch.delenv("RMQ_USER_AGENT", raising=False)

    settings = config.load_http_settings()

    assert settings.timeout == HttpSettings.timeout
    assert settings.max_body_bytes == HttpSettings.max_body_bytes
    assert settings.user_agent == DEFAULT_USER_AGENT


def test_http_settings_negative_body_limit_means_unlimited(monkeypatch):
    monkeypatch.setenv("RMQ_HTTP_MAX_BODY_BYTES", "-20")
    monkeypatch.setenv("RMQ_HTTP_TIMEOUT", "0")
    settings = config.load_http_settings()
    assert settings.max_body_bytes == -1
    assert settings.timeout == HttpSettings.timeout


def test_api_config_from_env(monkeypatch):
    monkeypatch.setenv("RMQ_SCHEME", "https")
    monkeypatch.setenv("RMQ_HOST", "rabbit")
    monkeypatch.setenv("RMQ_API_PORT", "443")
    monkeypatch.setenv("RMQ_COLUMNS", "name, vhost,,")
    monkeypatch.setenv("RMQ_SORT_REVERSE", "yes")

    cfg = config.load_api_config()

    assert cfg.base_url == "https://rabbit:443/api/"
    assert cfg.columns == ["name", "vhost"]
    assert cfg.sort_reverse is True
    assert cfg.user == "guest"


def test_api_config_defaults():
    assert ApiConfig().base_url == "http://localhost:15672/api/"


def test_error_message_falls_back_to_cause():
    cause = ValueError("bad value")
    err = ConfigError(cause=cause)
    assert err.message == "bad value"
    assert err.cause is cause
    assert err.kind == ErrorKind.CONFIG
    assert isinstance(err, RmqError)


def test_status_error_message():
    err = StatusError(404, "Not Found", "http://h/api/queues")
    assert str(err) == "request failed: 404 Not Found ( url: http://h/api/queues )"
    assert err.status_code == 404
    assert categorize_exception(err) == ErrorKind.STATUS


def test_processor_error_markers():
    req_err = RequestProcessorError("nope")
    rsp_err = ResponseProcessorError("nope")
    assert is_request_processor_error(req_err)
    assert not is_request_processor_error(rsp_err)
    assert is_response_processor_error(rsp_err)
    assert not is_response_processor_error(None)
    assert req_err.kind == rsp_err.kind == ErrorKind.PROCESSOR


def test_categorize_exception():
    assert categorize_exception(httpx.ConnectError("refused")) == ErrorKind.TRANSPORT
    assert categorize_exception(TimeoutError()) == ErrorKind.TRANSPORT
    assert categorize_exception(TransportError("x")) == ErrorKind.TRANSPORT
    assert categorize_exception(KeyError("x")) == ErrorKind.UNKNOWN


def test_setup_logging_accepts_unknown_level(monkeypatch):
    calls = {}
    monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.update(kwargs))
    setup_logging("not-a-level")
    assert calls["level"] == logging.WARNING
    setup_logging("debug")
    assert calls["level"] == logging.DEBUG


def test_log_level_env_is_read_at_call_time(monkeypatch):
    monkeypatch.delenv("RMQ_LOG_LEVEL", raising=False)
    assert resolve_log_level() == logging.WARNING
    monkeypatch.setenv("RMQ_LOG_LEVEL", "debug")
    assert resolve_log_level() == logging.DEBUG
    assert resolve_log_level("error") == logging.ERROR
    monkeypatch.setenv("RMQ_LOG_LEVEL", "chatty")
    assert resolve_log_level() == logging.WARNING


def test_unrecognised_boolean_env_keeps_default(monkeypatch):
    monkeypatch.setenv("RMQ_HTTP_VERIFY_SSL", "maybe")
    monkeypatch.setenv("RMQ_SORT_REVERSE", "off")
    assert config.load_http_settings().verify_ssl is True
    assert config.load_api_config().sort_reverse is False

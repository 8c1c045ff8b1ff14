# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

import httpx
import pytest

from rmq.cli.main import api_config_from_args, build_parser, main
from rmq.config import ApiConfig


@pytest.fixture
def broker(monkeypatch):
    state = {"requests": [], "status": 200, "content": b'[{"name":"q1"}]'}

    def handler(request):
        state["requests"].append(request)
        return httpx.Response(state["status"], content=state["content"], headers={"Content-Type": "application/json"})

    def fake_create(settings):
        return httpx.Client(transport=httpx.MockTransport(handler))

    for name in ("RMQ_HOST", "RMQ_VHOST", "RMQ_COLUMNS", "RMQ_SORT", "RMQ_PRETTY_PRINT", "RMQ_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("rmq.api.client.create_http_client", fake_create)
    return state


def test_list_queues_prints_body(broker, capsys):
    assert main(["list", "queues"]) == 0
    assert capsys.readouterr().out == '[{"name":"q1"}]\n'
    assert broker["requests"][0].url.path == "/api/queues"


def test_pretty_print_and_paging(broker, capsys):
    assert main(["--pretty-print", "list", "queues", "-p", "2", "-s", "10", "-n", "q.*", "-r"]) == 0
    assert capsys.readouterr().out == '[\n  {\n    "name": "q1"\n  }\n]\n'
    params = broker["requests"][0].url.params
    assert params["page"] == "2"
    assert params["page_size"] == "10"
    assert params["name"] == "q.*"
    assert params["use_regex"] == "true"


def test_global_flags_reach_the_request(broker):
    argv = [
        "--host", "rabbit", "--api-port", "15673", "--vhost", "my vhost",
        "--columns", "name,messages", "--sort", "messages", "--sort-reverse",
        "list", "vhost-queues",
    ]
    assert main(argv) == 0
    request = broker["requests"][0]
    assert request.url.host == "rabbit"
    assert request.url.port == 15673
    assert request.url.raw_path.startswith(b"/api/queues/my%20vhost")
    assert request.url.params["columns"] == "name,messages"
    assert request.url.params["sort_reverse"] == "true"


def test_node_command_flags(broker):
    assert main(["list", "node", "-n", "rabbit@a", "--memory"]) == 0
    request = broker["requests"][0]
    assert request.url.path == "/api/nodes/rabbit@a"
    assert request.url.params["memory"] == "true"
    assert "binary" not in request.url.params


def test_check_certificate_expiration(broker):
    assert main(["check", "certificate-expiration", "--within-weeks", "2"]) == 0
    assert broker["requests"][0].url.path == "/api/health/checks/certificate-expiration/2/weeks"


def test_check_listener_requires_exactly_one_flag(broker, capsys):
    assert main(["check", "listener"]) == 1
    assert capsys.readouterr().err == "ERROR: exactly one of the --port or --protocol flags must be specified\n"
    assert main(["check", "listener", "--port", "5672", "--protocol", "amqp091"]) == 1
    assert broker["requests"] == []


def test_error_status_exits_non_zero(broker, capsys):
    broker["status"] = 503
    broker["content"] = b'{"status":"failed"}'
    assert main(["check", "alarms"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("ERROR: request failed: 503 Service Unavailable")


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])
    with pytest.raises(SystemExit):
        build_parser().parse_args(["list"])


def test_api_config_from_args_overlays_only_given_flags():
    args = build_parser().parse_args(["--user", "admin", "list", "vhosts"])
    cfg = api_config_from_args(args, ApiConfig(password="secret", debug=True))
    assert cfg.user == "admin"
    assert cfg.password == "secret"
    assert cfg.debug is True
    assert cfg.columns == []

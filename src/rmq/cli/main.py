# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""rmq CLI."""

from __future__ import annotations

import argparse
from collections.abc import Callable

from ..api import ApiClient, PageFilter, endpoints, new_page_filter, print_error, print_json
from ..config import ApiConfig, load_api_config, load_http_settings
from ..errors import RmqError
from ..log import setup_logging
from ..version import __version__

Command = Callable[[ApiClient, argparse.Namespace], bytes]


def _page(args: argparse.Namespace) -> PageFilter:
    return new_page_filter(args.page, args.page_size, args.name, args.regex)


LIST_COMMANDS: dict[str, tuple[str, Command]] = {
    "overview": ("Shows the cluster overview", lambda api, a: endpoints.overview(api)),
    "nodes": ("Lists all cluster nodes", lambda api, a: endpoints.nodes(api)),
    "node": ("Lists node details", lambda api, a: endpoints.node(api, a.name, a.memory, a.binary)),
    "extensions": ("Lists the management plugin extensions", lambda api, a: endpoints.extensions(api)),
    "definitions": (
        "Lists all definitions (queues, exchanges, etc.) for all vhosts",
        lambda api, a: endpoints.definitions(api),
    ),
    "vhost-definitions": (
        "Lists all definitions (queues, exchanges, etc.) in the vhost",
        lambda api, a: endpoints.vhost_definitions(api, api.config.vhost),
    ),
    "connections": ("Lists all connections", lambda api, a: endpoints.connections(api, _page(a))),
    "vhost-connections": (
        "Lists the connections for a vhost",
        lambda api, a: endpoints.vhost_connections(api, api.config.vhost, _page(a)),
    ),
    "connection": ("Shows the connection with the given --name", lambda api, a: endpoints.connection(api, a.name)),
    "queues": ("Lists all queues", lambda api, a: endpoints.queues(api, _page(a))),
    "vhost-queues": (
        "Lists the queues in the vhost",
        lambda api, a: endpoints.vhost_queues(api, api.config.vhost, _page(a)),
    ),
    "vhosts": ("Lists all vhosts", lambda api, a: endpoints.vhosts(api)),
    "limits": ("Lists limits for all vhosts", lambda api, a: endpoints.vhosts_limits(api)),
    "vhost-limits": ("Lists limits for the vhost", lambda api, a: endpoints.vhost_limits(api, api.config.vhost)),
    "users": ("Lists all users", lambda api, a: endpoints.users(api)),
    "global-parameters": ("Lists all global parameters", lambda api, a: endpoints.global_parameters(api)),
    "global-parameter": ("Lists a global parameter", lambda api, a: endpoints.global_parameter(api, a.name)),
    "federation-links": (
        "Lists status for all federation links",
        lambda api, a: endpoints.federation_links(api),
    ),
    "vhost-federation-links": (
        "Lists status for the vhost federation links",
        lambda api, a: endpoints.vhost_federation_links(api, api.config.vhost),
    ),
    "auth": ("Lists details about the OAuth2 configuration", lambda api, a: endpoints.auth(api)),
    "auth-attempts": (
        "Lists authentication attempts on the specified node",
        lambda api, a: endpoints.auth_attempts(api, a.node),
    ),
    "auth-attempts-by-source": (
        "Lists authentication attempts by source on the specified node",
        lambda api, a: endpoints.auth_attempts_by_source(api, a.node),
    ),
}

PAGED_LIST_COMMANDS = {"connections", "vhost-connections", "queues", "vhost-queues"}
NAMED_LIST_COMMANDS = {
    "node": "The node name",
    "connection": "The connection name",
    "global-parameter": "The parameter name",
}
NODE_LIST_COMMANDS = {"auth-attempts", "auth-attempts-by-source"}


def _check_certificate_expiration(api: ApiClient, args: argparse.Namespace) -> bytes:
    given = [(unit, getattr(args, f"within_{unit}")) for unit in endpoints.certificate_expiration_time_units()]
    given = [(unit, value) for unit, value in given if value is not None]
    if len(given) != 1:
        names = ", ".join(f"--within-{unit}" for unit in endpoints.certificate_expiration_time_units())
        raise RmqError(f"exactly one of the {names} parameters must be specified")
    unit, within = given[0]
    return endpoints.health_check_certificate_expiration(api, within, unit)


def _check_listener(api: ApiClient, args: argparse.Namespace) -> bytes:
    if (args.port is None) == (args.protocol is None):
        raise RmqError("exactly one of the --port or --protocol flags must be specified")
    if args.port is not None:
        return endpoints.health_check_port_listener(api, args.port)
    return endpoints.health_check_protocol_listener(api, args.protocol)


CHECK_COMMANDS: dict[str, tuple[str, Command]] = {
    "alarms": (
        "Checks that no alarms are in effect in the cluster",
        lambda api, a: endpoints.health_check_alarms(api),
    ),
    "local-alarms": (
        "Checks that no local alarms are in effect on the target node",
        lambda api, a: endpoints.health_check_local_alarms(api),
    ),
    "certificate-expiration": (
        "Checks the expiration date of the certificates of every TLS listener",
        _check_certificate_expiration,
    ),
    "listener": ("Checks for an active listener on a port or protocol", _check_listener),
    "vhost-aliveness": (
        "Publishes and consumes a message on a test queue in the vhost",
        lambda api, a: endpoints.aliveness_test(api, api.config.vhost),
    ),
    "vhosts": (
        "Checks that all virtual hosts are running on the target node",
        lambda api, a: endpoints.health_check_virtual_hosts(api),
    ),
    "node-is-mirror-sync-critical": (
        "Checks for classic mirrored queues without synchronised mirrors online",
        lambda api, a: endpoints.health_check_node_is_mirror_sync_critical(api),
    ),
    "node-is-quorum-critical": (
        "Checks for quorum queues with minimum online quorum",
        lambda api, a: endpoints.health_check_node_is_quorum_critical(api),
    ),
}


def _add_paging_flags(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--page", "-p", type=int, default=1, help="Page number, starting at 1")
    parser.add_argument("--page-size", "-s", type=int, default=100, help="Number of items per page")
    parser.add_argument("--name", "-n", default="", help="Only list items whose name matches")
    parser.add_argument("--regex", "-r", action="store_true", help="Interpret --name as a regular expression")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="rmq", description="RabbitMQ management api command line client")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--scheme", choices=["http", "https"], help="Management api scheme")
    parser.add_argument("--host", help="RabbitMQ host name")
    parser.add_argument("--api-port", type=int, help="Management api port")
    parser.add_argument("--user", help="User name")
    parser.add_argument("--password", help="Password")
    parser.add_argument("--vhost", help="The vhost used by the vhost-* commands")
    parser.add_argument("--debug", action="store_true", default=None, help="Log request and response headers")
    parser.add_argument("--pretty-print", action="store_true", default=None, help="Indent the JSON output")
    parser.add_argument("--columns", help="Comma separated list of fields to return")
    parser.add_argument("--sort", help="Field to sort the results by")
    parser.add_argument("--sort-reverse", action="store_true", default=None, help="Reverse the sort order")
    parser.add_argument("--log-level", help="Logging level (default from RMQ_LOG_LEVEL)")

    commands = parser.add_subparsers(dest="command", required=True)

    list_parser = commands.add_parser("list", help="List resources")
    resources = list_parser.add_subparsers(dest="resource", required=True)
    for name, (help_text, run) in LIST_COMMANDS.items():
        sub = resources.add_parser(name, help=help_text, description=help_text)
        sub.set_defaults(run=run)
        if name in PAGED_LIST_COMMANDS:
            _add_paging_flags(sub)
        if name in NAMED_LIST_COMMANDS:
            sub.add_argument("--name", "-n", required=True, help=NAMED_LIST_COMMANDS[name])
        if name in NODE_LIST_COMMANDS:
            sub.add_argument(
                "--node", "-n", required=True, help="The node name, see 'rmq --columns name list nodes'"
            )
        if name == "node":
            sub.add_argument("--memory", "-m", action="store_true", help="Add memory statistics")
            sub.add_argument("--binary", "-b", action="store_true", help="Add binary statistics")

    check_parser = commands.add_parser("check", help="Run health checks")
    checks = check_parser.add_subparsers(dest="check", required=True)
    for name, (help_text, run) in CHECK_COMMANDS.items():
        sub = checks.add_parser(name, help=help_text, description=help_text)
        sub.set_defaults(run=run)
        if name == "certificate-expiration":
            for unit in endpoints.certificate_expiration_time_units():
                sub.add_argument(
                    f"--within-{unit}",
                    f"-{unit[0]}",
                    type=int,
                    help=f"The number of {unit} within which the certificate expires",
                )
        if name == "listener":
            sub.add_argument("--port", type=int, help="Listener port, cannot be combined with --protocol")
            sub.add_argument("--protocol", help="Protocol name, e.g. amqp091, mqtt, stomp")

    return parser


_CONFIG_FLAGS = (
    "scheme",
    "host",
    "api_port",
    "user",
    "password",
    "vhost",
    "debug",
    "pretty_print",
    "sort",
    "sort_reverse",
)


def api_config_from_args(args: argparse.Namespace, base: ApiConfig | None = None) -> ApiConfig:
    """Overlay the command line flags onto the environment based config."""
    cfg = base or load_api_config()
    for attr in _CONFIG_FLAGS:
        value = getattr(args, attr, None)
        if value is not None:
            setattr(cfg, attr, value)
    if args.columns is not None:
        cfg.columns = [c.strip() for c in args.columns.split(",") if c.strip()]
    return cfg


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = api_config_from_args(args)
    setup_logging(args.log_level or ("INFO" if config.debug else None))
    settings = load_http_settings()

    try:
        with ApiClient(config, settings) as api:
            body = args.run(api, args)
        print_json(body, config.pretty_print)
    except RmqError as exc:
        print_error(exc)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())

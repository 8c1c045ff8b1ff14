# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Management api endpoints used by the rmq commands."""

from __future__ import annotations

from ..errors import ConfigError
from ..web import path_escape
from .client import ApiClient
from .query import PageFilter, Query

UNIT_DAYS = "days"
UNIT_WEEKS = "weeks"
UNIT_MONTHS = "months"
UNIT_YEARS = "years"


def certificate_expiration_time_units() -> list[str]:
    """Units accepted by health_check_certificate_expiration."""
    return [UNIT_DAYS, UNIT_WEEKS, UNIT_MONTHS, UNIT_YEARS]


def _required(value: str, what: str) -> str:
    if not value:
        raise ConfigError(f"{what} is required")
    return path_escape(value)


def overview(api: ApiClient) -> bytes:
    return api.get_json("overview")


def nodes(api: ApiClient) -> bytes:
    return api.get_json("nodes")


def node(api: ApiClient, name: str, memory: bool = False, binary: bool = False) -> bytes:
    q = Query().add_if(memory, "memory", "true").add_if(binary, "binary", "true")
    return api.get_json(f"nodes/{_required(name, 'node name')}", q)


def extensions(api: ApiClient) -> bytes:
    return api.get_json("extensions")


def definitions(api: ApiClient) -> bytes:
    return api.get_json("definitions")


def vhost_definitions(api: ApiClient, vhost: str) -> bytes:
    return api.get_json(f"definitions/{_required(vhost, 'vhost')}")


def connections(api: ApiClient, page: PageFilter | None = None) -> bytes:
    return api.get_json("connections", page=page)


def vhost_connections(api: ApiClient, vhost: str, page: PageFilter | None = None) -> bytes:
    return api.get_json(f"vhosts/{_required(vhost, 'vhost')}/connections", page=page)


def connection(api: ApiClient, name: str) -> bytes:
    return api.get_json(f"connections/{_required(name, 'connection name')}")


def queues(api: ApiClient, page: PageFilter | None = None) -> bytes:
    return api.get_json("queues", page=page)


def vhost_queues(api: ApiClient, vhost: str, page: PageFilter | None = None) -> bytes:
    return api.get_json(f"queues/{_required(vhost, 'vhost')}", page=page)


def vhosts(api: ApiClient) -> bytes:
    return api.get_json("vhosts")


def vhosts_limits(api: ApiClient) -> bytes:
    return api.get_json("vhost-limits")


def vhost_limits(api: ApiClient, vhost: str) -> bytes:
    return api.get_json(f"vhost-limits/{_required(vhost, 'vhost')}")


def users(api: ApiClient) -> bytes:
    return api.get_json("users")


def global_parameters(api: ApiClient) -> bytes:
    return api.get_json("global-parameters")


def global_parameter(api: ApiClient, name: str) -> bytes:
    return api.get_json(f"global-parameters/{_required(name, 'parameter name')}")


def federation_links(api: ApiClient) -> bytes:
    """Requires the rabbitmq_federation_management plugin."""
    return api.get_json("federation-links")


def vhost_federation_links(api: ApiClient, vhost: str) -> bytes:
    return api.get_json(f"federation-links/{_required(vhost, 'vhost')}")


def auth(api: ApiClient) -> bytes:
    return api.get_json("auth")


def auth_attempts(api: ApiClient, node: str) -> bytes:
    return api.get_json(f"auth/attempts/{_required(node, 'node name')}")


def auth_attempts_by_source(api: ApiClient, node: str) -> bytes:
    """Needs `track_auth_attempt_source` enabled in the broker config."""
    return api.get_json(f"auth/attempts/{_required(node, 'node name')}/source")


def health_check_alarms(api: ApiClient) -> bytes:
    return api.get_json("health/checks/alarms")


def health_check_local_alarms(api: ApiClient) -> bytes:
    return api.get_json("health/checks/local-alarms")


def health_check_certificate_expiration(api: ApiClient, within: int, unit: str) -> bytes:
    if unit not in certificate_expiration_time_units():
        raise ConfigError(f"unknown time unit {unit!r}, expected one of {certificate_expiration_time_units()}")
    if within < 1:
        raise ConfigError("certificate expiration period must be positive")
    return api.get_json(f"health/checks/certificate-expiration/{within:d}/{unit}")


def health_check_port_listener(api: ApiClient, port: int) -> bytes:
    if not 0 < port <= 0xFFFF:
        raise ConfigError(f"invalid listener port {port}")
    return api.get_json(f"health/checks/port-listener/{port:d}")


def health_check_protocol_listener(api: ApiClient, protocol: str) -> bytes:
    return api.get_json(f"health/checks/protocol-listener/{_required(protocol, 'protocol')}")


def health_check_virtual_hosts(api: ApiClient) -> bytes:
    return api.get_json("health/checks/virtual-hosts")


def health_check_node_is_mirror_sync_critical(api: ApiClient) -> bytes:
    return api.get_json("health/checks/node-is-mirror-sync-critical")


def health_check_node_is_quorum_critical(api: ApiClient) -> bytes:
    return api.get_json("health/checks/node-is-quorum-critical")


def aliveness_test(api: ApiClient, vhost: str) -> bytes:
    """Declares a test queue in vhost, then publishes and consumes a message."""
    return api.get_json(f"aliveness-test/{_required(vhost, 'vhost')}")

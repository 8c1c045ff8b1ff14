# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""RabbitMQ management api client."""

from . import endpoints
from .client import ApiClient, ensure_success
from .endpoints import certificate_expiration_time_units
from .printing import print_error, print_json
from .query import PageFilter, Query, new_page, new_page_filter

__all__ = [
    "ApiClient",
    "PageFilter",
    "Query",
    "certificate_expiration_time_units",
    "endpoints",
    "ensure_success",
    "new_page",
    "new_page_filter",
    "print_error",
    "print_json",
]

# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx client factory."""

from __future__ import annotations

import threading

import httpx

from ..config import HttpSettings, load_http_settings

_default_client: httpx.Client | None = None
_default_lock = threading.Lock()


def create_http_client(
    settings: HttpSettings | None = None,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Create an httpx.Client configured from HttpSettings."""
    settings = settings or load_http_settings()
    return httpx.Client(
        follow_redirects=settings.allow_redirects,
        timeout=settings.timeout,
        verify=settings.verify_ssl,
        headers={"User-Agent": settings.user_agent},
        transport=transport,
    )


def default_http_client() -> httpx.Client:
    """Return the client shared by builders that were not given one."""
    global _default_client
    with _default_lock:
        if _default_client is None or _default_client.is_closed:
            _default_client = create_http_client()
        return _default_client


__all__ = ["create_http_client", "default_http_client"]

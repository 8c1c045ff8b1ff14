# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Query string and paging helpers for the management api."""

from __future__ import annotations

from dataclasses import dataclass, field
from urllib.parse import quote_plus, unquote_plus

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 100


@dataclass
class _Param:
    name: str
    value: str
    escaped: bool = False


@dataclass
class Query:
    """
    Ordered query string builder.

    Parameters keep their insertion order and the same name may be added more
    than once. Names and values added with `add` are escaped with form rules
    (space becomes `+`); `add_escaped` takes them as they are.
    """

    params: list[_Param] = field(default_factory=list)

    def add(self, name: str, value: str) -> Query:
        self.params.append(_Param(name, str(value)))
        return self

    def add_escaped(self, name: str, value: str) -> Query:
        self.params.append(_Param(name, str(value), escaped=True))
        return self

    def add_if(self, condition: bool, name: str, value: str) -> Query:
        if condition:
            return self.add(name, value)
        return self

    def extend(self, other: Query | None) -> Query:
        if other is not None:
            self.params.extend(other.params)
        return self

    def empty(self) -> bool:
        return not self.params

    def items(self) -> list[tuple[str, str]]:
        """Return the unescaped (name, value) pairs in insertion order."""
        return [
            (unquote_plus(p.name), unquote_plus(p.value)) if p.escaped else (p.name, p.value) for p in self.params
        ]

    def string(self) -> str:
        """Return the encoded query string without the leading `?`."""
        parts = []
        for p in self.params:
            if p.escaped:
                parts.append(f"{p.name}={p.value}")
            else:
                parts.append(f"{quote_plus(p.name)}={quote_plus(p.value)}")
        return "&".join(parts)

    def query_string(self) -> str:
        """Return the encoded query string with the leading `?`, or "" when empty."""
        if self.empty():
            return ""
        return "?" + self.string()

    def __str__(self) -> str:
        return self.string()


@dataclass
class PageFilter:
    """Paging and name filtering for the queue, exchange, connection and channel listings."""

    page: int = DEFAULT_PAGE
    page_size: int = DEFAULT_PAGE_SIZE
    name: str = ""
    use_regex: bool = False

    def to_query(self) -> Query:
        """Return the query for this page; settings equal to the server defaults are left out."""
        q = Query()
        q.add_if(self.page > DEFAULT_PAGE, "page", str(self.page))
        q.add_if(self.page_size > 0 and self.page_size != DEFAULT_PAGE_SIZE, "page_size", str(self.page_size))
        if self.name:
            q.add("name", self.name)
            q.add_if(self.use_regex, "use_regex", "true")
        return q

    def to_url_suffix(self) -> str:
        return self.to_query().query_string()


def new_page(page: int, page_size: int) -> PageFilter:
    return new_page_filter(page, page_size, "", False)


def new_page_filter(page: int, page_size: int, name: str = "", use_regex: bool = False) -> PageFilter:
    if page < 1:
        page = DEFAULT_PAGE
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    return PageFilter(page=page, page_size=page_size, name=name or "", use_regex=use_regex)


__all__ = ["DEFAULT_PAGE", "DEFAULT_PAGE_SIZE", "PageFilter", "Query", "new_page", "new_page_filter"]

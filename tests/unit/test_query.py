# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

from rmq.api.query import DEFAULT_PAGE_SIZE, PageFilter, Query, new_page, new_page_filter


def test_query_keeps_insertion_order_and_duplicates():
    q = Query().add("z", "1").add("a", "2").add("z", "3")
    assert q.string() == "z=1&a=2&z=3"
    assert q.items() == [("z", "1"), ("a", "2"), ("z", "3")]


def test_query_escapes_reserved_characters():
    q = Query().add("a b", "c&d=e").add("path", "/x?y#z")
    assert q.string() == "a+b=c%26d%3De&path=%2Fx%3Fy%23z"


def test_query_add_escaped_is_written_verbatim():
    q = Query().add_escaped("q", "a%20b")
    assert q.string() == "q=a%20b"
    assert q.items() == [("q", "a b")]


def test_add_if():
    q = Query().add("a", "1")
    before = q.string()
    q.add_if(False, "b", "2")
    assert q.string() == before

    assert Query().add_if(True, "n", "v").string() == Query().add("n", "v").string()


def test_query_string_has_question_mark_only_when_not_empty():
    assert Query().empty()
    assert Query().query_string() == ""
    assert Query().add("a", "1").query_string() == "?a=1"
    assert str(Query().add("a", "1")) == "a=1"


def test_query_extend():
    q = Query().add("a", "1").extend(Query().add("b", "2")).extend(None)
    assert q.string() == "a=1&b=2"


def test_new_page_filter_clamps_invalid_values():
    page = new_page_filter(0, -5)
    assert page.page == 1
    assert page.page_size == DEFAULT_PAGE_SIZE
    assert new_page(3, 0) == PageFilter(page=3, page_size=DEFAULT_PAGE_SIZE)


def test_default_page_produces_no_url_suffix():
    assert new_page(1, 100).to_url_suffix() == ""
    assert new_page_filter(1, 100, "", True).to_url_suffix() == ""


def test_page_filter_query():
    page = new_page_filter(2, 50, "my queue", True)
    assert page.to_query().string() == "page=2&page_size=50&name=my+queue&use_regex=true"
    assert page.to_url_suffix().startswith("?page=2")

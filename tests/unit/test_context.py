# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from rmq.errors import ContextCancelledError, DeadlineExceededError
from rmq.web.context import background, with_cancel, with_timeout, with_value


def test_background_is_never_done():
    ctx = background()
    ctx.cancel()
    assert ctx.cancelled is False
    assert ctx.remaining() is None
    assert ctx.error() is None
    ctx.check()


def test_cancel_propagates_to_children_only():
    parent = with_cancel()
    child = with_value(parent, "k", "v")
    sibling = with_cancel()

    parent.cancel()

    assert child.cancelled
    assert not sibling.cancelled
    with pytest.raises(ContextCancelledError):
        child.check()


def test_values_are_looked_up_through_parents():
    ctx = with_value(with_value(None, "a", 1), "b", 2)
    assert ctx.get("a") == 1
    assert ctx.get("b") == 2
    assert ctx.get("missing", "default") == "default"


def test_deadline_uses_the_earliest_parent_deadline():
    outer = with_timeout(None, 0)
    inner = with_timeout(outer, 60)
    assert inner.remaining() == 0
    with pytest.raises(DeadlineExceededError):
        inner.check()

    relaxed = with_timeout(None, 60)
    assert 0 < relaxed.remaining() <= 60
    assert relaxed.error() is None

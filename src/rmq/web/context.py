# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Per-request cancellation context.

A Context carries an optional deadline, a cancellation flag and key/value
pairs from the caller down to request sending and response body reading.
Derived contexts observe the cancellation and deadline of their parents.
"""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any

from ..errors import ContextCancelledError, DeadlineExceededError


@dataclass(frozen=True)
class Context:
    deadline: float | None = None
    key: Any = None
    value: Any = None
    parent: Context | None = None
    _done: threading.Event = field(default_factory=threading.Event, repr=False, compare=False)

    def cancel(self) -> None:
        """Cancel this context and every context derived from it."""
        if self is _BACKGROUND:
            return
        self._done.set()

    @property
    def cancelled(self) -> bool:
        ctx: Context | None = self
        while ctx is not None:
            if ctx._done.is_set():
                return True
            ctx = ctx.parent
        return False

    def effective_deadline(self) -> float | None:
        deadlines = []
        ctx: Context | None = self
        while ctx is not None:
            if ctx.deadline is not None:
                deadlines.append(ctx.deadline)
            ctx = ctx.parent
        return min(deadlines) if deadlines else None

    def remaining(self) -> float | None:
        """Seconds left before the deadline, None when there is no deadline."""
        deadline = self.effective_deadline()
        if deadline is None:
            return None
        return max(0.0, deadline - time.monotonic())

    def get(self, key: Any, default: Any = None) -> Any:
        ctx: Context | None = self
        while ctx is not None:
            if ctx.key is not None and ctx.key == key:
                return ctx.value
            ctx = ctx.parent
        return default

    def error(self) -> Exception | None:
        if self.cancelled:
            return ContextCancelledError("context cancelled")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            return DeadlineExceededError("context deadline exceeded")
        return None

    def check(self) -> None:
        err = self.error()
        if err is not None:
            raise err


_BACKGROUND = Context()


def background() -> Context:
    """Return the empty root context; it is never cancelled and has no deadline."""
    return _BACKGROUND


def with_cancel(parent: Context | None = None) -> Context:
    return Context(parent=parent or background())


def with_timeout(parent: Context | None, seconds: float) -> Context:
    return Context(deadline=time.monotonic() + seconds, parent=parent or background())


def with_value(parent: Context | None, key: Any, value: Any) -> Context:
    return Context(key=key, value=value, parent=parent or background())


__all__ = ["Context", "background", "with_cancel", "with_timeout", "with_value"]

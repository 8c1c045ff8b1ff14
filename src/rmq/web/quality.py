# SPDX-FileCopyrightText: 2025 The rmq Authors
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Quality value lists for the Accept header.

See https://developer.mozilla.org/en-US/docs/Glossary/Quality_values
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from .codec import ResponseEncoding


def format_quality(q: float) -> str:
    """Clamp q to [0, 1] and format it with three significant digits."""
    return format(max(0.0, min(float(q), 1.0)), ".3g")


def sorted_range(q_range: Mapping[str, float]) -> list[str]:
    """
    Order content types by descending quality, ties by ascending name.

    The top entry is emitted bare when its quality is the implicit default
    of 1, every other entry as `type;q=value`.
    """
    ordered = sorted(q_range, key=lambda ct: (-max(0.0, min(float(q_range[ct]), 1.0)), ct))
    items = []
    for i, content_type in enumerate(ordered):
        q = format_quality(q_range[content_type])
        items.append(content_type if i == 0 and q == "1" else f"{content_type};q={q}")
    return items


def accept_value(q_range: Mapping[str, float]) -> str:
    return ", ".join(sorted_range(q_range))


def quality_values(encodings: Sequence[ResponseEncoding]) -> dict[str, float]:
    """
    Assign qualities to encodings in registration order, evenly spaced from 1
    down towards 0. Duplicate content types (compared case-insensitively) keep
    their first position.
    """
    qv: dict[str, float] = {}
    if not encodings:
        return qv
    if len(encodings) == 1:
        qv[encodings[0].content_type()] = 1.0
        return qv

    seen: set[str] = set()
    step = 1.0 / (len(encodings) + 1)
    q = 1.0
    for encoding in encodings:
        content_type = encoding.content_type()
        if content_type.lower() in seen:
            continue
        seen.add(content_type.lower())
        qv[content_type] = q
        q -= step
    return qv


__all__ = ["accept_value", "format_quality", "quality_values", "sorted_range"]

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Unique-prefix hints and containment checks for sticker names.

A *hint length* is the number of leading characters a user has to type so
that the prefix no longer matches the start of any other name. Names are
processed as Python strings, i.e. sequences of code points, so a hint never
splits a multi-byte character.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Final

from .errors import HintConflictError
from .models import Sticker

DEFAULT_LIST_LIMIT: Final[int] = 10
_MORE_SUFFIX: Final[str] = "... and more"


def common_prefix_length(first: str, second: str) -> int:
    """Return the length of the longest prefix shared by both strings.

    Args:
        first: First string to compare.
        second: Second string to compare.

    Returns:
        int: Number of leading code points the strings have in common.
    """

    length = 0
    for left, right in zip(first, second):
        if left != right:
            break
        length += 1
    return length


def _conflicts(first: str, second: str, *, substrings: bool) -> bool:
    if substrings:
        return first in second or second in first
    return first.startswith(second) or second.startswith(first)


def count_hint_lengths(names: Sequence[str], *, forbid_substrings: bool = False) -> list[int]:
    """Return the unique-prefix length of every name in ``names``.

    Every unordered pair is compared, so the cost is quadratic in the number of
    names.

    Args:
        names: Candidate names, in any order.
        forbid_substrings: Also reject a name contained anywhere inside another,
            not only as a prefix.

    Returns:
        list[int]: Hint lengths aligned with ``names``. A lone name gets a hint
        of one character.

    Raises:
        HintConflictError: If two names are equal or one contains the other.
    """

    hints = [min(1, len(name)) for name in names]
    for i, first in enumerate(names):
        for j in range(i + 1, len(names)):
            second = names[j]
            if _conflicts(first, second, substrings=forbid_substrings):
                raise HintConflictError(first, second)
            candidate = common_prefix_length(first, second) + 1
            if hints[i] < candidate:
                hints[i] = candidate
            if hints[j] < candidate:
                hints[j] = candidate
    return hints


def find_containment(names: Sequence[str]) -> tuple[str, str] | None:
    """Return the first pair where one name is a substring of the other.

    Args:
        names: Names to inspect.

    Returns:
        tuple[str, str] | None: ``(container, contained)`` or ``None`` when the
        names are free of containment conflicts.
    """

    for i, first in enumerate(names):
        for second in names[i + 1 :]:
            if second in first:
                return first, second
            if first in second:
                return second, first
    return None


def with_hint(name: str, hint_length: int) -> str:
    """Render ``name`` with the optional tail wrapped in brackets.

    Example:
        ``with_hint("abcde", 3)`` returns ``"abc[de]"``.

    Args:
        name: Name to render.
        hint_length: Number of leading characters required to identify it.

    Returns:
        str: ``name`` unchanged when the hint covers it entirely, otherwise the
        bracketed rendering.
    """

    if hint_length >= len(name):
        return name
    return f"{name[:hint_length]}[{name[hint_length:]}]"


def strip_hint(rendered: str, hint_length: int) -> str:
    """Undo :func:`with_hint` for a rendering produced with ``hint_length``.

    Args:
        rendered: Output of :func:`with_hint`.
        hint_length: Hint length used for the rendering.

    Returns:
        str: The original name.
    """

    if len(rendered) > hint_length and rendered[hint_length] == "[" and rendered.endswith("]"):
        return rendered[:hint_length] + rendered[hint_length + 1 : -1]
    return rendered


def hint_map(names: Sequence[str]) -> dict[str, int]:
    """Return hint lengths keyed by name, or an empty mapping on conflicts.

    Args:
        names: Every name in the catalog.

    Returns:
        dict[str, int]: Name to hint length. Empty when the names contain a
        prefix conflict, in which case callers render names without hints.
    """

    try:
        lengths = count_hint_lengths(names)
    except HintConflictError:
        return {}
    return dict(zip(names, lengths))


def sticker_list_string(
    stickers: Sequence[Sticker],
    hints: dict[str, int] | None = None,
    *,
    limit: int = DEFAULT_LIST_LIMIT,
) -> str:
    """Compose a short, quoted report of matched stickers.

    Args:
        stickers: Stickers to report, in catalog order.
        hints: Optional hint lengths keyed by name, see :func:`hint_map`.
        limit: Maximum number of stickers to include.

    Returns:
        str: Backtick-quoted names joined by commas, followed by
        ``"... and more"`` when ``stickers`` exceeds ``limit``.
    """

    hints = hints or {}
    shown = [
        with_hint(sticker.name, hints[sticker.name]) if sticker.name in hints else sticker.name
        for sticker in stickers[:limit]
    ]
    report = "`" + "`, `".join(shown) + "`"
    if len(stickers) > limit:
        report += _MORE_SUFFIX
    return report


__all__ = [
    "DEFAULT_LIST_LIMIT",
    "common_prefix_length",
    "count_hint_lengths",
    "find_containment",
    "hint_map",
    "sticker_list_string",
    "strip_hint",
    "with_hint",
]

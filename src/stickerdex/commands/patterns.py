# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Parse user-typed patterns and format listings for chat transports."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Final

GROUP_SEPARATOR: Final[str] = "/"
MAX_MESSAGE_LENGTH: Final[int] = 2000

_FENCE_HEAD: Final[str] = "```\n"
_FENCE_TAIL: Final[str] = "\n```\n"
_ELLIPSIS: Final[str] = " ..."
_TOKEN_RE: Final[re.Pattern[str]] = re.compile(r"[^\s/]+|/")


def build_pattern_groups(text: str) -> list[list[str]]:
    """Split ``text`` into pattern groups.

    Whitespace separates patterns inside a group and ``/`` separates groups,
    whether it stands alone or is attached to a pattern.

    Example:
        ``build_pattern_groups("cat big/ dog")`` returns
        ``[["cat", "big"], ["dog"]]``.

    Args:
        text: Raw user input.

    Returns:
        list[list[str]]: Pattern groups; blank input yields ``[[]]``.
    """

    groups: list[list[str]] = [[]]
    for token in _TOKEN_RE.findall(text):
        if token == GROUP_SEPARATOR:
            groups.append([])
        else:
            groups[-1].append(token)
    return groups


def quoted_chunks(lines: Iterable[str], *, limit: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Pack ``lines`` into fenced code blocks no longer than ``limit``.

    Lines that do not fit in a block on their own are truncated with ``" ..."``.

    Args:
        lines: Lines to pack, in order.
        limit: Maximum length of each produced message.

    Returns:
        list[str]: Fenced messages.
    """

    overhead = len(_FENCE_HEAD) + len(_FENCE_TAIL)
    chunks: list[str] = []
    current: list[str] = []
    size = 0
    for line in lines:
        if current and overhead + size + 1 + len(line) <= limit:
            current.append(line)
            size += 1 + len(line)
            continue
        if current:
            chunks.append(_FENCE_HEAD + "\n".join(current) + _FENCE_TAIL)
        if overhead + len(line) > limit:
            line = line[: limit - overhead - len(_ELLIPSIS)] + _ELLIPSIS
        current = [line]
        size = len(line)
    if current:
        chunks.append(_FENCE_HEAD + "\n".join(current) + _FENCE_TAIL)
    return chunks


__all__ = ["GROUP_SEPARATOR", "MAX_MESSAGE_LENGTH", "build_pattern_groups", "quoted_chunks"]

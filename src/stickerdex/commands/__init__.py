# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Chat command handlers built on the sticker catalog."""

from __future__ import annotations

from .patterns import build_pattern_groups, quoted_chunks
from .service import Attachment, Reply, ReplyStatus, StickerCommands

__all__ = [
    "Attachment",
    "Reply",
    "ReplyStatus",
    "StickerCommands",
    "build_pattern_groups",
    "quoted_chunks",
]

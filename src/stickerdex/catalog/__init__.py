# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Sticker catalog: index, name hints, scanning, sources, and the manager."""

from __future__ import annotations

from .errors import (
    GENERIC_APOLOGY,
    AmbiguousStickerError,
    CatalogLoadError,
    HintConflictError,
    InternalCatalogError,
    InvalidSourceError,
    NameConflictError,
    StickerError,
    StickerNotFoundError,
    StickerValidationError,
)
from .hints import count_hint_lengths, find_containment, hint_map, sticker_list_string, strip_hint, with_hint
from .index import StickerIndex
from .locking import ReadWriteLock
from .manager import PatternGroups, StickerManager
from .models import ContentKind, Sticker
from .scanner import StickerScanner
from .sources import StickerPayload, StickerSource, TextStickerSource, UrlStickerSource

__all__ = [
    "GENERIC_APOLOGY",
    "AmbiguousStickerError",
    "CatalogLoadError",
    "ContentKind",
    "HintConflictError",
    "InternalCatalogError",
    "InvalidSourceError",
    "NameConflictError",
    "PatternGroups",
    "ReadWriteLock",
    "Sticker",
    "StickerError",
    "StickerIndex",
    "StickerManager",
    "StickerNotFoundError",
    "StickerPayload",
    "StickerScanner",
    "StickerSource",
    "StickerValidationError",
    "TextStickerSource",
    "UrlStickerSource",
    "count_hint_lengths",
    "find_containment",
    "hint_map",
    "sticker_list_string",
    "strip_hint",
    "with_hint",
]

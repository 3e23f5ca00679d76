# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from helpers.fakes import RecordingSource, write_stickers

from stickerdex.catalog import StickerManager


@pytest.fixture
def sticker_root(tmp_path: Path) -> Path:
    """Return a catalog root holding ``cat.png`` and ``dog.png``."""

    return write_stickers(tmp_path / "stickers", "cat.png", "dog.png")


@pytest.fixture
def manager(sticker_root: Path) -> StickerManager:
    """Return a case-insensitive manager loaded from ``sticker_root``."""

    return StickerManager.load(sticker_root)


@pytest.fixture
def png_source() -> RecordingSource:
    """Return a source producing a small PNG payload."""

    return RecordingSource()

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Filesystem scanning utilities for the sticker catalog."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from .errors import CatalogLoadError
from .hints import find_containment
from .models import NAME_SEPARATOR, Sticker

LOGGER = logging.getLogger(__name__)


def _log_walk_error(error: OSError) -> None:
    LOGGER.warning("Skipping unreadable path during scan, path=%s err=%s", error.filename, error)


@dataclass(slots=True)
class StickerScanner:
    """Derive catalog entries from the files found under ``root``.

    Every regular file with a non-empty suffix becomes a sticker. Nested
    directories are flattened: the relative path without its suffix has its
    separators replaced by :data:`~stickerdex.catalog.models.NAME_SEPARATOR`.
    """

    root: Path
    case_sensitive: bool = False

    def sticker_files(self) -> tuple[Path, ...]:
        """Return sorted paths of candidate sticker files.

        Returns:
            tuple[Path, ...]: Regular files with a suffix, below ``root``.

        Raises:
            CatalogLoadError: If ``root`` is not a directory.
        """

        if not self.root.is_dir():
            raise CatalogLoadError(f"Sticker root {self.root} is not a directory")
        paths: list[Path] = []
        for dirpath, dirnames, filenames in os.walk(self.root, onerror=_log_walk_error):
            dirnames.sort()
            for filename in filenames:
                path = Path(dirpath, filename)
                if not path.is_file():
                    continue
                if not path.suffix:
                    LOGGER.info("Found a file without extension, skipped, path=%s", path)
                    continue
                paths.append(path)
        return tuple(sorted(paths))

    def normalise(self, name: str) -> str:
        """Apply the configured case folding to ``name``."""

        return name if self.case_sensitive else name.lower()

    def derive_name(self, path: Path) -> str:
        """Return the catalog name for a file below ``root``.

        Args:
            path: Sticker file located under ``root``.

        Returns:
            str: Flattened, case-folded name without the suffix.
        """

        relative = path.relative_to(self.root).with_suffix("")
        return self.normalise(NAME_SEPARATOR.join(relative.parts))

    def scan(self) -> list[Sticker]:
        """Build entries for every sticker file below ``root``.

        Returns:
            list[Sticker]: Entries sorted by name.

        Raises:
            CatalogLoadError: If ``root`` is missing or two files derive the
                same name.
        """

        seen: dict[str, Path] = {}
        stickers: list[Sticker] = []
        for path in self.sticker_files():
            name = self.derive_name(path)
            if name in seen:
                raise CatalogLoadError(f"Stickers {seen[name]} and {path} both resolve to the name {name!r}")
            seen[name] = path
            stickers.append(Sticker(name=name, path=path))
        stickers.sort(key=lambda sticker: sticker.name)
        _report_containment([sticker.name for sticker in stickers])
        return stickers


def _report_containment(names: list[str]) -> None:
    """Log every containment conflict left in a bulk-loaded catalog."""

    for i, first in enumerate(names):
        for second in names[i + 1 :]:
            pair = find_containment((first, second))
            if pair is not None:
                LOGGER.warning("Found sticker %r contains %r", *pair)


__all__ = ["StickerScanner"]

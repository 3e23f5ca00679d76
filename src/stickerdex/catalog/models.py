# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Data models describing catalog entries and their content kinds."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

NAME_SEPARATOR: Final[str] = "-"


class ContentKind(str, Enum):
    """Enumerate the content types a sticker may be stored as."""

    PNG = "image/png"
    JPEG = "image/jpeg"
    GIF = "image/gif"
    TEXT = "text/plain"

    @property
    def suffix(self) -> str:
        """Return the file suffix used when writing content of this kind.

        Returns:
            str: Suffix including the leading dot, e.g. ``".png"``.
        """

        if self is ContentKind.TEXT:
            return ".txt"
        return "." + self.value.split("/", 1)[1]

    @property
    def is_image(self) -> bool:
        """Return ``True`` for the image content kinds."""

        return self is not ContentKind.TEXT

    @classmethod
    def from_content_type(cls, raw: str | None) -> ContentKind | None:
        """Return the kind matching an HTTP ``Content-Type`` header value.

        Args:
            raw: Header value, possibly carrying parameters such as ``charset``.

        Returns:
            ContentKind | None: Matching kind, or ``None`` when unsupported.
        """

        if not raw:
            return None
        media_type = raw.split(";", 1)[0].strip().lower()
        try:
            return cls(media_type)
        except ValueError:
            return None

    @classmethod
    def from_suffix(cls, suffix: str) -> ContentKind | None:
        """Return the kind matching a filesystem suffix such as ``".jpg"``.

        Args:
            suffix: File suffix including the leading dot.

        Returns:
            ContentKind | None: Matching kind, or ``None`` when unknown.
        """

        return _SUFFIX_KINDS.get(suffix.lower())


_SUFFIX_KINDS: Final[dict[str, ContentKind]] = {
    ".png": ContentKind.PNG,
    ".jpeg": ContentKind.JPEG,
    ".jpg": ContentKind.JPEG,
    ".gif": ContentKind.GIF,
    ".txt": ContentKind.TEXT,
}


@dataclass(slots=True)
class Sticker:
    """One catalog entry mapping a display name to its backing file.

    Attributes:
        name: Normalised lookup key, unique within the catalog.
        path: Location of the backing file. The suffix carries the content kind.
    """

    name: str
    path: Path

    @property
    def ext(self) -> str:
        """Return the backing file suffix including the leading dot."""

        return self.path.suffix

    @property
    def kind(self) -> ContentKind | None:
        """Return the content kind implied by the backing file suffix."""

        return ContentKind.from_suffix(self.path.suffix)

    @property
    def is_text(self) -> bool:
        """Return ``True`` when the sticker is a plain-text sticker."""

        return self.kind is ContentKind.TEXT


__all__ = ["ContentKind", "NAME_SEPARATOR", "Sticker"]

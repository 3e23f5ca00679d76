# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Custom exceptions raised by sticker catalog operations."""

from __future__ import annotations

from typing import Final

GENERIC_APOLOGY: Final[str] = "Something went wrong here! Please contact the admin."


class StickerError(RuntimeError):
    """Base class for every error raised by the sticker catalog."""


class StickerValidationError(StickerError):
    """Raised when user input is rejected; the message is safe to show to the user."""


class StickerNotFoundError(StickerValidationError):
    """Raised when a reference matches no sticker."""


class AmbiguousStickerError(StickerValidationError):
    """Raised when a reference matches more than one sticker."""


class NameConflictError(StickerValidationError):
    """Raised when a name is invalid or would make existing lookups ambiguous."""


class InvalidSourceError(StickerValidationError):
    """Raised when a sticker source has the wrong content type, size, or address."""


class InternalCatalogError(StickerError):
    """Opaque internal failure.

    The detail is logged where the failure happens; the exception itself only
    carries :data:`GENERIC_APOLOGY` so it can be relayed to untrusted users.
    """

    def __init__(self) -> None:
        """Initialise the error with the generic apology message."""

        super().__init__(GENERIC_APOLOGY)


class CatalogLoadError(StickerError):
    """Raised when a directory scan cannot produce a consistent catalog."""


class HintConflictError(ValueError):
    """Raised when two names are equal or one contains the other."""

    def __init__(self, first: str, second: str) -> None:
        """Initialise the error with the conflicting pair.

        Args:
            first: Name encountered first in the input sequence.
            second: Name conflicting with ``first``.
        """

        super().__init__(f"Found contained strings: {first!r} vs {second!r}")
        self.first = first
        self.second = second


__all__ = [
    "AmbiguousStickerError",
    "CatalogLoadError",
    "GENERIC_APOLOGY",
    "HintConflictError",
    "InternalCatalogError",
    "InvalidSourceError",
    "NameConflictError",
    "StickerError",
    "StickerNotFoundError",
    "StickerValidationError",
]

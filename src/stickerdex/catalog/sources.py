# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Byte sources that materialise new stickers."""

from __future__ import annotations

import http.client
import logging
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Final, Protocol, runtime_checkable
from urllib.parse import urlparse

from .errors import InternalCatalogError, InvalidSourceError
from .models import ContentKind

LOGGER = logging.getLogger(__name__)

DEFAULT_SIZE_LIMIT: Final[int] = 3_500_000
DEFAULT_TIMEOUT: Final[float] = 10.0
_USER_AGENT: Final[str] = "stickerdex/1.0"
_SUPPORTED_SCHEMES: Final[frozenset[str]] = frozenset({"http", "https"})

Opener = Callable[..., Any]

_TRANSPORT_ERRORS: Final = (OSError, ValueError, http.client.HTTPException)


@dataclass(frozen=True, slots=True)
class StickerPayload:
    """Validated content ready to be written to disk."""

    kind: ContentKind
    data: bytes


@runtime_checkable
class StickerSource(Protocol):
    """Provide the bytes of a new sticker."""

    def fetch(self, *, size_limit: int) -> StickerPayload:
        """Return validated content no larger than ``size_limit`` bytes.

        Raises:
            InvalidSourceError: If the content is unsupported or too large.
            InternalCatalogError: If the content cannot be retrieved.
        """
        ...


@dataclass(slots=True)
class UrlStickerSource:
    """Download an image over HTTP(S).

    A ``HEAD`` request checks the content type and announced size before any
    body is transferred; the ``GET`` body is capped at the size limit as well.
    """

    url: str
    timeout: float = DEFAULT_TIMEOUT
    opener: Opener = field(default=urllib.request.urlopen, repr=False)

    def _request(self, method: str) -> urllib.request.Request:
        return urllib.request.Request(self.url, method=method, headers={"User-Agent": _USER_AGENT})

    def fetch(self, *, size_limit: int) -> StickerPayload:
        """Validate the remote image and download it.

        Args:
            size_limit: Largest accepted payload in bytes.

        Returns:
            StickerPayload: Image content and its kind.

        Raises:
            InvalidSourceError: If the URL is unusable or not HTTP(S), the type is not an
                image, or the size exceeds ``size_limit``.
            InternalCatalogError: If the download itself fails.
        """

        scheme = urlparse(self.url).scheme.lower()
        if scheme not in _SUPPORTED_SCHEMES:
            LOGGER.info("Refusing url=%r with unsupported scheme %r", self.url, scheme)
            raise InvalidSourceError("Failed to download the image. Is it a valid URL?")
        try:
            with self.opener(self._request("HEAD"), timeout=self.timeout) as response:
                content_type = response.headers.get("Content-Type")
                content_length = response.headers.get("Content-Length")
        except _TRANSPORT_ERRORS as exc:
            LOGGER.info("Failed to HEAD url=%r: %s", self.url, exc)
            raise InvalidSourceError("Failed to download the image. Is it a valid URL?") from exc

        kind = ContentKind.from_content_type(content_type)
        if kind is None or not kind.is_image:
            raise InvalidSourceError("Invalid URL content type. Only png, jpeg, and gif are supported.")
        try:
            size = int(content_length or "")
        except ValueError as exc:
            LOGGER.info("Invalid Content-Length %r from url=%r", content_length, self.url)
            raise InvalidSourceError("Invalid Content-Length from the URL. Is it a valid URL?") from exc
        if size > size_limit:
            raise InvalidSourceError(f"Image size too large. Expect < {size_limit}B, got {size}")

        try:
            with self.opener(self._request("GET"), timeout=self.timeout) as response:
                data = response.read(size_limit + 1)
        except _TRANSPORT_ERRORS as exc:
            LOGGER.error("Failed to GET url=%r: %s", self.url, exc)
            raise InternalCatalogError() from exc
        if len(data) > size_limit:
            raise InvalidSourceError(f"Image size too large. Expect < {size_limit}B")
        return StickerPayload(kind=kind, data=data)


@dataclass(frozen=True, slots=True)
class TextStickerSource:
    """Plain-text sticker content, e.g. a link too large to store as an image."""

    text: str

    def fetch(self, *, size_limit: int) -> StickerPayload:
        """Encode the text as UTF-8.

        Args:
            size_limit: Largest accepted payload in bytes.

        Returns:
            StickerPayload: Encoded text.

        Raises:
            InvalidSourceError: If the text is blank or too large.
        """

        text = self.text.strip()
        if not text:
            raise InvalidSourceError("The text of a text sticker must not be empty.")
        data = text.encode("utf-8")
        if len(data) > size_limit:
            raise InvalidSourceError(f"Text too large. Expect < {size_limit}B, got {len(data)}")
        return StickerPayload(kind=ContentKind.TEXT, data=data)


__all__ = [
    "DEFAULT_SIZE_LIMIT",
    "DEFAULT_TIMEOUT",
    "StickerPayload",
    "StickerSource",
    "TextStickerSource",
    "UrlStickerSource",
]

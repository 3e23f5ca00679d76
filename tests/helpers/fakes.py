# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Test doubles for sticker sources and ``urlopen``."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from stickerdex.catalog import ContentKind, StickerPayload

PNG_BYTES = b"\x89PNG\r\n\x1a\n-fake-png-body"


def write_stickers(root: Path, *relative_paths: str) -> Path:
    """Create placeholder sticker files under ``root`` and return it."""

    root.mkdir(parents=True, exist_ok=True)
    for relative in relative_paths:
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(PNG_BYTES)
    return root


@dataclass
class RecordingSource:
    """Sticker source returning a fixed payload and counting fetches."""

    payload: StickerPayload = field(default_factory=lambda: StickerPayload(ContentKind.PNG, PNG_BYTES))
    error: Exception | None = None
    calls: int = 0

    def fetch(self, *, size_limit: int) -> StickerPayload:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload


class FakeResponse:
    """Minimal stand-in for the object returned by ``urllib.request.urlopen``."""

    def __init__(self, headers: Mapping[str, str], body: bytes = b"") -> None:
        self.headers = dict(headers)
        self._body = body

    def read(self, amount: int = -1) -> bytes:
        return self._body if amount < 0 else self._body[:amount]

    def __enter__(self) -> FakeResponse:
        return self

    def __exit__(self, *exc_info: object) -> None:
        return None


@dataclass
class FakeOpener:
    """Callable replacing ``urlopen``; answers per HTTP method."""

    responses: dict[str, FakeResponse | Exception]
    methods: list[str] = field(default_factory=list)

    def __call__(self, request, timeout: float) -> FakeResponse:
        method = request.get_method()
        self.methods.append(method)
        outcome = self.responses[method]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def image_opener(content_type: str = "image/png", body: bytes = PNG_BYTES, length: int | None = None) -> FakeOpener:
    """Return an opener serving one image with matching HEAD and GET headers."""

    headers = {"Content-Type": content_type, "Content-Length": str(len(body) if length is None else length)}
    return FakeOpener({"HEAD": FakeResponse(headers), "GET": FakeResponse(headers, body)})

# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Transport-neutral handlers for sticker chat commands.

Each handler takes the appropriate catalog lock for its whole duration,
turns catalog errors into replies, and leaves delivery to the transport.
Internal failures are logged with detail here and surface to the user only
as :data:`~stickerdex.catalog.errors.GENERIC_APOLOGY`.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..catalog.errors import GENERIC_APOLOGY, InternalCatalogError, StickerValidationError
from ..catalog.manager import StickerManager
from ..catalog.models import Sticker
from ..cooldown import GuildCooldownPolicy
from .patterns import build_pattern_groups, quoted_chunks

LOGGER = logging.getLogger(__name__)


class ReplyStatus(str, Enum):
    """Outcome category of a command."""

    OK = "ok"
    REJECTED = "rejected"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class Attachment:
    """Sticker file content to upload."""

    filename: str
    content_type: str
    data: bytes
    source: Path


@dataclass(frozen=True, slots=True)
class Reply:
    """A message the transport should deliver.

    Attributes:
        text: Message body, ``None`` when only an attachment is sent.
        attachment: Sticker upload, if any.
        private: Deliver to the requesting user only.
        status: Outcome category, used e.g. for CLI exit codes.
    """

    text: str | None = None
    attachment: Attachment | None = None
    private: bool = False
    status: ReplyStatus = ReplyStatus.OK


def _rejected(text: str, *, private: bool = False) -> Reply:
    return Reply(text=text, private=private, status=ReplyStatus.REJECTED)


def _apology() -> Reply:
    return Reply(text=GENERIC_APOLOGY, status=ReplyStatus.ERROR)


@dataclass(slots=True)
class StickerCommands:
    """Serve list, post, random, add, add-text and rename commands."""

    manager: StickerManager
    cooldowns: GuildCooldownPolicy = field(default_factory=GuildCooldownPolicy)
    rng: random.Random = field(default_factory=random.Random)

    def list_stickers(self, patterns: str = "") -> list[Reply]:
        """List the stickers matching ``patterns``, privately.

        Args:
            patterns: Pattern groups separated by ``/``; blank lists everything.

        Returns:
            list[Reply]: One reply per fenced chunk of names.
        """

        with self.manager.read_locked():
            stickers = self.manager.match(build_pattern_groups(patterns))
            names = [sticker.name for sticker in stickers]
        if not names:
            return [_rejected("No matched stickers found!", private=True)]
        return [Reply(text=chunk, private=True) for chunk in quoted_chunks(names)]

    def post(self, pattern: str, *, channel_id: str, guild_id: str | None = None) -> list[Reply]:
        """Post the only sticker matching ``pattern``.

        Args:
            pattern: Whitespace-separated patterns; group separators are refused.
            channel_id: Channel the command came from.
            guild_id: Guild of the channel, ``None`` for direct messages.

        Returns:
            list[Reply]: The sticker, or an explanation.
        """

        decision = self.cooldowns.try_cool_down(channel_id, guild_id)
        if not decision.allowed:
            return [_rejected(decision.message)]
        groups = build_pattern_groups(pattern)
        if len(groups) > 1:
            return [_rejected("Post command should not contain slash (`/`).")]
        with self.manager.read_locked():
            stickers = self.manager.match(groups)
            if not stickers:
                return [
                    _rejected(
                        "Cannot find the sticker you're looking for. Find the sticker name with `list` command."
                    )
                ]
            if len(stickers) > 1:
                return [
                    _rejected(
                        "Found more than one stickers! Please provide more specific patterns. Matched: "
                        + self.manager.describe(stickers)
                    )
                ]
            return [self._deliver(stickers[0])]

    def post_random(self, patterns: str = "", *, channel_id: str, guild_id: str | None = None) -> list[Reply]:
        """Post a random sticker among those matching ``patterns``."""

        decision = self.cooldowns.try_cool_down(channel_id, guild_id)
        if not decision.allowed:
            return [_rejected(decision.message)]
        with self.manager.read_locked():
            stickers = self.manager.match(build_pattern_groups(patterns))
            if not stickers:
                return [
                    _rejected("Cannot find any matched sticker. Find the sticker names with `list` command.")
                ]
            return [self._deliver(self.rng.choice(stickers))]

    def add(self, name: str, url: str, *, user: str = "") -> list[Reply]:
        """Download the image at ``url`` as a new sticker named ``name``."""

        with self.manager.write_locked():
            try:
                sticker = self.manager.add(name, url)
            except StickerValidationError as exc:
                return [_rejected(str(exc))]
            except InternalCatalogError:
                return [_apology()]
        LOGGER.info("%s add %r %r", user, name, url)
        return [Reply(text=f"Done. Added sticker: `{sticker.name}`")]

    def add_text(self, name: str, text: str, *, user: str = "") -> list[Reply]:
        """Store ``text`` as a new plain-text sticker named ``name``."""

        with self.manager.write_locked():
            try:
                sticker = self.manager.add_text(name, text)
            except StickerValidationError as exc:
                return [_rejected(str(exc))]
            except InternalCatalogError:
                return [_apology()]
        LOGGER.info("%s add-text %r %r", user, name, text)
        return [Reply(text=f"Done. Added text: `{sticker.name}`")]

    def rename(self, name: str, new_name: str, *, user: str = "") -> list[Reply]:
        """Rename the single sticker matching ``name`` to ``new_name``."""

        with self.manager.write_locked():
            try:
                sticker = self.manager.rename(name, new_name)
            except StickerValidationError as exc:
                return [_rejected(str(exc))]
            except InternalCatalogError:
                return [_apology()]
        LOGGER.info("%s rename %r %r", user, name, new_name)
        return [Reply(text=f"Done. Renamed sticker: `{name}` -> `{sticker.name}`")]

    def _deliver(self, sticker: Sticker) -> Reply:
        """Read the sticker content; the caller holds the read lock."""

        try:
            data = sticker.path.read_bytes()
        except OSError as exc:
            LOGGER.error("Failed to read sticker %s: %s", sticker.path, exc)
            return _apology()
        if sticker.is_text:
            return Reply(text=data.decode("utf-8", errors="replace"))
        kind = sticker.kind
        content_type = kind.value if kind is not None else "application/octet-stream"
        return Reply(
            attachment=Attachment(
                filename="sticker" + sticker.ext,
                content_type=content_type,
                data=data,
                source=sticker.path,
            )
        )


__all__ = ["Attachment", "Reply", "ReplyStatus", "StickerCommands"]

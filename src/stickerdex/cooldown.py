# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Per-key cooldowns used to rate-limit repeated sticker posts."""

from __future__ import annotations

import logging
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from threading import Lock, Timer
from typing import Final, Generic, NamedTuple, TypeVar

LOGGER = logging.getLogger(__name__)

KeyT = TypeVar("KeyT", bound=Hashable)

DEFAULT_COOLDOWN_SECONDS: Final[float] = 5.0
DEFAULT_COOLDOWN_MESSAGE: Final[str] = "Cooling down..."


class CooldownRegister(Generic[KeyT]):
    """Track keys that are cooling down.

    Inserting a key starts a one-shot timer that removes it after the given
    duration. Inserting a key that is already present is rejected and does not
    restart its timer. Expiry and insertion share one lock, and a timer only
    removes the entry it was started for, so an early :meth:`remove` followed
    by a fresh insertion is never cut short by the stale timer.
    """

    def __init__(self) -> None:
        """Initialise an empty register."""

        self._lock = Lock()
        self._tokens: dict[KeyT, object] = {}

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._tokens

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

    def cool_down(self, key: KeyT, seconds: float) -> bool:
        """Mark ``key`` as cooling down for ``seconds``.

        Args:
            key: Identifier to rate-limit, e.g. a channel id.
            seconds: Cooldown duration.

        Returns:
            bool: ``True`` when the key was accepted, ``False`` when it is
            already cooling down.
        """

        with self._lock:
            if key in self._tokens:
                return False
            token = object()
            self._tokens[key] = token
        timer = Timer(seconds, self._expire, args=(key, token))
        timer.daemon = True
        timer.start()
        return True

    def remove(self, key: KeyT) -> None:
        """Clear the cooldown of ``key``; a no-op when it is not cooling down."""

        with self._lock:
            self._tokens.pop(key, None)

    def _expire(self, key: KeyT, token: object) -> None:
        with self._lock:
            if self._tokens.get(key) is token:
                del self._tokens[key]


class CooldownDecision(NamedTuple):
    """Outcome of a cooldown check."""

    allowed: bool
    message: str = ""


@dataclass(frozen=True, slots=True)
class CooldownRule:
    """Cooldown duration and the message shown while it is active."""

    seconds: float = DEFAULT_COOLDOWN_SECONDS
    message: str = DEFAULT_COOLDOWN_MESSAGE


@dataclass(slots=True)
class GuildCooldownPolicy:
    """Apply per-guild cooldown rules to channels.

    Direct messages carry no guild and are never rate-limited; a rule with a
    zero duration disables the cooldown for its guild.
    """

    default: CooldownRule = field(default_factory=CooldownRule)
    per_guild: Mapping[str, CooldownRule] = field(default_factory=dict)
    register: CooldownRegister[str] = field(default_factory=CooldownRegister)

    def rule_for(self, guild_id: str | None) -> CooldownRule:
        """Return the rule applying to ``guild_id``."""

        if guild_id is None:
            return self.default
        return self.per_guild.get(guild_id, self.default)

    def try_cool_down(self, channel_id: str, guild_id: str | None) -> CooldownDecision:
        """Start a cooldown for ``channel_id`` unless one is already running.

        Args:
            channel_id: Channel the action happens in.
            guild_id: Guild owning the channel, ``None`` for direct messages.

        Returns:
            CooldownDecision: Whether the action may proceed, with the message
            to show when it may not.
        """

        if not guild_id:
            return CooldownDecision(True)
        rule = self.rule_for(guild_id)
        if rule.seconds <= 0 or self.register.cool_down(channel_id, rule.seconds):
            return CooldownDecision(True)
        LOGGER.debug("Channel %s is cooling down", channel_id)
        return CooldownDecision(False, rule.message)

    def release(self, channel_id: str) -> None:
        """Clear the cooldown of ``channel_id`` early."""

        self.register.remove(channel_id)


__all__ = [
    "CooldownDecision",
    "CooldownRegister",
    "CooldownRule",
    "DEFAULT_COOLDOWN_MESSAGE",
    "DEFAULT_COOLDOWN_SECONDS",
    "GuildCooldownPolicy",
]

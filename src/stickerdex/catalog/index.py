# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Sorted in-memory storage for catalog entries."""

from __future__ import annotations

import logging
from bisect import bisect_left
from collections.abc import Iterable, Iterator
from operator import attrgetter

from .models import Sticker

LOGGER = logging.getLogger(__name__)

_by_name = attrgetter("name")


class StickerIndex:
    """Keep stickers ordered by name using ordinal string comparison.

    The index performs no locking of its own; it is only touched while the
    owning :class:`~stickerdex.catalog.manager.StickerManager` lock is held.
    """

    def __init__(self, stickers: Iterable[Sticker] = ()) -> None:
        """Initialise the index, sorting ``stickers`` by name.

        Args:
            stickers: Initial entries. Names are expected to be unique.
        """

        self._stickers: list[Sticker] = sorted(stickers, key=_by_name)

    def __len__(self) -> int:
        return len(self._stickers)

    def __iter__(self) -> Iterator[Sticker]:
        return iter(self._stickers)

    def find(self, name: str) -> tuple[int, bool]:
        """Binary-search ``name``.

        Args:
            name: Normalised sticker name.

        Returns:
            tuple[int, bool]: Position where ``name`` is or would be stored, and
            whether an entry with that name exists.
        """

        position = bisect_left(self._stickers, name, key=_by_name)
        found = position < len(self._stickers) and self._stickers[position].name == name
        return position, found

    def insert(self, sticker: Sticker) -> bool:
        """Insert ``sticker`` at its sorted position.

        Args:
            sticker: Entry to insert.

        Returns:
            bool: ``False`` when an entry with the same name already exists and
            the insertion was skipped.
        """

        position, found = self.find(sticker.name)
        if found:
            LOGGER.warning("Tried to insert an already existing sticker %r, skipped", sticker.name)
            return False
        self._stickers.insert(position, sticker)
        return True

    def remove(self, target: Sticker | str) -> bool:
        """Delete the entry named like ``target``.

        Args:
            target: Sticker or sticker name to remove.

        Returns:
            bool: ``True`` when an entry was removed.
        """

        name = target if isinstance(target, str) else target.name
        position, found = self.find(name)
        if not found:
            return False
        del self._stickers[position]
        return True

    def snapshot(self) -> tuple[Sticker, ...]:
        """Return the ordered entries. The entries themselves must not be mutated."""

        return tuple(self._stickers)


__all__ = ["StickerIndex"]

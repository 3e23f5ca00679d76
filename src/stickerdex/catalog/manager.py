# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Sticker catalog manager binding the in-memory index to a directory.

Locking is the caller's responsibility. Queries must run under
:meth:`StickerManager.read_locked` (or :meth:`~StickerManager.rlock`) and
mutations under :meth:`StickerManager.write_locked` (or
:meth:`~StickerManager.lock`), so that a caller can hold the lock across a
read-then-act sequence such as "find exactly one match, then open its file".
"""

from __future__ import annotations

import logging
import os
import unicodedata
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from .errors import (
    AmbiguousStickerError,
    CatalogLoadError,
    InternalCatalogError,
    NameConflictError,
    StickerNotFoundError,
)
from .hints import hint_map, sticker_list_string
from .index import StickerIndex
from .locking import ReadWriteLock
from .models import Sticker
from .scanner import StickerScanner
from .sources import (
    DEFAULT_SIZE_LIMIT,
    DEFAULT_TIMEOUT,
    StickerPayload,
    StickerSource,
    TextStickerSource,
    UrlStickerSource,
)

LOGGER = logging.getLogger(__name__)

PatternGroups = Sequence[Sequence[str]]

_SEPARATORS = frozenset({"/", os.sep, os.altsep or "/"})


class StickerManager:
    """Own the sticker catalog and keep it coherent with the filesystem."""

    def __init__(
        self,
        root: Path,
        *,
        case_sensitive: bool = False,
        size_limit: int = DEFAULT_SIZE_LIMIT,
        download_timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Create an empty manager. Use :meth:`load` to build a ready instance.

        Args:
            root: Directory holding one file per sticker.
            case_sensitive: Whether names and patterns keep their case.
            size_limit: Largest accepted payload for new stickers, in bytes.
            download_timeout: Timeout in seconds for URL sources given as strings.
        """

        self._root = Path(os.path.normpath(root))
        self._case_sensitive = case_sensitive
        self._size_limit = size_limit
        self._download_timeout = download_timeout
        self._index = StickerIndex()
        self._lock = ReadWriteLock()

    @classmethod
    def load(
        cls,
        root: Path | str,
        *,
        case_sensitive: bool = False,
        size_limit: int = DEFAULT_SIZE_LIMIT,
        download_timeout: float = DEFAULT_TIMEOUT,
    ) -> StickerManager:
        """Scan ``root`` and return a ready manager.

        Args:
            root: Existing directory holding the sticker files.
            case_sensitive: Whether names and patterns keep their case.
            size_limit: Largest accepted payload for new stickers, in bytes.
            download_timeout: Timeout in seconds for URL sources given as strings.

        Returns:
            StickerManager: Manager holding every sticker found under ``root``.

        Raises:
            CatalogLoadError: If ``root`` is unusable or two files derive the
                same sticker name.
        """

        manager = cls(
            Path(root),
            case_sensitive=case_sensitive,
            size_limit=size_limit,
            download_timeout=download_timeout,
        )
        manager.reload()
        return manager

    # ------------------------------------------------------------------ locking

    def lock(self) -> None:
        """Acquire exclusive access."""

        self._lock.acquire_write()

    def unlock(self) -> None:
        """Release exclusive access."""

        self._lock.release_write()

    def rlock(self) -> None:
        """Acquire shared access."""

        self._lock.acquire_read()

    def runlock(self) -> None:
        """Release shared access."""

        self._lock.release_read()

    @contextmanager
    def read_locked(self) -> Iterator[StickerManager]:
        """Hold shared access for the duration of the ``with`` block."""

        with self._lock.read_locked():
            yield self

    @contextmanager
    def write_locked(self) -> Iterator[StickerManager]:
        """Hold exclusive access for the duration of the ``with`` block."""

        with self._lock.write_locked():
            yield self

    # ------------------------------------------------------------------ queries

    @property
    def root(self) -> Path:
        """Return the catalog root directory."""

        return self._root

    @property
    def case_sensitive(self) -> bool:
        """Return ``True`` when names keep their case."""

        return self._case_sensitive

    @property
    def size_limit(self) -> int:
        """Return the largest accepted payload for new stickers, in bytes."""

        return self._size_limit

    def normalise(self, name: str) -> str:
        """Apply the configured case folding to ``name``."""

        return name if self._case_sensitive else name.lower()

    def stickers(self) -> tuple[Sticker, ...]:
        """Return every sticker in name order."""

        return self._index.snapshot()

    def hints(self) -> dict[str, int]:
        """Return unique-prefix hint lengths keyed by sticker name.

        Returns:
            dict[str, int]: Empty when bulk-loaded names contain prefix conflicts.
        """

        return hint_map([sticker.name for sticker in self._index])

    def describe(self, stickers: Sequence[Sticker]) -> str:
        """Render ``stickers`` as a short hinted list for user messages."""

        return sticker_list_string(stickers, self.hints())

    def match(self, pattern_groups: PatternGroups) -> list[Sticker]:
        """Return the stickers matching any of ``pattern_groups``.

        A sticker matches a group when every pattern of the group is a
        substring of its name. Empty groups are ignored; when no non-empty group
        remains, every sticker matches.

        Args:
            pattern_groups: Groups of substrings (AND within, OR across).

        Returns:
            list[Sticker]: Matching stickers in name order.
        """

        groups = [[self.normalise(pattern) for pattern in group] for group in pattern_groups if group]
        if not groups:
            return list(self._index)
        return [
            sticker
            for sticker in self._index
            if any(all(pattern in sticker.name for pattern in group) for group in groups)
        ]

    def contained_by(self, name: str) -> list[Sticker]:
        """Return the stickers whose name is a substring of ``name``."""

        candidate = self.normalise(name)
        return [sticker for sticker in self._index if sticker.name in candidate]

    # ---------------------------------------------------------------- mutations

    def reload(self) -> None:
        """Rebuild the index from a full directory scan.

        The current index is replaced only when the scan succeeds.

        Raises:
            CatalogLoadError: If the scan fails.
        """

        scanner = StickerScanner(self._root, case_sensitive=self._case_sensitive)
        try:
            stickers = scanner.scan()
        except OSError as exc:
            raise CatalogLoadError(f"Failed to scan sticker root {self._root}: {exc}") from exc
        self._index = StickerIndex(stickers)
        LOGGER.info("Loaded %d stickers from %s", len(stickers), self._root)

    def add(self, name: str, source: StickerSource | str) -> Sticker:
        """Fetch a new sticker and store it as ``name``.

        Args:
            name: Display name for the new sticker.
            source: Byte source, or a URL to download the image from.

        Returns:
            Sticker: The inserted entry.

        Raises:
            StickerValidationError: If the name or the source is rejected.
            InternalCatalogError: If writing the file fails; nothing is left on disk.
        """

        self._check_new_name(name)
        if isinstance(source, str):
            source = UrlStickerSource(source, timeout=self._download_timeout)
        payload = source.fetch(size_limit=self._size_limit)
        path = self._root / f"{name}{payload.kind.suffix}"
        self._write_payload(path, payload)
        sticker = Sticker(name=self.normalise(name), path=path)
        try:
            inserted = self._index.insert(sticker)
        except Exception:
            self._discard(path)
            raise
        if not inserted:
            self._discard(path)
            raise NameConflictError(f"A sticker named `{sticker.name}` already exists.")
        return sticker

    def add_text(self, name: str, text: str) -> Sticker:
        """Store ``text`` as a new plain-text sticker named ``name``."""

        return self.add(name, TextStickerSource(text))

    def rename(self, old_ref: str, new_name: str) -> Sticker:
        """Rename the single sticker matching ``old_ref`` to ``new_name``.

        Args:
            old_ref: Substring identifying exactly one existing sticker.
            new_name: New display name.

        Returns:
            Sticker: The renamed entry.

        Raises:
            StickerValidationError: If ``old_ref`` is unresolved or ambiguous,
                or ``new_name`` conflicts with other stickers.
            InternalCatalogError: If moving the file fails; the file is moved
                back when possible.
        """

        source = self._resolve_one(old_ref)
        self._check_new_name(new_name, ignore=source)

        old_path = source.path
        new_path = self._root / f"{new_name}{source.ext}"
        if new_path != old_path and new_path.exists():
            LOGGER.error("Refusing to overwrite untracked file %s while renaming %s", new_path, old_path)
            raise InternalCatalogError()
        try:
            new_path.parent.mkdir(parents=True, exist_ok=True)
            os.replace(old_path, new_path)
        except OSError as exc:
            LOGGER.error("Failed to move %s to %s: %s", old_path, new_path, exc)
            raise InternalCatalogError() from exc

        old_name = source.name
        try:
            self._index.remove(source)
            source.name = self.normalise(new_name)
            source.path = new_path
            self._index.insert(source)
        except Exception:
            self._restore(source, old_name, old_path, new_path)
            raise
        return source

    # ------------------------------------------------------------------ helpers

    def _resolve_one(self, ref: str) -> Sticker:
        matched = self.match([[ref]])
        if not matched:
            raise StickerNotFoundError("Sticker not found.")
        if len(matched) > 1:
            raise AmbiguousStickerError("Found more than one stickers. Matched: " + self.describe(matched))
        return matched[0]

    def _check_new_name(self, name: str, *, ignore: Sticker | None = None) -> None:
        """Reject names that would break lookups of existing stickers.

        Args:
            name: Candidate name.
            ignore: Sticker being renamed, which may conflict with itself.

        Raises:
            NameConflictError: If the name is empty, contains a path
                separator or a control character, or overlaps an existing name.
        """

        if not name or name.strip() != name:
            raise NameConflictError("Invalid sticker name, it must be non-empty and must not start or end with spaces.")
        if any(separator in name for separator in _SEPARATORS):
            raise NameConflictError(f"Invalid sticker name, filepath separator ({os.sep}) or slash is included.")
        if any(unicodedata.category(char) == "Cc" for char in name):
            raise NameConflictError("Invalid sticker name, control characters are not allowed.")
        if name.startswith("."):
            raise NameConflictError("Invalid sticker name, it must not start with a dot.")

        containing = [sticker for sticker in self.match([[name]]) if sticker is not ignore]
        if containing:
            raise NameConflictError("The name is contained by the following sticker(s): " + self.describe(containing))
        contained = [sticker for sticker in self.contained_by(name) if sticker is not ignore]
        if contained:
            raise NameConflictError("The name contains the following sticker(s): " + self.describe(contained))

    def _write_payload(self, path: Path, payload: StickerPayload) -> None:
        try:
            handle = path.open("xb")
        except OSError as exc:
            LOGGER.error("Failed to create sticker file %s: %s", path, exc)
            raise InternalCatalogError() from exc
        try:
            with handle:
                handle.write(payload.data)
        except OSError as exc:
            LOGGER.error("Failed to write sticker file %s: %s", path, exc)
            self._discard(path)
            raise InternalCatalogError() from exc

    def _discard(self, path: Path) -> None:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.error("Failed to remove %s during rollback: %s", path, exc)

    def _restore(self, sticker: Sticker, old_name: str, old_path: Path, new_path: Path) -> None:
        """Undo a rename after indexing failed. Failures here are logged only."""

        try:
            os.replace(new_path, old_path)
        except OSError as exc:
            LOGGER.error("Failed to move %s back to %s: %s", new_path, old_path, exc)
        try:
            self._index.remove(sticker)
            sticker.name = old_name
            sticker.path = old_path
            self._index.insert(sticker)
        except Exception:
            LOGGER.exception("Failed to restore index entry %r after a failed rename", old_name)


__all__ = ["PatternGroups", "StickerManager"]

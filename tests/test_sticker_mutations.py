# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for adding and renaming stickers, including rollback."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest
from helpers.fakes import PNG_BYTES, RecordingSource, write_stickers

from stickerdex.catalog import (
    AmbiguousStickerError,
    ContentKind,
    InternalCatalogError,
    InvalidSourceError,
    NameConflictError,
    StickerIndex,
    StickerManager,
    StickerNotFoundError,
    StickerPayload,
)
from stickerdex.commands import ReplyStatus, StickerCommands


def _names(manager: StickerManager) -> list[str]:
    return [sticker.name for sticker in manager.stickers()]


def test_add_writes_file_and_indexes(
    manager: StickerManager, sticker_root: Path, png_source: RecordingSource
) -> None:
    with manager.write_locked():
        sticker = manager.add("fox", png_source)
    assert sticker.name == "fox"
    assert sticker.path == sticker_root / "fox.png"
    assert sticker.path.read_bytes() == PNG_BYTES
    assert _names(manager) == ["cat", "dog", "fox"]
    assert png_source.calls == 1


def test_add_uses_extension_of_payload(manager: StickerManager, sticker_root: Path) -> None:
    source = RecordingSource(payload=StickerPayload(ContentKind.GIF, b"GIF89a"))
    sticker = manager.add("owl", source)
    assert sticker.path == sticker_root / "owl.gif"
    assert sticker.kind is ContentKind.GIF


def test_add_text_strips_and_stores_utf8(manager: StickerManager, sticker_root: Path) -> None:
    sticker = manager.add_text("note", "  貓 says hi  ")
    assert sticker.path == sticker_root / "note.txt"
    assert sticker.is_text
    assert sticker.path.read_text(encoding="utf-8") == "貓 says hi"


def test_add_case_folds_name_but_keeps_file_name(
    manager: StickerManager, sticker_root: Path, png_source: RecordingSource
) -> None:
    sticker = manager.add("Fox", png_source)
    assert sticker.name == "fox"
    assert sticker.path == sticker_root / "Fox.png"
    assert [s.name for s in manager.match([["FOX"]])] == ["fox"]


@pytest.mark.parametrize(
    ("name", "message"),
    [
        ("bigcat", "contains the following sticker"),
        ("ca", "contained by the following sticker"),
        ("DOG", "contained by the following sticker"),
        ("a/b", "separator"),
        ("", "non-empty"),
        (" fox", "spaces"),
        (".hidden", "dot"),
        ("a\x00b", "control characters"),
        ("line\nbreak", "control characters"),
    ],
)
def test_add_rejects_bad_names_before_fetching(
    manager: StickerManager,
    sticker_root: Path,
    png_source: RecordingSource,
    name: str,
    message: str,
) -> None:
    before = sorted(path.name for path in sticker_root.iterdir())
    with pytest.raises(NameConflictError, match=message):
        manager.add(name, png_source)
    assert png_source.calls == 0
    assert sorted(path.name for path in sticker_root.iterdir()) == before
    assert _names(manager) == ["cat", "dog"]


def test_add_propagates_source_rejection(manager: StickerManager, sticker_root: Path) -> None:
    source = RecordingSource(error=InvalidSourceError("Invalid URL content type."))
    with pytest.raises(InvalidSourceError):
        manager.add("fox", source)
    assert not list(sticker_root.glob("fox.*"))


def test_add_rejects_blank_text(manager: StickerManager, sticker_root: Path) -> None:
    with pytest.raises(InvalidSourceError, match="must not be empty"):
        manager.add_text("note", "   ")
    assert not (sticker_root / "note.txt").exists()


def test_add_removes_file_when_indexing_fails(
    manager: StickerManager,
    sticker_root: Path,
    png_source: RecordingSource,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    def broken_insert(self: StickerIndex, sticker: object) -> bool:
        raise RuntimeError("index exploded")

    monkeypatch.setattr(StickerIndex, "insert", broken_insert)
    with pytest.raises(RuntimeError, match="index exploded"):
        manager.add("fox", png_source)
    assert not (sticker_root / "fox.png").exists()
    assert _names(manager) == ["cat", "dog"]


def test_add_never_overwrites_untracked_file(
    manager: StickerManager, sticker_root: Path, png_source: RecordingSource
) -> None:
    stray = sticker_root / "fox.png"
    stray.write_bytes(b"untracked")
    with pytest.raises(InternalCatalogError) as excinfo:
        manager.add("fox", png_source)
    assert str(excinfo.value) == "Something went wrong here! Please contact the admin."
    assert stray.read_bytes() == b"untracked"
    assert _names(manager) == ["cat", "dog"]


def test_rename_moves_file_and_updates_index(manager: StickerManager, sticker_root: Path) -> None:
    with manager.write_locked():
        sticker = manager.rename("ca", "fox")
    assert sticker.name == "fox"
    assert sticker.path == sticker_root / "fox.png"
    assert sticker.path.read_bytes() == PNG_BYTES
    assert not (sticker_root / "cat.png").exists()
    assert manager.match([["cat"]]) == []
    assert [s.name for s in manager.match([["fox"]])] == ["fox"]
    assert _names(manager) == ["dog", "fox"]


def test_rename_preserves_extension(tmp_path: Path) -> None:
    manager = StickerManager.load(write_stickers(tmp_path / "root", "cat.gif", "dog.png"))
    sticker = manager.rename("cat", "owl")
    assert sticker.path == tmp_path / "root" / "owl.gif"


def test_rename_may_extend_its_own_name(manager: StickerManager, sticker_root: Path) -> None:
    sticker = manager.rename("dog", "dogs")
    assert sticker.path == sticker_root / "dogs.png"
    assert _names(manager) == ["cat", "dogs"]


def test_rename_unknown_sticker(manager: StickerManager) -> None:
    with pytest.raises(StickerNotFoundError, match="Sticker not found"):
        manager.rename("zzz", "fox")


def test_rename_ambiguous_reference(tmp_path: Path) -> None:
    manager = StickerManager.load(write_stickers(tmp_path / "root", "cat.png", "cow.png", "dog.png"))
    with pytest.raises(AmbiguousStickerError, match="Matched: `ca\\[t\\]`, `co\\[w\\]`"):
        manager.rename("c", "fox")


def test_rename_onto_other_sticker_conflicts(manager: StickerManager, sticker_root: Path) -> None:
    with pytest.raises(NameConflictError):
        manager.rename("dog", "cat")
    assert (sticker_root / "dog.png").exists()
    assert _names(manager) == ["cat", "dog"]


def test_rename_refuses_untracked_target(manager: StickerManager, sticker_root: Path) -> None:
    stray = sticker_root / "fox.png"
    stray.write_bytes(b"untracked")
    with pytest.raises(InternalCatalogError):
        manager.rename("cat", "fox")
    assert stray.read_bytes() == b"untracked"
    assert (sticker_root / "cat.png").exists()
    assert _names(manager) == ["cat", "dog"]


def test_rename_reports_move_failure(
    manager: StickerManager, sticker_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    def broken_replace(src: object, dst: object) -> None:
        raise PermissionError("read-only file system")

    monkeypatch.setattr("stickerdex.catalog.manager.os.replace", broken_replace)
    with pytest.raises(InternalCatalogError):
        manager.rename("cat", "fox")
    assert (sticker_root / "cat.png").exists()
    assert _names(manager) == ["cat", "dog"]


def test_rename_rolls_back_when_indexing_fails(
    manager: StickerManager, sticker_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    original_insert = StickerIndex.insert
    calls: list[str] = []

    def flaky_insert(self: StickerIndex, sticker) -> bool:
        calls.append(sticker.name)
        if len(calls) == 1:
            raise RuntimeError("index exploded")
        return original_insert(self, sticker)

    monkeypatch.setattr(StickerIndex, "insert", flaky_insert)
    with pytest.raises(RuntimeError, match="index exploded"):
        manager.rename("cat", "fox")
    assert calls == ["fox", "cat"]
    assert (sticker_root / "cat.png").exists()
    assert not (sticker_root / "fox.png").exists()
    restored = manager.stickers()[0]
    assert (restored.name, restored.path) == ("cat", sticker_root / "cat.png")
    assert _names(manager) == ["cat", "dog"]


@pytest.mark.parametrize("new_name", ["x\x00y", "tab\there", "sub/dir"])
def test_rename_rejects_bad_names(manager: StickerManager, sticker_root: Path, new_name: str) -> None:
    with pytest.raises(NameConflictError):
        manager.rename("cat", new_name)
    assert (sticker_root / "cat.png").exists()
    assert _names(manager) == ["cat", "dog"]


def test_commands_report_control_characters(manager: StickerManager) -> None:
    commands = StickerCommands(manager=manager)
    (reply,) = commands.add_text("a\x00b", "hello")
    assert reply.status is ReplyStatus.REJECTED
    (reply,) = commands.rename("cat", "x\x00y")
    assert reply.status is ReplyStatus.REJECTED
    assert _names(manager) == ["cat", "dog"]


def test_rename_moves_file_back_even_if_index_restore_fails(
    manager: StickerManager,
    sticker_root: Path,
    monkeypatch: pytest.MonkeyPatch,
    caplog: pytest.LogCaptureFixture,
) -> None:
    def broken_insert(self: StickerIndex, sticker: object) -> bool:
        raise RuntimeError("index exploded")

    monkeypatch.setattr(StickerIndex, "insert", broken_insert)
    with caplog.at_level(logging.ERROR), pytest.raises(RuntimeError, match="index exploded"):
        manager.rename("cat", "fox")
    assert (sticker_root / "cat.png").exists()
    assert not (sticker_root / "fox.png").exists()
    assert "Failed to restore index entry 'cat'" in caplog.text


def _entries(manager: StickerManager) -> set[tuple[str, Path]]:
    return {(sticker.name, sticker.path) for sticker in manager.stickers()}


def test_mutations_match_a_fresh_scan(
    manager: StickerManager, sticker_root: Path, png_source: RecordingSource
) -> None:
    with manager.write_locked():
        manager.add("Fox", png_source)
        manager.add_text("note", "hello")
        manager.rename("ca", "owl")
        manager.rename("Fo", "Wolf")
    live = _entries(manager)
    assert live == {
        ("dog", sticker_root / "dog.png"),
        ("note", sticker_root / "note.txt"),
        ("owl", sticker_root / "owl.png"),
        ("wolf", sticker_root / "Wolf.png"),
    }

    with manager.write_locked():
        manager.reload()
    assert _entries(manager) == live
    assert _entries(StickerManager.load(sticker_root)) == live

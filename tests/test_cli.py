# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command-line tests for the stickerdex application."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from stickerdex.cli import app


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)


def _invoke(root: Path, *args: str):
    return CliRunner().invoke(app, ["--no-emoji", "--root", str(root), *args])


def test_list_prints_fenced_names(sticker_root: Path) -> None:
    result = _invoke(sticker_root, "list")
    assert result.exit_code == 0
    assert "cat\ndog" in result.stdout


def test_list_without_match_exits_one(sticker_root: Path) -> None:
    result = _invoke(sticker_root, "list", "zzz")
    assert result.exit_code == 1
    assert "No matched stickers found!" in result.stdout


def test_hints_marks_unique_prefixes(sticker_root: Path) -> None:
    result = _invoke(sticker_root, "hints")
    assert result.exit_code == 0
    assert result.stdout.splitlines() == ["c[at]", "d[og]"]


def test_show_prints_sticker_path(sticker_root: Path) -> None:
    result = _invoke(sticker_root, "show", "ca")
    assert result.exit_code == 0
    assert result.stdout.strip() == str(sticker_root / "cat.png")


def test_show_without_match_exits_one(sticker_root: Path) -> None:
    result = _invoke(sticker_root, "show", "zzz")
    assert result.exit_code == 1
    assert "Cannot find the sticker" in result.stdout


def test_add_text_then_show(sticker_root: Path) -> None:
    result = _invoke(sticker_root, "add-text", "note", "hello", "world")
    assert result.exit_code == 0
    assert "Done. Added text: `note`" in result.stdout
    result = _invoke(sticker_root, "show", "note")
    assert result.stdout.strip() == "hello world"


def test_rename(sticker_root: Path) -> None:
    result = _invoke(sticker_root, "rename", "cat", "fox")
    assert result.exit_code == 0
    assert (sticker_root / "fox.png").exists()
    assert _invoke(sticker_root, "hints").stdout.splitlines() == ["d[og]", "f[ox]"]


def test_random_within_patterns(sticker_root: Path) -> None:
    result = _invoke(sticker_root, "random", "og")
    assert result.exit_code == 0
    assert result.stdout.strip() == str(sticker_root / "dog.png")


def test_missing_root_exits_two(tmp_path: Path) -> None:
    result = _invoke(tmp_path / "missing", "list")
    assert result.exit_code == 2
    assert "not a directory" in result.stdout


def test_config_file_sets_root(tmp_path: Path, sticker_root: Path) -> None:
    config = tmp_path / "stickerdex.toml"
    config.write_text(f'[catalog]\nroot = "{sticker_root.name}"\n', encoding="utf-8")
    result = CliRunner().invoke(app, ["--no-emoji", "--config", str(config), "list"])
    assert result.exit_code == 0
    assert "cat\ndog" in result.stdout


def test_invalid_config_exits_two(tmp_path: Path) -> None:
    config = tmp_path / "stickerdex.toml"
    config.write_text("[catalog]\nbogus = 1\n", encoding="utf-8")
    result = CliRunner().invoke(app, ["--no-emoji", "--config", str(config), "list"])
    assert result.exit_code == 2

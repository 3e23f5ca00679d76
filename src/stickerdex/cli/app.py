# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application for inspecting and curating a sticker catalog."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

import typer

from ..catalog.errors import CatalogLoadError
from ..catalog.hints import with_hint
from ..catalog.manager import StickerManager
from ..commands.service import Reply, ReplyStatus, StickerCommands
from ..config import ConfigError, StickerdexConfig, load_config
from ..logging import configure_logging, fail, warn

CLI_CHANNEL: Final[str] = "cli"

_EXIT_CODES: Final[dict[ReplyStatus, int]] = {
    ReplyStatus.OK: 0,
    ReplyStatus.REJECTED: 1,
    ReplyStatus.ERROR: 2,
}

app = typer.Typer(help="Curate and query a directory of stickers.", no_args_is_help=True, add_completion=False)


@dataclass(slots=True)
class CLIState:
    """Options shared by every sub-command."""

    config: StickerdexConfig
    emoji: bool

    def commands(self) -> StickerCommands:
        """Load the catalog and wrap it in command handlers.

        Returns:
            StickerCommands: Handlers bound to a freshly loaded catalog.

        Raises:
            typer.Exit: If the catalog cannot be loaded.
        """

        settings = self.config.catalog
        try:
            manager = StickerManager.load(
                settings.root,
                case_sensitive=settings.case_sensitive,
                size_limit=settings.size_limit,
                download_timeout=settings.download_timeout,
            )
        except CatalogLoadError as exc:
            fail(str(exc), use_emoji=self.emoji)
            raise typer.Exit(code=2) from exc
        return StickerCommands(manager=manager, cooldowns=self.config.cooldown_policy())


def _state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.BadParameter("CLI state was not initialised")
    return state


def _emit(replies: Sequence[Reply], *, use_emoji: bool) -> None:
    """Print ``replies`` and exit with a status matching the worst outcome."""

    worst = ReplyStatus.OK
    for reply in replies:
        if reply.attachment is not None:
            typer.echo(str(reply.attachment.source))
        if reply.text is None:
            continue
        if reply.status is ReplyStatus.OK:
            typer.echo(reply.text)
        elif reply.status is ReplyStatus.REJECTED:
            warn(reply.text, use_emoji=use_emoji)
        else:
            fail(reply.text, use_emoji=use_emoji)
        if _EXIT_CODES[reply.status] > _EXIT_CODES[worst]:
            worst = reply.status
    raise typer.Exit(code=_EXIT_CODES[worst])


@app.callback()
def main(
    ctx: typer.Context,
    root: Path | None = typer.Option(None, "--root", "-r", help="Sticker root directory."),
    config_path: Path | None = typer.Option(None, "--config", "-c", help="TOML configuration file."),
    case_sensitive: bool | None = typer.Option(
        None,
        "--case-sensitive/--case-insensitive",
        help="Override case sensitivity of sticker names.",
    ),
    emoji: bool = typer.Option(True, "--emoji/--no-emoji", help="Decorate messages with emoji."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging."),
) -> None:
    """Load configuration shared by every command."""

    configure_logging(debug=debug)
    try:
        config = load_config(config_path)
    except ConfigError as exc:
        fail(str(exc), use_emoji=emoji)
        raise typer.Exit(code=2) from exc
    overrides: dict[str, object] = {}
    if root is not None:
        overrides["root"] = root
    if case_sensitive is not None:
        overrides["case_sensitive"] = case_sensitive
    if overrides:
        config = config.model_copy(update={"catalog": config.catalog.model_copy(update=overrides)})
    ctx.obj = CLIState(config=config, emoji=emoji)


@app.command("list")
def list_command(
    ctx: typer.Context,
    patterns: list[str] | None = typer.Argument(None, help="Patterns; separate groups with '/'."),
) -> None:
    """List stickers matching any group of patterns."""

    state = _state(ctx)
    _emit(state.commands().list_stickers(" ".join(patterns or ())), use_emoji=state.emoji)


@app.command("hints")
def hints_command(ctx: typer.Context) -> None:
    """Show every sticker with its shortest unambiguous prefix."""

    state = _state(ctx)
    manager = state.commands().manager
    with manager.read_locked():
        names = [sticker.name for sticker in manager.stickers()]
        hints = manager.hints()
    if names and not hints:
        warn("Some sticker names are prefixes of others; hints are unavailable.", use_emoji=state.emoji)
    for name in names:
        typer.echo(with_hint(name, hints[name]) if name in hints else name)


@app.command("show")
def show_command(
    ctx: typer.Context,
    patterns: list[str] = typer.Argument(..., help="Patterns identifying exactly one sticker."),
) -> None:
    """Print the file path (or text) of the only matching sticker."""

    state = _state(ctx)
    _emit(state.commands().post(" ".join(patterns), channel_id=CLI_CHANNEL), use_emoji=state.emoji)


@app.command("random")
def random_command(
    ctx: typer.Context,
    patterns: list[str] | None = typer.Argument(None, help="Patterns; separate groups with '/'."),
) -> None:
    """Print a random sticker matching any group of patterns."""

    state = _state(ctx)
    replies = state.commands().post_random(" ".join(patterns or ()), channel_id=CLI_CHANNEL)
    _emit(replies, use_emoji=state.emoji)


@app.command("add")
def add_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the new sticker."),
    url: str = typer.Argument(..., help="URL of a png, jpeg, or gif image."),
) -> None:
    """Download an image and store it as a new sticker."""

    state = _state(ctx)
    _emit(state.commands().add(name, url, user=CLI_CHANNEL), use_emoji=state.emoji)


@app.command("add-text")
def add_text_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Name of the new sticker."),
    text: list[str] = typer.Argument(..., help="Text content of the sticker."),
) -> None:
    """Store plain text as a new sticker."""

    state = _state(ctx)
    _emit(state.commands().add_text(name, " ".join(text), user=CLI_CHANNEL), use_emoji=state.emoji)


@app.command("rename")
def rename_command(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Pattern identifying exactly one sticker."),
    new_name: str = typer.Argument(..., help="New sticker name."),
) -> None:
    """Rename a sticker."""

    state = _state(ctx)
    _emit(state.commands().rename(name, new_name, user=CLI_CHANNEL), use_emoji=state.emoji)


__all__ = ["CLIState", "app"]

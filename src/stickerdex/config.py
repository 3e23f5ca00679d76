# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loading helpers for stickerdex."""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .catalog.sources import DEFAULT_SIZE_LIMIT, DEFAULT_TIMEOUT
from .cooldown import DEFAULT_COOLDOWN_MESSAGE, DEFAULT_COOLDOWN_SECONDS, CooldownRule, GuildCooldownPolicy

DEFAULT_CONFIG_FILENAME: Final[str] = "stickerdex.toml"


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class CooldownSettings(BaseModel):
    """Cooldown applied to post and random commands in a guild."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    seconds: float = Field(default=DEFAULT_COOLDOWN_SECONDS, ge=0)
    message: str = DEFAULT_COOLDOWN_MESSAGE

    def to_rule(self) -> CooldownRule:
        """Return the runtime rule described by these settings."""

        return CooldownRule(seconds=self.seconds, message=self.message)


class CatalogSettings(BaseModel):
    """Location and behaviour of the sticker catalog."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    root: Path = Field(default_factory=lambda: Path("resources"))
    case_sensitive: bool = False
    size_limit: int = Field(default=DEFAULT_SIZE_LIMIT, gt=0)
    download_timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)


class StickerdexConfig(BaseModel):
    """Top-level configuration document."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    cooldown: CooldownSettings = Field(default_factory=CooldownSettings)
    guilds: dict[str, CooldownSettings] = Field(default_factory=dict)

    def cooldown_policy(self) -> GuildCooldownPolicy:
        """Build the per-guild cooldown policy described by this configuration.

        Returns:
            GuildCooldownPolicy: Policy with the default rule and guild overrides.
        """

        return GuildCooldownPolicy(
            default=self.cooldown.to_rule(),
            per_guild={guild_id: settings.to_rule() for guild_id, settings in self.guilds.items()},
        )

    def resolve_paths(self, base_dir: Path) -> StickerdexConfig:
        """Return a copy whose relative catalog root is anchored at ``base_dir``.

        Args:
            base_dir: Directory relative paths are interpreted against.

        Returns:
            StickerdexConfig: Updated configuration copy.
        """

        root = self.catalog.root.expanduser()
        if root.is_absolute():
            return self
        catalog = self.catalog.model_copy(update={"root": base_dir / root})
        return self.model_copy(update={"catalog": catalog})


def _read_toml(path: Path) -> Mapping[str, Any]:
    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration at {path} is not valid TOML: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Failed to read configuration at {path}: {exc}") from exc


def load_config(path: Path | None = None) -> StickerdexConfig:
    """Load configuration from a TOML document.

    A missing file yields the defaults. Relative paths inside the document are
    resolved against the document's directory.

    Args:
        path: TOML document to read. Defaults to :data:`DEFAULT_CONFIG_FILENAME`
            in the working directory.

    Returns:
        StickerdexConfig: Validated configuration.

    Raises:
        ConfigError: If the document cannot be parsed or fails validation.
    """

    config_path = path if path is not None else Path(DEFAULT_CONFIG_FILENAME)
    if not config_path.exists():
        return StickerdexConfig()
    data = _read_toml(config_path)
    try:
        config = StickerdexConfig.model_validate(dict(data))
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration at {config_path}:\n{exc}") from exc
    return config.resolve_paths(config_path.resolve().parent)


__all__ = [
    "CatalogSettings",
    "ConfigError",
    "CooldownSettings",
    "DEFAULT_CONFIG_FILENAME",
    "StickerdexConfig",
    "load_config",
]

"""Configuration for Minions.

Settings live in ``~/.minions/config.json`` and can be overridden by
``MINIONS_*`` environment variables. The database key reads ``MINIONS_DB``,
the same variable the CLI ``--db`` option honours.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, ValidationError
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict

ENV_PREFIX = "MINIONS_"

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when the config file cannot be read as a settings object."""


class MinionsSettings(BaseSettings):
    """User-level settings."""

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        extra="ignore",
    )

    data_dir: Path = Field(default_factory=lambda: Path.home() / ".minions")
    db_key: str = Field(
        default="default",
        validation_alias=AliasChoices(f"{ENV_PREFIX}DB", "db_key"),
    )
    app_key: str = "minionmanagementapp"
    max_dependencies: int = Field(default=10, ge=1)
    log_level: str = "WARNING"

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Environment variables override config file entries.
        return (env_settings, init_settings, dotenv_settings, file_secret_settings)

    def database_path(self, db_key: str | None = None) -> Path:
        """Path of the JSON document holding one database's tables."""
        return self.data_dir / f"{self.app_key}_{db_key or self.db_key}.json"


def get_config_dir() -> Path:
    """Get the Minions config directory."""
    override = os.environ.get(f"{ENV_PREFIX}CONFIG_DIR")
    return Path(override) if override else Path.home() / ".minions"


def _read_config_file(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root in {path} must be an object")
    return data


def get_settings() -> MinionsSettings:
    """Load settings from the config file, with env overrides on top.

    A config file that cannot be parsed or validated is reported as a
    warning and replaced by the defaults, so a broken file never locks
    the CLI out.
    """
    config_file = get_config_dir() / "config.json"
    try:
        return MinionsSettings(**_read_config_file(config_file))
    except (ConfigError, ValidationError) as e:
        logger.warning("Ignoring config file %s: %s", config_file, e)
        return MinionsSettings()


def save_settings(settings: MinionsSettings) -> None:
    """Save settings to the config file."""
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "config.json").write_text(
        json.dumps(settings.model_dump(mode="json"), indent=2),
        encoding="utf-8",
    )

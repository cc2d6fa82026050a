"""User configuration for saferm.

This module provides the configuration model and I/O functions for the
recycle bin: where it lives, how long items are kept, and whether a
confirmation is required before expired items are purged.

Configuration is stored in ~/.config/saferm/config.toml
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from saferm.core.paths import get_config_path, get_default_recycle_dir

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 30


class SafermConfig(BaseModel):
    """Configuration for the recycle bin.

    Attributes:
        retention_days: Number of days before items are purged from the recycle bin.
            Items are only purged when saferm is invoked.
        safe_mode: Prompt for confirmation before purging expired items.
        recycle_dir: Location of the recycle bin directory.
    """

    model_config = ConfigDict(extra="forbid")

    retention_days: Annotated[
        int,
        Field(ge=0, description="Days before staged items expire"),
    ] = DEFAULT_RETENTION_DAYS
    safe_mode: Annotated[
        bool,
        Field(description="Confirm before purging expired items"),
    ] = False
    recycle_dir: Annotated[
        Path,
        Field(default_factory=get_default_recycle_dir, description="Recycle bin directory"),
    ]

    def with_overrides(
        self,
        *,
        retention_days: int | None = None,
        safe_mode: bool | None = None,
        recycle_dir: Path | None = None,
    ) -> "SafermConfig":
        """Return a copy with command-line overrides applied.

        Overrides set to None keep the configured value.

        Raises:
            ConfigError: If an override fails validation.
        """
        data = self.model_dump()
        if retention_days is not None:
            data["retention_days"] = retention_days
        if safe_mode is not None:
            data["safe_mode"] = safe_mode
        if recycle_dir is not None:
            data["recycle_dir"] = recycle_dir
        try:
            return SafermConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid option: {e}") from e


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> SafermConfig:
    """Load configuration from a TOML file.

    A missing file is not an error: the defaults are returned.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated SafermConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return SafermConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    if "recycle_dir" in data and isinstance(data["recycle_dir"], str):
        data["recycle_dir"] = Path(data["recycle_dir"]).expanduser()

    try:
        return SafermConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def save_config(config: SafermConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The SafermConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: SafermConfig) -> dict[str, object]:
    """Convert SafermConfig to a dictionary for TOML serialization.

    Args:
        config: The SafermConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return {
        "retention_days": config.retention_days,
        "safe_mode": config.safe_mode,
        "recycle_dir": str(config.recycle_dir),
    }

"""Application configuration and settings.

This module provides the configuration model and I/O functions for
datrain. Settings are grouped by area:

- explorer: prompt label and listing column widths
- usb: external imaging tool and command timeout
- sync: OneDrive mirroring and download cache locations

Configuration is stored in ~/.config/datrain/config.toml. A missing file
means "use the defaults"; a malformed one is an error.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from datrain.core.paths import get_config_path

logger = logging.getLogger(__name__)


class ExplorerSettings(BaseModel):
    """Settings for the interactive explorer.

    Attributes:
        prompt_label: Text shown before the current directory in the prompt.
        name_width: Column width of the name field in listings.
        size_width: Column width of the size field in listings.
    """

    model_config = ConfigDict(extra="forbid")

    prompt_label: Annotated[str, Field(min_length=1)] = "RuForUs"
    name_width: Annotated[int, Field(ge=8, le=256)] = 40
    size_width: Annotated[int, Field(ge=4, le=32)] = 10


class UsbSettings(BaseModel):
    """Settings for removable-media helpers.

    Attributes:
        bootable_tool: Executable that writes a disk image to a device.
        command_timeout: Timeout in seconds for device queries and ejects.
    """

    model_config = ConfigDict(extra="forbid")

    bootable_tool: Annotated[str, Field(min_length=1)] = "rufus_usb"
    command_timeout: Annotated[int, Field(ge=1, le=3600)] = 60


class SyncSettings(BaseModel):
    """Settings for folder mirroring and the download cache.

    Attributes:
        source_dir: Directory whose plain files are mirrored to OneDrive.
        target_dir: Explicit OneDrive folder. None = detect from environment.
        downloads_dir: Directory scanned by the download cache. None = ~/Downloads.
        cache_dir: Directory new downloads are cached into. None = ~/DownloadCache.
        detector: Optional command that vets a file before caching. The file
            path is appended as the last argument.
    """

    model_config = ConfigDict(extra="forbid")

    source_dir: str = "./cache_to_onedrive"
    target_dir: str | None = None
    downloads_dir: str | None = None
    cache_dir: str | None = None
    detector: list[str] | None = None


class DatrainConfig(BaseModel):
    """Top-level datrain configuration."""

    model_config = ConfigDict(extra="forbid")

    explorer: ExplorerSettings = Field(default_factory=ExplorerSettings)
    usb: UsbSettings = Field(default_factory=UsbSettings)
    sync: SyncSettings = Field(default_factory=SyncSettings)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file is not valid TOML."""


class ConfigValidationError(ConfigError):
    """Raised when the config file content doesn't match the schema."""


def load_config(path: Path | None = None) -> DatrainConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated DatrainConfig. Defaults if the file does not exist.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
        ConfigError: If the file exists but cannot be read.
    """
    config_path = path or get_config_path()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        logger.debug("No config at %s, using defaults", config_path)
        return DatrainConfig()
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return DatrainConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: DatrainConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The DatrainConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

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
            tomli_w.dump(config_to_dict(config), f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: DatrainConfig) -> dict[str, object]:
    """Convert DatrainConfig to a dictionary for TOML serialization.

    TOML has no null, so unset optional values are omitted.

    Args:
        config: The DatrainConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    return config.model_dump(exclude_none=True)

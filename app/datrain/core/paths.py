"""XDG-compliant path management for datrain.

This module provides standardized paths following the XDG Base Directory
Specification for configuration storage, plus the home-relative default
locations the sync helpers work with.

XDG defaults:
- Config: ~/.config/datrain/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "datrain"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/datrain/ (or XDG_CONFIG_HOME/datrain/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/datrain/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/datrain/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_default_downloads_dir() -> Path:
    """Get the directory the download cache reads from.

    Returns:
        Path to ~/Downloads.
    """
    return Path.home() / "Downloads"


def get_default_download_cache_dir() -> Path:
    """Get the directory the download cache writes to.

    Returns:
        Path to ~/DownloadCache.
    """
    return Path.home() / "DownloadCache"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Returns:
        Path to the configuration directory.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")

"""XDG-compliant path management for caskforge.

This module provides standardized paths following the XDG Base Directory
Specification for configuration, state, and cache storage, plus the
install locations applications and their binaries are placed into.

XDG defaults:
- Config: ~/.config/caskforge/
- State: ~/.local/state/caskforge/
- Cache: ~/.cache/caskforge/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "caskforge"

DEFAULT_APPDIR = Path("/Applications")
DEFAULT_BINDIR = Path("/opt/homebrew/bin")

APPDIR_ENV = "CASKFORGE_APPDIR"
BINDIR_ENV = "CASKFORGE_BINDIR"


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
        Path to ~/.config/caskforge/ (or XDG_CONFIG_HOME/caskforge/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes install receipts that must persist between runs
    but are not configuration.

    Returns:
        Path to ~/.local/state/caskforge/ (or XDG_STATE_HOME/caskforge/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_cache_dir() -> Path:
    """Get the cache directory path.

    Returns:
        Path to ~/.cache/caskforge/ (or XDG_CACHE_HOME/caskforge/).
    """
    return _get_xdg_dir("XDG_CACHE_HOME", ".cache")


def get_user_recipes_dir() -> Path:
    """Get the directory holding user-supplied recipes.

    Returns:
        Path to ~/.config/caskforge/recipes/.
    """
    return get_config_dir() / "recipes"


def get_receipts_dir() -> Path:
    """Get the directory holding install receipts.

    Returns:
        Path to ~/.local/state/caskforge/receipts/.
    """
    return get_state_dir() / "receipts"


def get_staging_root() -> Path:
    """Get the root under which per-attempt staging directories are created.

    Returns:
        Path to ~/.cache/caskforge/staging/.
    """
    return get_cache_dir() / "staging"


def get_staging_dir(token: str, version: str) -> Path:
    """Get the staging directory for one install attempt.

    Args:
        token: Recipe token (e.g., "trackweight").
        version: Recipe version (e.g., "1.0.3").

    Returns:
        Path to ~/.cache/caskforge/staging/<token>-<version>/.
    """
    return get_staging_root() / f"{token}-{version}"


def get_appdir() -> Path:
    """Get the directory applications are installed into.

    Returns:
        CASKFORGE_APPDIR if set, otherwise /Applications.
    """
    override = os.environ.get(APPDIR_ENV)
    return Path(override) if override else DEFAULT_APPDIR


def get_bindir() -> Path:
    """Get the directory application binaries are linked into.

    Returns:
        CASKFORGE_BINDIR if set, otherwise /opt/homebrew/bin.
    """
    override = os.environ.get(BINDIR_ENV)
    return Path(override) if override else DEFAULT_BINDIR


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


def ensure_receipts_dir() -> Path:
    """Create the receipts directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_receipts_dir(), "receipts")

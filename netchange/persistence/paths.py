"""Resolution of the directory holding the persisted network state.

Fallback chain: explicit override, ``NETCHANGE_STATE_DIR``, the platform
data directory, the cache directory, the config directory and finally the
current working directory. The first candidate that exists or can be
created wins.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path

from netchange.utils.env import env_is_set, get_env

logger = logging.getLogger(__name__)

APP_NAME = "netchange"
STATE_FILENAME = "network_state"


def _base_dirs() -> list[Path]:
    """Return data, cache and config base directories for this platform."""
    home = Path.home()
    if sys.platform == "win32":
        appdata = Path(os.environ.get("APPDATA", home / "AppData" / "Roaming"))
        local = Path(os.environ.get("LOCALAPPDATA", home / "AppData" / "Local"))
        return [appdata, local, appdata]
    if sys.platform == "darwin":
        library = home / "Library"
        return [
            library / "Application Support",
            library / "Caches",
            library / "Preferences",
        ]
    return [
        Path(os.environ.get("XDG_DATA_HOME") or home / ".local" / "share"),
        Path(os.environ.get("XDG_CACHE_HOME") or home / ".cache"),
        Path(os.environ.get("XDG_CONFIG_HOME") or home / ".config"),
    ]


def _usable(directory: Path) -> bool:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.debug(f"Cannot use {directory}: {e}")
        return False
    return os.access(directory, os.W_OK)


def resolve_state_dir(override: Path | None = None) -> Path:
    """Return the directory the state file lives in.

    Args:
        override: Directory to use instead of the fallback chain.

    Returns
    -------
        An existing, writable directory (or the current directory as the
        last resort).
    """
    if override is not None:
        candidates = [Path(override)]
    elif env_is_set("NETCHANGE_STATE_DIR"):
        candidates = [get_env("NETCHANGE_STATE_DIR", as_type=Path)]
    else:
        candidates = [base / APP_NAME for base in _base_dirs()]

    for candidate in candidates:
        if _usable(candidate):
            return candidate

    logger.warning("No writable state directory found, using current directory")
    return Path.cwd()


def state_file_path(override: Path | None = None) -> Path:
    """Return the full path of the persisted state file."""
    return resolve_state_dir(override) / STATE_FILENAME

"""Per-user data and config directory resolution.

Snapshots live under ``<data dir>/ota/jira-queries`` and credentials under
``<config dir>/ota``, the same places earlier releases of the tool used, so
existing watches are picked up unchanged.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping, Optional

APP_NAMESPACE = "ota"
QUERIES_DIR_NAME = "jira-queries"


def user_data_dir(
    env: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return the platform's per-user persistent data directory."""
    env = os.environ if env is None else env
    platform = platform or sys.platform
    home = home or Path.home()

    if platform == "win32":
        for var in ("LOCALAPPDATA", "APPDATA"):
            if env.get(var):
                return Path(env[var])
        return home / "AppData" / "Local"
    if platform == "darwin":
        return home / "Library" / "Application Support"

    xdg = env.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg)
    return home / ".local" / "share"


def user_config_dir(
    env: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return the platform's per-user configuration directory."""
    env = os.environ if env is None else env
    platform = platform or sys.platform
    home = home or Path.home()

    if platform == "win32":
        if env.get("APPDATA"):
            return Path(env["APPDATA"])
        return home / "AppData" / "Roaming"
    if platform == "darwin":
        return home / "Library" / "Application Support"

    xdg = env.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    return home / ".config"


def default_queries_dir(**kwargs) -> Path:
    """``<data dir>/ota/jira-queries``; not created here."""
    return user_data_dir(**kwargs) / APP_NAMESPACE / QUERIES_DIR_NAME


def app_config_dir(**kwargs) -> Path:
    """``<config dir>/ota``; not created here."""
    return user_config_dir(**kwargs) / APP_NAMESPACE

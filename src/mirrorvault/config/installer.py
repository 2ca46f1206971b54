#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

import os
import sys
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "mirrorvault"
CONFIG_FILENAME = "config.toml"
CONFIG_ENV = "MIRRORVAULT_CONFIG"
XDG_CONFIG_ENV = "XDG_CONFIG_HOME"

DEFAULT_PATHS_FILE = "paths.txt"
DEFAULT_PUBLIC_KEY_FILE = "public_key.txt"
DEFAULT_STAGING_DIR = "laptop-backup"


def _user_config_dir() -> Path:
    xdg_override = os.environ.get(XDG_CONFIG_ENV)
    if xdg_override:
        return Path(xdg_override) / APP_NAME
    if sys.platform == "darwin":
        return Path.home() / ".config" / APP_NAME
    return Path(user_config_dir(APP_NAME, appauthor=False))


def user_config_path() -> Path:
    return _user_config_dir() / CONFIG_FILENAME


def resolve_config_path(path: str | Path | None = None) -> Path | None:
    """Pick the TOML config to load, or None to run on built-in defaults.

    An explicit path or ``MIRRORVAULT_CONFIG`` must exist; the per-user file
    is only used when present.
    """
    if path:
        explicit = Path(path).expanduser()
        if not explicit.is_file():
            raise ValueError(f"config file not found: {explicit}")
        return explicit
    env_path = os.environ.get(CONFIG_ENV)
    if env_path:
        from_env = Path(env_path).expanduser()
        if not from_env.is_file():
            raise ValueError(f"config file from {CONFIG_ENV} not found: {from_env}")
        return from_env
    candidate = user_config_path()
    if candidate.is_file():
        return candidate
    return None

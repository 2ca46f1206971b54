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

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from .installer import (
    DEFAULT_PATHS_FILE,
    DEFAULT_PUBLIC_KEY_FILE,
    DEFAULT_STAGING_DIR,
    resolve_config_path,
)


@dataclass(frozen=True)
class BackupSettings:
    paths_file: Path = Path(DEFAULT_PATHS_FILE)
    public_key_file: Path = Path(DEFAULT_PUBLIC_KEY_FILE)
    staging_dir: Path = Path(DEFAULT_STAGING_DIR)
    output_dir: Path | None = None


@dataclass(frozen=True)
class UiDefaults:
    quiet: bool = False
    no_color: bool = False


@dataclass(frozen=True)
class AppConfig:
    backup: BackupSettings = field(default_factory=BackupSettings)
    ui: UiDefaults = field(default_factory=UiDefaults)
    source: Path | None = None


def load_app_config(path: str | Path | None = None) -> AppConfig:
    config_path = resolve_config_path(path)
    if config_path is None:
        return AppConfig()
    data = _load_toml(config_path)
    return AppConfig(
        backup=_parse_backup_settings(_get_dict(data, "backup")),
        ui=_parse_ui_defaults(_get_dict(data, "ui")),
        source=config_path,
    )


def apply_overrides(
    settings: BackupSettings,
    *,
    paths_file: str | Path | None = None,
    public_key_file: str | Path | None = None,
    staging_dir: str | Path | None = None,
    output_dir: str | Path | None = None,
) -> BackupSettings:
    updates: dict[str, Path] = {}
    if paths_file:
        updates["paths_file"] = Path(paths_file).expanduser()
    if public_key_file:
        updates["public_key_file"] = Path(public_key_file).expanduser()
    if staging_dir:
        updates["staging_dir"] = Path(staging_dir).expanduser()
    if output_dir:
        updates["output_dir"] = Path(output_dir).expanduser()
    if not updates:
        return settings
    return replace(settings, **updates)


def load_source_paths(paths_file: str | Path) -> list[str]:
    """Read one source path per line, skipping blank lines and ``#`` comments."""
    paths_file = Path(paths_file)
    try:
        text = paths_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(f"could not read paths from {paths_file}: {_reason(exc)}") from exc
    paths: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        paths.append(stripped)
    return paths


def load_public_key(public_key_file: str | Path) -> str:
    public_key_file = Path(public_key_file)
    try:
        text = public_key_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise ValueError(
            f"could not read public key from {public_key_file}: {_reason(exc)}"
        ) from exc
    public_key = text.strip()
    if not public_key:
        raise ValueError(f"public key file {public_key_file} is empty")
    return public_key


def _parse_backup_settings(cfg: dict[str, object]) -> BackupSettings:
    defaults = BackupSettings()
    return BackupSettings(
        paths_file=_parse_path(cfg.get("paths_file"), field="backup.paths_file")
        or defaults.paths_file,
        public_key_file=_parse_path(cfg.get("public_key_file"), field="backup.public_key_file")
        or defaults.public_key_file,
        staging_dir=_parse_path(cfg.get("staging_dir"), field="backup.staging_dir")
        or defaults.staging_dir,
        output_dir=_parse_path(cfg.get("output_dir"), field="backup.output_dir"),
    )


def _parse_ui_defaults(cfg: dict[str, object]) -> UiDefaults:
    return UiDefaults(
        quiet=_parse_bool(cfg.get("quiet"), field="ui.quiet", default=False),
        no_color=_parse_bool(cfg.get("no_color"), field="ui.no_color", default=False),
    )


def _load_toml(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        try:
            return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"invalid config file {path}: {exc}") from exc


def _get_dict(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"[{key}] must be a table")
    return value


def _parse_path(value: object, *, field: str) -> Path | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    normalized = value.strip()
    if not normalized:
        return None
    return Path(normalized).expanduser()


def _parse_bool(value: object, *, field: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"{field} must be a boolean")
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
        raise ValueError(f"{field} must be a boolean")
    raise ValueError(f"{field} must be a boolean")


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc)

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

from dataclasses import dataclass
from pathlib import Path

from ...core.models import MirrorIssue


@dataclass(frozen=True)
class SourceFailure:
    source: str
    detail: str


@dataclass(frozen=True)
class BackupResult:
    encrypted_path: Path
    sources: tuple[str, ...]
    copied_files: int
    issues: tuple[MirrorIssue, ...]
    failed_sources: tuple[SourceFailure, ...]
    cleanup_error: str | None = None


@dataclass
class BackupArgs:
    """Typed container for backup command arguments."""

    config: str | None = None
    paths_file: str | None = None
    public_key_file: str | None = None
    staging_dir: str | None = None
    output_dir: str | None = None
    debug: bool = False
    quiet: bool = False

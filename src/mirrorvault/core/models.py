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

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class IssueKind(str, Enum):
    SKIPPED = "skipped"
    CYCLE = "cycle"
    COPY_FAILED = "copy_failed"


@dataclass(frozen=True)
class MirrorIssue:
    """A non-fatal event recorded while mirroring one source."""

    path: Path
    kind: IssueKind
    detail: str

    def describe(self) -> str:
        if self.kind is IssueKind.COPY_FAILED:
            return f"failed to copy {self.path}: {self.detail}"
        if self.kind is IssueKind.CYCLE:
            return f"skipping directory {self.path}: {self.detail}"
        return f"skipping {self.path}: {self.detail}"


@dataclass
class MirrorReport:
    source: Path
    staging_root: Path
    copied: list[Path] = field(default_factory=list)
    directories: list[Path] = field(default_factory=list)
    issues: list[MirrorIssue] = field(default_factory=list)

    @property
    def copied_count(self) -> int:
        return len(self.copied)

    @property
    def failures(self) -> list[MirrorIssue]:
        return [issue for issue in self.issues if issue.kind is IssueKind.COPY_FAILED]

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(frozen=True)
class ArchiveResult:
    archive_path: Path
    file_count: int
    cleanup_error: str | None = None


@dataclass
class ArchiveError(RuntimeError):
    staging_root: Path
    detail: str

    def __str__(self) -> str:
        message = self.detail.strip() or "unknown error"
        return f"failed to archive {self.staging_root}: {message}"

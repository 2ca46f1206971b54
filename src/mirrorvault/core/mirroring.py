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

"""Copy source files and directories into a staging tree keyed by absolute path.

A source at ``/home/me/notes`` lands at ``<staging>/home/me/notes``. Only the
filesystem anchor is stripped, so sources from different places never collide.
Source paths are normalized textually with ``os.path.normpath`` before they are
read, so ``/x/link/..`` means ``/x`` for both listing and placement. The
staging root itself is never descended into. Per-file copy failures are
recorded on the returned report; anything that prevents walking a directory
raises.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Callable
from pathlib import Path

from .models import IssueKind, MirrorIssue, MirrorReport

FileCallback = Callable[[Path], None]


def mirror_destination(path: str | Path, staging_root: str | Path) -> Path:
    """Return where ``path`` is mirrored under ``staging_root``."""
    path = Path(path)
    if not path.is_absolute():
        raise ValueError(f"source path '{path}' is not absolute")
    normalized = Path(os.path.normpath(path))
    return Path(staging_root) / normalized.relative_to(normalized.anchor)


def mirror(
    source: str | Path,
    staging_root: str | Path,
    *,
    on_file: FileCallback | None = None,
) -> MirrorReport:
    """Mirror ``source`` (a file or a directory tree) into ``staging_root``.

    Raises ValueError for a relative source and FileNotFoundError when the
    source is neither a file nor a directory; both are checked before anything
    is written, as is ValueError for a source inside the staging root. OSError
    from creating or listing directories propagates.
    """
    source = Path(source)
    staging_root = Path(staging_root)
    if not source.is_absolute():
        raise ValueError(f"source path '{source}' is not absolute")
    source = Path(os.path.normpath(source))
    staging_resolved = staging_root.resolve()
    if source.resolve().is_relative_to(staging_resolved):
        raise ValueError(f"source path '{source}' lies inside the staging directory")

    report = MirrorReport(source=source, staging_root=staging_root)
    if source.is_dir():
        _mirror_directory(
            source,
            staging_root,
            report,
            ancestors=(),
            skip=staging_resolved,
            on_file=on_file,
        )
    elif source.is_file():
        destination = _ensure_directory(mirror_destination(source.parent, staging_root), report)
        _copy_file(source, destination, report, on_file=on_file)
    else:
        raise FileNotFoundError(f"path or file '{source}' does not exist")
    return report


def _mirror_directory(
    directory: Path,
    staging_root: Path,
    report: MirrorReport,
    *,
    ancestors: tuple[Path, ...],
    skip: Path,
    on_file: FileCallback | None,
) -> None:
    walk_path = (*ancestors, directory.resolve(strict=True))
    destination = _ensure_directory(mirror_destination(directory, staging_root), report)

    with os.scandir(directory) as scan:
        entries = sorted(scan, key=lambda entry: entry.name)

    for entry in entries:
        child = directory / entry.name
        try:
            is_dir = entry.is_dir()
            is_file = not is_dir and entry.is_file()
        except OSError as exc:
            report.issues.append(
                MirrorIssue(child, IssueKind.COPY_FAILED, f"cannot read entry: {_reason(exc)}")
            )
            continue

        if is_dir:
            resolved = child.resolve(strict=True)
            if resolved in walk_path:
                report.issues.append(
                    MirrorIssue(child, IssueKind.CYCLE, f"symlink cycle back to {resolved}")
                )
                continue
            if resolved == skip:
                report.issues.append(MirrorIssue(child, IssueKind.SKIPPED, "staging directory"))
                continue
            _mirror_directory(
                child,
                staging_root,
                report,
                ancestors=walk_path,
                skip=skip,
                on_file=on_file,
            )
        elif is_file:
            _copy_file(child, destination, report, on_file=on_file)
        else:
            report.issues.append(MirrorIssue(child, IssueKind.SKIPPED, "not a regular file"))


def _ensure_directory(path: Path, report: MirrorReport) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    report.directories.append(path)
    return path


def _copy_file(
    source: Path,
    destination_dir: Path,
    report: MirrorReport,
    *,
    on_file: FileCallback | None,
) -> None:
    target = destination_dir / source.name
    try:
        shutil.copyfile(source, target)
    except OSError as exc:
        report.issues.append(MirrorIssue(source, IssueKind.COPY_FAILED, _reason(exc)))
        return
    report.copied.append(target)
    if on_file is not None:
        on_file(target)


def _reason(exc: OSError) -> str:
    return exc.strerror or str(exc) or exc.__class__.__name__

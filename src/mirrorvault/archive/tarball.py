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
import shutil
import tarfile
from datetime import datetime
from pathlib import Path

from ..core.models import ArchiveError, ArchiveResult

ARCHIVE_SUFFIX = ".tar"
TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def archive_name(staging_root: str | Path, now: datetime | None = None) -> str:
    """Return ``<staging name>-<local timestamp>.tar``."""
    moment = now or datetime.now()
    return f"{Path(staging_root).name}-{moment.strftime(TIMESTAMP_FORMAT)}{ARCHIVE_SUFFIX}"


def check_staging_root(
    staging_root: str | Path,
    *,
    output_dir: str | Path | None = None,
) -> None:
    """Refuse a staging root whose removal would take other files with it.

    The staging root is deleted after archiving, so it must have a real name,
    must not be the working directory or one of its ancestors, and must not
    hold the archive's output directory.
    """
    staging_root = Path(staging_root)
    if Path(os.path.normpath(staging_root)).name in ("", ".", ".."):
        raise ArchiveError(staging_root=staging_root, detail="staging directory needs a name")
    resolved = staging_root.resolve()
    if Path.cwd().resolve().is_relative_to(resolved):
        raise ArchiveError(
            staging_root=staging_root,
            detail="staging directory contains the working directory",
        )
    if output_dir is not None and Path(output_dir).resolve().is_relative_to(resolved):
        raise ArchiveError(
            staging_root=staging_root,
            detail=f"output directory {output_dir} lies inside the staging directory",
        )


def archive_staging_dir(
    staging_root: str | Path,
    *,
    output_dir: str | Path | None = None,
    now: datetime | None = None,
) -> ArchiveResult:
    """Write ``staging_root`` into a timestamped tar file, then remove it.

    Raises ArchiveError before writing anything when removing the staging
    directory would be unsafe (see ``check_staging_root``). The staging
    directory is kept whenever the archive could not be written.
    Failing to remove it afterwards does not invalidate the archive and is
    reported through ``ArchiveResult.cleanup_error``.
    """
    staging_root = Path(staging_root)
    check_staging_root(staging_root, output_dir=output_dir)
    if not staging_root.is_dir():
        raise ArchiveError(staging_root=staging_root, detail="staging directory does not exist")

    target_dir = Path(output_dir) if output_dir is not None else staging_root.parent
    archive_path = target_dir / archive_name(staging_root, now)

    try:
        file_count = _write_archive(staging_root, archive_path)
    except FileExistsError as exc:
        raise ArchiveError(
            staging_root=staging_root,
            detail=f"archive {archive_path} already exists",
        ) from exc
    except (OSError, tarfile.TarError) as exc:
        archive_path.unlink(missing_ok=True)
        raise ArchiveError(staging_root=staging_root, detail=str(exc)) from exc

    cleanup_error = None
    try:
        shutil.rmtree(staging_root)
    except OSError as exc:
        cleanup_error = f"failed to remove staging directory {staging_root}: {exc}"
    return ArchiveResult(
        archive_path=archive_path,
        file_count=file_count,
        cleanup_error=cleanup_error,
    )


def _write_archive(staging_root: Path, archive_path: Path) -> int:
    file_count = 0

    def _count(member: tarfile.TarInfo) -> tarfile.TarInfo:
        nonlocal file_count
        if member.isfile():
            file_count += 1
        return member

    with tarfile.open(archive_path, "x") as tar:
        tar.add(staging_root, arcname=staging_root.name, recursive=True, filter=_count)
    return file_count

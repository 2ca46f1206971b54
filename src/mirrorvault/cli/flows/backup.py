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

from rich.progress import Progress, TaskID

from ...archive.tarball import archive_staging_dir, check_staging_root
from ...config import (
    BackupSettings,
    apply_overrides,
    load_app_config,
    load_public_key,
    load_source_paths,
)
from ...core.mirroring import mirror
from ...core.models import IssueKind, MirrorIssue
from ...crypto.age_runtime import encrypt_file
from ..core.log import _warn
from ..core.types import BackupArgs, BackupResult, SourceFailure
from ..ui import configure_ui, print_completion_panel, progress, status

COPY_UPDATE_INTERVAL = 25


@dataclass
class _CopyTracker:
    progress: Progress | None
    task_id: TaskID | None
    copied: int = 0

    def tick(self, _target: Path) -> None:
        self.copied += 1
        if self.progress is None or self.task_id is None:
            return
        if self.copied == 1 or self.copied % COPY_UPDATE_INTERVAL == 0:
            self.progress.update(
                self.task_id,
                description=f"Copying into staging... ({self.copied} files)",
            )


def run_backup_command(args: BackupArgs) -> BackupResult:
    config = load_app_config(args.config)
    if config.ui.no_color:
        configure_ui(no_color=True)
    settings = apply_overrides(
        config.backup,
        paths_file=args.paths_file,
        public_key_file=args.public_key_file,
        staging_dir=args.staging_dir,
        output_dir=args.output_dir,
    )
    return run_backup(settings, quiet=args.quiet or config.ui.quiet)


def run_backup(settings: BackupSettings, *, quiet: bool) -> BackupResult:
    """Mirror every configured source, archive the staging tree, then encrypt it.

    Configuration problems abort before anything is copied. A source that
    cannot be mirrored is reported and skipped; archive and encryption errors
    propagate to the caller.
    """
    sources = load_source_paths(settings.paths_file)
    public_key = load_public_key(settings.public_key_file)
    check_staging_root(settings.staging_dir, output_dir=settings.output_dir)
    if not sources:
        _warn(f"no source paths listed in {settings.paths_file}", quiet=quiet)

    issues, failures, copied = _mirror_sources(sources, settings.staging_dir, quiet=quiet)

    with status("Archiving staging directory...", quiet=quiet):
        archived = archive_staging_dir(settings.staging_dir, output_dir=settings.output_dir)
    if archived.cleanup_error:
        _warn(archived.cleanup_error, quiet=False)

    with status("Encrypting archive...", quiet=quiet):
        encrypted_path = encrypt_file(archived.archive_path, public_key)

    result = BackupResult(
        encrypted_path=encrypted_path,
        sources=tuple(sources),
        copied_files=copied,
        issues=tuple(issues),
        failed_sources=tuple(failures),
        cleanup_error=archived.cleanup_error,
    )
    print_completion_panel("Backup complete", _summary_rows(result), quiet=quiet)
    return result


def _mirror_sources(
    sources: list[str],
    staging_root: Path,
    *,
    quiet: bool,
) -> tuple[list[MirrorIssue], list[SourceFailure], int]:
    issues: list[MirrorIssue] = []
    failures: list[SourceFailure] = []
    with progress(quiet=quiet) as progress_bar:
        task_id = (
            progress_bar.add_task("Copying into staging...", total=None)
            if progress_bar is not None
            else None
        )
        tracker = _CopyTracker(progress_bar, task_id)
        for source in sources:
            try:
                report = mirror(source, staging_root, on_file=tracker.tick)
            except (ValueError, OSError) as exc:
                failures.append(SourceFailure(source=source, detail=str(exc)))
                _warn(f"error retrieving file/folder {source}: {exc}", quiet=False)
                continue
            for issue in report.issues:
                _warn(issue.describe(), quiet=quiet and issue.kind is not IssueKind.COPY_FAILED)
            issues.extend(report.issues)
    return issues, failures, tracker.copied


def _summary_rows(result: BackupResult) -> list[tuple[str, str]]:
    rows = [
        ("Encrypted archive", str(result.encrypted_path)),
        ("Sources", str(len(result.sources))),
        ("Files copied", str(result.copied_files)),
    ]
    if result.issues:
        rows.append(("Entries skipped", str(len(result.issues))))
    if result.failed_sources:
        rows.append(("Failed sources", ", ".join(f.source for f in result.failed_sources)))
    return rows

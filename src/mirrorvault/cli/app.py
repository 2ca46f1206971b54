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

import functools

import typer

from .core.common import _get_version, _run_cli
from .core.types import BackupArgs
from .flows.backup import run_backup_command
from .ui import configure_ui, console

_HELP = (
    "Mirror the configured paths into a staging folder, archive it and encrypt the "
    "archive to an age public key.\n\n"
    "With no options, sources are read from paths.txt and the recipient from "
    "public_key.txt in the current directory."
)

app = typer.Typer(add_completion=False, help=_HELP)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"mirrorvault {_get_version()}")
        raise typer.Exit()


@app.command(help=_HELP)
def backup(
    config: str | None = typer.Option(
        None,
        "--config",
        help="Use this TOML config file.",
        rich_help_panel="Config",
    ),
    paths_file: str | None = typer.Option(
        None,
        "--paths-file",
        help="File listing absolute source paths, one per line.",
        rich_help_panel="Inputs",
    ),
    key_file: str | None = typer.Option(
        None,
        "--key-file",
        help="File holding the age recipient (public key).",
        rich_help_panel="Encryption",
    ),
    staging_dir: str | None = typer.Option(
        None,
        "--staging-dir",
        help="Staging folder to build and archive (default: laptop-backup).",
        rich_help_panel="Outputs",
    ),
    output_dir: str | None = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Where to write the encrypted archive (default: next to the staging folder).",
        rich_help_panel="Outputs",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Hide non-error output.",
        rich_help_panel="Behavior",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output.",
        rich_help_panel="Behavior",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Show full tracebacks on failure.",
        rich_help_panel="Debug",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
        rich_help_panel="Info",
    ),
) -> None:
    _ = version
    configure_ui(no_color=no_color)
    args = BackupArgs(
        config=config,
        paths_file=paths_file,
        public_key_file=key_file,
        staging_dir=staging_dir,
        output_dir=output_dir,
        debug=debug,
        quiet=quiet,
    )
    _run_cli(functools.partial(run_backup_command, args), debug=debug)


def main() -> None:
    app()

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

import sys
from collections.abc import Sequence
from contextlib import contextmanager

from rich import box
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table
from rich.text import Text

from .state import UIContext, get_context, isatty

DEFAULT_CONTEXT = get_context()
THEME = DEFAULT_CONTEXT.theme
console = DEFAULT_CONTEXT.console
console_err = DEFAULT_CONTEXT.console_err


def _resolve_context(context: UIContext | None) -> UIContext:
    return context or DEFAULT_CONTEXT


def configure_ui(
    *,
    no_color: bool,
    no_animations: bool = False,
    context: UIContext | None = None,
) -> None:
    context = _resolve_context(context)
    context.animations_enabled = not no_animations
    context.console.no_color = no_color
    context.console_err.no_color = no_color


@contextmanager
def progress(*, quiet: bool, context: UIContext | None = None):
    context = _resolve_context(context)
    if quiet:
        yield None
        return
    force_render = isatty(sys.__stdout__, sys.stdout)
    columns = [TextColumn("[progress.description]{task.description}"), TimeElapsedColumn()]
    if context.animations_enabled:
        columns.insert(0, SpinnerColumn(style="accent"))
    progress_bar = Progress(
        *columns,
        console=context.console,
        transient=True,
        disable=not force_render,
    )
    with progress_bar:
        yield progress_bar


@contextmanager
def status(message: str, *, quiet: bool, context: UIContext | None = None):
    context = _resolve_context(context)
    if quiet:
        yield
        return
    context.console.print(f"[subtitle]{message}[/subtitle]")
    yield
    context.console.print(Text(f"✓ {message}", style="success"))


def build_kv_table(rows: Sequence[tuple[str, str]], *, title: str | None = None) -> Table:
    table = Table(title=title, show_header=False, box=box.SIMPLE, show_lines=False)
    table.add_column("Field", style="bold", no_wrap=True)
    table.add_column("Value")
    for key, value in rows:
        table.add_row(str(key), str(value))
    return table


def panel(title: str, renderable, *, style: str = "panel") -> Panel:
    return Panel(
        renderable,
        title=title,
        title_align="left",
        border_style=style,
        box=box.ROUNDED,
        padding=(1, 2),
    )


def print_completion_panel(
    title: str,
    rows: Sequence[tuple[str, str]],
    *,
    quiet: bool,
    context: UIContext | None = None,
) -> None:
    if quiet:
        return
    context = _resolve_context(context)
    context.console.print(panel(title, build_kv_table(rows), style="success"))


__all__ = [
    "THEME",
    "UIContext",
    "build_kv_table",
    "configure_ui",
    "console",
    "console_err",
    "panel",
    "print_completion_panel",
    "progress",
    "status",
]

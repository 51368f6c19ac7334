"""Cargo-style status output on stderr.

Status lines carry a right-aligned, bold green verb (``    Removing serde
from dependencies``); warnings, notes, and errors carry a coloured label.
Report tables go to stderr as plain lines, so stdout stays free for
machine-readable output such as ``config --format json``.
"""

from __future__ import annotations

from collections.abc import Sequence

import rich_click as click

_STATUS_WIDTH = 12


class ClickShell:
    """Production ``Shell`` writing through click so colour follows the terminal."""

    def __init__(self, *, color: bool | None = None) -> None:
        self.color = color

    def _labelled(self, label: str, colour: str, message: str) -> None:
        prefix = click.style(f"{label}:", fg=colour, bold=True)
        click.echo(f"{prefix} {message}", err=True, color=self.color)

    def status(self, action: str, message: str) -> None:
        verb = click.style(action.rjust(_STATUS_WIDTH), fg="green", bold=True)
        click.echo(f"{verb} {message}", err=True, color=self.color)

    def warn(self, message: str) -> None:
        self._labelled("warning", "yellow", message)

    def note(self, message: str) -> None:
        self._labelled("note", "cyan", message)

    def error(self, message: str) -> None:
        self._labelled("error", "red", message)

    def write_lines(self, lines: Sequence[str]) -> None:
        for line in lines:
            click.echo(line, err=True, color=self.color)


__all__ = ["ClickShell"]

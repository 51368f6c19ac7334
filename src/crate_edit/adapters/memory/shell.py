"""Recording ``Shell`` for assertions on user-facing output."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass
class ShellSpy:
    """Captures every shell call instead of printing it.

    Example:
        >>> spy = ShellSpy()
        >>> spy.status("Removing", "serde from dependencies")
        >>> spy.warn("aborting remove due to dry run")
        >>> spy.statuses, spy.warnings
        ([('Removing', 'serde from dependencies')], ['aborting remove due to dry run'])
    """

    statuses: list[tuple[str, str]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    notes: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)

    def status(self, action: str, message: str) -> None:
        self.statuses.append((action, message))

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def note(self, message: str) -> None:
        self.notes.append(message)

    def error(self, message: str) -> None:
        self.errors.append(message)

    def write_lines(self, lines: Sequence[str]) -> None:
        self.lines.extend(lines)


__all__ = ["ShellSpy"]

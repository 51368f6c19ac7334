"""Dependency table selectors."""

from __future__ import annotations

from dataclasses import dataclass

from .enums import DepKind

__all__ = ["DepTable"]


@dataclass(frozen=True, slots=True)
class DepTable:
    """Identify one dependency table: a kind plus an optional target platform.

    Example:
        >>> DepTable().to_table()
        ('dependencies',)
        >>> DepTable(DepKind.DEVELOPMENT, "cfg(unix)").to_table()
        ('target', 'cfg(unix)', 'dev-dependencies')
        >>> DepTable(DepKind.BUILD, "x86_64-pc-windows-gnu").section_label
        'build-dependencies for target `x86_64-pc-windows-gnu`'
    """

    kind: DepKind = DepKind.NORMAL
    target: str | None = None

    def to_table(self) -> tuple[str, ...]:
        if self.target is None:
            return (self.kind.value,)
        return ("target", self.target, self.kind.value)

    @property
    def section_label(self) -> str:
        """Human-readable table description for status lines."""
        if self.target is None:
            return self.kind.label
        return f"{self.kind.label} for target `{self.target}`"

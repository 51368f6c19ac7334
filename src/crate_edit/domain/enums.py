"""Type-safe domain enums for output formats, dependency kinds, and upgrade reasons."""

from __future__ import annotations

from enum import Enum


class OutputFormat(str, Enum):
    """Output format options for configuration display.

    Inherits from str to allow direct string comparison and Click integration.

    Attributes:
        HUMAN: Human-readable TOML-like output format.
        JSON: Machine-readable JSON output format.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


class DepKind(str, Enum):
    """Dependency table kinds; values are the manifest table names.

    Example:
        >>> DepKind.DEVELOPMENT.value
        'dev-dependencies'
        >>> DepKind.NORMAL.label
        'dependencies'
    """

    NORMAL = "dependencies"
    DEVELOPMENT = "dev-dependencies"
    BUILD = "build-dependencies"

    @property
    def label(self) -> str:
        """Table name used in user-facing messages."""
        return self.value


class Reason(str, Enum):
    """Why an upgrade left a requirement untouched.

    ``short`` is the text shown in the report's note column; ``long`` names
    the group in the summary of uninteresting rows.

    Example:
        >>> Reason.UNCHANGED.short
        ''
        >>> Reason.UNCHANGED.long
        'unchanged'
        >>> Reason.PINNED.short
        'pinned'
    """

    UNCHANGED = "unchanged"
    COMPATIBLE = "compatible"
    PINNED = "pinned"

    @property
    def short(self) -> str:
        return "" if self is Reason.UNCHANGED else self.value

    @property
    def long(self) -> str:
        return self.value


__all__ = [
    "DepKind",
    "OutputFormat",
    "Reason",
]

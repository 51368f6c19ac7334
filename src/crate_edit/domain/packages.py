"""Values reported by the package-resolution collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

__all__ = ["LockedPackage", "Package"]


@dataclass(frozen=True, slots=True)
class Package:
    """A workspace package whose manifest the engines will edit."""

    name: str
    manifest_path: Path


@dataclass(frozen=True, slots=True)
class LockedPackage:
    """One resolved ``name``/``version`` pair from the lockfile snapshot."""

    name: str
    version: str

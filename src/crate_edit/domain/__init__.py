"""Domain layer - pure manifest reasoning with no I/O or framework dependencies.

Contents:
    * :mod:`.semver` - Versions, comparators, and requirement matching
    * :mod:`.requirements` - Pin detection, minimal upgrades, lockfile lookup
    * :mod:`.dependency` - Parsed view of one manifest entry
    * :mod:`.tables` - Dependency table selectors
    * :mod:`.packages` - Values reported by package resolution
    * :mod:`.enums` - Domain enumerations (OutputFormat, DepKind, Reason)
    * :mod:`.errors` - Domain exception types
"""

from __future__ import annotations

from .dependency import Dependency, GitSource, PathSource, RegistrySource, Source, WorkspaceSource
from .enums import DepKind, OutputFormat, Reason
from .errors import (
    CollaboratorFailure,
    ConfigurationError,
    CrateEditError,
    DependencyNotFound,
    LockedViolation,
    ManifestNotFound,
    TableNotFound,
    UnparsableRequirement,
    UnsupportedDependency,
)
from .packages import LockedPackage, Package
from .requirements import find_locked_version, is_pinned, matches, minimal_upgrade, parse_dependency_spec
from .semver import Comparator, Op, Version, VersionReq
from .tables import DepTable

__all__ = [
    # Requirements
    "Comparator",
    "Op",
    "Version",
    "VersionReq",
    "find_locked_version",
    "is_pinned",
    "matches",
    "minimal_upgrade",
    "parse_dependency_spec",
    # Manifest entries
    "DepTable",
    "Dependency",
    "GitSource",
    "LockedPackage",
    "Package",
    "PathSource",
    "RegistrySource",
    "Source",
    "WorkspaceSource",
    # Enums
    "DepKind",
    "OutputFormat",
    "Reason",
    # Errors
    "CollaboratorFailure",
    "ConfigurationError",
    "CrateEditError",
    "DependencyNotFound",
    "LockedViolation",
    "ManifestNotFound",
    "TableNotFound",
    "UnparsableRequirement",
    "UnsupportedDependency",
]

"""Domain-specific exceptions for typed error handling at boundaries.

Every failure the engines surface names the dependency, table, or package it
concerns. CLI commands translate these types into exit codes; anything else
travels through ``lib_cli_exit_tools``.
"""

from __future__ import annotations


class CrateEditError(Exception):
    """Base class for all manifest editing failures.

    Example:
        >>> issubclass(ManifestNotFound, CrateEditError)
        True
    """


class ConfigurationError(CrateEditError):
    """Missing, invalid, or incomplete configuration.

    Raised when a configuration section fails validation. Typically caught
    at CLI boundaries to provide user-friendly error messages.

    Example:
        >>> err = ConfigurationError("registry.timeout must be positive")
        >>> str(err)
        'registry.timeout must be positive'
    """


class ManifestNotFound(CrateEditError):
    """No ``Cargo.toml`` exists at the requested location."""


class DependencyNotFound(CrateEditError):
    """A dependency name is absent from a table or from every processed table.

    Example:
        >>> err = DependencyNotFound("dependency does-not-exist doesn't exist")
        >>> str(err)
        "dependency does-not-exist doesn't exist"
    """


class TableNotFound(DependencyNotFound):
    """The dependency table addressed by a selector does not exist.

    A missing table necessarily means the dependency cannot be found either,
    so callers catching :class:`DependencyNotFound` see both.

    Example:
        >>> isinstance(TableNotFound("The table `dev-dependencies` could not be found."), DependencyNotFound)
        True
    """


class UnparsableRequirement(CrateEditError, ValueError):
    """A version requirement or version string failed to parse.

    Inherits from ValueError so generic parsing code can catch it.

    Example:
        >>> isinstance(UnparsableRequirement("unexpected character 'x'"), ValueError)
        True
    """


class UnsupportedDependency(CrateEditError):
    """A manifest entry has a shape the descriptor cannot interpret."""


class CollaboratorFailure(CrateEditError):
    """An external collaborator (cargo, registry index) failed."""


class LockedViolation(CrateEditError):
    """A change was required while the run demanded an unchanged manifest."""


__all__ = [
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

"""Parsed view of a single dependency entry.

A ``Dependency`` is a read-only projection of one manifest entry. The
authoritative state stays in the manifest document; edits go through
:mod:`crate_edit.adapters.manifest`.

Entries take two shapes in ``Cargo.toml``::

    serde = "1.0"
    tokio = { version = "1", features = ["rt"], optional = true }

The parser only depends on ``str`` and ``Mapping`` so it accepts both plain
values and ``tomlkit`` items.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .errors import UnsupportedDependency

__all__ = [
    "Dependency",
    "GitSource",
    "PathSource",
    "RegistrySource",
    "Source",
    "WorkspaceSource",
]


@dataclass(frozen=True, slots=True)
class RegistrySource:
    """Dependency resolved from a registry, optionally an alternate one."""

    version: str
    registry: str | None = None

    def __str__(self) -> str:
        return self.version


@dataclass(frozen=True, slots=True)
class PathSource:
    path: str

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True, slots=True)
class GitSource:
    """Dependency fetched from a git repository.

    Example:
        >>> str(GitSource("https://github.com/serde-rs/serde", tag="v1.0.0"))
        'https://github.com/serde-rs/serde?tag=v1.0.0'
    """

    url: str
    branch: str | None = None
    tag: str | None = None
    rev: str | None = None

    def __str__(self) -> str:
        for ref_kind in ("branch", "tag", "rev"):
            value = getattr(self, ref_kind)
            if value is not None:
                return f"{self.url}?{ref_kind}={value}"
        return self.url


@dataclass(frozen=True, slots=True)
class WorkspaceSource:
    def __str__(self) -> str:
        return "workspace"


Source = RegistrySource | PathSource | GitSource | WorkspaceSource


def _string_field(table: Mapping[str, Any], field: str, key: str) -> str | None:
    value = table.get(field)
    if value is None:
        return None
    if not isinstance(value, str):
        raise UnsupportedDependency(f"`{field}` of `{key}` must be a string")
    return str(value)


def _check_features(table: Mapping[str, Any], key: str) -> None:
    value = table.get("features")
    if value is None:
        return
    if isinstance(value, str) or not isinstance(value, Sequence) or not all(isinstance(item, str) for item in value):
        raise UnsupportedDependency(f"`features` of `{key}` must be an array of strings")


@dataclass(frozen=True, slots=True)
class Dependency:
    """One manifest entry.

    Attributes:
        toml_key: Key the entry is declared under.
        name: Real package name; differs from ``toml_key`` for renames.
        source: Where the package comes from.
        optional: Whether the entry is ``optional = true``.

    Example:
        >>> dep = Dependency.from_toml("json", {"package": "serde_json", "version": "1"})
        >>> dep.name, dep.rename, dep.version
        ('serde_json', 'json', '1')
        >>> Dependency.from_toml("local", {"path": "../local"}).version is None
        True
    """

    toml_key: str
    name: str
    source: Source
    optional: bool = False

    @classmethod
    def from_toml(cls, key: str, item: Any) -> Dependency:
        """Build a descriptor from a manifest value.

        Raises:
            UnsupportedDependency: If the value is neither a requirement
                string nor a table with a recognised source, or a field of
                the table has the wrong type.
        """
        if isinstance(item, str):
            return cls(toml_key=key, name=key, source=RegistrySource(version=str(item)))
        if not isinstance(item, Mapping):
            raise UnsupportedDependency(f"Unrecognized dependency entry format for `{key}`")

        name = _string_field(item, "package", key) or key
        version = _string_field(item, "version", key)
        git = _string_field(item, "git", key)
        path = _string_field(item, "path", key)
        source: Source
        if item.get("workspace") is True:
            source = WorkspaceSource()
        elif git is not None:
            source = GitSource(
                url=git,
                branch=_string_field(item, "branch", key),
                tag=_string_field(item, "tag", key),
                rev=_string_field(item, "rev", key),
            )
        elif path is not None:
            source = PathSource(path)
        elif version is not None:
            source = RegistrySource(version=version, registry=_string_field(item, "registry", key))
        else:
            raise UnsupportedDependency(f"Unrecognized dependency source for `{key}`")

        _check_features(item, key)
        return cls(toml_key=key, name=name, source=source, optional=item.get("optional") is True)

    @property
    def rename(self) -> str | None:
        """The local key when the entry renames its package."""
        return self.toml_key if self.toml_key != self.name else None

    @property
    def version(self) -> str | None:
        return self.source.version if isinstance(self.source, RegistrySource) else None

    @property
    def registry(self) -> str | None:
        return self.source.registry if isinstance(self.source, RegistrySource) else None

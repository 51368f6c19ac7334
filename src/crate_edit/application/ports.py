"""Application ports: Protocol definitions for adapter functions and objects.

Callable ports define a ``__call__`` whose signature matches the adapter
function, so module-level functions satisfy them structurally (PEP 544).
Object ports (``Shell``, ``Registry``, ``ManifestDocument``) describe the
methods the use cases call on collaborators.

System Role:
    Sits between domain and adapters. Infrastructure types (``Config``,
    ``RegistrySettings``) are imported under ``TYPE_CHECKING`` only so the
    application layer never imports adapters at runtime.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol

from ..domain.enums import OutputFormat
from ..domain.features import DependencyStatus
from ..domain.packages import LockedPackage, Package

if TYPE_CHECKING:
    from lib_layered_config import Config

    from ..adapters.config.settings import CrateEditSettings, RegistrySettings


class GetConfig(Protocol):
    """Load layered configuration with application defaults."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class GetDefaultConfigPath(Protocol):
    """Return the path to the bundled default configuration file."""

    def __call__(self) -> Path: ...


class DisplayConfig(Protocol):
    """Display the provided configuration in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class LoadSettingsFromDict(Protocol):
    """Validate the ``[registry]`` and ``[upgrade]`` sections."""

    def __call__(self, config_dict: Mapping[str, Any]) -> CrateEditSettings: ...


class InitLogging(Protocol):
    """Initialize lib_log_rich runtime with the provided configuration."""

    def __call__(self, config: Config) -> None: ...


class Shell(Protocol):
    """User-facing status, warning, and note lines on the error stream."""

    def status(self, action: str, message: str) -> None: ...

    def warn(self, message: str) -> None: ...

    def note(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def write_lines(self, lines: Sequence[str]) -> None: ...


class DependencyTableHandle(Protocol):
    """One dependency table of an open manifest."""

    path: tuple[str, ...]

    def __iter__(self) -> Iterator[tuple[str, Any]]: ...

    def set_version(self, key: str, requirement: str) -> None: ...


class ManifestDocument(Protocol):
    """An open manifest the engines mutate in memory."""

    path: Path

    def dependency_tables(self) -> Sequence[DependencyTableHandle]: ...

    def remove_from_table(self, table_path: tuple[str, ...], name: str) -> str: ...

    def dependency_status(self, dep_key: str) -> DependencyStatus: ...

    def gc_dep(self, dep_key: str) -> None: ...

    def write(self) -> None: ...


class OpenManifest(Protocol):
    """Load and parse the manifest at a path."""

    def __call__(self, path: Path) -> ManifestDocument: ...


class FindManifest(Protocol):
    """Locate the manifest for an explicit path or the working directory."""

    def __call__(self, manifest_path: Path | None = ...) -> Path: ...


class ResolveManifests(Protocol):
    """Select the packages a command operates on."""

    def __call__(self, manifest_path: Path | None, *, workspace: bool, pkgids: Sequence[str]) -> list[Package]: ...


class LoadLockfile(Protocol):
    """Resolve the lockfile snapshot for the given packages."""

    def __call__(self, packages: Sequence[Package], *, locked: bool, offline: bool) -> list[LockedPackage]: ...


class Registry(Protocol):
    """Registry index access for one run."""

    def registry_url(self, manifest_path: Path, registry: str | None) -> str: ...

    def update_index(self, url: str) -> None: ...

    def latest_version(
        self, name: str, *, prerelease: bool, manifest_path: Path, registry_url: str | None
    ) -> str: ...


class OpenRegistry(Protocol):
    """Create registry access from settings."""

    def __call__(self, settings: RegistrySettings, *, offline: bool) -> Registry: ...


__all__ = [
    "DependencyTableHandle",
    "DisplayConfig",
    "FindManifest",
    "GetConfig",
    "GetDefaultConfigPath",
    "InitLogging",
    "LoadLockfile",
    "LoadSettingsFromDict",
    "ManifestDocument",
    "OpenManifest",
    "OpenRegistry",
    "Registry",
    "ResolveManifests",
    "Shell",
]

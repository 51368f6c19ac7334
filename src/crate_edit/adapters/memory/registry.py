"""Scripted registry answering from a dictionary of latest versions."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ...domain.errors import CollaboratorFailure
from ..config.settings import CRATES_IO_INDEX, RegistrySettings


@dataclass
class FakeRegistry:
    """Registry double; ``open`` satisfies the ``OpenRegistry`` port.

    Attributes:
        versions: Latest version per crate name.
        registries: Index URL per alternate registry alias.
        updated: Index URLs refreshed, in call order.
        lookups: Crate names queried, in call order.

    Example:
        >>> registry = FakeRegistry(versions={"serde": "1.0.200"})
        >>> registry.open(RegistrySettings(), offline=False).latest_version(
        ...     "serde", prerelease=False, manifest_path=Path("Cargo.toml"), registry_url=None
        ... )
        '1.0.200'
    """

    versions: dict[str, str] = field(default_factory=dict)
    registries: dict[str, str] = field(default_factory=dict)
    updated: list[str] = field(default_factory=list)
    lookups: list[str] = field(default_factory=list)
    offline: bool = False
    settings: RegistrySettings | None = None

    def open(self, settings: RegistrySettings, *, offline: bool) -> FakeRegistry:
        self.settings = settings
        self.offline = offline
        return self

    def registry_url(self, manifest_path: Path, registry: str | None) -> str:
        if registry is None:
            return self.settings.default_index if self.settings is not None else CRATES_IO_INDEX
        try:
            return self.registries[registry]
        except KeyError:
            raise CollaboratorFailure(f"The registry '{registry}' could not be found") from None

    def update_index(self, url: str) -> None:
        self.updated.append(url)

    def latest_version(self, name: str, *, prerelease: bool, manifest_path: Path, registry_url: str | None) -> str:
        self.lookups.append(name)
        if self.offline:
            raise CollaboratorFailure(f"cannot look up `{name}` while offline")
        try:
            return self.versions[name]
        except KeyError:
            raise CollaboratorFailure(f"no published version of `{name}` found") from None


__all__ = ["FakeRegistry"]

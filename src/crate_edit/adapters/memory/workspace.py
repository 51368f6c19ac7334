"""Scripted package resolution and lockfile for engine tests.

Manifests themselves stay real files (tests write them under ``tmp_path``);
only the ``cargo metadata`` collaborators are replaced.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from ...domain.errors import CollaboratorFailure, ManifestNotFound
from ...domain.packages import LockedPackage, Package


@dataclass
class FakeWorkspace:
    """Answers ``FindManifest``, ``ResolveManifests`` and ``LoadLockfile``.

    Attributes:
        packages: Workspace members, the first one being the root package.
        locked: Lockfile snapshot returned by every load.
        lockfile_error: Raised by ``load_lockfile`` when set.
        lockfile_loads: ``(locked, offline)`` flags of every load, in order.
    """

    packages: list[Package] = field(default_factory=list)
    locked: list[LockedPackage] = field(default_factory=list)
    lockfile_error: CollaboratorFailure | None = None
    lockfile_loads: list[tuple[bool, bool]] = field(default_factory=list)

    def find_manifest(self, manifest_path: Path | None = None) -> Path:
        if manifest_path is not None:
            return manifest_path
        if not self.packages:
            raise ManifestNotFound("Unable to find Cargo.toml")
        return self.packages[0].manifest_path

    def resolve_manifests(self, manifest_path: Path | None, *, workspace: bool, pkgids: Sequence[str]) -> list[Package]:
        if workspace:
            return list(self.packages)
        if pkgids:
            by_name = {package.name: package for package in self.packages}
            missing = [pkgid for pkgid in pkgids if pkgid not in by_name]
            if missing:
                raise CollaboratorFailure(f"could not find pkgid {missing[0]}")
            return [by_name[pkgid] for pkgid in pkgids]
        root = self.find_manifest(manifest_path)
        for package in self.packages:
            if package.manifest_path == root:
                return [package]
        raise CollaboratorFailure("Found virtual manifest, but this command requires running against an actual package")

    def load_lockfile(self, packages: Sequence[Package], *, locked: bool, offline: bool) -> list[LockedPackage]:
        self.lockfile_loads.append((locked, offline))
        if self.lockfile_error is not None:
            raise self.lockfile_error
        return list(self.locked)


__all__ = ["FakeWorkspace"]

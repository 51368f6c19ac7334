"""Package and lockfile resolution through ``cargo metadata``.

Contents:
    * :func:`find_manifest` - locate ``Cargo.toml`` for a path or the working directory.
    * :func:`resolve_manifests` - pick the workspace packages a command targets.
    * :func:`load_lockfile` - resolved name/version pairs for the whole workspace.

System Role:
    Adapter behind the ``FindManifest``, ``ResolveManifests`` and
    ``LoadLockfile`` ports. ``cargo`` runs as a subprocess (``$CARGO`` wins
    over the one on ``PATH``) and its JSON is parsed with orjson.
"""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import Any, cast

import orjson

from ...domain.errors import CollaboratorFailure, ManifestNotFound
from ...domain.packages import LockedPackage, Package
from ..manifest import MANIFEST_NAME

logger = logging.getLogger(__name__)

VIRTUAL_MANIFEST_MESSAGE = (
    "Found virtual manifest, but this command requires running against an actual package in this workspace. "
    "Try adding `--workspace`."
)


def find_manifest(manifest_path: Path | None = None) -> Path:
    """Return the absolute manifest path for ``manifest_path`` or the nearest ancestor.

    Raises:
        ManifestNotFound: If no ``Cargo.toml`` exists at the given path or
            anywhere above the working directory.
    """
    if manifest_path is not None:
        candidate = manifest_path / MANIFEST_NAME if manifest_path.is_dir() else manifest_path
        if not candidate.is_file():
            raise ManifestNotFound(f"manifest `{candidate}` does not exist")
        return candidate.resolve()

    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        candidate = directory / MANIFEST_NAME
        if candidate.is_file():
            return candidate
    raise ManifestNotFound(f"Unable to find {MANIFEST_NAME} for {cwd}")


def _cargo_metadata(manifest_path: Path, *options: str) -> dict[str, Any]:
    command = [
        os.environ.get("CARGO", "cargo"),
        "metadata",
        "--format-version",
        "1",
        "--manifest-path",
        str(manifest_path),
        *options,
    ]
    logger.debug("Running cargo metadata", extra={"command": command})
    try:
        proc = subprocess.run(command, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise CollaboratorFailure(f"failed to run `{command[0]}`: {exc}") from exc
    if proc.returncode != 0:
        raise CollaboratorFailure(f"`cargo metadata` failed for `{manifest_path}`: {proc.stderr.strip()}")
    try:
        data = orjson.loads(proc.stdout)
    except orjson.JSONDecodeError as exc:
        raise CollaboratorFailure(f"`cargo metadata` returned invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise CollaboratorFailure("`cargo metadata` returned an unexpected document")
    return cast("dict[str, Any]", data)


def _packages(metadata: dict[str, Any]) -> list[dict[str, Any]]:
    return [cast("dict[str, Any]", entry) for entry in metadata.get("packages", []) if isinstance(entry, dict)]


def resolve_manifests(manifest_path: Path | None, *, workspace: bool, pkgids: Sequence[str]) -> list[Package]:
    """Select target packages the way ``cargo`` would.

    ``workspace`` returns every member, ``pkgids`` returns the named members
    in the order given, and otherwise the package owning the manifest itself
    is returned.

    Raises:
        ManifestNotFound: If no manifest can be located.
        CollaboratorFailure: If ``cargo metadata`` fails, a pkgid is unknown,
            or the manifest is virtual and neither option was given.
    """
    root_manifest = find_manifest(manifest_path)
    members = [
        Package(name=str(entry["name"]), manifest_path=Path(str(entry["manifest_path"])))
        for entry in _packages(_cargo_metadata(root_manifest, "--no-deps"))
    ]
    if workspace:
        return members
    if pkgids:
        selected: list[Package] = []
        for pkgid in pkgids:
            match = next((member for member in members if member.name == pkgid), None)
            if match is None:
                raise CollaboratorFailure(f"could not find pkgid {pkgid}")
            selected.append(match)
        return selected
    for member in members:
        if member.manifest_path.resolve() == root_manifest:
            return [member]
    raise CollaboratorFailure(VIRTUAL_MANIFEST_MESSAGE)


def load_lockfile(packages: Sequence[Package], *, locked: bool, offline: bool) -> list[LockedPackage]:
    """Return every resolved package of the workspace.

    A workspace shares one lockfile, so the first package's manifest is enough.

    Raises:
        CollaboratorFailure: If ``packages`` is empty or ``cargo metadata`` fails.
    """
    if not packages:
        raise CollaboratorFailure("Invalid cargo config")
    options = ["--all-features"]
    if locked:
        options.append("--locked")
    if offline:
        options.append("--offline")
    metadata = _cargo_metadata(packages[0].manifest_path, *options)
    return [LockedPackage(name=str(entry["name"]), version=str(entry["version"])) for entry in _packages(metadata)]


__all__ = [
    "VIRTUAL_MANIFEST_MESSAGE",
    "find_manifest",
    "load_lockfile",
    "resolve_manifests",
]

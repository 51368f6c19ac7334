"""Cargo collaborators: ``cargo metadata`` and the sparse registry index.

Contents:
    * :mod:`.metadata` - Manifest discovery, package selection, lockfile
    * :mod:`.registry` - Latest-version lookup over HTTP
"""

from __future__ import annotations

from .metadata import find_manifest, load_lockfile, resolve_manifests
from .registry import SparseRegistry, index_path, registry_url

__all__ = [
    "SparseRegistry",
    "find_manifest",
    "index_path",
    "load_lockfile",
    "registry_url",
    "resolve_manifests",
]

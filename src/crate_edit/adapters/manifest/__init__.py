"""Manifest adapter - format-preserving ``Cargo.toml`` editing with tomlkit.

Contents:
    * :class:`.local.LocalManifest` - Parsed manifest with atomic writes
    * :class:`.local.DependencyTable` - Ordered view over one dependency table
"""

from __future__ import annotations

from .local import MANIFEST_NAME, DependencyTable, LocalManifest

__all__ = ["MANIFEST_NAME", "DependencyTable", "LocalManifest"]

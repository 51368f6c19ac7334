"""Application layer - use cases and port definitions.

Contents:
    * :mod:`.ports` - Protocols the adapters satisfy
    * :mod:`.remove` - ``rm`` use case
    * :mod:`.upgrade` - ``upgrade`` use case
    * :mod:`.report` - upgrade change report rendering
"""

from __future__ import annotations

from .ports import (
    DisplayConfig,
    FindManifest,
    GetConfig,
    GetDefaultConfigPath,
    InitLogging,
    LoadLockfile,
    LoadSettingsFromDict,
    ManifestDocument,
    OpenManifest,
    OpenRegistry,
    Registry,
    ResolveManifests,
    Shell,
)

__all__ = [
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

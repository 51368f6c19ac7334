"""Remove and upgrade dependencies in ``Cargo.toml`` manifests.

Public surface, routed through the architectural layers:

- Application: the remove and upgrade use cases
- Composition: wired configuration access
- Metadata: package information
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Application use cases
from .application.remove import RemoveRequest, remove_dependencies
from .application.upgrade import UpgradeOptions, UpgradeServices, upgrade_dependencies

# Composition exports (wired adapters)
from .composition import get_config

__all__ = [
    "RemoveRequest",
    "UpgradeOptions",
    "UpgradeServices",
    "get_config",
    "print_info",
    "remove_dependencies",
    "upgrade_dependencies",
]

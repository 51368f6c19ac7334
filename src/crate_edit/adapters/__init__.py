"""Adapters layer - infrastructure and framework integrations.

Contents:
    * :mod:`.cargo` - ``cargo metadata`` and sparse registry access
    * :mod:`.cli` - Click CLI framework integration
    * :mod:`.config` - Configuration loading, settings, and display
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.manifest` - Format-preserving Cargo.toml editing
    * :mod:`.memory` - In-memory doubles for tests
    * :mod:`.shell` - Cargo-style status output
"""

from __future__ import annotations

__all__: list[str] = []

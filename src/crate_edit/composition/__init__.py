"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

# Collaborators: cargo metadata and registry index
from ..adapters.cargo.metadata import find_manifest, load_lockfile, resolve_manifests
from ..adapters.cargo.registry import SparseRegistry

# Configuration services
from ..adapters.config.display import display_config
from ..adapters.config.loader import get_config, get_default_config_path
from ..adapters.config.settings import load_settings_from_dict

# Logging services
from ..adapters.logging.setup import init_logging

# Manifest editing and user-facing output
from ..adapters.manifest import LocalManifest
from ..adapters.shell import ClickShell
from ..application.ports import (
    DisplayConfig,
    FindManifest,
    GetConfig,
    GetDefaultConfigPath,
    InitLogging,
    LoadLockfile,
    LoadSettingsFromDict,
    OpenManifest,
    OpenRegistry,
    ResolveManifests,
    Shell,
)

# Static conformance assertions: pyright verifies that each adapter
# structurally satisfies its corresponding Protocol at type-check time.
if TYPE_CHECKING:
    from ..adapters.memory import FakeRegistry, FakeWorkspace, ShellSpy

    _assert_get_config: GetConfig = get_config
    _assert_get_default_config_path: GetDefaultConfigPath = get_default_config_path
    _assert_display_config: DisplayConfig = display_config
    _assert_load_settings_from_dict: LoadSettingsFromDict = load_settings_from_dict
    _assert_init_logging: InitLogging = init_logging
    _assert_shell: Shell = ClickShell()
    _assert_open_manifest: OpenManifest = LocalManifest.load
    _assert_find_manifest: FindManifest = find_manifest
    _assert_resolve_manifests: ResolveManifests = resolve_manifests
    _assert_load_lockfile: LoadLockfile = load_lockfile
    _assert_open_registry: OpenRegistry = SparseRegistry


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    get_default_config_path: GetDefaultConfigPath
    display_config: DisplayConfig
    load_settings_from_dict: LoadSettingsFromDict
    init_logging: InitLogging
    shell: Shell
    open_manifest: OpenManifest
    find_manifest: FindManifest
    resolve_manifests: ResolveManifests
    load_lockfile: LoadLockfile
    open_registry: OpenRegistry


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        get_default_config_path=get_default_config_path,
        display_config=display_config,
        load_settings_from_dict=load_settings_from_dict,
        init_logging=init_logging,
        shell=ClickShell(),
        open_manifest=LocalManifest.load,
        find_manifest=find_manifest,
        resolve_manifests=resolve_manifests,
        load_lockfile=load_lockfile,
        open_registry=SparseRegistry,
    )


def build_testing(
    *,
    shell: ShellSpy | None = None,
    workspace: FakeWorkspace | None = None,
    registry: FakeRegistry | None = None,
) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Manifests are still real files; pass a ``FakeWorkspace`` whose packages
    point at manifests written under ``tmp_path``. Logging init is a no-op,
    so commands that bind a lib_log_rich job need ``init_logging`` replaced
    with the real one.

    Args:
        shell: Spy capturing status and report output. Fresh when None.
        workspace: Scripted package resolution and lockfile. Empty when None.
        registry: Scripted latest versions. Empty when None.

    Returns:
        AppServices container with in-memory adapters.
    """
    from ..adapters.memory import (
        FakeRegistry,
        FakeWorkspace,
        ShellSpy,
        display_config_in_memory,
        get_config_in_memory,
        get_default_config_path_in_memory,
        init_logging_in_memory,
        load_settings_from_dict_in_memory,
    )

    fake_workspace = workspace if workspace is not None else FakeWorkspace()
    fake_registry = registry if registry is not None else FakeRegistry()

    return AppServices(
        get_config=get_config_in_memory,
        get_default_config_path=get_default_config_path_in_memory,
        display_config=display_config_in_memory,
        load_settings_from_dict=load_settings_from_dict_in_memory,
        init_logging=init_logging_in_memory,
        shell=shell if shell is not None else ShellSpy(),
        open_manifest=LocalManifest.load,
        find_manifest=fake_workspace.find_manifest,
        resolve_manifests=fake_workspace.resolve_manifests,
        load_lockfile=fake_workspace.load_lockfile,
        open_registry=fake_registry.open,
    )


__all__ = [
    # Configuration
    "get_config",
    "get_default_config_path",
    "display_config",
    "load_settings_from_dict",
    # Logging
    "init_logging",
    # Composition
    "AppServices",
    "build_production",
    "build_testing",
]

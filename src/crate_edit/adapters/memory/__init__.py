"""In-memory adapter implementations for testing.

Lightweight implementations of the application ports that need no
``cargo`` binary, no network, and no logging framework.

Contents:
    * :mod:`.config` - In-memory configuration adapters
    * :mod:`.logging` - In-memory logging adapter
    * :mod:`.registry` - Scripted registry (FakeRegistry)
    * :mod:`.shell` - Recording shell (ShellSpy)
    * :mod:`.workspace` - Scripted package resolution (FakeWorkspace)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import (
    display_config_in_memory,
    get_config_in_memory,
    get_default_config_path_in_memory,
    load_settings_from_dict_in_memory,
)
from .logging import init_logging_in_memory
from .registry import FakeRegistry
from .shell import ShellSpy
from .workspace import FakeWorkspace

# Static conformance assertions
if TYPE_CHECKING:
    from ...application.ports import (
        DisplayConfig,
        GetConfig,
        GetDefaultConfigPath,
        InitLogging,
        LoadSettingsFromDict,
        Shell,
    )

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_get_default_config_path: GetDefaultConfigPath = get_default_config_path_in_memory
    _assert_display_config: DisplayConfig = display_config_in_memory
    _assert_load_settings: LoadSettingsFromDict = load_settings_from_dict_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_shell: Shell = ShellSpy()

__all__ = [
    "FakeRegistry",
    "FakeWorkspace",
    "ShellSpy",
    "display_config_in_memory",
    "get_config_in_memory",
    "get_default_config_path_in_memory",
    "init_logging_in_memory",
    "load_settings_from_dict_in_memory",
]

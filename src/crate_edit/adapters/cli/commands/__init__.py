"""CLI command implementations.

Contents:
    * Info command from :mod:`.info`
    * Config command from :mod:`.config`
    * ``rm`` from :mod:`.rm_cmd`
    * ``upgrade`` from :mod:`.upgrade_cmd`
"""

from __future__ import annotations

from .config import cli_config
from .info import cli_info
from .rm_cmd import cli_rm
from .upgrade_cmd import cli_upgrade

__all__ = [
    "cli_config",
    "cli_info",
    "cli_rm",
    "cli_upgrade",
]

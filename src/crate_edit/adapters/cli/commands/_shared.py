"""Shared helpers for the manifest-editing commands.

Contents:
    * :func:`exit_code_for` - Map a domain error onto an :class:`ExitCode`.
    * :func:`handle_command_error` - Log, print, and exit for a domain error.
    * :func:`load_settings` - Validated ``[registry]``/``[upgrade]`` settings.
    * :func:`manifest_path_option` - The ``--manifest-path`` option.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, NoReturn

import rich_click as click

from ....adapters.config.settings import CrateEditSettings
from ....application.ports import Shell
from ....domain.errors import (
    CollaboratorFailure,
    ConfigurationError,
    CrateEditError,
    DependencyNotFound,
    LockedViolation,
    ManifestNotFound,
    UnparsableRequirement,
)
from ..context import CLIContext
from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)

#: Most specific first; the first ``isinstance`` match wins.
_EXIT_CODES: tuple[tuple[type[CrateEditError], ExitCode], ...] = (
    (ManifestNotFound, ExitCode.MANIFEST_NOT_FOUND),
    (DependencyNotFound, ExitCode.DEPENDENCY_NOT_FOUND),
    (UnparsableRequirement, ExitCode.INVALID_ARGUMENT),
    (CollaboratorFailure, ExitCode.COLLABORATOR_FAILURE),
    (LockedViolation, ExitCode.LOCKED_VIOLATION),
    (ConfigurationError, ExitCode.CONFIG_ERROR),
)


def exit_code_for(exc: CrateEditError) -> ExitCode:
    """Return the exit code for ``exc``.

    Example:
        >>> from crate_edit.domain.errors import TableNotFound
        >>> exit_code_for(TableNotFound("The table `dev-dependencies` could not be found."))
        <ExitCode.DEPENDENCY_NOT_FOUND: 65>
    """
    for error_type, code in _EXIT_CODES:
        if isinstance(exc, error_type):
            return code
    return ExitCode.GENERAL_ERROR


def handle_command_error(exc: CrateEditError, *, shell: Shell, command: str) -> NoReturn:
    """Report ``exc`` on the shell and exit with its mapped code.

    Raises:
        SystemExit: Always.
    """
    code = exit_code_for(exc)
    logger.error(
        "Command failed",
        extra={"command": command, "error": str(exc), "error_type": type(exc).__name__, "exit_code": int(code)},
    )
    shell.error(str(exc))
    raise SystemExit(code) from exc


def load_settings(cli_ctx: CLIContext) -> CrateEditSettings:
    """Validate settings from the already-loaded layered config.

    Raises:
        ConfigurationError: When a section is malformed.
    """
    return cli_ctx.services.load_settings_from_dict(cli_ctx.config.as_dict())


def manifest_path_option(func: Callable[..., Any]) -> Callable[..., Any]:
    """Apply the shared ``--manifest-path`` option."""
    return click.option(
        "--manifest-path",
        type=click.Path(path_type=Path),
        default=None,
        metavar="PATH",
        help="Path to the manifest to edit (defaults to the nearest Cargo.toml)",
    )(func)


__all__ = ["exit_code_for", "handle_command_error", "load_settings", "manifest_path_option"]

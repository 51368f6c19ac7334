"""Process-level entry for ``crate-edit`` and ``python -m crate_edit``.

Runs the root group in non-standalone mode so exit codes, traceback
preferences, and lib_log_rich shutdown are handled in one place.
"""

from __future__ import annotations

import sys
import threading
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING

import click
import lib_cli_exit_tools
import lib_log_rich.runtime

from ... import __init__conf__
from .constants import TRACEBACK_SUMMARY_LIMIT, TRACEBACK_VERBOSE_LIMIT
from .context import (
    apply_traceback_preferences,
    restore_traceback_state,
    snapshot_traceback_state,
)

if TYPE_CHECKING:
    from ...composition import AppServices


def _report_unhandled(exc: BaseException) -> int:
    """Print ``exc`` through lib_cli_exit_tools and map it to an exit code."""
    tracebacks_enabled = bool(getattr(lib_cli_exit_tools.config, "traceback", False))
    apply_traceback_preferences(tracebacks_enabled)
    length_limit = TRACEBACK_VERBOSE_LIMIT if tracebacks_enabled else TRACEBACK_SUMMARY_LIMIT
    lib_cli_exit_tools.print_exception_message(trace_back=tracebacks_enabled, length_limit=length_limit)
    return lib_cli_exit_tools.get_system_exit_code(exc)


def _run_cli(argv: Sequence[str] | None, *, services_factory: Callable[[], AppServices]) -> int:
    from .root import cli

    args = list(argv) if argv is not None else sys.argv[1:]
    try:
        cli.main(
            args=args,
            prog_name=__init__conf__.shell_command,
            obj=services_factory,
            standalone_mode=False,
        )
    except click.exceptions.Exit as exc:
        return exc.exit_code
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except SystemExit as exc:
        # commands exit with an ExitCode after printing their own message
        if isinstance(exc.code, int):
            return exc.code
        return _report_unhandled(exc)
    except BaseException as exc:  # noqa: BLE001 - CLI boundary
        return _report_unhandled(exc)
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    restore_traceback: bool = True,
    services_factory: Callable[[], AppServices] | None = None,
) -> int:
    """Run the CLI and return its exit code.

    Args:
        argv: Arguments without the program name. None uses ``sys.argv``.
        restore_traceback: Reset lib_cli_exit_tools traceback flags afterwards.
        services_factory: ``build_production`` or ``build_testing``; required.

    Raises:
        ValueError: If ``services_factory`` is missing.

    Example:
        >>> from crate_edit.composition import build_testing
        >>> main(["--version"], services_factory=build_testing)  # doctest: +SKIP
        0
    """
    if services_factory is None:
        raise ValueError("services_factory is required. Pass build_production from composition layer.")

    previous_state = snapshot_traceback_state()
    try:
        return _run_cli(argv, services_factory=services_factory)
    finally:
        if restore_traceback:
            restore_traceback_state(previous_state)
        # lib_log_rich owns a background queue; only the main thread may stop it
        if threading.current_thread() is threading.main_thread() and lib_log_rich.runtime.is_initialised():
            lib_log_rich.runtime.shutdown()


__all__ = ["main"]

"""POSIX-conventional exit codes for CLI error paths.

Provides a single :class:`ExitCode` enum so every ``SystemExit`` raised by a
command carries a meaningful, grep-friendly integer instead of a bare ``1``.

Signal codes (130, 141, 143) are informational constants only; the
application never raises ``SystemExit`` with these values because
``lib_cli_exit_tools`` handles signal-to-exit-code translation.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes following sysexits.h and errno conventions where applicable.

    * 0-1: generic success / failure
    * 2: ENOENT (no manifest)
    * 22: EINVAL (bad argument or requirement)
    * 65: EX_DATAERR (dependency or table missing from the manifest)
    * 69: EX_UNAVAILABLE (cargo or the registry failed)
    * 75: EX_TEMPFAIL (``--locked`` forbids the change)
    * 78: EX_CONFIG (sysexits.h)
    * 128+N: signal N (informational only)

    Example:
        >>> ExitCode.SUCCESS
        <ExitCode.SUCCESS: 0>
        >>> int(ExitCode.COLLABORATOR_FAILURE)
        69
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    MANIFEST_NOT_FOUND = 2
    INVALID_ARGUMENT = 22
    DEPENDENCY_NOT_FOUND = 65
    COLLABORATOR_FAILURE = 69
    LOCKED_VIOLATION = 75
    CONFIG_ERROR = 78
    SIGNAL_INT = 130
    BROKEN_PIPE = 141
    SIGNAL_TERM = 143


__all__ = ["ExitCode"]

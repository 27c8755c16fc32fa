"""POSIX-conventional exit codes for CLI error paths.

Every ``SystemExit`` raised by a command carries one of these values so
scripts can tell a partial delivery apart from a configuration problem.

Contents:
    * :class:`ExitCode` - IntEnum of all exit codes used by this application.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes following sysexits.h and errno conventions.

    * 0: every recipient accepted
    * 1: unexpected error
    * 22: EINVAL, an option or recipient failed validation
    * 69: EX_UNAVAILABLE, at least one recipient was not accepted
    * 78: EX_CONFIG, SES credentials missing or invalid
    * 130/143: signals (informational; lib_cli_exit_tools maps them)

    Example:
        >>> int(ExitCode.DELIVERY_FAILURE)
        69
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    INVALID_ARGUMENT = 22
    DELIVERY_FAILURE = 69
    CONFIG_ERROR = 78
    SIGNAL_INT = 130
    SIGNAL_TERM = 143


__all__ = ["ExitCode"]

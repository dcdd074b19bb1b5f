"""
Shared error reporting for the vgc and vgm tools.

Every failure leaves a command through ``handle_cli_exception``, so both
tools print errors in one format and share one set of exit codes.
"""

import logging
import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from valgol.errors import LocatedError, ValgolError


class ExitCode(IntEnum):
    """Process exit codes of the VALGOL tools."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Translation, loading or run-time error
    INVALID_ARGS = 2     # Invalid arguments or unreadable files
    INTERNAL_ERROR = 3   # Bug in the toolchain


def describe_error(error: Exception, error_type: str | None = None) -> tuple[str, ExitCode]:
    """
    Message and exit code for an exception escaping a command.

    Args:
        error: The exception that was raised
        error_type: Prefix for unlocated toolchain errors (e.g. "Run-time")
    """
    if isinstance(error, LocatedError):
        # Already reads "file:line:col: error: ..."
        return str(error), ExitCode.BUILD_ERROR
    if isinstance(error, ValgolError):
        prefix = f"{error_type} error" if error_type else "Error"
        return f"{prefix}: {error}", ExitCode.BUILD_ERROR
    if isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        return f"Error: {error}", ExitCode.INVALID_ARGS
    return f"Internal error: {error}", ExitCode.INTERNAL_ERROR


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None,
) -> NoReturn:
    """
    Report an exception on stderr and exit.

    Internal errors also print their traceback when ``verbose`` is set.

    Raises:
        SystemExit: Always
    """
    message, code = describe_error(error, error_type)
    click.echo(message, err=True)
    if code is ExitCode.INTERNAL_ERROR and verbose:
        traceback.print_exc()
    sys.exit(code)


def setup_logging(verbose: bool) -> None:
    """Send library debug logging to stderr when running verbosely."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s: %(name)s: %(message)s")

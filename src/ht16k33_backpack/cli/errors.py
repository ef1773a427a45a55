"""
CLI Error Handling
==================

Provides consistent error messages and exit codes for the CLI.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from ht16k33_backpack.errors import BackpackError, InvalidParameterError


class ExitCode(IntEnum):
    """Exit codes for the CLI."""
    SUCCESS = 0
    DEVICE_ERROR = 1     # Bus cannot be opened or written
    INVALID_ARGS = 2     # Invalid arguments or configuration
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always
    """
    if isinstance(error, (InvalidParameterError, ValueError, click.BadParameter)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, BackpackError):
        click.echo(f"Device error: {error}", err=True)
        sys.exit(ExitCode.DEVICE_ERROR)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)

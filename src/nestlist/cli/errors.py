"""
Exit codes and error reporting for `nestlist`.

A rejected input is an expected outcome, not a crash: the formatted
recognition error goes to stderr and the command exits 1. Usage mistakes
exit 2, anything else is a bug and exits 3.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from nestlist.errors import NestListError, RecognitionError


class ExitCode(IntEnum):
    """Process exit status of the nestlist commands."""
    SUCCESS = 0
    PARSE_ERROR = 1      # Input rejected: lexical, syntax or nesting error
    INVALID_ARGS = 2     # Bad INPUT/--file combination or unreadable file
    INTERNAL_ERROR = 3   # Bug in nestlist itself


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report `error` on stderr and exit with its ExitCode.

    Recognition errors print as-is, since they already carry the location,
    source line and caret. With `verbose`, internal errors also print the
    traceback.
    """
    if isinstance(error, RecognitionError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.PARSE_ERROR)

    if isinstance(error, NestListError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.PARSE_ERROR)

    if isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)

"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import typer

from relflow.core.result import Err, Result
from relflow.output.errors import print_release_error, release_error_exit_code
from relflow.services.release.errors import ReleaseError

if TYPE_CHECKING:
    from relflow.output.console import ConsoleProtocol


T = TypeVar("T")


def exit_on_release_error(
    result: Result[T, ReleaseError],
    console: ConsoleProtocol,
) -> T:
    """Return the value of an Ok result; print and exit on Err.

    Replaces the pattern:
        match result:
            case Err(e):
                print_release_error(e, console)
                raise typer.Exit(code=release_error_exit_code(e))
            case Ok(value):
                ...
    """
    if isinstance(result, Err):
        print_release_error(result.error, console)
        raise typer.Exit(code=release_error_exit_code(result.error))
    return result.value

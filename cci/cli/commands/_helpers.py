"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import typer

from cci.core.result import Err, Ok, Result
from cci.output.errors import PipelineError, pipeline_error_exit_code, print_pipeline_error

if TYPE_CHECKING:
    from cci.cli.context import CLIContext


def exit_on_error[T](result: Result[T, PipelineError], ctx: CLIContext) -> T:
    """Return the value of ``result``, or print the error and exit.

    Replaces the per-command boilerplate:
        match result:
            case Err(e):
                print_pipeline_error(e, ctx.console)
                raise typer.Exit(code=pipeline_error_exit_code(e))
            case Ok(value):
                ...
    """
    match result:
        case Err(error):
            print_pipeline_error(error, ctx.console)
            raise typer.Exit(code=pipeline_error_exit_code(error))
        case Ok(value):
            return value

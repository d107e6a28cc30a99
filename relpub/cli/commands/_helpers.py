"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from relpub.output.errors import print_publish_error, publish_error_exit_code
from relpub.services.publish.errors import PublishFailure, SetupError

if TYPE_CHECKING:
    from relpub.cli.context import CLIContext


def exit_with_error(error: PublishFailure | SetupError, ctx: CLIContext) -> NoReturn:
    """Report the failing step and exit with its mapped code."""
    print_publish_error(error, ctx.console)
    raise typer.Exit(code=publish_error_exit_code(error))

"""Root CLI callback: global options shared by every command."""

from typing import Optional

import typer

from foxforge import __version__
from foxforge.cli.output import Console


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"foxforge {__version__}")
        raise typer.Exit()


def main_command(
    ctx: typer.Context,
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Show debug output",
    ),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """foxforge: build customized Firefox browsers from a patch set."""
    ctx.obj = Console(verbose=verbose)

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)

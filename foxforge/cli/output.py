"""Terminal output for foxforge commands.

Contains:
- Console: Message helpers bound to the verbosity chosen on the command line
"""

from dataclasses import dataclass

import typer


@dataclass
class Console:
    """Writes command output.

    Created once per invocation from the --verbose flag and passed to
    commands through typer.Context.obj.
    """

    verbose: bool = False

    def title(self, text: str) -> None:
        typer.secho(f"\n{text}", bold=True)
        typer.echo()

    def info(self, message: str = "") -> None:
        typer.echo(message)

    def heading(self, text: str) -> None:
        typer.secho(text, fg=typer.colors.YELLOW)

    def success(self, message: str) -> None:
        typer.secho(f"✓ {message}", fg=typer.colors.GREEN)

    def warn(self, message: str) -> None:
        typer.secho(f"⚠️  {message}", fg=typer.colors.YELLOW, err=True)

    def error(self, message: str) -> None:
        typer.secho(message, fg=typer.colors.RED, err=True)

    def debug(self, message: str) -> None:
        """Only shown with --verbose."""
        if self.verbose:
            typer.secho(f"[debug] {message}", dim=True, err=True)

    def done(self, message: str) -> None:
        typer.echo()
        typer.secho(message, bold=True)

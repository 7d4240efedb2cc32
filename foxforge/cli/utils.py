"""Shared utility functions for CLI commands."""

import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer

from foxforge.cli.output import Console
from foxforge.config import ProjectPaths
from foxforge.exceptions import ForgeError, GeneralError
from foxforge.git import is_git_repository


def get_project_root() -> Path:
    """Get the project root (the current working directory)."""
    return Path.cwd()


def get_paths() -> ProjectPaths:
    """Get the paths of the project in the current directory."""
    return ProjectPaths(get_project_root())


def get_console(ctx: Optional[typer.Context]) -> Console:
    """Get the Console created by the root callback."""
    if ctx is not None:
        root = ctx.find_root()
        if isinstance(root.obj, Console):
            return root.obj
    return Console()


def is_interactive() -> bool:
    """Check if both stdin and stdout are attached to a terminal."""
    return sys.stdin.isatty() and sys.stdout.isatty()


@contextmanager
def handle_errors(console: Console) -> Iterator[None]:
    """Turn a ForgeError into a rendered message and its exit code.

    Usage:
        with handle_errors(console):
            ...
    """
    try:
        yield
    except ForgeError as e:
        console.error(f"\n{e.user_message}")
        if e.cause is not None:
            console.debug(f"Caused by: {e.cause!r}")
        raise typer.Exit(int(e.exit_code))


def require_engine(paths: ProjectPaths) -> None:
    """Ensure the Firefox source has been downloaded.

    Raises:
        GeneralError: If engine/ does not exist.
    """
    if not paths.engine.exists():
        raise GeneralError('Firefox source not found. Run "foxforge download" first.')


def require_repository(paths: ProjectPaths) -> None:
    """Ensure the engine exists and is under version control.

    Raises:
        GeneralError: If engine/ is missing or is not a git repository.
    """
    require_engine(paths)
    if not is_git_repository(paths.engine):
        raise GeneralError(
            'Engine directory is not a git repository. Run "foxforge download" to initialize.'
        )


def plural(count: int, word: str, suffix: str = "s") -> str:
    """Format a count with a naively pluralised word, e.g. ``3 patches``."""
    return f"{count} {word}{'' if count == 1 else suffix}"


def format_duration(seconds: float) -> str:
    """Format an elapsed time as ``4m 12s`` or ``37s``."""
    minutes, secs = divmod(int(seconds), 60)
    return f"{minutes}m {secs}s" if minutes > 0 else f"{secs}s"

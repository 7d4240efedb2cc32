"""CLI commands that inspect or revert the engine workspace: status, reset, discard."""

import typer

from foxforge.cli.utils import (
    get_console,
    get_paths,
    handle_errors,
    is_interactive,
    plural,
    require_repository,
)
from foxforge.exceptions import InvalidArgumentError
from foxforge.git import (
    StatusCategory,
    discard_file,
    get_path_status,
    get_status_entries,
    has_changes,
    reset_changes,
)


def status_command(ctx: typer.Context) -> None:
    """Show files changed in the engine since the baseline."""
    console = get_console(ctx)
    console.title("Forge Status")

    with handle_errors(console):
        paths = get_paths()
        require_repository(paths)

        entries = get_status_entries(paths.engine)
        if not entries:
            console.info("No modified files")
            console.done("Working tree clean")
            return

        console.info(f"{plural(len(entries), 'modified file')}:")
        console.info()

        grouped: dict[StatusCategory, list[str]] = {}
        for entry in entries:
            grouped.setdefault(entry.category, []).append(entry.path)

        for category, files in grouped.items():
            console.heading(f"{category.value}:")
            for file in files:
                console.info(f"  {file}")

        console.done(f"{plural(len(entries), 'file')} changed")


def reset_command(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Skip the confirmation prompt",
    ),
) -> None:
    """Discard all changes in the engine and return to the baseline."""
    console = get_console(ctx)
    console.title("Forge Reset")

    with handle_errors(console):
        paths = get_paths()
        require_repository(paths)

        if not has_changes(paths.engine):
            console.info("No changes to reset")
            console.done("Working tree already clean")
            return

        if not force:
            if not is_interactive():
                raise InvalidArgumentError(
                    "Refusing to reset without confirmation in non-interactive mode. "
                    "Use: foxforge reset --force",
                    "--force",
                )
            console.warn("This will discard all uncommitted changes in the engine directory.")
            if not typer.confirm("Are you sure you want to reset?", default=False):
                console.info("Reset cancelled")
                return

        reset_changes(paths.engine)
        console.success("Changes reset")
        console.done("Working tree restored to clean state")


def discard_command(
    ctx: typer.Context,
    file: str = typer.Argument(
        ...,
        help="File to revert, relative to engine/",
    ),
) -> None:
    """Revert the changes to a single file."""
    console = get_console(ctx)
    console.title("Forge Discard")

    with handle_errors(console):
        paths = get_paths()
        require_repository(paths)

        if get_path_status(paths.engine, file) is None:
            console.info(f'File "{file}" has no changes to discard')
            console.done("Nothing to discard")
            return

        discard_file(paths.engine, file)
        console.success(f"Discarded changes to {file}")
        console.done("File restored to original state")

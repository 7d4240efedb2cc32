"""CLI commands that move changes between patches/ and the engine: import, export, export-all."""

from pathlib import Path
from typing import Optional

import typer

from foxforge.cli.output import Console
from foxforge.cli.utils import (
    get_console,
    get_paths,
    handle_errors,
    is_interactive,
    plural,
    require_engine,
    require_repository,
)
from foxforge.exceptions import InvalidArgumentError
from foxforge.patches import (
    PatchError,
    apply_patches,
    count_patches,
    get_all_export_diff,
    get_file_export_diff,
    validate_patch_name,
    write_patch,
)


def _prompt_patch_name(console: Console, default: str) -> str:
    """Ask for a patch name until a valid one is entered."""
    while True:
        name = typer.prompt("Enter a name for this patch", default=default)
        error = validate_patch_name(name)
        if error is None:
            return name
        console.error(error)


def _resolve_patch_name(
    console: Console, name: Optional[str], usage: str, default: str
) -> str:
    """Validate --name, or prompt for it on an interactive terminal.

    Raises:
        InvalidArgumentError: If --name is invalid, or missing when not interactive.
    """
    if name is not None:
        error = validate_patch_name(name)
        if error:
            raise InvalidArgumentError(error, "--name")
        return name

    if not is_interactive():
        raise InvalidArgumentError(
            "The --name flag is required in non-interactive mode. "
            f'Use: {usage} --name "my-patch-name"',
            "--name",
        )
    return _prompt_patch_name(console, default)


def _report_export(console: Console, patch_path: Path, diff: str) -> None:
    console.success(f"Exported to {patch_path.name}")
    console.info()
    console.info(f"Patch saved to: patches/{patch_path.name}")
    console.debug(f"Diff size: {plural(len(diff.splitlines()), 'line')}")


def import_command(ctx: typer.Context) -> None:
    """Apply every patch in patches/ to the engine, in order."""
    console = get_console(ctx)
    console.title("Forge Import")

    with handle_errors(console):
        paths = get_paths()
        require_engine(paths)

        patch_count = count_patches(paths.patches)
        if patch_count == 0:
            console.info("No patch files found in patches/ directory.")
            console.done("Import complete (no patches)")
            return

        console.info(f"Found {plural(patch_count, 'patch', 'es')} to apply")

        results = apply_patches(paths.patches, paths.engine)
        failed = next((r for r in results if not r.success), None)

        for result in results:
            if result.success:
                console.success(f"  {result.patch.filename}")

        if failed is not None:
            console.error(f"Failed to apply: {failed.patch.filename}")
            if failed.error:
                console.error(failed.error)
            raise PatchError(
                f"Failed to apply patch: {failed.patch.filename}",
                patch_name=failed.patch.filename,
                cause=failed.cause,
            )

        console.done(f"Applied {plural(len(results), 'patch', 'es')}. All patches applied successfully!")


def export_command(
    ctx: typer.Context,
    file: str = typer.Argument(
        ...,
        help="Changed file to export, relative to engine/",
    ),
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="Patch name (required when not running in a terminal)",
    ),
) -> None:
    """Export the changes to one file as a new patch."""
    console = get_console(ctx)
    console.title("Forge Export")

    with handle_errors(console):
        paths = get_paths()
        require_repository(paths)

        diff = get_file_export_diff(paths.engine, file)
        patch_name = _resolve_patch_name(
            console, name, "foxforge export <file>", "my-change"
        )

        patch_path = write_patch(paths.patches, patch_name, diff)
        _report_export(console, patch_path, diff)
        console.done("Export complete")


def export_all_command(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(
        None,
        "--name",
        "-n",
        help="Patch name (required when not running in a terminal)",
    ),
) -> None:
    """Export every change in the engine as a single new patch."""
    console = get_console(ctx)
    console.title("Forge Export All")

    with handle_errors(console):
        paths = get_paths()
        require_repository(paths)

        diff = get_all_export_diff(paths.engine)
        if diff is None:
            console.info("No changes to export")
            console.done("Nothing to export")
            return

        patch_name = _resolve_patch_name(console, name, "foxforge export-all", "my-changes")

        patch_path = write_patch(paths.patches, patch_name, diff)
        _report_export(console, patch_path, diff)
        console.done("Export complete")

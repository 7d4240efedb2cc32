"""CLI commands that drive the Firefox build: build, run, package, watch."""

import time
from datetime import datetime, timezone
from typing import Optional

import typer

from foxforge.branding import is_branding_setup, setup_branding
from foxforge.cli.output import Console
from foxforge.cli.utils import (
    format_duration,
    get_console,
    get_paths,
    get_project_root,
    handle_errors,
    require_engine,
)
from foxforge.config import ForgeConfig, ProjectPaths, load_config, update_state
from foxforge.exceptions import GeneralError
from foxforge.mach import (
    INTERRUPTED_EXIT_CODE,
    BuildError,
    build,
    build_ui,
    generate_mozconfig,
    has_build_artifacts,
    package,
    run,
    watch,
)


def _prepare_engine(console: Console, paths: ProjectPaths, config: ForgeConfig) -> None:
    """Apply branding if needed and regenerate engine/mozconfig."""
    if not is_branding_setup(paths.engine, config):
        console.info("Setting up branding...")
        setup_branding(paths.engine, config)
        console.success("Branding configured")

    generate_mozconfig(paths.configs, paths.engine, config)
    console.success("mozconfig generated")


def build_command(
    ctx: typer.Context,
    ui: bool = typer.Option(
        False,
        "--ui",
        help="Fast UI-only rebuild (mach build faster)",
    ),
    jobs: Optional[int] = typer.Option(
        None,
        "--jobs",
        "-j",
        min=1,
        help="Number of parallel jobs (defaults to build.jobs in forge.yaml)",
    ),
    brand: Optional[str] = typer.Option(
        None,
        "--brand",
        help="Brand name recorded with the build",
    ),
) -> None:
    """Build the browser."""
    console = get_console(ctx)
    build_type = "UI-only" if ui else "Full"
    console.title(f"Forge Build ({build_type}{f' [{brand}]' if brand else ''})")

    with handle_errors(console):
        root = get_project_root()
        config = load_config(root)
        paths = get_paths()
        require_engine(paths)

        if brand:
            console.info(f"Brand: {brand}")

        _prepare_engine(console, paths, config)

        jobs = jobs if jobs is not None else config.build.jobs
        console.info(f"Starting {build_type.lower()} build...")
        if jobs and not ui:
            console.info(f"Using {jobs} parallel jobs")
        console.info()

        command = "mach build faster" if ui else "mach build"
        start = time.monotonic()
        try:
            if ui:
                exit_code = build_ui(paths.engine, config.build.python)
            else:
                exit_code = build(paths.engine, jobs, config.build.python)
        except OSError as e:
            raise BuildError("Build process failed to start", command, cause=e) from e
        elapsed = format_duration(time.monotonic() - start)

        if exit_code != 0:
            console.error(f"Build failed after {elapsed}")
            raise BuildError(f"Build failed with exit code {exit_code}", command)

        update_state(
            root,
            last_build=datetime.now(timezone.utc).isoformat(),
            brand=brand,
        )
        console.done(f"Build completed in {elapsed}!")


def run_command(
    ctx: typer.Context,
    args: Optional[list[str]] = typer.Argument(
        None,
        help="Extra arguments passed to the browser",
    ),
) -> None:
    """Launch the built browser."""
    console = get_console(ctx)
    console.title("Forge Run")

    with handle_errors(console):
        config = load_config(get_project_root())
        paths = get_paths()
        require_engine(paths)

        console.info("Launching browser...")
        console.info()

        exit_code = run(paths.engine, args or [], config.build.python)
        if exit_code != 0:
            raise BuildError(f"Browser exited with code {exit_code}", "mach run")


def package_command(
    ctx: typer.Context,
    brand: Optional[str] = typer.Option(
        None,
        "--brand",
        help="Brand name to package",
    ),
) -> None:
    """Create a distribution package."""
    console = get_console(ctx)
    console.title(f"Forge Package{f' [{brand}]' if brand else ''}")

    with handle_errors(console):
        config = load_config(get_project_root())
        paths = get_paths()
        require_engine(paths)

        if brand:
            console.info(f"Brand: {brand}")

        _prepare_engine(console, paths, config)

        console.info("Creating distribution package...")
        console.info("This may take a while.")
        console.info()

        start = time.monotonic()
        try:
            exit_code = package(paths.engine, config.build.python)
        except OSError as e:
            raise BuildError("Package process failed to start", "mach package", cause=e) from e
        elapsed = format_duration(time.monotonic() - start)

        if exit_code != 0:
            console.error(f"Packaging failed after {elapsed}")
            raise BuildError(f"Packaging failed with exit code {exit_code}", "mach package")

        console.info("Package created in obj-*/dist/")
        console.done(f"Packaging completed in {elapsed}!")


def watch_command(ctx: typer.Context) -> None:
    """Rebuild automatically when files change."""
    console = get_console(ctx)
    console.title("Forge Watch")

    with handle_errors(console):
        config = load_config(get_project_root())
        paths = get_paths()
        require_engine(paths)

        if not has_build_artifacts(paths.engine):
            raise GeneralError(
                "Watch mode requires a completed build. "
                "No build artifacts found (obj-*/dist/bin missing)\n\n"
                'Run "foxforge build" first to create the initial build, then run "foxforge watch".'
            )

        generate_mozconfig(paths.configs, paths.engine, config)
        console.success("mozconfig generated")

        console.info("Starting watch mode...")
        console.info("Press Ctrl+C to stop")
        console.info()

        try:
            exit_code = watch(paths.engine, config.build.python)
        except OSError as e:
            raise BuildError("Watch process failed to start", "mach watch", cause=e) from e

        if exit_code not in (0, INTERRUPTED_EXIT_CODE):
            raise BuildError(
                f"Watch failed with exit code {exit_code}. Check the output above for details.\n\n"
                "Common causes:\n"
                '  - Missing build: Run "foxforge build" first\n'
                '  - Missing dependencies: Run "foxforge bootstrap"',
                "mach watch",
            )

        console.done("Watch mode stopped")

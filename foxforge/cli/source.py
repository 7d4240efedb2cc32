"""CLI commands that fetch and prepare the Firefox source: download, bootstrap."""

import shutil
from contextlib import ExitStack

import typer

from foxforge.cli.utils import (
    get_console,
    get_paths,
    get_project_root,
    handle_errors,
    is_interactive,
    require_engine,
)
from foxforge.config import load_config, update_state
from foxforge.git import DirtyRepositoryError, has_changes, init_repository, is_git_repository
from foxforge.mach import BootstrapError, bootstrap
from foxforge.source import EngineExistsError, download_firefox_source, format_bytes


BASELINE_BRANCH = "firefox"


def download_command(
    ctx: typer.Context,
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help="Replace an existing engine/ directory",
    ),
) -> None:
    """Download the Firefox source and record it as the baseline."""
    console = get_console(ctx)
    console.title("Forge Download")

    with handle_errors(console):
        root = get_project_root()
        config = load_config(root)
        paths = get_paths()
        version = config.firefox.version

        console.info(f"Firefox version: {version}")

        if paths.engine.exists():
            if not force:
                raise EngineExistsError(paths.engine)

            if is_git_repository(paths.engine) and has_changes(paths.engine):
                if not is_interactive():
                    raise DirtyRepositoryError()
                console.warn("The engine has changes that have not been exported.")
                if not typer.confirm("Delete them and download again?", default=False):
                    console.info("Download cancelled")
                    return

            console.warn("Removing existing engine directory...")
            shutil.rmtree(paths.engine)

        with ExitStack() as stack:
            progress = {}

            def on_progress(downloaded: int, total: int) -> None:
                if "bar" not in progress:
                    progress["bar"] = stack.enter_context(
                        typer.progressbar(
                            length=total,
                            label=f"Downloading Firefox {version} ({format_bytes(total)})",
                        )
                    )
                    progress["last"] = 0
                progress["bar"].update(downloaded - progress["last"])
                progress["last"] = downloaded

            console.info(f"Downloading Firefox {version}...")
            tarball = download_firefox_source(
                version,
                config.firefox.product,
                paths.engine,
                paths.cache,
                on_progress,
            )

        console.debug(f"Source tarball: {tarball}")
        console.success(f"Firefox {version} downloaded")

        console.info("Initializing git repository (this may take a few minutes)...")
        init_repository(paths.engine, BASELINE_BRANCH)
        console.success("Git repository initialized")

        update_state(root, downloaded_version=version)
        console.done(f"Firefox {version} is ready!")


def bootstrap_command(ctx: typer.Context) -> None:
    """Install the Firefox build dependencies (mach bootstrap)."""
    console = get_console(ctx)
    console.title("Forge Bootstrap")

    with handle_errors(console):
        root = get_project_root()
        config = load_config(root)
        paths = get_paths()
        require_engine(paths)

        console.info("Installing Firefox build dependencies...")
        console.info("This may take a while and require sudo permissions.")
        console.info()

        exit_code = bootstrap(paths.engine, config.build.python)
        if exit_code != 0:
            raise BootstrapError(config.build.python)

        console.done("Build dependencies installed successfully!")

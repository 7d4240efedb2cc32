"""CLI command for creating a new foxforge project."""

import re
from typing import Callable, Optional

import typer

from foxforge.cli.output import Console
from foxforge.cli.utils import get_console, get_paths, handle_errors, is_interactive
from foxforge.config import (
    CONFIG_FILENAME,
    BuildConfig,
    FirefoxConfig,
    ForgeConfig,
    config_exists,
    infer_product,
    is_valid_app_id,
    is_valid_firefox_version,
    save_config,
)
from foxforge.exceptions import InvalidArgumentError
from foxforge.templates import MOZCONFIG_TEMPLATES, read_template, render


DEFAULT_FIREFOX_VERSION = "146.0"
DEFAULT_JOBS = 8
MAX_BROWSER_NAME_LENGTH = 50

_BINARY_NAME_RE = re.compile(r"^[a-z][a-z0-9-]*$")


def _slug(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())


def _check_name(value: str) -> Optional[str]:
    if not value.strip():
        return "Name is required"
    if len(value) > MAX_BROWSER_NAME_LENGTH:
        return f"Name must be {MAX_BROWSER_NAME_LENGTH} characters or less"
    return None


def _check_vendor(value: str) -> Optional[str]:
    return None if value.strip() else "Vendor is required"


def _check_app_id(value: str) -> Optional[str]:
    if is_valid_app_id(value):
        return None
    return "Must be in reverse-domain format (e.g., org.example.browser)"


def _check_binary_name(value: str) -> Optional[str]:
    if _BINARY_NAME_RE.match(value):
        return None
    return "Must start with a letter and contain only lowercase letters, numbers, and hyphens"


def _check_version(value: str) -> Optional[str]:
    if is_valid_firefox_version(value):
        return None
    return "Invalid Firefox version format (e.g., 146.0 or 128.0esr)"


def _resolve(
    console: Console,
    value: Optional[str],
    option: str,
    message: str,
    check: Callable[[str], Optional[str]],
    default: Optional[str] = None,
) -> str:
    """Take a value from its option, or prompt for it.

    Without a terminal a missing value falls back to the default, and is an
    error when there is none.
    """
    if value is not None:
        error = check(value)
        if error:
            raise InvalidArgumentError(error, option)
        return value

    if not is_interactive():
        if default is None:
            raise InvalidArgumentError(
                f"The {option} flag is required in non-interactive mode", option
            )
        return default

    while True:
        answer = typer.prompt(message, default=default)
        error = check(answer)
        if error is None:
            return answer
        console.error(error)


def setup_command(
    ctx: typer.Context,
    name: Optional[str] = typer.Option(None, "--name", help="Browser display name"),
    vendor: Optional[str] = typer.Option(None, "--vendor", help="Vendor or company name"),
    app_id: Optional[str] = typer.Option(
        None, "--app-id", help="Application ID in reverse-domain format"
    ),
    binary_name: Optional[str] = typer.Option(
        None, "--binary-name", help="Executable name"
    ),
    firefox_version: Optional[str] = typer.Option(
        None, "--firefox-version", help="Firefox version to base on"
    ),
    force: bool = typer.Option(
        False,
        "--force",
        "-f",
        help=f"Overwrite an existing {CONFIG_FILENAME}",
    ),
) -> None:
    """Create a new browser project in the current directory."""
    console = get_console(ctx)
    console.title("Forge Setup")

    with handle_errors(console):
        paths = get_paths()

        if config_exists(paths.root) and not force:
            if not is_interactive():
                raise InvalidArgumentError(
                    f"A {CONFIG_FILENAME} already exists. Use: foxforge setup --force",
                    "--force",
                )
            if not typer.confirm(f"A {CONFIG_FILENAME} already exists. Overwrite?", default=False):
                console.info("Setup cancelled")
                return

        name = _resolve(console, name, "--name", "What is the name of your browser?", _check_name)
        vendor = _resolve(
            console, vendor, "--vendor", "What is your vendor/company name?", _check_vendor
        )
        slug = _slug(name) or "browser"
        app_id = _resolve(
            console,
            app_id,
            "--app-id",
            "Application ID (reverse-domain format)",
            _check_app_id,
            default=f"org.{slug}.browser",
        )
        binary_name = _resolve(
            console,
            binary_name,
            "--binary-name",
            "Binary name (executable name)",
            _check_binary_name,
            default=slug,
        )
        firefox_version = _resolve(
            console,
            firefox_version,
            "--firefox-version",
            "Firefox version to base on",
            _check_version,
            default=DEFAULT_FIREFOX_VERSION,
        )

        config = ForgeConfig(
            name=name,
            vendor=vendor,
            app_id=app_id,
            binary_name=binary_name,
            firefox=FirefoxConfig(
                version=firefox_version,
                product=infer_product(firefox_version) or "firefox",
            ),
            build=BuildConfig(jobs=DEFAULT_JOBS),
        )

        for directory in (paths.patches, paths.configs, paths.forge_dir):
            directory.mkdir(parents=True, exist_ok=True)

        save_config(paths.root, config)

        variables = config.template_variables()
        for filename in MOZCONFIG_TEMPLATES:
            content = render(read_template("configs", filename), variables)
            (paths.configs / filename).write_text(content, encoding="utf-8")

        console.success("Project structure created")
        console.info()
        console.info("Next steps:")
        console.info("  1. foxforge download    # Download Firefox source")
        console.info("  2. foxforge bootstrap   # Install build dependencies")
        console.info("  3. foxforge build       # Build the browser")
        console.info("  4. foxforge run         # Launch the browser")
        console.done(f"{config.name} project created successfully!")

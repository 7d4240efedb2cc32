"""CLI command for diagnosing a foxforge project."""

from dataclasses import dataclass
from typing import Callable, Optional

import typer

from foxforge.cli.utils import get_console, get_paths, plural
from foxforge.config import (
    CONFIG_FILENAME,
    DEFAULT_PYTHON,
    ConfigError,
    config_exists,
    load_config,
)
from foxforge.exceptions import ForgeError
from foxforge.git import ensure_git, is_git_repository
from foxforge.mach import ensure_mach, ensure_python
from foxforge.patches import count_patches


@dataclass
class DoctorCheck:
    """Outcome of one diagnostic check."""

    name: str
    passed: bool
    message: str
    fix: Optional[str] = None


def _run_check(name: str, check: Callable[[], None], fix: Optional[str] = None) -> DoctorCheck:
    """Run a check; any ForgeError it raises marks it as failed."""
    try:
        check()
    except ForgeError as e:
        return DoctorCheck(name=name, passed=False, message=e.message, fix=fix)
    return DoctorCheck(name=name, passed=True, message="OK")


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ForgeError(message)


def collect_checks() -> list[DoctorCheck]:
    """Run every diagnostic check for the project in the current directory."""
    paths = get_paths()
    checks: list[DoctorCheck] = []

    checks.append(_run_check("Git installed", ensure_git, "Install git from https://git-scm.com/"))

    # The interpreter check falls back to the default until the config loads
    python = DEFAULT_PYTHON
    try:
        python = load_config(paths.root).build.python
    except ConfigError:
        pass

    checks.append(
        _run_check(
            f"{python} installed",
            lambda: ensure_python(python),
            f"Install {python} or set build.python in {CONFIG_FILENAME}",
        )
    )
    checks.append(
        _run_check(
            f"{CONFIG_FILENAME} exists",
            lambda: _require(config_exists(paths.root), f"{CONFIG_FILENAME} not found"),
            'Run "foxforge setup" to create a project',
        )
    )
    checks.append(
        _run_check(
            f"{CONFIG_FILENAME} is valid",
            lambda: load_config(paths.root),
            f"Check {CONFIG_FILENAME} for syntax errors or missing fields",
        )
    )

    engine_exists = paths.engine.is_dir()
    checks.append(
        _run_check(
            "Engine directory exists",
            lambda: _require(engine_exists, "engine/ directory not found"),
            'Run "foxforge download" to download Firefox source',
        )
    )

    if engine_exists:
        checks.append(
            _run_check(
                "Engine is git repository",
                lambda: _require(
                    is_git_repository(paths.engine), "engine/ is not a git repository"
                ),
                'Run "foxforge download --force" to reinitialize',
            )
        )
        checks.append(
            _run_check(
                "mach available",
                lambda: ensure_mach(paths.engine),
                'Firefox source may be corrupted. Re-download with "foxforge download --force"',
            )
        )

    # Optional: a project without patches is still healthy
    patches_exist = paths.patches.is_dir()
    checks.append(
        DoctorCheck(
            name="Patches directory exists",
            passed=patches_exist,
            message="OK" if patches_exist else "No patches/ directory (optional)",
        )
    )
    if patches_exist:
        checks.append(
            DoctorCheck(
                name="Patches found",
                passed=True,
                message=f"{plural(count_patches(paths.patches), 'patch', 'es')} found",
            )
        )

    checks.append(
        _run_check(
            "Configs directory exists",
            lambda: _require(paths.configs.is_dir(), "configs/ directory not found"),
            'Run "foxforge setup" to create configs',
        )
    )

    return checks


def doctor_command(ctx: typer.Context) -> None:
    """Check the environment and project for common problems."""
    console = get_console(ctx)
    console.title("Forge Doctor")

    checks = collect_checks()
    failed = [check for check in checks if not check.passed]

    for check in checks:
        if check.passed:
            console.success(f"{check.name}: {check.message}")
        else:
            console.error(f"✗ {check.name}: {check.message}")
            if check.fix:
                console.warn(f"Fix: {check.fix}")

    if not failed:
        console.done(f"All {len(checks)} checks passed!")
    else:
        console.done(f"{len(checks) - len(failed)} passed, {len(failed)} failed")

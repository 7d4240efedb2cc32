"""Firefox build system (mach) driver.

Contains:
- BuildError, MachNotFoundError, PythonNotFoundError, BootstrapError, MozconfigError
- get_platform: Current platform name as used for mozconfig files
- ensure_python / ensure_mach: Dependency checks
- run_mach: Run a mach subcommand with the terminal attached
- bootstrap, build, build_ui, run, package, watch: mach subcommands
- has_build_artifacts: Check for a finished build
- generate_mozconfig: Assemble engine/mozconfig from configs/
"""

import shutil
import subprocess
import sys
from pathlib import Path
from typing import Optional

from foxforge.config import DEFAULT_PYTHON, ForgeConfig
from foxforge.exceptions import ExitCode, ForgeError
from foxforge.templates import render


SUPPORTED_PLATFORMS = ("darwin", "linux", "win32")

# mach exits with 130 when interrupted with Ctrl+C
INTERRUPTED_EXIT_CODE = 130


class BuildError(ForgeError):
    """Raised when a build operation fails."""

    exit_code = ExitCode.BUILD_ERROR

    def __init__(
        self,
        message: str,
        command: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.command = command

    @property
    def user_message(self) -> str:
        msg = f"Build Error: {self.message}"
        if self.command:
            msg += f"\n\nCommand: {self.command}"
        msg += "\n\nTo fix this:\n"
        msg += "  1. Check the build output above for specific errors\n"
        msg += '  2. Ensure all dependencies are installed with "foxforge bootstrap"\n'
        msg += "  3. Try a clean build by deleting obj-* directories"
        return msg


class MachNotFoundError(BuildError):
    """Raised when mach is missing from the engine directory."""

    def __init__(self, engine_dir: Path):
        super().__init__(f"mach not found in {engine_dir}")
        self.engine_dir = engine_dir

    @property
    def user_message(self) -> str:
        return (
            "Build Error: Firefox build system (mach) not found.\n\n"
            f"Expected location: {self.engine_dir / 'mach'}\n\n"
            "To fix this:\n"
            '  1. Run "foxforge download" to download Firefox source\n'
            "  2. Ensure the engine/ directory contains the Firefox source"
        )


class PythonNotFoundError(BuildError):
    """Raised when the interpreter for mach is not available."""

    exit_code = ExitCode.MISSING_DEPENDENCY

    def __init__(self, python: str = DEFAULT_PYTHON):
        super().__init__(f"{python} is not installed or not found in PATH")
        self.python = python

    @property
    def user_message(self) -> str:
        return (
            f"Build Error: {self.python} is required but not found.\n\n"
            "To fix this:\n"
            f"  1. Install {self.python}\n"
            f"  2. Ensure {self.python} is in your PATH\n"
            '  3. Or point build.python at another interpreter with "foxforge config"'
        )


class BootstrapError(BuildError):
    """Raised when mach bootstrap fails."""

    def __init__(self, python: str = DEFAULT_PYTHON, cause: Optional[BaseException] = None):
        super().__init__("Bootstrap failed", f"{python} mach bootstrap", cause)

    @property
    def user_message(self) -> str:
        return (
            "Build Error: Bootstrap failed.\n\n"
            "The Firefox build dependencies could not be installed.\n\n"
            "To fix this:\n"
            "  1. Check the error output above\n"
            "  2. Ensure you have sufficient permissions\n"
            f"  3. Try running bootstrap manually: cd engine && {self.command}"
        )


class MozconfigError(BuildError):
    """Raised when engine/mozconfig cannot be generated."""

    @property
    def user_message(self) -> str:
        return (
            f"Build Error: {self.message}\n\n"
            "To fix this:\n"
            "  1. Check that the configs/ directory exists\n"
            "  2. Ensure the platform-specific mozconfig exists\n"
            '  3. Run "foxforge setup" to regenerate configs'
        )


def get_platform() -> str:
    """Get the current platform name (darwin, linux or win32).

    Raises:
        BuildError: On an unsupported platform.
    """
    platform = "linux" if sys.platform.startswith("linux") else sys.platform
    if platform not in SUPPORTED_PLATFORMS:
        raise BuildError(
            f"Unsupported platform: {sys.platform}. foxforge supports darwin, linux, and win32."
        )
    return platform


def ensure_python(python: str = DEFAULT_PYTHON) -> str:
    """Ensure the mach interpreter is on PATH.

    Returns:
        The resolved interpreter path.

    Raises:
        PythonNotFoundError: If it is not found.
    """
    resolved = shutil.which(python)
    if resolved is None:
        raise PythonNotFoundError(python)
    return resolved


def ensure_mach(engine_dir: Path) -> Path:
    """Ensure mach exists in the engine directory.

    Raises:
        MachNotFoundError: If it does not.
    """
    mach_path = engine_dir / "mach"
    if not mach_path.exists():
        raise MachNotFoundError(engine_dir)
    return mach_path


def run_mach(args: list[str], engine_dir: Path, python: str = DEFAULT_PYTHON) -> int:
    """Run a mach command in the engine directory.

    Output goes straight to the terminal; only the exit code is returned.

    Args:
        args: mach subcommand and arguments.
        engine_dir: The engine directory.
        python: Interpreter used to run mach.

    Returns:
        The mach exit code.
    """
    interpreter = ensure_python(python)
    mach_path = ensure_mach(engine_dir)
    result = subprocess.run([interpreter, str(mach_path), *args], cwd=engine_dir, check=False)
    return result.returncode


def bootstrap(engine_dir: Path, python: str = DEFAULT_PYTHON) -> int:
    """Install build dependencies with mach bootstrap."""
    return run_mach(["bootstrap", "--application-choice", "browser"], engine_dir, python)


def build(engine_dir: Path, jobs: Optional[int] = None, python: str = DEFAULT_PYTHON) -> int:
    """Run a full build."""
    args = ["build"]
    if jobs is not None:
        args += ["-j", str(jobs)]
    return run_mach(args, engine_dir, python)


def build_ui(engine_dir: Path, python: str = DEFAULT_PYTHON) -> int:
    """Run a fast UI-only build (``mach build faster``)."""
    return run_mach(["build", "faster"], engine_dir, python)


def run(engine_dir: Path, args: Optional[list[str]] = None, python: str = DEFAULT_PYTHON) -> int:
    """Launch the built browser."""
    return run_mach(["run", *(args or [])], engine_dir, python)


def package(engine_dir: Path, python: str = DEFAULT_PYTHON) -> int:
    """Create a distribution package."""
    return run_mach(["package"], engine_dir, python)


def watch(engine_dir: Path, python: str = DEFAULT_PYTHON) -> int:
    """Rebuild automatically on file changes."""
    return run_mach(["watch"], engine_dir, python)


def has_build_artifacts(engine_dir: Path) -> bool:
    """Check for an obj-*/dist/bin directory from a previous build."""
    if not engine_dir.is_dir():
        return False
    return any(
        entry.is_dir() and (entry / "dist" / "bin").is_dir()
        for entry in engine_dir.glob("obj-*")
    )


def generate_mozconfig(configs_dir: Path, engine_dir: Path, config: ForgeConfig) -> Path:
    """Generate engine/mozconfig from the project's mozconfig templates.

    configs/common.mozconfig (optional) is followed by
    configs/<platform>.mozconfig (required). Identity placeholders such as
    ``${binary_name}`` are substituted.

    Args:
        configs_dir: The project's configs directory.
        engine_dir: The engine directory.
        config: Project configuration.

    Returns:
        Path to the written mozconfig.

    Raises:
        MozconfigError: If the platform mozconfig is missing.
    """
    platform = get_platform()
    common_path = configs_dir / "common.mozconfig"
    platform_path = configs_dir / f"{platform}.mozconfig"
    output_path = engine_dir / "mozconfig"
    variables = config.template_variables()

    if not platform_path.is_file():
        raise MozconfigError(f"Platform mozconfig not found: {platform_path}")

    content = ""
    if common_path.is_file():
        common = render(common_path.read_text(encoding="utf-8"), variables)
        content += f"# Common configuration\n{common}\n\n"

    platform_content = render(platform_path.read_text(encoding="utf-8"), variables)
    content += f"# Platform configuration ({platform})\n{platform_content}"

    output_path.write_text(content, encoding="utf-8")
    return output_path

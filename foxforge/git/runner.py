"""Git command runner.

Contains:
- ensure_git: Verify the git binary is available
- _run_git_command: Run a git command in a directory and return its output
- _run_git_status: Run a git command and return only whether it succeeded
"""

import shutil
import subprocess
from pathlib import Path

from foxforge.git.exceptions import GitError, GitNotFoundError


def ensure_git() -> None:
    """Ensure git is available on PATH.

    Raises:
        GitNotFoundError: If git is not installed.
    """
    if shutil.which("git") is None:
        raise GitNotFoundError()


def _run_git_command(args: list[str], cwd: Path, strip: bool = True) -> str:
    """Run a git command and return its output.

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run the command in.
        strip: Whether to strip surrounding whitespace from stdout. Diff and
            status output must keep it, so those callers pass False.

    Returns:
        The stdout of the git command.

    Raises:
        GitError: If the command fails.
        GitNotFoundError: If git is not installed.
    """
    try:
        result = subprocess.run(
            ["git"] + args,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
            cwd=cwd,
        )
    except subprocess.CalledProcessError as e:
        stderr = (e.stderr or "").strip()
        raise GitError(stderr or "Git command failed", " ".join(args), cause=e) from e
    except FileNotFoundError as e:
        raise GitNotFoundError() from e
    return result.stdout.strip() if strip else result.stdout


def _run_git_status(args: list[str], cwd: Path) -> subprocess.CompletedProcess:
    """Run a git command without raising on a non-zero exit.

    Used where the exit code itself is the answer (``git apply --check``).

    Args:
        args: List of arguments to pass to git.
        cwd: Directory to run the command in.

    Returns:
        The completed process.

    Raises:
        GitNotFoundError: If git is not installed.
    """
    try:
        return subprocess.run(
            ["git"] + args,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=False,
            cwd=cwd,
        )
    except FileNotFoundError as e:
        raise GitNotFoundError() from e

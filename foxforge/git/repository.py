"""Workspace repository operations.

Contains:
- is_git_repository: Check for a .git directory
- init_repository: Create the baseline commit on an orphan branch
- get_head: Get the baseline commit hash
- reset_changes: Restore the whole workspace to the baseline
- discard_file: Restore a single path to the baseline
- check_patch: Dry-run a patch with git apply --check
- apply_patch: Apply a patch with git apply
"""

from pathlib import Path

from foxforge.git.exceptions import GitError, PatchApplyError
from foxforge.git.runner import _run_git_command, _run_git_status, ensure_git
from foxforge.git.status import get_path_status


BASELINE_MESSAGE = "Initial Firefox source"
BASELINE_AUTHOR_NAME = "Forge"
BASELINE_AUTHOR_EMAIL = "forge@localhost"


def is_git_repository(directory: Path) -> bool:
    """Check if a directory is a git repository.

    Only checks for the metadata directory; repository integrity is not
    validated.

    Args:
        directory: Directory to check.

    Returns:
        True if ``directory/.git`` exists.
    """
    return (directory / ".git").exists()


def init_repository(repo_dir: Path, branch_name: str = "main") -> None:
    """Initialize a repository whose only commit is the pristine tree.

    Args:
        repo_dir: Directory holding the extracted source.
        branch_name: Name for the orphan branch.

    Raises:
        GitNotFoundError: If git is not installed.
        GitError: If any git step fails.
    """
    ensure_git()

    _run_git_command(["init"], repo_dir)
    _run_git_command(["checkout", "--orphan", branch_name], repo_dir)

    _run_git_command(["config", "user.email", BASELINE_AUTHOR_EMAIL], repo_dir)
    _run_git_command(["config", "user.name", BASELINE_AUTHOR_NAME], repo_dir)
    # The baseline commit must not depend on the user's signing setup
    _run_git_command(["config", "commit.gpgsign", "false"], repo_dir)

    _run_git_command(["add", "-A"], repo_dir)
    _run_git_command(["commit", "-m", BASELINE_MESSAGE], repo_dir)


def get_head(repo_dir: Path) -> str:
    """Get the current HEAD commit hash.

    Args:
        repo_dir: The workspace repository directory.

    Returns:
        Commit hash.
    """
    return _run_git_command(["rev-parse", "HEAD"], repo_dir)


def reset_changes(repo_dir: Path) -> None:
    """Discard every change, tracked and untracked.

    HEAD is not moved, so the baseline commit stays as it is.

    Args:
        repo_dir: The workspace repository directory.
    """
    ensure_git()

    _run_git_command(["reset", "--hard", "HEAD"], repo_dir)
    _run_git_command(["clean", "-fd"], repo_dir)


def discard_file(repo_dir: Path, file_path: str) -> None:
    """Discard changes to a specific path.

    Tracked paths are checked out from HEAD. Untracked paths have no
    baseline content, so they are removed with ``git clean``.

    Args:
        repo_dir: The workspace repository directory.
        file_path: Path relative to the repository root.

    Raises:
        GitError: If git fails to restore the path.
    """
    ensure_git()

    entry = get_path_status(repo_dir, file_path)

    try:
        if entry is not None and entry.is_untracked:
            _run_git_command(["clean", "-fd", "--", file_path], repo_dir)
        elif entry is not None and entry.code[0] in ("A", "R", "C"):
            # The path does not exist in HEAD: unstage it, then remove it
            _run_git_command(["reset", "-q", "HEAD", "--", file_path], repo_dir)
            _run_git_command(["clean", "-fd", "--", file_path], repo_dir)
            if entry.code[0] == "R" and entry.orig_path:
                _run_git_command(["checkout", "HEAD", "--", entry.orig_path], repo_dir)
        else:
            _run_git_command(["checkout", "HEAD", "--", file_path], repo_dir)
    except GitError as e:
        raise GitError(
            f"Failed to discard {file_path}: {e.message}",
            f"checkout HEAD -- {file_path}",
            cause=e,
        ) from e


def _apply_args(patch_path: Path, check: bool, reverse: bool) -> list[str]:
    args = ["apply"]
    if check:
        args.append("--check")
    if reverse:
        args.append("--reverse")
    # Patches live outside the workspace, so the path must be absolute
    args.append(str(Path(patch_path).resolve()))
    return args


def check_patch(repo_dir: Path, patch_path: Path, reverse: bool = False) -> bool:
    """Check whether a patch would apply cleanly, without changing anything.

    Args:
        repo_dir: The workspace repository directory.
        patch_path: Path to the patch file.
        reverse: Check the reverse direction instead.

    Returns:
        True if ``git apply --check`` succeeds.
    """
    result = _run_git_status(_apply_args(patch_path, check=True, reverse=reverse), repo_dir)
    return result.returncode == 0


def apply_patch(repo_dir: Path, patch_path: Path, reverse: bool = False, check_first: bool = True) -> None:
    """Apply a patch to the working tree.

    Args:
        repo_dir: The workspace repository directory.
        patch_path: Path to the patch file.
        reverse: Apply the patch in reverse.
        check_first: Validate with ``--check`` before applying.

    Raises:
        PatchApplyError: If validation or application fails, carrying git's
            diagnostic text.
    """
    ensure_git()

    if check_first:
        result = _run_git_status(_apply_args(patch_path, check=True, reverse=reverse), repo_dir)
        if result.returncode != 0:
            raise PatchApplyError(patch_path, result.stderr)

    result = _run_git_status(_apply_args(patch_path, check=False, reverse=reverse), repo_dir)
    if result.returncode != 0:
        raise PatchApplyError(patch_path, result.stderr)

"""Git-related exception classes.

Contains all exception classes for workspace repository operations:
- GitError: Base exception for git-related errors
- GitNotFoundError: Raised when the git binary is not on PATH
- PatchApplyError: Raised when git apply (or its --check) fails
- DirtyRepositoryError: Raised when a clean workspace was expected
"""

from pathlib import Path
from typing import Optional, Union

from foxforge.exceptions import ExitCode, ForgeError


class GitError(ForgeError):
    """Custom exception for git-related errors."""

    exit_code = ExitCode.GIT_ERROR

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
        msg = f"Git Error: {self.message}"
        if self.command:
            msg += f"\n\nCommand: git {self.command}"
        msg += "\n\nTo fix this:\n"
        msg += "  1. Ensure git is installed and in your PATH\n"
        msg += "  2. Check if the repository is in a valid state\n"
        msg += '  3. Try running "foxforge reset" to start fresh'
        return msg


class GitNotFoundError(GitError):
    """Raised when git is not installed."""

    exit_code = ExitCode.MISSING_DEPENDENCY

    def __init__(self):
        super().__init__("Git is not installed or not found in PATH")

    @property
    def user_message(self) -> str:
        return (
            "Git Error: Git is not installed or not found in PATH.\n\n"
            "To fix this:\n"
            "  1. Install git from https://git-scm.com/\n"
            "  2. Ensure git is in your system PATH\n"
            "  3. Restart your terminal and try again"
        )


class PatchApplyError(GitError):
    """Raised when applying a patch fails.

    ``stderr`` holds git's own diagnostic so callers can show exactly which
    hunk or file did not apply.
    """

    def __init__(self, patch_path: Union[str, Path], stderr: str = ""):
        super().__init__(f"Failed to apply patch: {patch_path}", "apply")
        self.patch_path = str(patch_path)
        self.stderr = stderr.strip()

    @property
    def user_message(self) -> str:
        msg = f"Git Error: Failed to apply patch.\n\nPatch: {self.patch_path}\n\n"
        if self.stderr:
            msg += f"{self.stderr}\n\n"
        msg += (
            "This usually means the patch conflicts with existing changes.\n\n"
            "To fix this:\n"
            "  1. Check if the Firefox version matches the patch\n"
            '  2. Use "foxforge reset" to start with clean source\n'
            "  3. Update the patch to match the current Firefox version"
        )
        return msg


class DirtyRepositoryError(GitError):
    """Raised when the workspace has uncommitted changes."""

    def __init__(self):
        super().__init__("Repository has uncommitted changes")

    @property
    def user_message(self) -> str:
        return (
            "Git Error: The Firefox source has uncommitted changes.\n\n"
            "To fix this:\n"
            '  1. Export your changes with "foxforge export-all"\n'
            '  2. Use "foxforge reset" to restore clean state\n'
            '  3. Then run "foxforge import" to reapply patches'
        )

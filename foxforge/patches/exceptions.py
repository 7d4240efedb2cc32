"""Patch engine exception classes.

Contains:
- PatchError: A patch in the set could not be applied
- ExportError: Workspace changes could not be exported as a patch
"""

from typing import Optional

from foxforge.exceptions import ExitCode, ForgeError


class PatchError(ForgeError):
    """Raised when patch operations fail."""

    exit_code = ExitCode.PATCH_ERROR

    def __init__(
        self,
        message: str,
        patch_name: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.patch_name = patch_name

    @property
    def user_message(self) -> str:
        msg = f"Patch Error: {self.message}"
        if self.patch_name:
            msg += f"\n\nPatch: {self.patch_name}"
        msg += "\n\nTo fix this:\n"
        msg += "  1. Check if the patch is compatible with the Firefox version\n"
        msg += '  2. Use "foxforge reset" to start with clean source\n'
        msg += "  3. Update the patch for the current Firefox version"
        return msg


class ExportError(ForgeError):
    """Raised when changes cannot be exported."""

    pass

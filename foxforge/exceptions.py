"""Base exception classes and exit codes for foxforge.

Contains:
- ExitCode: Process exit codes, one per failure category
- ForgeError: Base exception carrying an exit code and a user-facing message
- GeneralError: Unexpected or uncategorized failures
- InvalidArgumentError: A command-line argument was rejected
"""

from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Exit codes surfaced to the invoking shell."""

    SUCCESS = 0
    GENERAL_ERROR = 1
    CONFIG_ERROR = 2
    DOWNLOAD_ERROR = 3
    GIT_ERROR = 4
    BUILD_ERROR = 5
    PATCH_ERROR = 6
    MISSING_DEPENDENCY = 7


class ForgeError(Exception):
    """Base exception for all foxforge errors.

    Subclasses set ``exit_code`` and may override ``user_message`` to add
    context and remediation steps.
    """

    exit_code: ExitCode = ExitCode.GENERAL_ERROR

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    @property
    def user_message(self) -> str:
        """Message shown to the user when this error ends a command."""
        return self.message


class GeneralError(ForgeError):
    """General error for unexpected failures."""

    pass


class InvalidArgumentError(ForgeError):
    """Raised when a command-line argument is invalid."""

    def __init__(
        self,
        message: str,
        argument: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.argument = argument

    @property
    def user_message(self) -> str:
        msg = f"Invalid Argument: {self.message}"
        if self.argument:
            msg += f"\n\nArgument: {self.argument}"
        return msg

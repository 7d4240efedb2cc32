"""Workspace repository adapter for foxforge.

This package wraps the version-controlled engine directory:
- exceptions: GitError, GitNotFoundError, PatchApplyError, DirtyRepositoryError
- runner: ensure_git, _run_git_command, _run_git_status
- status: StatusCategory, StatusEntry, parse_status, get_status_entries,
          has_changes, get_modified_files, get_untracked_files, get_path_status
- diff: get_file_diff, generate_new_file_diff, get_all_diff
- repository: is_git_repository, init_repository, get_head, reset_changes,
              discard_file, check_patch, apply_patch
"""

# Exceptions
from foxforge.git.exceptions import (
    DirtyRepositoryError,
    GitError,
    GitNotFoundError,
    PatchApplyError,
)

# Runner utilities
from foxforge.git.runner import (
    _run_git_command,
    _run_git_status,
    ensure_git,
)

# Status utilities
from foxforge.git.status import (
    StatusCategory,
    StatusEntry,
    categorize,
    get_modified_files,
    get_path_status,
    get_status_entries,
    get_untracked_files,
    has_changes,
    parse_status,
)

# Diff utilities
from foxforge.git.diff import (
    generate_new_file_diff,
    get_all_diff,
    get_file_diff,
)

# Repository operations
from foxforge.git.repository import (
    apply_patch,
    check_patch,
    discard_file,
    get_head,
    init_repository,
    is_git_repository,
    reset_changes,
)


__all__ = [
    # Exceptions
    "GitError",
    "GitNotFoundError",
    "PatchApplyError",
    "DirtyRepositoryError",
    # Runner
    "ensure_git",
    "_run_git_command",
    "_run_git_status",
    # Status
    "StatusCategory",
    "StatusEntry",
    "categorize",
    "parse_status",
    "get_status_entries",
    "has_changes",
    "get_modified_files",
    "get_untracked_files",
    "get_path_status",
    # Diff
    "get_file_diff",
    "generate_new_file_diff",
    "get_all_diff",
    # Repository
    "is_git_repository",
    "init_repository",
    "get_head",
    "reset_changes",
    "discard_file",
    "check_patch",
    "apply_patch",
]

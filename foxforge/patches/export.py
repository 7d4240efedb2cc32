"""Diff export engine.

Contains:
- validate_patch_name: Check a user-supplied patch name
- sanitize_filename: Turn a patch name into a filename fragment
- build_patch_filename: Numbered filename for the next patch
- get_file_export_diff: Diff for a single changed file
- get_all_export_diff: Diff for every change in the workspace
- write_patch: Write a diff into the patches directory
"""

import re
from pathlib import Path
from typing import Optional

from foxforge.exceptions import GeneralError
from foxforge.git import (
    generate_new_file_diff,
    get_all_diff,
    get_file_diff,
    get_path_status,
    has_changes,
)
from foxforge.patches.discovery import PATCH_EXTENSION, get_next_patch_number
from foxforge.patches.exceptions import ExportError


MAX_NAME_LENGTH = 50

_VALID_NAME_RE = re.compile(r"^[a-zA-Z0-9\-_ ]+$")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def validate_patch_name(name: str) -> Optional[str]:
    """Validate a patch name.

    Args:
        name: The patch name to validate.

    Returns:
        An error message if invalid, None if valid.
    """
    if not name.strip():
        return "Name is required"
    if len(name) > MAX_NAME_LENGTH:
        return f"Name must be {MAX_NAME_LENGTH} characters or less"
    if not _VALID_NAME_RE.match(name):
        return "Name can only contain letters, numbers, hyphens, underscores, and spaces"
    return None


def sanitize_filename(name: str) -> str:
    """Sanitize a string for use in a filename.

    Lower-cases, collapses runs of non-alphanumerics into one hyphen, trims
    hyphens from both ends and truncates to 50 characters.
    """
    sanitized = _NON_ALNUM_RE.sub("-", name.lower()).strip("-")
    return sanitized[:MAX_NAME_LENGTH]


def build_patch_filename(patches_dir: Path, name: str) -> str:
    """Build the filename for a new patch.

    Args:
        patches_dir: Path to the patches directory.
        name: Patch name as given by the user.

    Returns:
        Filename like ``004-my-change.patch``.
    """
    sanitized = sanitize_filename(name) or "patch"
    return f"{get_next_patch_number(patches_dir)}-{sanitized}{PATCH_EXTENSION}"


def get_file_export_diff(repo_dir: Path, file_path: str) -> str:
    """Get the diff to export for one file.

    Untracked files (including files inside untracked directories) get a
    synthesized new-file diff; tracked files are diffed against HEAD.

    Args:
        repo_dir: The workspace repository directory.
        file_path: Path relative to the repository root.

    Returns:
        Non-empty diff text.

    Raises:
        GeneralError: If the file has no changes.
        ExportError: If the path is a directory or the diff is empty.
    """
    target = file_path.rstrip("/")
    entry = get_path_status(repo_dir, file_path)

    if entry is None:
        raise GeneralError(
            f'File "{file_path}" has no changes to export.\n\n'
            'Run "foxforge status" to see modified files.'
        )
    if entry.is_directory or file_path.endswith("/"):
        raise ExportError(
            f'"{file_path}" is a directory.\n\n'
            'Use "foxforge export-all" to export all changes including new directories.'
        )

    if entry.is_untracked:
        diff = generate_new_file_diff(repo_dir, target)
    else:
        diff = get_file_diff(repo_dir, target)

    if not diff.strip():
        raise ExportError(
            f'File "{file_path}" has no diff content to export.\n\n'
            "The file may be staged but unchanged, or binary."
        )
    return diff


def get_all_export_diff(repo_dir: Path) -> Optional[str]:
    """Get the diff to export for the whole workspace.

    Args:
        repo_dir: The workspace repository directory.

    Returns:
        Combined diff text, or None when there are no changes at all.

    Raises:
        ExportError: If git reports changes but none can be expressed as a
            text diff.
    """
    if not has_changes(repo_dir):
        return None

    diff = get_all_diff(repo_dir)
    if not diff.strip():
        raise ExportError(
            "The workspace has changes but no diff content to export.\n\n"
            "The changed files may be staged but unchanged, or binary."
        )
    return diff


def write_patch(patches_dir: Path, name: str, diff: str) -> Path:
    """Write a diff as the next patch in the set.

    Args:
        patches_dir: Path to the patches directory (created if missing).
        name: Patch name as given by the user.
        diff: Diff content.

    Returns:
        Path to the written patch file.
    """
    patches_dir.mkdir(parents=True, exist_ok=True)
    patch_path = patches_dir / build_patch_filename(patches_dir, name)
    # newline="" keeps CRLF content intact and avoids translation on Windows
    patch_path.write_text(diff, encoding="utf-8", newline="")
    return patch_path

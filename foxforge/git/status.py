"""Git status utilities.

Contains:
- StatusCategory: Semantic category of a porcelain status code
- StatusEntry: One parsed line of porcelain status output
- parse_status: Parse porcelain v1 output into StatusEntry objects
- get_status_entries: Get the workspace delta as StatusEntry objects
- has_changes: Check whether the workspace differs from the baseline
- get_modified_files: Get the paths listed by git status
- get_untracked_files: Get untracked files with directories expanded
- get_path_status: Find the status entry for a single path
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from foxforge.git.runner import _run_git_command


class StatusCategory(Enum):
    """Semantic category of a two-character porcelain status code."""

    MODIFIED = "modified"
    ADDED = "added"
    DELETED = "deleted"
    RENAMED = "renamed"
    COPIED = "copied"
    UNMERGED = "unmerged"
    UNTRACKED = "untracked"
    IGNORED = "ignored"
    CHANGED = "changed"


_CODE_CATEGORIES = {
    "M": StatusCategory.MODIFIED,
    "A": StatusCategory.ADDED,
    "D": StatusCategory.DELETED,
    "R": StatusCategory.RENAMED,
    "C": StatusCategory.COPIED,
    "U": StatusCategory.UNMERGED,
}

# Both-sides codes that git reports for unresolved merges
_UNMERGED_CODES = {"DD", "AU", "UD", "UA", "DU", "AA", "UU"}


def categorize(code: str) -> StatusCategory:
    """Map a porcelain status code to its semantic category.

    The index column wins over the worktree column, so ``MM`` is modified
    and ``AM`` is added. Unknown codes (e.g. ``T`` typechange) are CHANGED.

    Args:
        code: Two-character XY status code.

    Returns:
        The matching StatusCategory.
    """
    if code == "??":
        return StatusCategory.UNTRACKED
    if code == "!!":
        return StatusCategory.IGNORED
    if code in _UNMERGED_CODES:
        return StatusCategory.UNMERGED
    for char in code:
        if char != " ":
            return _CODE_CATEGORIES.get(char, StatusCategory.CHANGED)
    return StatusCategory.CHANGED


@dataclass
class StatusEntry:
    """A single file reported by ``git status --porcelain``."""

    code: str  # Raw XY code, e.g. " M", "A ", "??"
    path: str  # Untracked directories keep their trailing "/"
    orig_path: Optional[str] = None  # Source path for renames and copies

    @property
    def category(self) -> StatusCategory:
        return categorize(self.code)

    @property
    def is_untracked(self) -> bool:
        return self.code == "??"

    @property
    def is_directory(self) -> bool:
        return self.path.endswith("/")


def parse_status(output: str) -> list[StatusEntry]:
    """Parse ``git status --porcelain=v1 -z`` output, preserving git's order.

    Records are NUL-terminated and paths are written as-is, without C-style
    quoting. A rename or copy record is followed by one more record holding
    the source path.

    Args:
        output: Raw NUL-separated status output.

    Returns:
        List of StatusEntry objects.
    """
    entries = []
    records = iter(output.split("\0"))
    for record in records:
        # Porcelain format: XY<space>path
        if len(record) < 4 or record.startswith("##"):
            continue
        code = record[:2]
        orig_path = next(records, None) if code[0] in ("R", "C") else None
        entries.append(StatusEntry(code=code, path=record[3:], orig_path=orig_path))
    return entries


def get_status_entries(repo_dir: Path) -> list[StatusEntry]:
    """Get the workspace delta with status codes.

    Args:
        repo_dir: The workspace repository directory.

    Returns:
        List of StatusEntry objects in git's order.
    """
    # Leading spaces are part of the status code, so output is not stripped
    output = _run_git_command(["status", "--porcelain=v1", "-z"], repo_dir, strip=False)
    return parse_status(output)


def has_changes(repo_dir: Path) -> bool:
    """Check if the workspace differs from the baseline commit.

    Args:
        repo_dir: The workspace repository directory.

    Returns:
        True if git status reports anything.
    """
    return len(get_status_entries(repo_dir)) > 0


def get_modified_files(repo_dir: Path) -> list[str]:
    """Get the list of changed paths, tracked and untracked.

    Args:
        repo_dir: The workspace repository directory.

    Returns:
        List of paths as reported by git status.
    """
    return [entry.path for entry in get_status_entries(repo_dir)]


def get_untracked_files(repo_dir: Path) -> list[str]:
    """Get all untracked files, including files inside untracked directories.

    ``git status`` collapses a new directory into a single ``dir/`` entry;
    ``ls-files --others`` lists every file in it individually.

    Args:
        repo_dir: The workspace repository directory.

    Returns:
        List of untracked file paths relative to the repository root.
    """
    output = _run_git_command(
        ["ls-files", "--others", "--exclude-standard", "-z"], repo_dir, strip=False
    )
    return [path for path in output.split("\0") if path]


def get_path_status(repo_dir: Path, file_path: str) -> Optional[StatusEntry]:
    """Find the status entry for a single path.

    A trailing ``/`` is ignored when matching. Files inside a new directory
    only appear in git status as ``dir/``; they get an untracked entry of
    their own.

    Args:
        repo_dir: The workspace repository directory.
        file_path: Path relative to the repository root.

    Returns:
        The StatusEntry, or None if the path has no changes.
    """
    target = file_path.rstrip("/")
    for entry in get_status_entries(repo_dir):
        if entry.path.rstrip("/") == target:
            return entry
    if target in get_untracked_files(repo_dir):
        return StatusEntry(code="??", path=target)
    return None

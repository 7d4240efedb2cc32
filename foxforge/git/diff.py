"""Git diff utilities.

Contains:
- get_file_diff: Diff of one tracked file against the baseline
- generate_new_file_diff: Synthesize a unified diff for an untracked file
- get_all_diff: Tracked diff plus synthesized diffs for every untracked file
"""

import os
from pathlib import Path

from foxforge.git.runner import _run_git_command
from foxforge.git.status import get_untracked_files


# Keep user diff settings (color, external diff drivers) out of patch files
_DIFF_ARGS = ["diff", "--no-color", "--no-ext-diff", "HEAD"]


def get_file_diff(repo_dir: Path, file_path: str) -> str:
    """Get the diff for a specific file against HEAD.

    Args:
        repo_dir: The workspace repository directory.
        file_path: Path to the file, relative to the repository root.

    Returns:
        Unified diff text (empty if the file is unchanged).
    """
    return _run_git_command(_DIFF_ARGS + ["--", file_path], repo_dir, strip=False)


def generate_new_file_diff(repo_dir: Path, file_path: str) -> str:
    """Generate a unified diff that creates an untracked file.

    The output is what ``git diff`` would print for the same file once
    staged, so ``git apply`` accepts it. A trailing
    ``\\ No newline at end of file`` marker is emitted when the content does
    not end with a newline. Empty files produce only the header lines.

    Binary content (NUL bytes or invalid UTF-8) cannot be carried in a text
    patch, so an empty string is returned for it.

    Args:
        repo_dir: The workspace repository directory.
        file_path: Path to the file, relative to the repository root.

    Returns:
        Diff content in unified diff format, ending with a newline.
    """
    full_path = repo_dir / file_path
    data = full_path.read_bytes()
    if b"\0" in data:
        return ""
    try:
        content = data.decode("utf-8")
    except UnicodeDecodeError:
        return ""

    mode = "100755" if os.access(full_path, os.X_OK) else "100644"
    diff_lines = [
        f"diff --git a/{file_path} b/{file_path}",
        f"new file mode {mode}",
    ]

    if not content:
        return "\n".join(diff_lines) + "\n"

    lines = content.split("\n")
    has_trailing_newline = content.endswith("\n")
    line_count = len(lines) - 1 if has_trailing_newline else len(lines)

    diff_lines.extend([
        "--- /dev/null",
        f"+++ b/{file_path}",
        f"@@ -0,0 +1,{line_count} @@",
    ])
    diff_lines.extend(f"+{line}" for line in lines[:line_count])

    if not has_trailing_newline:
        diff_lines.append("\\ No newline at end of file")

    # git apply requires the patch to end with a newline
    return "\n".join(diff_lines) + "\n"


def get_all_diff(repo_dir: Path) -> str:
    """Get the diff for all changes, including untracked (new) files.

    Untracked files are enumerated with ``ls-files --others`` so files inside
    new directories are diffed one by one.

    Args:
        repo_dir: The workspace repository directory.

    Returns:
        Combined diff text, or an empty string if nothing is exportable.
    """
    tracked_diff = _run_git_command(_DIFF_ARGS, repo_dir, strip=False)

    untracked_diffs = [
        generate_new_file_diff(repo_dir, file_path)
        for file_path in get_untracked_files(repo_dir)
    ]

    fragments = [d for d in [tracked_diff, *untracked_diffs] if d.strip()]
    if not fragments:
        return ""
    return "\n".join(fragment.rstrip("\n") for fragment in fragments) + "\n"

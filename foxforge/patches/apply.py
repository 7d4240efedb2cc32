"""Patch apply engine.

Contains:
- probe_patch: Find out whether a patch applies, is applied, or conflicts
- apply_patch_idempotent: Apply a patch whether or not it is already present
- apply_patches: Apply the whole patch set in order, stopping at the first failure
"""

from pathlib import Path

from foxforge.git import (
    GitError,
    GitNotFoundError,
    PatchApplyError,
    apply_patch,
    check_patch,
    ensure_git,
)
from foxforge.patches.discovery import discover_patches
from foxforge.patches.models import PatchInfo, PatchProbe, PatchResult


def probe_patch(repo_dir: Path, patch_path: Path) -> PatchProbe:
    """Check a patch against the working tree without modifying it.

    The reverse direction is checked first: if it applies, the patch's
    changes are already present.

    Args:
        repo_dir: The workspace repository directory.
        patch_path: Path to the patch file.

    Returns:
        The PatchProbe state.
    """
    if check_patch(repo_dir, patch_path, reverse=True):
        return PatchProbe.ALREADY_APPLIED
    if check_patch(repo_dir, patch_path):
        return PatchProbe.APPLIES
    return PatchProbe.CONFLICTS


def apply_patch_idempotent(repo_dir: Path, patch_path: Path) -> PatchProbe:
    """Apply a patch so that re-running it leaves the tree unchanged.

    An already applied patch is reversed and then applied forward again,
    which ends in the same content. A conflicting patch fails the forward
    check and raises.

    Args:
        repo_dir: The workspace repository directory.
        patch_path: Path to the patch file.

    Returns:
        The state the patch was found in before applying.

    Raises:
        PatchApplyError: If the patch does not apply.
    """
    probe = probe_patch(repo_dir, patch_path)
    if probe is PatchProbe.ALREADY_APPLIED:
        apply_patch(repo_dir, patch_path, reverse=True, check_first=False)
    apply_patch(repo_dir, patch_path)
    return probe


def _apply_single_patch(repo_dir: Path, patch: PatchInfo) -> PatchResult:
    """Apply one patch and capture the outcome instead of raising."""
    try:
        apply_patch_idempotent(repo_dir, patch.path)
    except GitNotFoundError:
        raise
    except PatchApplyError as e:
        return PatchResult(patch=patch, success=False, error=e.stderr or e.message, cause=e)
    except GitError as e:
        return PatchResult(patch=patch, success=False, error=e.message, cause=e)
    return PatchResult(patch=patch, success=True)


def apply_patches(patches_dir: Path, repo_dir: Path) -> list[PatchResult]:
    """Apply all patches in order.

    Each patch assumes every earlier one is applied, so the first failure
    stops the run. The results include that failed patch.

    Args:
        patches_dir: Path to the patches directory.
        repo_dir: The workspace repository directory.

    Returns:
        Results for each patch attempted.

    Raises:
        GitNotFoundError: If git is not installed.
    """
    patches = discover_patches(patches_dir)
    if not patches:
        return []

    ensure_git()

    results: list[PatchResult] = []
    for patch in patches:
        result = _apply_single_patch(repo_dir, patch)
        results.append(result)
        if not result.success:
            break

    return results

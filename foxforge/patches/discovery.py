"""Patch set discovery.

Contains:
- extract_order: Parse the numeric prefix of a patch filename
- discover_patches: List patch files in application order
- count_patches: Number of patch files
- get_next_patch_number: Zero-padded prefix for the next exported patch
"""

import math
import re
from pathlib import Path
from typing import Union

from foxforge.patches.models import PatchInfo


PATCH_EXTENSION = ".patch"

_ORDER_RE = re.compile(r"^(\d+)-")


def extract_order(filename: str) -> Union[int, float]:
    """Extract the order number from a patch filename.

    Expects a format like ``001-description.patch``.

    Args:
        filename: Patch filename.

    Returns:
        The order number, or math.inf if there is no numeric prefix.
    """
    match = _ORDER_RE.match(filename)
    if match:
        return int(match.group(1))
    return math.inf


def discover_patches(patches_dir: Path) -> list[PatchInfo]:
    """Discover patch files in a directory.

    Patches are sorted by their numeric prefix; unprefixed patches come
    last. Patches sharing a prefix are ordered by filename so the result
    does not depend on directory listing order.

    Args:
        patches_dir: Path to the patches directory.

    Returns:
        List of PatchInfo in application order (empty if the directory
        does not exist).
    """
    if not patches_dir.is_dir():
        return []

    patches = [
        PatchInfo(path=entry, filename=entry.name, order=extract_order(entry.name))
        for entry in patches_dir.iterdir()
        if entry.is_file() and entry.suffix == PATCH_EXTENSION
    ]
    patches.sort(key=PatchInfo.sort_key)
    return patches


def count_patches(patches_dir: Path) -> int:
    """Count the patch files in a directory.

    Args:
        patches_dir: Path to the patches directory.

    Returns:
        Number of patches.
    """
    return len(discover_patches(patches_dir))


def get_next_patch_number(patches_dir: Path) -> str:
    """Get the prefix for a new patch.

    Only numbered patches count; with none (or only unprefixed ones) the
    sequence starts at 001.

    Args:
        patches_dir: Path to the patches directory.

    Returns:
        Three-digit zero-padded number, e.g. "008" after 001, 003 and 007.
    """
    orders = [patch.order for patch in discover_patches(patches_dir) if patch.has_order]
    next_number = max(orders) + 1 if orders else 1
    return f"{next_number:03d}"

"""Data models for the patch engine.

Contains:
- PatchInfo: A patch file and its position in the patch set
- PatchResult: Outcome of applying one patch
- PatchProbe: What git says a patch would do to the current tree
"""

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional, Union


@dataclass(frozen=True)
class PatchInfo:
    """A patch file in the patches directory."""

    path: Path
    filename: str
    order: Union[int, float]  # Numeric filename prefix, math.inf if none

    @property
    def has_order(self) -> bool:
        return not math.isinf(self.order)

    def sort_key(self) -> tuple:
        return (self.order, self.filename)


@dataclass
class PatchResult:
    """Result of applying a single patch."""

    patch: PatchInfo
    success: bool
    error: Optional[str] = None
    cause: Optional[Exception] = None  # Underlying git error on failure


class PatchProbe(Enum):
    """State of a patch relative to the working tree."""

    APPLIES = "applies"  # Forward check passes: not applied yet
    ALREADY_APPLIED = "already_applied"  # Reverse check passes
    CONFLICTS = "conflicts"  # Neither direction applies

"""Patch engine for foxforge.

This package turns the patches directory into workspace state and back:
- models: PatchInfo, PatchResult, PatchProbe
- exceptions: PatchError, ExportError
- discovery: extract_order, discover_patches, count_patches, get_next_patch_number
- apply: probe_patch, apply_patch_idempotent, apply_patches
- export: validate_patch_name, sanitize_filename, build_patch_filename,
          get_file_export_diff, get_all_export_diff, write_patch
"""

# Models
from foxforge.patches.models import (
    PatchInfo,
    PatchProbe,
    PatchResult,
)

# Exceptions
from foxforge.patches.exceptions import (
    ExportError,
    PatchError,
)

# Discovery
from foxforge.patches.discovery import (
    count_patches,
    discover_patches,
    extract_order,
    get_next_patch_number,
)

# Apply engine
from foxforge.patches.apply import (
    apply_patch_idempotent,
    apply_patches,
    probe_patch,
)

# Export engine
from foxforge.patches.export import (
    build_patch_filename,
    get_all_export_diff,
    get_file_export_diff,
    sanitize_filename,
    validate_patch_name,
    write_patch,
)


__all__ = [
    # Models
    "PatchInfo",
    "PatchResult",
    "PatchProbe",
    # Exceptions
    "PatchError",
    "ExportError",
    # Discovery
    "extract_order",
    "discover_patches",
    "count_patches",
    "get_next_patch_number",
    # Apply
    "probe_patch",
    "apply_patch_idempotent",
    "apply_patches",
    # Export
    "validate_patch_name",
    "sanitize_filename",
    "build_patch_filename",
    "get_file_export_diff",
    "get_all_export_diff",
    "write_patch",
]

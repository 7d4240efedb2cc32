"""Branding overlay for the Firefox source tree.

Makes the configured identity (name, vendor, application id, binary name)
show up in the upstream branding assets. Generated files are fully
overwritten so running the overlay again gives the same tree.

Contains:
- BrandingError: Branding could not be applied
- set_imply_option: Replace the value of one imply_option() call
- get_branding_dir: Location of the project's branding subtree
- setup_branding: Create or refresh the branding subtree
- is_branding_setup: Check if branding matches the configuration
"""

import re
import shutil
from pathlib import Path

from foxforge.config import ForgeConfig
from foxforge.exceptions import ExitCode, ForgeError
from foxforge.templates import read_template, render


BRANDING_ROOT = Path("browser") / "branding"
BASE_BRANDING = "unofficial"
MOZ_CONFIGURE = Path("browser") / "moz.configure"
VENDOR_OPTION = "MOZ_APP_VENDOR"
LOCALE_DIR = Path("locales") / "en-US"


class BrandingError(ForgeError):
    """Raised when branding operations fail."""

    exit_code = ExitCode.CONFIG_ERROR

    @property
    def user_message(self) -> str:
        return (
            f"Branding Error: {self.message}\n\n"
            "Branding is required to set MOZ_APP_VENDOR, MOZ_MACBUNDLE_ID, "
            "and other Firefox identity values."
        )


def _escape(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def set_imply_option(content: str, key: str, value: str) -> str:
    """Set the value of an ``imply_option("KEY", "...")`` call.

    Args:
        content: Text of a moz.configure file.
        key: Option name, e.g. MOZ_APP_VENDOR.
        value: New option value (escaped for a Python string literal).

    Returns:
        The updated content.

    Raises:
        BrandingError: If no imply_option call for the key exists.
    """
    pattern = re.compile(
        r'imply_option\(\s*"' + re.escape(key) + r'"\s*,\s*"(?:[^"\\]|\\.)*"\s*\)'
    )
    replacement = f'imply_option("{key}", "{_escape(value)}")'
    updated, count = pattern.subn(lambda _: replacement, content, count=1)
    if count == 0:
        raise BrandingError(f"Could not find {key} imply_option in {MOZ_CONFIGURE.as_posix()}")
    return updated


def get_branding_dir(engine_dir: Path, config: ForgeConfig) -> Path:
    """Get the branding directory for the configured binary name."""
    return engine_dir / BRANDING_ROOT / config.binary_name


def setup_branding(engine_dir: Path, config: ForgeConfig) -> Path:
    """Create or refresh the custom branding in the engine.

    The unofficial branding is copied as a starting point the first time.
    configure.sh is always written; the localization files are only
    rewritten when the copied branding has them.

    Args:
        engine_dir: The engine (Firefox source) directory.
        config: Project configuration providing the identity.

    Returns:
        Path to the branding directory.

    Raises:
        BrandingError: If the base branding or moz.configure entry is missing.
    """
    branding_dir = get_branding_dir(engine_dir, config)
    base_dir = engine_dir / BRANDING_ROOT / BASE_BRANDING

    if not base_dir.is_dir():
        raise BrandingError(f"Unofficial branding directory not found at {base_dir}")

    if not branding_dir.exists():
        shutil.copytree(base_dir, branding_dir)

    variables = config.template_variables()

    (branding_dir / "configure.sh").write_text(
        render(read_template("branding", "configure.sh"), variables), encoding="utf-8"
    )

    for filename in ("brand.properties", "brand.ftl"):
        target = branding_dir / LOCALE_DIR / filename
        if target.exists():
            target.write_text(
                render(read_template("branding", filename), variables), encoding="utf-8"
            )

    _patch_moz_configure(engine_dir, config)
    return branding_dir


def _patch_moz_configure(engine_dir: Path, config: ForgeConfig) -> None:
    """Point MOZ_APP_VENDOR at the configured vendor.

    The build system only reads MOZ_APP_VENDOR from moz.configure, not mozconfig.
    """
    moz_configure = engine_dir / MOZ_CONFIGURE
    if not moz_configure.is_file():
        raise BrandingError(f"{MOZ_CONFIGURE.as_posix()} not found at {moz_configure}")

    content = moz_configure.read_text(encoding="utf-8")
    updated = set_imply_option(content, VENDOR_OPTION, config.vendor)
    if updated != content:
        moz_configure.write_text(updated, encoding="utf-8")


def is_branding_setup(engine_dir: Path, config: ForgeConfig) -> bool:
    """Check if branding has been set up for this configuration.

    Args:
        engine_dir: The engine (Firefox source) directory.
        config: Project configuration.

    Returns:
        True if configure.sh exists and carries the configured app id.
    """
    configure_sh = get_branding_dir(engine_dir, config) / "configure.sh"
    if not configure_sh.is_file():
        return False
    return f'MOZ_MACBUNDLE_ID="{config.app_id}"' in configure_sh.read_text(encoding="utf-8")

"""Template overlay shipped with foxforge.

Contains:
- BRANDING_TEMPLATES / MOZCONFIG_TEMPLATES: Shipped template names
- read_template: Raw template text
- render: Substitute ${name}-style identity variables
"""

from importlib.resources import files
from string import Template


BRANDING_TEMPLATES = ("configure.sh", "brand.properties", "brand.ftl")

MOZCONFIG_TEMPLATES = (
    "common.mozconfig",
    "darwin.mozconfig",
    "linux.mozconfig",
    "win32.mozconfig",
)


def read_template(group: str, filename: str) -> str:
    """Read a shipped template.

    Args:
        group: Template group directory ("branding" or "configs").
        filename: Template filename.

    Returns:
        The template text.
    """
    return files(__name__).joinpath(group).joinpath(filename).read_text(encoding="utf-8")


def render(content: str, variables: dict[str, str]) -> str:
    """Replace ${var} placeholders; unknown placeholders are left as-is."""
    return Template(content).safe_substitute(variables)

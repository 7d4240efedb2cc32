"""Customization-build orchestrator for a patched Firefox source tree."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("foxforge")
except PackageNotFoundError:
    # Fallback for development mode
    __version__ = "0.0.0-dev"

"""CLI entry point for foxforge.

This module provides the main CLI application that combines all commands
into a single unified interface.
"""

import typer

from foxforge.cli.build import build_command, package_command, run_command, watch_command
from foxforge.cli.config import config_command
from foxforge.cli.doctor import doctor_command
from foxforge.cli.main import main_command
from foxforge.cli.output import Console
from foxforge.cli.patches import export_all_command, export_command, import_command
from foxforge.cli.setup import setup_command
from foxforge.cli.source import bootstrap_command, download_command
from foxforge.cli.workspace import discard_command, reset_command, status_command

# Main application
app = typer.Typer(
    name="foxforge",
    help="foxforge: build customized Firefox browsers from a patch set",
    add_completion=False,
)

# Project
app.command("setup")(setup_command)
app.command("config")(config_command)
app.command("doctor")(doctor_command)

# Source
app.command("download")(download_command)
app.command("bootstrap")(bootstrap_command)

# Patches
app.command("import")(import_command)
app.command("export")(export_command)
app.command("export-all")(export_all_command)

# Workspace
app.command("status")(status_command)
app.command("reset")(reset_command)
app.command("discard")(discard_command)

# Build
app.command("build")(build_command)
app.command("run")(run_command)
app.command("package")(package_command)
app.command("watch")(watch_command)

# Global options (--verbose, --version)
app.callback(invoke_without_command=True)(main_command)


__all__ = [
    "app",
    "Console",
    "main_command",
    "setup_command",
    "config_command",
    "doctor_command",
    "download_command",
    "bootstrap_command",
    "import_command",
    "export_command",
    "export_all_command",
    "status_command",
    "reset_command",
    "discard_command",
    "build_command",
    "run_command",
    "package_command",
    "watch_command",
]

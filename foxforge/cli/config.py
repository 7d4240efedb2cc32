"""CLI command for reading and changing forge.yaml values."""

from typing import Any, Optional

import typer
import yaml

from foxforge.cli.utils import get_console, get_project_root, handle_errors
from foxforge.config import (
    get_nested_value,
    load_config,
    save_config,
    set_nested_value,
    validate_config,
)
from foxforge.exceptions import InvalidArgumentError


_MISSING = object()


def _format_value(value: Any) -> str:
    if value is None:
        return "(not set)"
    if isinstance(value, (dict, list)):
        return "\n" + yaml.dump(value, default_flow_style=False, sort_keys=False).rstrip()
    return str(value)


def _parse_value(raw: str, current: Any) -> Any:
    """Parse a command-line value with YAML so numbers and booleans keep their type.

    Keys that currently hold a string stay strings ("147.0" is a version,
    not a float).
    """
    if isinstance(current, str):
        return raw
    try:
        parsed = yaml.safe_load(raw)
    except yaml.YAMLError:
        return raw
    return raw if parsed is None else parsed


def config_command(
    ctx: typer.Context,
    key: str = typer.Argument(
        ...,
        help="Dotted configuration key, e.g. firefox.version",
    ),
    value: Optional[str] = typer.Argument(
        None,
        help="New value (omit to show the current value)",
    ),
) -> None:
    """Get or set a value in forge.yaml."""
    console = get_console(ctx)
    console.title("Forge Config")

    with handle_errors(console):
        root = get_project_root()
        data = load_config(root).model_dump()

        if value is None:
            current = get_nested_value(data, key, _MISSING)
            if current is _MISSING:
                console.error(f'Configuration key "{key}" not found')
                console.info()
                console.info("Available top-level keys:")
                for top_level in data:
                    console.info(f"  {top_level}")
                raise typer.Exit(1)
            console.info(f"{key} = {_format_value(current)}")
            return

        set_nested_value(data, key, _parse_value(value, get_nested_value(data, key)))
        config = validate_config(data)

        saved = get_nested_value(config.model_dump(), key)
        if saved is None:
            raise InvalidArgumentError(f'Unknown configuration key "{key}"', key)

        save_config(root, config)
        console.success(f"Set {key} = {_format_value(saved)}")

"""Project configuration and runtime state for foxforge.

Handles reading and writing forge.yaml at the project root and the runtime
state file in .forge/state.json.

Contains:
- ConfigError, ConfigNotFoundError: Configuration failures
- FirefoxConfig, BuildConfig, ForgeConfig: forge.yaml schema
- ForgeState: Runtime state persisted between commands
- ProjectPaths: Well-known locations inside a project
- load_config / save_config / config_exists
- load_state / save_state / update_state
- get_nested_value / set_nested_value: Dotted-key access for `foxforge config`
"""

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal, Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from foxforge.exceptions import ExitCode, ForgeError


CONFIG_FILENAME = "forge.yaml"
FORGE_DIR = ".forge"
STATE_FILENAME = "state.json"
CACHE_DIR = "cache"
ENGINE_DIR = "engine"
PATCHES_DIR = "patches"
CONFIGS_DIR = "configs"

DEFAULT_PYTHON = "python3.11"

FIREFOX_VERSION_RE = re.compile(r"^\d+\.\d+(b\d+)?(\.\d+)?(esr)?$")
APP_ID_RE = re.compile(r"^[a-z][a-z0-9]*(\.[a-z][a-z0-9]*)+$", re.IGNORECASE)


# ============================================================
# Errors
# ============================================================


class ConfigError(ForgeError):
    """Raised when the configuration is missing or invalid."""

    exit_code = ExitCode.CONFIG_ERROR

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ):
        super().__init__(message, cause)
        self.field = field

    @property
    def user_message(self) -> str:
        msg = f"Configuration Error: {self.message}"
        if self.field:
            msg += f"\n\nField: {self.field}"
        msg += "\n\nTo fix this:\n"
        msg += f"  1. Check your {CONFIG_FILENAME} file for errors\n"
        msg += '  2. Run "foxforge setup" to create a new configuration\n'
        msg += '  3. Run "foxforge doctor" to diagnose the project'
        return msg


class ConfigNotFoundError(ConfigError):
    """Raised when forge.yaml does not exist."""

    def __init__(self, config_path: Path):
        super().__init__(f"Configuration file not found: {config_path}")
        self.config_path = config_path

    @property
    def user_message(self) -> str:
        return (
            f"Configuration Error: {self.message}\n\n"
            "This directory does not appear to be a foxforge project.\n\n"
            "To fix this:\n"
            "  1. Navigate to your project root directory\n"
            '  2. Run "foxforge setup" to initialize a new project'
        )


# ============================================================
# Schema
# ============================================================


def is_valid_firefox_version(version: str) -> bool:
    """Check a Firefox version string like 146.0, 140.0esr or 147.0b1."""
    return bool(FIREFOX_VERSION_RE.match(version))


def is_valid_app_id(app_id: str) -> bool:
    """Check a reverse-domain application ID like org.example.browser."""
    return bool(APP_ID_RE.match(app_id))


def infer_product(version: str) -> Optional[str]:
    """Guess the Firefox product from a version string, if it says."""
    if "esr" in version.lower():
        return "firefox-esr"
    if re.search(r"b\d+", version):
        return "firefox-beta"
    return None


class FirefoxConfig(BaseModel):
    """Upstream Firefox release the project is built on."""

    version: str
    product: Literal["firefox", "firefox-esr", "firefox-beta"] = "firefox"

    @field_validator("version")
    @classmethod
    def _check_version(cls, value: str) -> str:
        if not is_valid_firefox_version(value):
            raise ValueError('must be a valid Firefox version (e.g. "146.0")')
        return value


class BuildConfig(BaseModel):
    """Build driver settings."""

    jobs: Optional[int] = None
    python: str = DEFAULT_PYTHON


class ForgeConfig(BaseModel):
    """Contents of forge.yaml."""

    name: str
    vendor: str
    app_id: str
    binary_name: str
    firefox: FirefoxConfig
    build: BuildConfig = BuildConfig()

    @field_validator("app_id")
    @classmethod
    def _check_app_id(cls, value: str) -> str:
        if not is_valid_app_id(value):
            raise ValueError(
                'must be a valid reverse-domain identifier (e.g. "org.example.browser")'
            )
        return value

    def template_variables(self) -> dict[str, str]:
        """Identity values substituted into branding and mozconfig templates."""
        return {
            "name": self.name,
            "vendor": self.vendor,
            "app_id": self.app_id,
            "binary_name": self.binary_name,
        }


class ForgeState(BaseModel):
    """Runtime state stored in .forge/state.json."""

    brand: Optional[str] = None
    build_mode: Optional[Literal["dev", "debug", "release"]] = None
    last_build: Optional[str] = None  # ISO format timestamp
    downloaded_version: Optional[str] = None


@dataclass(frozen=True)
class ProjectPaths:
    """Well-known paths inside a foxforge project."""

    root: Path

    @property
    def config(self) -> Path:
        return self.root / CONFIG_FILENAME

    @property
    def forge_dir(self) -> Path:
        return self.root / FORGE_DIR

    @property
    def state(self) -> Path:
        return self.forge_dir / STATE_FILENAME

    @property
    def cache(self) -> Path:
        return self.forge_dir / CACHE_DIR

    @property
    def engine(self) -> Path:
        return self.root / ENGINE_DIR

    @property
    def patches(self) -> Path:
        return self.root / PATCHES_DIR

    @property
    def configs(self) -> Path:
        return self.root / CONFIGS_DIR


# ============================================================
# Config file
# ============================================================


def config_exists(root: Path) -> bool:
    """Check whether forge.yaml exists in the project root."""
    return ProjectPaths(root).config.is_file()


def validate_config(data: Any) -> ForgeConfig:
    """Validate raw configuration data.

    Args:
        data: Parsed YAML content.

    Returns:
        The validated ForgeConfig.

    Raises:
        ConfigError: If the data does not match the schema. The first
            offending field is reported.
    """
    if not isinstance(data, dict):
        raise ConfigError("Config must be a mapping")

    try:
        return ForgeConfig.model_validate(data)
    except ValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first["loc"])
        reason = first["msg"].removeprefix("Value error, ")
        raise ConfigError(f'Config field "{field}": {reason}', field=field, cause=e) from e


def load_config(root: Path) -> ForgeConfig:
    """Load and validate forge.yaml.

    Args:
        root: The project root directory.

    Returns:
        The validated ForgeConfig.

    Raises:
        ConfigNotFoundError: If forge.yaml does not exist.
        ConfigError: If the file cannot be parsed or is invalid.
    """
    config_file = ProjectPaths(root).config
    if not config_file.is_file():
        raise ConfigNotFoundError(config_file)

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse {CONFIG_FILENAME}: {e}", cause=e) from e

    return validate_config(data)


def save_config(root: Path, config: ForgeConfig) -> None:
    """Write forge.yaml.

    Args:
        root: The project root directory.
        config: The configuration to write.
    """
    config_file = ProjectPaths(root).config
    data = config.model_dump(exclude_none=True)
    with open(config_file, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


# ============================================================
# Runtime state
# ============================================================


def load_state(root: Path) -> ForgeState:
    """Load the runtime state.

    A missing or unreadable state file yields an empty state.

    Args:
        root: The project root directory.

    Returns:
        The current ForgeState.
    """
    state_file = ProjectPaths(root).state
    if not state_file.exists():
        return ForgeState()

    try:
        data = json.loads(state_file.read_text(encoding="utf-8"))
        return ForgeState.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError):
        return ForgeState()


def save_state(root: Path, state: ForgeState) -> None:
    """Write the runtime state, creating .forge/ if needed."""
    state_file = ProjectPaths(root).state
    state_file.parent.mkdir(parents=True, exist_ok=True)
    state_file.write_text(state.model_dump_json(indent=2), encoding="utf-8")


def update_state(root: Path, **updates: Any) -> ForgeState:
    """Merge fields into the runtime state.

    Args:
        root: The project root directory.
        **updates: ForgeState fields to set.

    Returns:
        The saved state.
    """
    current = load_state(root).model_dump()
    current.update(updates)
    state = ForgeState.model_validate(current)
    save_state(root, state)
    return state


# ============================================================
# Dotted-key access
# ============================================================


def get_nested_value(data: dict, key: str, default: Any = None) -> Any:
    """Look up a dotted key like ``firefox.version``.

    Returns:
        The value, or default if any part of the path is absent.
    """
    current: Any = data
    for part in key.split("."):
        if not isinstance(current, dict) or part not in current:
            return default
        current = current[part]
    return current


def set_nested_value(data: dict, key: str, value: Any) -> None:
    """Set a dotted key, creating intermediate mappings as needed."""
    parts = key.split(".")
    current = data
    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]
    current[parts[-1]] = value

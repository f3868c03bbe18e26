"""Configuration system for dirtally.

Provides hierarchical configuration with precedence:
1. CLI flags (highest)
2. Environment variables
3. Project config (./.dirtally.json)
4. Global config (~/.dirtally_config.json)
5. Hardcoded defaults (lowest)
"""

from __future__ import annotations

import copy
import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Valid values for enums
VALID_OUTPUT_FORMATS = ("text", "tree", "json")

# Hardcoded defaults
DEFAULT_OUTPUT_FORMAT = "text"
DEFAULT_INDENT = "\t"

# Environment variable names
ENV_OUTPUT_FORMAT = "DIRTALLY_OUTPUT_FORMAT"
ENV_INDENT = "DIRTALLY_INDENT"
ENV_QUIET = "DIRTALLY_QUIET"
ENV_FOLLOW_SYMLINKS = "DIRTALLY_FOLLOW_SYMLINKS"
ENV_SORT_ENTRIES = "DIRTALLY_SORT_ENTRIES"

PROJECT_CONFIG_NAME = ".dirtally.json"

_TRUE_VALUES = ("true", "1", "yes")
_FALSE_VALUES = ("false", "0", "no")


class ConfigValidationError(Exception):
    """Raised when configuration validation fails."""

    pass


class ConfigLoadError(Exception):
    """Raised when configuration file cannot be loaded."""

    pass


def _check_unknown(cls: type, data: dict[str, Any], section: str) -> None:
    known_fields = {f.name for f in fields(cls)}
    unknown = set(data.keys()) - known_fields
    if unknown:
        raise ConfigValidationError(
            f"Unknown fields in {section} config: {', '.join(sorted(unknown))}"
        )


def _check_bool(name: str, value: Any) -> None:
    # A JSON string such as "false" is truthy
    if not isinstance(value, bool):
        raise ConfigValidationError(
            f"{name} must be true or false, got {value!r}"
        )


@dataclass
class DefaultsConfig:
    """Output defaults."""

    output_format: str = DEFAULT_OUTPUT_FORMAT
    indent: str = DEFAULT_INDENT
    quiet: bool = False

    def validate(self) -> None:
        """Validate configuration values."""
        if self.output_format not in VALID_OUTPUT_FORMATS:
            raise ConfigValidationError(
                f"Invalid output_format '{self.output_format}'. "
                f"Valid values: {', '.join(VALID_OUTPUT_FORMATS)}"
            )
        if not isinstance(self.indent, str):
            raise ConfigValidationError(
                f"indent must be a string, got {type(self.indent).__name__}"
            )
        if not self.indent:
            raise ConfigValidationError("indent must not be empty")
        _check_bool("quiet", self.quiet)

    def to_dict(self, exclude_none: bool = False) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "output_format": self.output_format,
            "indent": self.indent,
            "quiet": self.quiet,
        }

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], strict: bool = False
    ) -> "DefaultsConfig":
        """Create from dictionary."""
        if strict:
            _check_unknown(cls, data, "defaults")

        return cls(
            output_format=data.get("output_format", DEFAULT_OUTPUT_FORMAT),
            indent=data.get("indent", DEFAULT_INDENT),
            quiet=data.get("quiet", False),
        )


@dataclass
class WalkConfig:
    """Traversal options."""

    follow_symlinks: bool = False
    sort_entries: bool = True

    def validate(self) -> None:
        """Validate configuration values."""
        _check_bool("follow_symlinks", self.follow_symlinks)
        _check_bool("sort_entries", self.sort_entries)

    def to_dict(self, exclude_none: bool = False) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "follow_symlinks": self.follow_symlinks,
            "sort_entries": self.sort_entries,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], strict: bool = False) -> "WalkConfig":
        """Create from dictionary."""
        if strict:
            _check_unknown(cls, data, "walk")

        return cls(
            follow_symlinks=data.get("follow_symlinks", False),
            sort_entries=data.get("sort_entries", True),
        )


@dataclass
class DirtallyConfig:
    """Main configuration container."""

    version: str = "1"
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    walk: WalkConfig = field(default_factory=WalkConfig)

    def validate(self) -> None:
        """Validate entire configuration."""
        self.defaults.validate()
        self.walk.validate()

    def to_dict(self, exclude_none: bool = False) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "version": self.version,
            "defaults": self.defaults.to_dict(exclude_none),
            "walk": self.walk.to_dict(exclude_none),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], strict: bool = False) -> "DirtallyConfig":
        """Create from dictionary."""
        if strict:
            unknown = set(data.keys()) - {"version", "defaults", "walk"}
            if unknown:
                raise ConfigValidationError(
                    f"Unknown fields in config: {', '.join(sorted(unknown))}"
                )

        return cls(
            version=data.get("version", "1"),
            defaults=DefaultsConfig.from_dict(data.get("defaults", {}), strict),
            walk=WalkConfig.from_dict(data.get("walk", {}), strict),
        )


def get_global_config_path() -> Path:
    """Get path to global config file."""
    return Path.home() / ".dirtally_config.json"


def get_project_config_path(project_dir: Path) -> Path:
    """Get path to project config file."""
    return project_dir / PROJECT_CONFIG_NAME


def load_config_file(path: Path, strict: bool = False) -> DirtallyConfig:
    """Load configuration from a JSON file.

    Args:
        path: Path to the config file
        strict: If True, fail on unknown fields

    Returns:
        DirtallyConfig instance (defaults if the file does not exist)

    Raises:
        ConfigLoadError: If file cannot be read or parsed
        ConfigValidationError: If a value is invalid, or strict=True and
            unknown fields found
    """
    if not path.exists():
        return DirtallyConfig()

    try:
        content = path.read_text()
    except PermissionError as e:
        raise ConfigLoadError(f"Permission denied reading {path}: {e}")
    except OSError as e:
        raise ConfigLoadError(f"Error reading {path}: {e}")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigLoadError(f"Invalid JSON in {path}: {e}")

    if not isinstance(data, dict):
        raise ConfigLoadError(f"Invalid config in {path}: expected a JSON object")

    config = DirtallyConfig.from_dict(data, strict=strict)
    try:
        config.validate()
    except ConfigValidationError as e:
        raise ConfigValidationError(f"Invalid config in {path}: {e}") from e

    logger.debug("Loaded config from %s", path)
    return config


def merge_configs(*configs: DirtallyConfig) -> DirtallyConfig:
    """Merge multiple configs with later configs taking precedence.

    Only values that differ from the hardcoded defaults override earlier
    configs, so partial configs layer properly.

    Args:
        *configs: Configs to merge (first is base, last has highest priority)

    Returns:
        Merged DirtallyConfig
    """
    if not configs:
        return DirtallyConfig()

    result = copy.deepcopy(configs[0])

    for config in configs[1:]:
        if config.defaults.output_format != DEFAULT_OUTPUT_FORMAT:
            result.defaults.output_format = config.defaults.output_format
        if config.defaults.indent != DEFAULT_INDENT:
            result.defaults.indent = config.defaults.indent
        if config.defaults.quiet:
            result.defaults.quiet = config.defaults.quiet

        if config.walk.follow_symlinks:
            result.walk.follow_symlinks = config.walk.follow_symlinks
        if not config.walk.sort_entries:
            result.walk.sort_entries = config.walk.sort_entries

    return result


def _parse_bool(var: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigValidationError(
        f"{var} must be a boolean ({'/'.join(_TRUE_VALUES + _FALSE_VALUES)}), got '{value}'"
    )


def apply_env_overrides(config: DirtallyConfig) -> DirtallyConfig:
    """Apply environment variable overrides to config.

    Args:
        config: Base configuration

    Returns:
        New config with env var overrides applied

    Raises:
        ConfigValidationError: If env var value is invalid
    """
    result = copy.deepcopy(config)

    if output_format := os.environ.get(ENV_OUTPUT_FORMAT):
        result.defaults.output_format = output_format

    if indent := os.environ.get(ENV_INDENT):
        result.defaults.indent = indent

    if quiet := os.environ.get(ENV_QUIET):
        result.defaults.quiet = _parse_bool(ENV_QUIET, quiet)

    if follow := os.environ.get(ENV_FOLLOW_SYMLINKS):
        result.walk.follow_symlinks = _parse_bool(ENV_FOLLOW_SYMLINKS, follow)

    if sort_entries := os.environ.get(ENV_SORT_ENTRIES):
        result.walk.sort_entries = _parse_bool(ENV_SORT_ENTRIES, sort_entries)

    return result


def get_config(project_dir: Path | None = None) -> DirtallyConfig:
    """Load and merge configuration from all sources.

    Loads in order (later sources override earlier):
    1. Hardcoded defaults
    2. Global config (~/.dirtally_config.json)
    3. Project config (.dirtally.json in project_dir, default cwd)
    4. Environment variables

    Args:
        project_dir: Directory holding the project config

    Returns:
        Merged, validated configuration
    """
    base_config = DirtallyConfig()
    global_config = load_config_file(get_global_config_path())

    if project_dir is None:
        project_dir = Path.cwd()
    project_config = load_config_file(get_project_config_path(project_dir))

    merged = merge_configs(base_config, global_config, project_config)
    result = apply_env_overrides(merged)
    result.validate()
    return result


def generate_config_template() -> dict[str, Any]:
    """Generate a config template dictionary.

    Returns:
        Dictionary suitable for JSON serialization
    """
    return {
        "version": "1",
        "_comment_version": "Config file format version",
        "defaults": {
            "output_format": DEFAULT_OUTPUT_FORMAT,
            "_comment_output_format": f"Output format. Valid: {', '.join(VALID_OUTPUT_FORMATS)}",
            "indent": DEFAULT_INDENT,
            "_comment_indent": "Indent unit repeated once per nesting level in text output",
            "quiet": False,
            "_comment_quiet": "Suppress the 'current path' banner and failure summary",
        },
        "walk": {
            "follow_symlinks": False,
            "_comment_follow_symlinks": "Descend into symlinked directories",
            "sort_entries": True,
            "_comment_sort_entries": "Visit entries sorted by name instead of OS order",
        },
    }


def generate_config_template_string() -> str:
    """Generate a config template as a formatted JSON string."""
    return json.dumps(generate_config_template(), indent=2)

"""Configuration utilities for graphstat.

Provides XDG-compliant config path handling and configuration loading.
Configuration is stored in ~/.config/graphstat/config.toml by default,
respecting the XDG_CONFIG_HOME environment variable when set.
"""

import os
import re
import tomllib
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from graphstat.core.constants import (
    DEFAULT_NUM_PAIRS,
    DEFAULT_WORKERS,
    EMPTY_GRAPH_ERROR,
    EMPTY_GRAPH_POLICIES,
    FORMAT_TEXT,
    OUTPUT_FORMATS,
)
from graphstat.core.exceptions import ConfigError

__all__ = [
    "GraphStatConfig",
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_TOML",
    "ConfigError",
    "CONFIG_KEYS",
    "get_xdg_config_home",
    "get_config_path",
    "ensure_config_directory",
    "load_config",
    "write_default_config",
    "with_overrides",
    "get_config_display",
    "get_setting_value",
    "update_config",
    "reset_config",
]

VALID_BOOL_VALUES: frozenset[str] = frozenset({"true", "false"})
UNSET_VALUE = "none"

INT_KEYS: frozenset[str] = frozenset({"num_pairs", "workers", "seed"})
BOOL_KEYS: frozenset[str] = frozenset({"skip_malformed", "include_isolated"})

# Valid configuration keys with descriptions and allowed values
# Format: key -> (description, frozenset of valid values or None for free-form)
CONFIG_KEYS: dict[str, tuple[str, frozenset[str] | None]] = {
    "input_path": (
        "Edge-list file used when no PATH is given",
        None,
    ),
    "num_pairs": (
        "Number of random vertex pairs to measure (integer >= 0)",
        None,
    ),
    "seed": (
        "Random seed for pair sampling (integer, or none)",
        None,
    ),
    "workers": (
        "Threads used for distance queries (integer >= 1); "
        "only faster on free-threaded Python builds",
        None,
    ),
    "skip_malformed": (
        "Drop malformed input lines instead of failing (true, false)",
        VALID_BOOL_VALUES,
    ),
    "include_isolated": (
        "Keep single-vertex lines as isolated vertices (true, false)",
        VALID_BOOL_VALUES,
    ),
    "empty_graph": (
        "Average degree of an empty graph (error, nan, zero)",
        EMPTY_GRAPH_POLICIES,
    ),
    "default_format": (
        "Output format (text, json)",
        OUTPUT_FORMATS,
    ),
}


def get_xdg_config_home() -> Path:
    """Get XDG config home directory for graphstat.

    Returns ~/.config/graphstat/ by default.
    Respects XDG_CONFIG_HOME environment variable when set.

    Returns:
        Path to graphstat's config directory.
    """
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        base = Path(xdg_config_home)
    else:
        base = Path.home() / ".config"
    return base / "graphstat"


def get_config_path() -> Path:
    """Get path to config file.

    Returns:
        Path to config.toml file within graphstat's config directory.
    """
    return get_xdg_config_home() / "config.toml"


def ensure_config_directory() -> Path:
    """Ensure config directory exists with owner-only permissions.

    Returns:
        Path to the created/existing config directory.
    """
    config_dir = get_xdg_config_home()
    config_dir.parent.mkdir(parents=True, exist_ok=True)

    if not config_dir.exists():
        old_umask = os.umask(0o077)
        try:
            config_dir.mkdir(mode=0o700, exist_ok=True)
        finally:
            os.umask(old_umask)

    config_dir.chmod(0o700)
    return config_dir


@dataclass(frozen=True)
class GraphStatConfig:
    """graphstat configuration settings.

    All fields have defaults. Config file can be partial.
    """

    # Input
    input_path: str = ""
    skip_malformed: bool = True
    include_isolated: bool = False

    # Sampling and traversal
    num_pairs: int = DEFAULT_NUM_PAIRS
    seed: int | None = None
    workers: int = DEFAULT_WORKERS

    # Statistics
    empty_graph: str = EMPTY_GRAPH_ERROR

    # Output
    default_format: str = FORMAT_TEXT


DEFAULT_CONFIG = GraphStatConfig()


def _is_int(value: object, minimum: int | None = None) -> bool:
    # bool is a subclass of int; TOML true/false must not pass as a number
    if not isinstance(value, int) or isinstance(value, bool):
        return False
    return minimum is None or value >= minimum


def _validate_config_values(data: dict[str, object]) -> None:
    """Validate config values against the allowed types and choices.

    Args:
        data: Raw config data from TOML file.

    Raises:
        ConfigError: If any value has the wrong type or is not allowed.
    """
    if "input_path" in data and not isinstance(data["input_path"], str):
        raise ConfigError("Invalid input_path. Must be a string.")

    if "num_pairs" in data:
        value = data["num_pairs"]
        if not _is_int(value, minimum=0):
            raise ConfigError(f"Invalid num_pairs '{value}'. Must be an integer >= 0.")

    if "workers" in data:
        value = data["workers"]
        if not _is_int(value, minimum=1):
            raise ConfigError(f"Invalid workers '{value}'. Must be an integer >= 1.")

    if "seed" in data and not _is_int(data["seed"]):
        raise ConfigError(f"Invalid seed '{data['seed']}'. Must be an integer.")

    for key in BOOL_KEYS:
        if key in data and not isinstance(data[key], bool):
            raise ConfigError(f"Invalid {key} '{data[key]}'. Must be true or false.")

    if "empty_graph" in data:
        value = data["empty_graph"]
        if value not in EMPTY_GRAPH_POLICIES:
            raise ConfigError(
                f"Invalid empty_graph '{value}'. "
                f"Must be one of: {', '.join(sorted(EMPTY_GRAPH_POLICIES))}"
            )

    if "default_format" in data:
        value = data["default_format"]
        if value not in OUTPUT_FORMATS:
            raise ConfigError(
                f"Invalid default_format '{value}'. "
                f"Must be one of: {', '.join(sorted(OUTPUT_FORMATS))}"
            )


# Default config TOML template with documentation comments
DEFAULT_CONFIG_TOML = """\
# graphstat Configuration
# Location: ~/.config/graphstat/config.toml

# Edge-list file analyzed when no PATH argument is given
input_path = ""

# Malformed input lines: true drops them silently, false aborts the run
skip_malformed = true

# Lines holding a single vertex id declare an isolated (degree-zero) vertex.
# Isolated vertices lower the average degree and form their own components.
include_isolated = false

# Number of random vertex pairs whose distance is reported
num_pairs = 1000

# Random seed for pair sampling; leave unset for a different sample each run
# seed = 42

# Threads used for distance queries. Only faster on free-threaded Python
# builds; the GIL serializes the queries otherwise.
workers = 1

# Average degree of an empty graph: "error", "nan", or "zero"
empty_graph = "error"

# Output format: "text" or "json"
default_format = "text"
"""


def load_config(config_path: Path | None = None) -> GraphStatConfig:
    """Load configuration from TOML file.

    Args:
        config_path: Optional path override. Defaults to XDG config path.

    Returns:
        GraphStatConfig with loaded values merged with defaults.

    Raises:
        ConfigError: If TOML parsing or validation fails.
    """
    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        return DEFAULT_CONFIG

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Configuration file is invalid: {e}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {config_path}: {e}") from e

    _validate_config_values(data)

    # Merge with defaults - only use keys that are valid GraphStatConfig fields
    valid_fields = {f.name for f in fields(GraphStatConfig)}
    filtered_data = {k: v for k, v in data.items() if k in valid_fields}

    return GraphStatConfig(**{**DEFAULT_CONFIG.__dict__, **filtered_data})


def with_overrides(config: GraphStatConfig, **overrides: Any) -> GraphStatConfig:
    """Return a copy of config with every non-None override applied.

    Used to layer command-line options over file settings.

    Raises:
        ConfigError: If an override value is invalid.
    """
    changes = {k: v for k, v in overrides.items() if v is not None}
    _validate_config_values(changes)
    return replace(config, **changes)


def write_default_config(config_path: Path | None = None) -> None:
    """Write default configuration file with documented settings.

    Uses atomic write pattern (temp file + rename) and sets file
    permissions to 600.

    Args:
        config_path: Optional path override. Defaults to XDG config path.
    """
    if config_path is None:
        config_path = get_config_path()
        ensure_config_directory()
    else:
        config_path.parent.mkdir(parents=True, exist_ok=True)

    _atomic_write(config_path, DEFAULT_CONFIG_TOML)


def _atomic_write(config_path: Path, content: str) -> None:
    temp_path = config_path.with_suffix(".tmp")
    try:
        with open(temp_path, "w", encoding="utf-8") as f:
            f.write(content)
        temp_path.chmod(0o600)
        temp_path.replace(config_path)
    finally:
        try:
            if temp_path.exists():
                temp_path.unlink()
        except OSError:
            pass


def _format_value(config: GraphStatConfig, key: str) -> str:
    value = getattr(config, key)
    if key == "input_path" and not value:
        return "(not set)"
    if key == "seed" and value is None:
        return "(not set)"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def get_config_display(config: GraphStatConfig) -> str:
    """Format all configuration for display with section headers.

    Args:
        config: The GraphStatConfig to format.

    Returns:
        Human-readable string with all settings grouped by category.
    """
    sections = [
        ("# Input", ("input_path", "skip_malformed", "include_isolated")),
        ("# Sampling", ("num_pairs", "seed", "workers")),
        ("# Statistics", ("empty_graph",)),
        ("# Output", ("default_format",)),
    ]

    lines = []
    for header, keys in sections:
        if lines:
            lines.append("")
        lines.append(header)
        lines.extend(f"{key}: {_format_value(config, key)}" for key in keys)

    return "\n".join(lines)


def get_setting_value(config: GraphStatConfig, key: str) -> str:
    """Get a single setting value for display.

    Args:
        config: The GraphStatConfig to read from.
        key: Configuration key to retrieve.

    Returns:
        String representation of the setting value.

    Raises:
        ConfigError: If key is not a valid configuration key.
    """
    if key not in CONFIG_KEYS:
        valid_keys = ", ".join(sorted(CONFIG_KEYS.keys()))
        raise ConfigError(f"Unknown configuration key '{key}'. Valid keys: {valid_keys}")

    return _format_value(config, key)


def _to_toml_value(key: str, value: str) -> str:
    """Convert a command-line value to its TOML literal.

    Raises:
        ConfigError: If the value does not fit the key's type.
    """
    if key in BOOL_KEYS:
        return "true" if value.lower() == "true" else "false"

    if key in INT_KEYS:
        try:
            number = int(value)
        except ValueError:
            raise ConfigError(f"Invalid value '{value}' for {key}. Must be an integer.") from None
        _validate_config_values({key: number})
        return str(number)

    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def update_config(key: str, value: str, config_path: Path | None = None) -> None:
    """Update a single configuration value.

    Uses regex-based update to preserve comments in the TOML file.
    Setting seed to "none" removes it.

    Args:
        key: Configuration key to update.
        value: New value (will be converted to appropriate type).
        config_path: Optional path override. Defaults to XDG config path.

    Raises:
        ConfigError: If key is invalid or value doesn't pass validation.
    """
    if key not in CONFIG_KEYS:
        valid_keys = ", ".join(sorted(CONFIG_KEYS.keys()))
        raise ConfigError(f"Unknown configuration key '{key}'. Valid keys: {valid_keys}")

    _, valid_values = CONFIG_KEYS[key]
    if valid_values is not None and value.lower() not in valid_values:
        valid_list = ", ".join(sorted(valid_values))
        raise ConfigError(f"Invalid value '{value}' for {key}. Valid values: {valid_list}")
    if valid_values is not None:
        value = value.lower()

    unset = key == "seed" and value.lower() == UNSET_VALUE
    toml_value = None if unset else _to_toml_value(key, value)

    if config_path is None:
        config_path = get_config_path()

    if not config_path.exists():
        write_default_config(config_path)

    content = config_path.read_text(encoding="utf-8")

    pattern = rf"^({re.escape(key)}\s*=\s*).*$"
    if unset:
        new_content = re.sub(rf"{pattern}\n?", "", content, flags=re.MULTILINE)
    elif re.search(pattern, content, re.MULTILINE):
        new_content = re.sub(
            pattern,
            lambda m: f"{m.group(1)}{toml_value}",
            content,
            flags=re.MULTILINE,
        )
    else:
        new_content = content.rstrip() + f"\n{key} = {toml_value}\n"

    _atomic_write(config_path, new_content)


def reset_config(config_path: Path | None = None) -> None:
    """Reset configuration to default values.

    Overwrites the config file with DEFAULT_CONFIG_TOML.

    Args:
        config_path: Optional path override. Defaults to XDG config path.
    """
    write_default_config(config_path)

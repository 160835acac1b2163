"""Configuration loading and management."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
import tomllib

from .constants import DEFAULT_INDENT, DEFAULT_MAX_FILE_SIZE, OUTPUT_FORMATS


@dataclass
class SpecmarkConfig:
    """Configuration for extracting and building specifications.

    Attributes:
        indent_chars: Text emitted once per extra marker character.
        indent_spaces: Number of spaces per indentation unit; overrides
            `indent_chars` when set.
        output_format: Default output format (``"markdown"`` or ``"html"``).
        max_file_size: Maximum source file size in bytes that will be scanned.

    Examples:
        SpecmarkConfig(indent_spaces=2, output_format="html")
    """

    indent_chars: str = DEFAULT_INDENT
    indent_spaces: int | None = None
    output_format: str = "markdown"
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`max_file_size` must be a positive integer")
    """


# Config files checked in each directory, with the tables they may hold
_CONFIG_SOURCES: tuple[tuple[str, tuple[tuple[str, ...], ...]], ...] = (
    ("pyproject.toml", (("tool", "specmark"),)),
    (".specmark.toml", (("specmark",), ("tool", "specmark"))),
)


def load_config(search_path: Path) -> SpecmarkConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.specmark]`` table from `pyproject.toml` and the ``[specmark]``
    or ``[tool.specmark]`` table from `.specmark.toml` when present. Returns
    default values when no configuration is found. TOML files that cannot be
    read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        SpecmarkConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If the table is present but not a mapping or contains
            unsupported keys.

    Examples:
        load_config(Path("spec"))
    """
    start = search_path.resolve()

    for directory in (start, *start.parents):
        for filename, table_paths in _CONFIG_SOURCES:
            found = _find_table(directory / filename, table_paths)
            if found is not None:
                return normalize_config(_config_from_table(*found))

    return SpecmarkConfig()


def _read_toml(config_file: Path) -> dict | None:
    try:
        with open(config_file, "rb") as stream:
            return tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None


def _find_table(
    config_file: Path, table_paths: tuple[tuple[str, ...], ...]
) -> tuple[Path, str, object] | None:
    data = _read_toml(config_file) if config_file.is_file() else None
    if data is None:
        return None

    for table_path in table_paths:
        table: object = data
        for key in table_path:
            if not isinstance(table, dict) or key not in table:
                break
            table = table[key]
        else:
            return config_file, ".".join(table_path), table
    return None


def _config_from_table(config_file: Path, table_name: str, table: object) -> SpecmarkConfig:
    if not isinstance(table, dict):
        raise ConfigError(f"Invalid `[{table_name}]` settings in {config_file}")

    unknown = sorted(table.keys() - {field.name for field in fields(SpecmarkConfig)})
    if unknown:
        raise ConfigError(
            f"Unknown key(s) {', '.join(unknown)} in `[{table_name}]` of {config_file}"
        )
    return SpecmarkConfig(**table)


def normalize_config(config: SpecmarkConfig) -> SpecmarkConfig:
    """Expand `indent_spaces` into `indent_chars`."""
    if config.indent_spaces is None:
        return config

    _ensure_integers({"indent_spaces": config.indent_spaces})
    if config.indent_spaces <= 0:
        raise ConfigError("`indent_spaces` must be a positive integer")
    return replace(config, indent_chars=" " * config.indent_spaces)


def validate_config(config: SpecmarkConfig) -> None:
    """Validate a `SpecmarkConfig` instance.

    Raises:
        ConfigError: If the indentation is empty or not text, the output
            format is unknown, or the file size limit is not a positive integer.
    """
    config = normalize_config(config)

    if not isinstance(config.indent_chars, str) or not config.indent_chars:
        raise ConfigError("`indent_chars` must be a non-empty string")
    if config.output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"`output_format` must be one of: {', '.join(OUTPUT_FORMATS)}")

    _ensure_integers({"max_file_size": config.max_file_size})
    if config.max_file_size <= 0:
        raise ConfigError("`max_file_size` must be a positive integer")


def apply_overrides(config: SpecmarkConfig, **overrides: object) -> SpecmarkConfig:
    """Apply override values to a `SpecmarkConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        SpecmarkConfig: New configuration with the provided overrides applied.

    Raises:
        TypeError: If an override name is not defined on `SpecmarkConfig`.

    Examples:
        updated = apply_overrides(config, output_format="html")
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if "indent_chars" in changes and "indent_spaces" not in changes:
        changes["indent_spaces"] = None
    if not changes:
        return config
    return replace(config, **changes)


def build_config(search_path: Path, **overrides: object) -> SpecmarkConfig:
    """Load, override, and validate configuration.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), output_format="html")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    config = normalize_config(config)
    validate_config(config)
    return config


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")

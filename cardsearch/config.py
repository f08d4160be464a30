"""Configuration management for cardsearch."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli_w

from cardsearch.exceptions import (
    ConfigParseError,
    ConfigValidationError,
)

OUTPUT_FORMATS: tuple[str, ...] = ("table", "json")

DEFAULT_MAX_QUERY_LENGTH = 1000


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".config" / "cardsearch" / "config.toml"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        strict: Reject unknown ``is:`` states and ``prop:`` properties.
        max_query_length: Longest accepted search string. 0 disables the cap.
        default_format: Output format for ``parse`` when none is given.
        colored_output: Whether to use colored terminal output.
        config_path: Path where config was loaded from (None if defaults).
    """

    strict: bool = False
    max_query_length: int = DEFAULT_MAX_QUERY_LENGTH
    default_format: str = "table"
    colored_output: bool = True
    config_path: Path | None = None

    @property
    def length_limit(self) -> int | None:
        """The length cap to hand to the parser, or None when disabled."""
        return self.max_query_length or None

    def validate(self) -> list[str]:
        """Validate configuration values.

        Returns:
            List of warning messages for non-fatal issues.

        Raises:
            ConfigValidationError: If a critical validation fails.
        """
        warnings: list[str] = []

        if self.max_query_length < 0:
            raise ConfigValidationError(
                "search.max_query_length", self.max_query_length, "must not be negative"
            )

        if self.default_format not in OUTPUT_FORMATS:
            raise ConfigValidationError(
                "display.default_format",
                self.default_format,
                f"must be one of: {', '.join(OUTPUT_FORMATS)}",
            )

        if self.max_query_length == 0:
            warnings.append("search.max_query_length is 0; query length is not capped")

        return warnings


def load_config(config_path: Path | None = None) -> tuple[Config, list[str]]:
    """Load configuration from file or use defaults.

    Args:
        config_path: Explicit config file path. If None, uses default location.

    Returns:
        Tuple of (Config object, list of warning messages).

    Raises:
        ConfigParseError: If config file exists but has invalid syntax.
        ConfigValidationError: If config values are invalid.
    """
    warnings: list[str] = []

    if config_path is None:
        config_path = get_default_config_path()

    config_path = config_path.expanduser().resolve()

    if not config_path.exists():
        # Use defaults
        config = Config()
        warnings.append(
            f"No config file found at {config_path}. Using defaults. "
            f"Create config with: cardsearch init-config"
        )
        config_warnings = config.validate()
        return config, warnings + config_warnings

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(config_path, str(e)) from e

    config = _parse_config_dict(data, config_path)
    config_warnings = config.validate()

    return config, warnings + config_warnings


def _parse_config_dict(data: dict[str, Any], config_path: Path) -> Config:
    """Parse configuration dictionary into Config object."""
    config = Config(config_path=config_path)

    # Parse [search] section
    search = data.get("search", {})
    if "strict" in search:
        value = search["strict"]
        if not isinstance(value, bool):
            raise ConfigValidationError("search.strict", value, "must be a boolean")
        config.strict = value

    if "max_query_length" in search:
        value = search["max_query_length"]
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigValidationError("search.max_query_length", value, "must be an integer")
        config.max_query_length = value

    # Parse [display] section
    display = data.get("display", {})
    if "colored_output" in display:
        value = display["colored_output"]
        if not isinstance(value, bool):
            raise ConfigValidationError("display.colored_output", value, "must be a boolean")
        config.colored_output = value

    if "default_format" in display:
        value = display["default_format"]
        if not isinstance(value, str):
            raise ConfigValidationError("display.default_format", value, "must be a string")
        config.default_format = value

    return config


def save_config(config: Config, config_path: Path | None = None) -> None:
    """Save configuration to file.

    Only values that differ from the defaults are written.

    Args:
        config: Configuration to save.
        config_path: Path to save to. If None, uses config.config_path or default.
    """
    if config_path is None:
        config_path = config.config_path or get_default_config_path()

    config_path = config_path.expanduser().resolve()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    defaults = Config()
    data: dict[str, Any] = {}

    search_data: dict[str, Any] = {}
    if config.strict != defaults.strict:
        search_data["strict"] = config.strict
    if config.max_query_length != defaults.max_query_length:
        search_data["max_query_length"] = config.max_query_length
    if search_data:
        data["search"] = search_data

    display_data: dict[str, Any] = {}
    if config.colored_output != defaults.colored_output:
        display_data["colored_output"] = config.colored_output
    if config.default_format != defaults.default_format:
        display_data["default_format"] = config.default_format
    if display_data:
        data["display"] = display_data

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

"""Configuration management for pretty-size.

Loads settings from environment variables with sensible defaults.
Command-line flags override these values.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

from pretty_size.errors import ConfigError


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        number = int(value)
    except ValueError:
        raise ConfigError(name, value, "an integer") from None
    if number <= 0:
        raise ConfigError(name, value, "a positive integer")
    return number


@dataclass
class Settings:
    """Runtime settings."""
    size_prog: str = "arm-none-eabi-size"
    log_level: str = "WARNING"
    history_file: str = "fw-size.last"  # stored next to the analyzed binary
    bar_width: int = 51  # full report line width
    skip_empty_sections: bool = True
    skip_unallocated_sections: bool = True

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Raises:
            ConfigError: If a numeric variable is not a positive integer
        """
        return cls(
            size_prog=os.getenv("PRETTY_SIZE_SIZE_PROG", "arm-none-eabi-size"),
            log_level=os.getenv("PRETTY_SIZE_LOG_LEVEL", "WARNING").upper(),
            history_file=os.getenv("PRETTY_SIZE_HISTORY_FILE", "fw-size.last"),
            bar_width=_env_positive_int("PRETTY_SIZE_BAR_WIDTH", 51),
            skip_empty_sections=_env_flag("PRETTY_SIZE_SKIP_EMPTY_SECTIONS", True),
            skip_unallocated_sections=_env_flag("PRETTY_SIZE_SKIP_UNALLOCATED", True),
        )

"""
LoggingConfig: Project-level configuration for context-aware logging.

This module provides:

- find_config_file: Walk up directories to locate .lspace.toml
- LoggingConfig: Typed settings for ContextFilter and configure_logging
- load_config: Read the [logging] table of a config file

Example .lspace.toml:

    [logging]
    keys = ["request_id", "user_id"]
    missing = "-"
    level = "DEBUG"
    format = "%(asctime)s %(levelname)s [%(request_id)s] %(message)s"
"""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

CONFIG_FILENAME = ".lspace.toml"

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest `.lspace.toml` in start_dir (default: cwd) or above it."""
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


# Attributes every LogRecord carries; context keys must not clobber them
RESERVED_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", None, None))
) | {"message", "asctime"}


@dataclass(frozen=True)
class LoggingConfig:
    """
    Settings for injecting context values into log records.

    Attributes:
        keys: Context keys copied onto each log record.
        missing: Placeholder used when a key is unbound.
        prefix: Prefix for the record attribute names (``prefix + key``).
        level: Level name for the installed handler.
        format: Logging format string for the installed handler.
        include_all: Also attach the flattened context as ``record.lspace``.
    """

    keys: tuple[str, ...] = ()
    missing: str = "-"
    prefix: str = ""
    level: str = "INFO"
    format: str = DEFAULT_FORMAT
    include_all: bool = False

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> LoggingConfig:
        """
        Parse from a config dict (e.g., a TOML table).

        Args:
            d: Configuration dictionary.

        Returns:
            A LoggingConfig instance.

        Raises:
            ValueError: If d has unknown keys, values of the wrong type, an
                unknown level, or keys that collide with LogRecord attributes.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(d) - known
        if unknown:
            raise ValueError(f"Unknown logging config keys: {sorted(unknown)}")

        values = dict(d)
        if "keys" in values:
            keys = values["keys"]
            if isinstance(keys, str) or not all(isinstance(k, str) for k in keys):
                raise ValueError("logging.keys must be a list of strings")
            values["keys"] = tuple(keys)
        for name in ("missing", "prefix", "level", "format"):
            if name in values and not isinstance(values[name], str):
                raise ValueError(f"logging.{name} must be a string")
        if "include_all" in values and not isinstance(values["include_all"], bool):
            raise ValueError("logging.include_all must be a boolean")
        return cls(**values)

    def __post_init__(self) -> None:
        level = self.level.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"Unknown logging level: {self.level!r}")
        object.__setattr__(self, "level", level)

        clashing = sorted(k for k in self.keys if self.attribute(k) in RESERVED_ATTRIBUTES)
        if clashing:
            raise ValueError(
                f"logging.keys {clashing} collide with LogRecord attributes; set a prefix"
            )

    def attribute(self, key: str) -> str:
        """Record attribute name for a context key."""
        return f"{self.prefix}{key}"


def load_config(path: Path | None = None) -> LoggingConfig:
    """
    Load logging settings from a config file.

    Args:
        path: Explicit config file. When omitted, searched for with
            find_config_file from the current directory.

    Returns:
        The parsed LoggingConfig, or defaults when no file is found or the
        file has no ``[logging]`` table.
    """
    if path is None:
        path = find_config_file()
        if path is None:
            return LoggingConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    return LoggingConfig.from_dict(data.get("logging", {}))

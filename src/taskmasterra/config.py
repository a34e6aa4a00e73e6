# src/taskmasterra/config.py

"""
Application configuration.

Settings live in a small YAML file (default: ~/.taskmasterra/config.yml,
override with $TASKMASTERRA_CONFIG or --config). YAML is a superset of
JSON, so older config.json files load unchanged.

Keys missing from the file fall back to defaults; unknown keys are ignored.
"""

from __future__ import annotations

import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Final, Optional

import yaml

from taskmasterra.engine.ops import (
    DEFAULT_ARCHIVE_SUFFIX,
    DEFAULT_FILE_MODE,
    DEFAULT_JOURNAL_SUFFIX,
    expand_path,
    write_document,
)


log = logging.getLogger(__name__)

CONFIG_ENV: Final[str] = "TASKMASTERRA_CONFIG"
CONFIG_DIR_NAME: Final[str] = ".taskmasterra"
CONFIG_FILE_NAME: Final[str] = "config.yml"


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ConfigError(Exception):
    """
    Raised when the configuration cannot be read, parsed, or is invalid.
    """

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}" if self.path else self.message


# ---------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------

@dataclass(slots=True)
class Config:
    # Reminders
    default_due_hour: int = 16
    default_due_minute: int = 0
    reminder_list_name: str = "Taskmasterra"

    # Journal / archive
    journal_suffix: str = DEFAULT_JOURNAL_SUFFIX
    archive_suffix: str = DEFAULT_ARCHIVE_SUFFIX

    # Files
    default_file_permissions: int = DEFAULT_FILE_MODE

    # Tasks
    active_marker: str = "!!"

    def validate(self) -> None:
        """
        Check ranges and required values; raise ConfigError on the first problem.
        """
        if not 0 <= self.default_due_hour <= 23:
            raise ConfigError("", f"default_due_hour must be between 0 and 23 (got {self.default_due_hour})")
        if not 0 <= self.default_due_minute <= 59:
            raise ConfigError("", f"default_due_minute must be between 0 and 59 (got {self.default_due_minute})")
        if not self.reminder_list_name:
            raise ConfigError("", "reminder_list_name cannot be empty")
        if not self.journal_suffix:
            raise ConfigError("", "journal_suffix cannot be empty")
        if not self.archive_suffix:
            raise ConfigError("", "archive_suffix cannot be empty")
        if self.journal_suffix == self.archive_suffix:
            raise ConfigError("", "journal_suffix and archive_suffix must differ")
        if not 0 <= self.default_file_permissions <= 0o777:
            raise ConfigError(
                "",
                f"default_file_permissions must be between 0 and 0o777 (got {self.default_file_permissions})",
            )
        if not self.active_marker:
            raise ConfigError("", "active_marker cannot be empty")

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


# ---------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------

def default_config_path() -> Path:
    env = os.getenv(CONFIG_ENV, "").strip()
    if env:
        return expand_path(env)
    return Path.home() / CONFIG_DIR_NAME / CONFIG_FILE_NAME


# ---------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------

def load_config(path: Optional[str | Path] = None) -> Config:
    """
    Load configuration from `path` (or the default location).

    A missing file is created with default values.
    """
    p = expand_path(str(path)) if path else default_config_path()

    if not p.exists():
        config = Config()
        log.info("no config at %s, writing defaults", p)
        save_config(config, p)
        return config

    try:
        text = p.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(str(p), f"Cannot read file: {e}") from e

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(str(p), f"Invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(str(p), "Config root must be a mapping/dictionary")

    return _from_mapping(str(p), data)


def _from_mapping(path: str, data: dict[str, Any]) -> Config:
    config = Config()

    for f in fields(Config):
        if f.name not in data:
            continue

        value = data[f.name]
        expected = type(getattr(config, f.name))

        # bool is an int subclass; reject it for numeric keys.
        if isinstance(value, bool) or not isinstance(value, expected):
            raise ConfigError(path, f"Key '{f.name}' must be of type {expected.__name__}")

        setattr(config, f.name, value)

    return config


def save_config(config: Config, path: str | Path) -> None:
    p = Path(path)
    text = dump_config(config)

    try:
        write_document(p, text)
    except OSError as e:
        raise ConfigError(str(p), f"Cannot write file: {e}") from e


def dump_config(config: Config) -> str:
    """Render configuration for display (same format as the file)."""
    return yaml.safe_dump(config.to_dict(), sort_keys=False, allow_unicode=True)

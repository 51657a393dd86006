"""
Configuration file parsing and management.

Supports YAML configuration files (JSON for files ending in .json).
Merges configurations from multiple sources (custom → project → user → defaults).
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, fields
from typing import Any

import yaml


logger = logging.getLogger(__name__)

# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".update-ai-tools.yml",                                    # Project root (highest priority)
    ".update-ai-tools.yaml",
    os.path.expanduser("~/.config/update-ai-tools/config.yml"),  # User global
    os.path.expanduser("~/.config/update-ai-tools/config.yaml"),
]


@dataclass(frozen=True)
class Preferences:
    """
    Preferences for install and retry behavior.

    Attributes:
        max_retries: Extra attempts for a single-tool install
        bulk_retries: Extra attempts for the bulk install command
        retry_delay_seconds: Wait before retrying an unclassified failure
        network_retry_delay_seconds: Wait before retrying a network failure
        query_timeout_seconds: Timeout for npm list/view and version checks
        fail_on_error: Exit non-zero when any tool failed to install
    """
    max_retries: int = 2
    bulk_retries: int = 1
    retry_delay_seconds: float = 2
    network_retry_delay_seconds: float = 5
    query_timeout_seconds: int = 60
    fail_on_error: bool = False

    def __post_init__(self):
        """Validate preferences after initialization."""
        for name in ("max_retries", "bulk_retries"):
            value = getattr(self, name)
            if not isinstance(value, int) or value < 0 or value > 10:
                raise ValueError(f"Invalid {name}: {value}. Must be between 0 and 10")

        if self.retry_delay_seconds < 0 or self.retry_delay_seconds > 60:
            raise ValueError(
                f"Invalid retry_delay_seconds: {self.retry_delay_seconds}. "
                "Must be between 0 and 60"
            )

        if self.network_retry_delay_seconds < 0 or self.network_retry_delay_seconds > 300:
            raise ValueError(
                f"Invalid network_retry_delay_seconds: {self.network_retry_delay_seconds}. "
                "Must be between 0 and 300"
            )

        if self.query_timeout_seconds < 1 or self.query_timeout_seconds > 600:
            raise ValueError(
                f"Invalid query_timeout_seconds: {self.query_timeout_seconds}. "
                "Must be between 1 and 600"
            )

    @staticmethod
    def from_dict(data: dict[str, Any]) -> Preferences:
        """Create Preferences from dictionary."""
        return Preferences(
            max_retries=data.get("max_retries", 2),
            bulk_retries=data.get("bulk_retries", 1),
            retry_delay_seconds=data.get("retry_delay_seconds", 2),
            network_retry_delay_seconds=data.get("network_retry_delay_seconds", 5),
            query_timeout_seconds=data.get("query_timeout_seconds", 60),
            fail_on_error=data.get("fail_on_error", False),
        )

    def explicit_values(self) -> dict[str, Any]:
        """Values that differ from the defaults."""
        defaults = Preferences()
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) != getattr(defaults, f.name)
        }


@dataclass(frozen=True)
class Config:
    """
    Complete configuration for update-ai-tools.

    Attributes:
        version: Config schema version
        preferences: Retry and exit-code preferences
        source: Path to the configuration file that was loaded
    """
    version: int = 1
    preferences: Preferences = field(default_factory=Preferences)
    source: str = ""

    def __post_init__(self):
        """Validate config after initialization."""
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        preferences_data = data.get("preferences") or {}
        if not isinstance(preferences_data, dict):
            raise TypeError("'preferences' must be a mapping")

        return Config(
            version=data.get("version", 1),
            preferences=Preferences.from_dict(preferences_data),
            source=source,
        )

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        merged = other.preferences.explicit_values()
        merged.update(self.preferences.explicit_values())

        return Config(
            version=self.version,
            preferences=Preferences(**merged),
            source=self.source or other.source,
        )


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """Load YAML configuration file, or None if the file is unreadable or invalid."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return None


def _load_json(file_path: str) -> dict[str, Any] | None:
    """Load JSON configuration file, or None if the file is unreadable or invalid."""
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, json.JSONDecodeError):
        return None


def load_config_file(file_path: str) -> Config | None:
    """
    Load configuration from a single file.

    Args:
        file_path: Path to configuration file (.yml, .yaml or .json)

    Returns:
        Config object, or None if file cannot be loaded
    """
    if not os.path.exists(file_path):
        return None

    logger.debug(f"Loading config from: {file_path}")

    if file_path.endswith(".json"):
        data = _load_json(file_path)
    else:
        data = _load_yaml(file_path)

    if data is None:
        logger.debug(f"Invalid config file: {file_path}")
        return None

    try:
        config = Config.from_dict(data, source=file_path)
        logger.debug(f"Loaded config successfully: {file_path}")
        return config
    except (ValueError, TypeError) as e:
        logger.debug(f"Config validation failed for {file_path}: {e}")
        return None


def load_config(custom_path: str | None = None) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Custom path (if provided)
    2. Project .update-ai-tools.yml
    3. User ~/.config/update-ai-tools/config.yml
    4. Default configuration

    Raises:
        ValueError: If custom_path is provided but file cannot be loaded
    """
    configs: list[Config] = []

    if custom_path:
        config = load_config_file(custom_path)
        if config is None:
            raise ValueError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location)
        if config is not None:
            configs.append(config)
            logger.debug(f"Found config at: {location}")

    if not configs:
        logger.debug("No config files found, using defaults")
        return Config()

    # First config has highest priority
    merged = configs[0]
    for config in configs[1:]:
        merged = merged.merge_with(config)

    logger.debug(f"Merged {len(configs)} config files")
    return merged

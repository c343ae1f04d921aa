"""
Configuration file parsing and management.

Supports YAML configuration files (and JSON files by extension).
Merges configurations from multiple sources (custom → project → user →
system → defaults), then applies environment variable overrides.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping

import yaml

from .common import vlog


# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".php-discovery.yml",                                     # Project root (highest priority)
    ".php-discovery.yaml",
    os.path.expanduser("~/.config/php-discovery/config.yml"),  # User global
    os.path.expanduser("~/.config/php-discovery/config.yaml"),
    "/etc/php-discovery/config.yml",                          # System global
    "/etc/php-discovery/config.yaml",
]

ENV_TIMEOUT = "PHP_DISCOVERY_TIMEOUT_SECONDS"
ENV_EXTRA_PATHS = "PHP_DISCOVERY_EXTRA_PATHS"


@dataclass(frozen=True)
class Config:
    """
    Discovery configuration.

    Attributes:
        version: Config schema version
        timeout_seconds: Timeout for each probe subprocess (None waits forever)
        extra_paths: Additional directories scanned directly
        extra_trees: Additional roots scanned together with their children
        sort_results: Return builds sorted by binary path
        source: Path to the configuration file that was loaded
    """
    version: int = 1
    timeout_seconds: float | None = None
    extra_paths: tuple[str, ...] = ()
    extra_trees: tuple[str, ...] = ()
    sort_results: bool = True
    source: str = ""

    def __post_init__(self):
        """Validate config after initialization."""
        if self.version != 1:
            raise ValueError(f"Unsupported config version: {self.version}. Expected version 1")

        if self.timeout_seconds is not None and not (1 <= self.timeout_seconds <= 600):
            raise ValueError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be between 1 and 600"
            )

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        locations = data.get("locations", {}) or {}
        return Config(
            version=data.get("version", 1),
            timeout_seconds=data.get("timeout_seconds"),
            extra_paths=_location_list(locations, "paths"),
            extra_trees=_location_list(locations, "trees"),
            sort_results=data.get("sort_results", True),
            source=source,
        )

    def merge_with(self, other: Config) -> Config:
        """
        Merge this config with another, preferring values from this config.

        Extra locations are concatenated, this config's first.

        Args:
            other: Other config to merge (lower priority)

        Returns:
            New merged Config object
        """
        return Config(
            version=self.version,
            timeout_seconds=self.timeout_seconds if self.timeout_seconds is not None else other.timeout_seconds,
            extra_paths=_unique(self.extra_paths + other.extra_paths),
            extra_trees=_unique(self.extra_trees + other.extra_trees),
            sort_results=self.sort_results and other.sort_results,
            source=self.source or other.source,
        )


def _unique(items: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(items))


def _location_list(locations: dict[str, Any], key: str) -> tuple[str, ...]:
    value = locations.get(key) or []
    if not isinstance(value, list):
        raise ValueError(f"Invalid locations.{key}: expected a list of directories, got {value!r}")
    return tuple(str(p) for p in value)


def _load_yaml(file_path: str) -> dict[str, Any] | None:
    """
    Load YAML configuration file.

    Returns:
        Parsed configuration dictionary, or None if the file is unreadable or invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, yaml.YAMLError):
        return None


def _load_json(file_path: str) -> dict[str, Any] | None:
    """
    Load JSON configuration file.

    Returns:
        Parsed configuration dictionary, or None if file invalid
    """
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = json.load(f)
            return data if isinstance(data, dict) else {}
    except (OSError, json.JSONDecodeError):
        return None


def load_config_file(file_path: str, verbose: bool = False) -> Config | None:
    """
    Load configuration from a single file.

    Files ending in .json are read as JSON, anything else as YAML.

    Args:
        file_path: Path to configuration file
        verbose: Enable verbose logging

    Returns:
        Config object, or None if file cannot be loaded
    """
    if not os.path.exists(file_path):
        return None

    vlog(f"Loading config from: {file_path}", verbose)

    if file_path.endswith(".json"):
        data = _load_json(file_path)
    else:
        data = _load_yaml(file_path)

    if data is None:
        vlog(f"Invalid config file: {file_path}", verbose)
        return None

    try:
        config = Config.from_dict(data, source=file_path)
    except (ValueError, TypeError, AttributeError) as e:
        vlog(f"Config validation failed for {file_path}: {e}", verbose)
        return None

    vlog(f"Loaded config successfully: {file_path}", verbose)
    return config


def apply_env_overrides(
    config: Config,
    environ: Mapping[str, str] | None = None,
    verbose: bool = False,
) -> Config:
    """
    Apply environment variable overrides to a config.

    PHP_DISCOVERY_TIMEOUT_SECONDS replaces the timeout;
    PHP_DISCOVERY_EXTRA_PATHS (os.pathsep separated) is prepended to the
    extra paths.

    Raises:
        ValueError: If an override value is invalid
    """
    if environ is None:
        environ = os.environ

    timeout = environ.get(ENV_TIMEOUT)
    if timeout:
        try:
            config = replace(config, timeout_seconds=float(timeout))
        except ValueError as e:
            raise ValueError(f"Invalid {ENV_TIMEOUT}: {timeout}") from e
        vlog(f"Timeout set from environment: {timeout}s", verbose)

    extra = environ.get(ENV_EXTRA_PATHS)
    if extra:
        paths = tuple(p for p in extra.split(os.pathsep) if p)
        config = replace(config, extra_paths=_unique(paths + config.extra_paths))
        vlog(f"Extra paths from environment: {', '.join(paths)}", verbose)

    return config


def load_config(
    custom_path: str | None = None,
    environ: Mapping[str, str] | None = None,
    verbose: bool = False,
) -> Config:
    """
    Load and merge configuration from all sources.

    Configuration precedence (highest to lowest):
    1. Environment variables
    2. Custom path (if provided)
    3. Project .php-discovery.yml
    4. User ~/.config/php-discovery/config.yml
    5. System /etc/php-discovery/config.yml
    6. Default configuration

    Args:
        custom_path: Optional path to custom configuration file
        environ: Environment mapping for overrides (defaults to os.environ)
        verbose: Enable verbose logging

    Returns:
        Merged Config object (never None, returns defaults if no config found)

    Raises:
        ValueError: If custom_path is provided but file cannot be loaded
    """
    configs: list[Config] = []

    if custom_path:
        config = load_config_file(custom_path, verbose)
        if config is None:
            raise ValueError(f"Could not load config from specified path: {custom_path}")
        configs.append(config)

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location, verbose)
        if config is not None:
            configs.append(config)
            vlog(f"Found config at: {location}", verbose)

    if not configs:
        vlog("No config files found, using defaults", verbose)
        merged = Config()
    else:
        merged = configs[0]
        for config in configs[1:]:
            merged = merged.merge_with(config)
        vlog(f"Merged {len(configs)} config files", verbose)

    return apply_env_overrides(merged, environ, verbose)

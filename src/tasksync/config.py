"""
Configuration management with YAML loading and environment variable support.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .errors import ConfigError

logger = logging.getLogger(__name__)

SECTIONS = ["paths", "output", "logging"]


def _env_path(env_var: str, default: Path | None = None) -> Path | None:
    """Get path from environment variable or return default."""
    if value := os.environ.get(env_var):
        return Path(value)
    return default


@dataclass
class PathsConfig:
    """Paths configuration - can be overridden via environment variables."""

    # Directory searched for task files given by name instead of path
    tasks_dir: Path | None = field(default_factory=lambda: _env_path("TSYNC_TASKS_DIR"))


@dataclass
class OutputConfig:
    show_results: bool = True
    max_value_width: int = 60


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    console_logging: bool = True


@dataclass
class AppConfig:
    paths: PathsConfig = field(default_factory=PathsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Raises:
            ConfigError: The file is not valid YAML
        """
        if not path.exists():
            return cls()

        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "AppConfig":
        """
        Create config from dictionary.

        Unknown sections and keys are ignored, as are a document or section
        that is not a mapping.

        Raises:
            ConfigError: ``logging.level`` is not a known logging level
        """
        config = cls()

        if not isinstance(data, dict):
            logger.warning("Ignoring config: expected a mapping, got %s", type(data).__name__)
            return config

        for attr in SECTIONS:
            values = data.get(attr) or {}
            if not isinstance(values, dict):
                logger.warning("Ignoring config section %r: expected a mapping", attr)
                continue
            section = getattr(config, attr)
            for key, value in values.items():
                if not hasattr(section, key):
                    continue
                if attr == "paths" and isinstance(value, str):
                    value = Path(value).expanduser()
                setattr(section, key, value)

        config.logging.level = _check_level(config.logging.level)
        return config


def _check_level(level: object) -> str:
    """Return the upper-cased level name, or raise ConfigError if logging does not know it."""
    name = str(level).upper()
    if not isinstance(logging.getLevelName(name), int):
        raise ConfigError(f"Unknown logging level: {level!r}")
    return name


def _get_default_config_dir() -> Path:
    """Get default config directory."""
    # Check environment variable first
    if config_dir := os.environ.get("TSYNC_CONFIG_DIR"):
        return Path(config_dir)

    # Check XDG config home
    if xdg_config := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg_config) / "tasksync"

    # Fall back to ~/.config
    return Path.home() / ".config" / "tasksync"


def load_config(config_path: Path | None = None, config_dir: Path | None = None) -> AppConfig:
    """
    Load configuration.

    Args:
        config_path: Path to config file (default: searches standard locations)
        config_dir: Config directory to search when no path is given

    Returns:
        AppConfig (defaults when no file is found)
    """
    if config_dir is None:
        config_dir = _get_default_config_dir()

    if config_path is None:
        search_paths = [
            config_dir / "config.yaml",
            Path.cwd() / "tsync.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = path
                break

    return AppConfig.from_yaml(config_path) if config_path else AppConfig()

"""
Configuration loader for the prediction game.

Loads settings from a YAML config file; the path can be overridden with the
CJA_PICKS_CONFIG environment variable.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml  # type: ignore[import-untyped]
from pydantic import ValidationError

from cja_picks.utils.config_schema import AppConfig, validate_config

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/default.yaml"


class Config:
    """Central configuration manager."""

    _instance: "Config | None" = None
    _config: dict[str, Any] | None = None
    _validated: AppConfig | None = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if self._config is None:
            self._load()

    def _load(self):
        """Load config from YAML file."""
        config_file = os.getenv("CJA_PICKS_CONFIG", DEFAULT_CONFIG_PATH)
        config_path = Path(config_file)

        if not config_path.is_absolute():
            # Relative to project root
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / config_path

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}

        if not isinstance(raw, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")

        try:
            self._validated = validate_config(raw)
        except ValidationError as e:
            raise ValueError(f"Config validation failed for {config_path}:\n{e}") from e

        self._config = raw
        logger.info(f"Configuration loaded successfully from {config_path}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value using dot notation, returning default if not found."""
        keys = key.split(".")
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def get_section(self, section: str) -> dict:
        """Get entire config section."""
        if self._config is None:
            return {}
        value = self._config.get(section, {})
        return value if isinstance(value, dict) else {}

    @property
    def app_config(self) -> AppConfig:
        """Validated, typed view of the config."""
        return self._validated

    def reload(self):
        """Force reload config from file."""
        self._config = None
        self._validated = None
        self._load()


def get(key: str, default: Any = None) -> Any:
    """Get config value."""
    return Config().get(key, default)


def get_section(section: str) -> dict:
    """Get config section."""
    return Config().get_section(section)


def get_app_config() -> AppConfig:
    """Get the validated config."""
    return Config().app_config


def reload():
    """Reload config."""
    Config().reload()

#!/usr/bin/env python3
"""
Configuration Manager for the Waking Arc Engine
Handles loading and saving of engine settings as JSON.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from threading import Lock

from waking_arc.core.dataclasses_config import EngineConfig
from waking_arc.core.exceptions import ConfigurationError, ErrorCodes

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"


def get_config_path() -> Path:
    """Default configuration file location in the user's home directory."""
    return Path.home() / ".waking_arc" / CONFIG_FILENAME


class ConfigManager:
    """Manages engine configuration stored in a JSON file."""

    def __init__(self, config_file: Path | None = None) -> None:
        self._lock = Lock()
        self.config_file = config_file or get_config_path()
        self.config_dir = self.config_file.parent
        self.config = self.load_config()

    def load_config(self) -> EngineConfig:
        """Load configuration from the JSON file, falling back to defaults when missing or invalid."""
        if not self.config_file.exists():
            logger.debug("No config file at %s, using defaults", self.config_file)
            self.config = EngineConfig()
            return self.config

        try:
            with open(self.config_file, encoding="utf-8") as f:
                config_data = json.load(f)
            if not isinstance(config_data, dict):
                msg = f"Config file {self.config_file} must contain a JSON object"
                raise ConfigurationError(msg, ErrorCodes.CONFIG_INVALID)
            self.config = EngineConfig.from_dict(config_data)
            logger.info("Loaded configuration from %s", self.config_file)
        except (OSError, json.JSONDecodeError, ConfigurationError) as e:
            logger.warning("Failed to load configuration: %s, using defaults", e)
            self.config = EngineConfig()

        return self.config

    def save_config(self) -> None:
        """Save configuration to the JSON file (thread-safe)."""
        with self._lock:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w", encoding="utf-8") as f:
                json.dump(self.config.to_dict(), f, indent=2)
            logger.debug("Saved configuration to %s", self.config_file)

    def update_config(self, **changes: object) -> EngineConfig:
        """
        Apply changes on top of the current configuration and save.

        Raises:
            ConfigurationError: If a changed value is invalid

        """
        data = self.config.to_dict()
        data.update(changes)
        self.config = EngineConfig.from_dict(data)
        self.save_config()
        return self.config

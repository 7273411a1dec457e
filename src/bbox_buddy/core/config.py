"""Configuration management for BBox Buddy."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .models import UNLABELED

logger = logging.getLogger(__name__)

# Default configuration file path
DEFAULT_CONFIG_PATH = Path("config.yaml")


@dataclass
class AppConfig:
    """
    Application configuration settings.

    Stores user preferences and application state.
    """

    last_directory: str = ""  # Starting directory for file dialogs
    recent_files: list[str] = field(default_factory=list)
    max_recent_files: int = 10  # 0 disables the recent files menu
    line_thickness: int = 2
    font_size: int = 10
    handle_size: int = 8  # Resize handle edge length in pixels
    default_label: str = UNLABELED  # Label given to newly drawn boxes

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary for serialization."""
        return {
            "lastDirectory": self.last_directory,
            "recentFiles": self.recent_files,
            "maxRecentFiles": self.max_recent_files,
            "lineThickness": self.line_thickness,
            "fontSize": self.font_size,
            "handleSize": self.handle_size,
            "defaultLabel": self.default_label,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> AppConfig:
        """Create config from dictionary."""
        return cls(
            last_directory=data.get("lastDirectory", ""),
            recent_files=data.get("recentFiles", []),
            max_recent_files=data.get("maxRecentFiles", 10),
            line_thickness=data.get("lineThickness", 2),
            font_size=data.get("fontSize", 10),
            handle_size=data.get("handleSize", 8),
            default_label=data.get("defaultLabel", UNLABELED),
        )


class ConfigManager:
    """
    Manager for loading and saving application configuration.

    Handles YAML serialization and provides a clean interface
    for configuration access.
    """

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH) -> None:
        """
        Initialize the configuration manager.

        Args:
            config_path: Path to the configuration file
        """
        self.config_path = config_path
        self._config: Optional[AppConfig] = None

    @property
    def config(self) -> AppConfig:
        """Get the current configuration, loading if necessary."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> AppConfig:
        """
        Load configuration from file.

        Returns:
            AppConfig instance with loaded or default values
        """
        if not self.config_path.exists():
            logger.info(f"Config file not found at {self.config_path}, using defaults")
            return AppConfig()

        try:
            with open(self.config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                logger.error(f"Config file {self.config_path} is not a mapping, using defaults")
                return AppConfig()
            logger.info(f"Loaded configuration from {self.config_path}")
            return AppConfig.from_dict(data)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing config file: {e}")
            return AppConfig()
        except Exception as e:
            logger.error(f"Error loading config: {e}")
            return AppConfig()

    def save(self, config: Optional[AppConfig] = None) -> bool:
        """
        Save configuration to file.

        Args:
            config: Configuration to save, or use current config

        Returns:
            True if save was successful
        """
        if config is not None:
            self._config = config

        if self._config is None:
            logger.warning("No configuration to save")
            return False

        try:
            with open(self.config_path, "w") as f:
                yaml.dump(self._config.to_dict(), f, default_flow_style=False)
            logger.info(f"Saved configuration to {self.config_path}")
            return True
        except OSError as e:
            logger.error(f"Error saving config: {e}")
            return False

    def update(self, **kwargs: Any) -> None:
        """
        Update configuration with new values.

        Args:
            **kwargs: Key-value pairs to update
        """
        config = self.config
        for key, value in kwargs.items():
            if hasattr(config, key):
                setattr(config, key, value)
            else:
                logger.warning(f"Unknown config key: {key}")
        self.save()

    def add_recent_file(self, path: str) -> None:
        """
        Move a file to the front of the recent files list and save.

        Args:
            path: Path of the opened or saved dataset file
        """
        config = self.config
        if config.max_recent_files <= 0:
            return

        recent = [p for p in config.recent_files if p != path]
        recent.insert(0, path)
        config.recent_files = recent[:config.max_recent_files]
        config.last_directory = str(Path(path).parent)
        self.save()

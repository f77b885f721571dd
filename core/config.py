"""
Configuration management for the Explorer engine.

This module provides a split configuration system that separates concerns
into focused configuration classes, loaded from and saved to a TOML file.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import toml

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)


@dataclass
class LoggingConfig:
    """Configuration for log output."""

    level: str = 'INFO'
    log_file: Optional[str] = None
    log_dir: str = 'logs'
    propagate: bool = False

    def validate(self) -> List[str]:
        """Validate the logging configuration and return any errors."""
        errors = []

        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if self.level.upper() not in valid_levels:
            errors.append(f"level must be one of {valid_levels}")
        if not isinstance(self.propagate, bool):
            errors.append("propagate must be true or false")

        return errors


@dataclass
class VisualizationConfig:
    """
    Visualization registry entries.

    An empty entry list means the built-in registry is used unchanged.
    Each entry is a mapping with 'id' and 'type' keys.
    """

    entries: List[Dict[str, str]] = field(default_factory=list)

    def validate(self) -> List[str]:
        """Validate the registry entries and return any errors."""
        # Import here to avoid circular imports
        from explorer.visualizations import VisualizationType

        errors = []
        valid_types = [item.value for item in VisualizationType]
        seen_ids = set()

        for i, entry in enumerate(self.entries):
            if not isinstance(entry, dict):
                errors.append(f"Visualization entry {i} must be a table")
                continue
            if not entry.get('id'):
                errors.append(f"Visualization entry {i} is missing 'id'")
            elif entry['id'] in seen_ids:
                errors.append(f"Duplicate visualization id '{entry['id']}'")
            else:
                seen_ids.add(entry['id'])
            if entry.get('type') not in valid_types:
                errors.append(f"Visualization entry {i} type must be one of {valid_types}")

        return errors


@dataclass
class Config:
    """Main configuration class that combines all configuration sections."""

    config_file_path: str = "config.toml"

    logging: LoggingConfig = field(default_factory=LoggingConfig)
    visualizations: VisualizationConfig = field(default_factory=VisualizationConfig)

    def __post_init__(self):
        """Load configuration when an instance is created."""
        self.load_config()

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to the TOML document structure."""
        logging_section = {
            'level': self.logging.level,
            'log_dir': self.logging.log_dir,
            'propagate': self.logging.propagate,
        }
        if self.logging.log_file:
            logging_section['log_file'] = self.logging.log_file

        return {
            'logging': logging_section,
            'visualizations': [dict(entry) for entry in self.visualizations.entries],
        }

    def save_config(self) -> None:
        """Save current configuration to TOML file."""
        try:
            with open(self.config_file_path, 'w') as f:
                toml.dump(self.to_dict(), f)
            logger.info(f"Configuration saved to {self.config_file_path}")
        except OSError as e:
            error_msg = f"Error saving configuration: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)

    def load_config(self) -> None:
        """Load configuration from TOML file."""
        try:
            with open(self.config_file_path) as f:
                config_data = toml.load(f)
        except FileNotFoundError:
            logger.info(f"{self.config_file_path} not found. Using default configuration.")
            return
        except toml.TomlDecodeError as e:
            error_msg = f"Error decoding {self.config_file_path}: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)
        except OSError as e:
            error_msg = f"Error loading configuration: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg, config_file=self.config_file_path)

        if 'logging' in config_data:
            logging_config = config_data['logging']
            self.logging.level = logging_config.get('level', self.logging.level)
            self.logging.log_file = logging_config.get('log_file', self.logging.log_file)
            self.logging.log_dir = logging_config.get('log_dir', self.logging.log_dir)
            self.logging.propagate = logging_config.get('propagate', self.logging.propagate)

        if 'visualizations' in config_data:
            entries = config_data['visualizations']
            if not isinstance(entries, list):
                raise ConfigurationError(
                    "visualizations must be an array of tables",
                    config_file=self.config_file_path,
                    field='visualizations'
                )
            self.visualizations.entries = entries

        logger.info(f"Configuration loaded from {self.config_file_path}")

    def validate(self) -> List[str]:
        """Validate all configuration sections and return any errors."""
        errors = []
        errors.extend(self.logging.validate())
        errors.extend(self.visualizations.validate())
        return errors

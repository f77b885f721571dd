"""
Core infrastructure module for the Explorer engine.

This module provides the foundational components including configuration
management, logging setup, and custom exceptions.
"""

from .config import LoggingConfig, VisualizationConfig, Config
from .exceptions import ExplorerError, ConfigurationError, PackageModelError, ValidationError
from .logging_config import setup_logging

__all__ = [
    # Configuration
    'LoggingConfig',
    'VisualizationConfig',
    'Config',

    # Exceptions
    'ExplorerError',
    'ConfigurationError',
    'PackageModelError',
    'ValidationError',

    # Logging
    'setup_logging',
]

# Version info
__version__ = "1.0.0"

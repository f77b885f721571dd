"""
Centralized configuration manager to avoid multiple Config instances.
"""
from core.config import Config
from core.exceptions import ConfigurationError
from core.logging_config import setup_logging

# Global config instance - loaded once
_config_instance = None

def get_config() -> Config:
    """Get the global config instance, creating it only once."""
    global _config_instance
    if _config_instance is None:
        _config_instance = Config()
    return _config_instance

def refresh_config():
    """Force a refresh of the global config instance."""
    global _config_instance
    _config_instance = None
    return get_config()

def get_visualization_registry():
    """Build the visualization registry described by the configuration."""
    from explorer.visualizations import VisualizationRegistry

    config = get_config()
    if not config.visualizations.entries:
        return VisualizationRegistry()
    return VisualizationRegistry.from_entries(config.visualizations.entries)

def configure_explorer() -> Config:
    """
    Validate the configuration, set up logging and install the configured
    visualization registry as the process-wide one.

    Raises:
        ConfigurationError: If the configuration is invalid
    """
    from explorer.visualizations import set_registry

    config = get_config()
    errors = config.validate()
    if errors:
        raise ConfigurationError(
            f"Invalid configuration: {'; '.join(errors)}",
            config_file=config.config_file_path
        )

    setup_logging(
        level=config.logging.level,
        log_file=config.logging.log_file,
        log_dir=config.logging.log_dir,
        propagate=config.logging.propagate
    )
    set_registry(get_visualization_registry())
    return config

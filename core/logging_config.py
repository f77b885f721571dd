"""
Logging configuration for the Explorer engine.

The engine runs inside a host application, so only the engine's own logger
hierarchy is configured. The root logger and any handlers the host installed
are left alone. Nothing is configured on import; call setup_logging() (or
config_manager.configure_explorer()) once at startup.
"""

import logging
import os
from pathlib import Path
from typing import List, Optional


DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Top-level loggers of the engine's packages and modules
ENGINE_LOGGERS = ('explorer', 'core', 'config_manager')

logger = logging.getLogger(__name__)


def _build_handlers(level: int, formatter: logging.Formatter,
                    log_file: Optional[str], log_dir: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler()]

    if log_file:
        log_dir = log_dir or 'logs'
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(os.path.join(log_dir, log_file)))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        handler.explorer_handler = True
    return handlers


def setup_logging(
    level: str = 'INFO',
    log_file: Optional[str] = None,
    log_dir: Optional[str] = None,
    format_string: Optional[str] = None,
    propagate: bool = False
) -> None:
    """
    Set up logging for the engine's loggers.

    Handlers from an earlier call are replaced; handlers added by anyone
    else stay in place.

    Args:
        level: Logging level ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')
        log_file: Name of log file (optional)
        log_dir: Directory for log files (defaults to 'logs')
        format_string: Custom format string (optional)
        propagate: Also pass records on to the host's root handlers
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)
    handlers = _build_handlers(numeric_level, formatter, log_file, log_dir)

    for name in ENGINE_LOGGERS:
        engine_logger = logging.getLogger(name)
        engine_logger.setLevel(numeric_level)
        engine_logger.propagate = propagate

        for handler in engine_logger.handlers[:]:
            if getattr(handler, 'explorer_handler', False):
                engine_logger.removeHandler(handler)
                handler.close()
        for handler in handlers:
            engine_logger.addHandler(handler)

    if log_file:
        logger.info(f"Logging to file: {handlers[-1].baseFilename}")
    logger.info(f"Logging configured with level: {level}")

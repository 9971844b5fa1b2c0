"""Centralized logging configuration for Zen Tuner.

This module provides a consistent way to configure logging across the application.
"""

import logging
import sys
from typing import Optional

# Log levels for different modules
MODULE_LOG_LEVELS = {
    # Core modules
    "zen_tuner": logging.INFO,
    "zen_tuner.cli": logging.INFO,
    # Pitch pipeline
    "zen_tuner.detection": logging.INFO,  # Set to DEBUG to see why frames are rejected
    "zen_tuner.services": logging.INFO,
    "zen_tuner.audio": logging.INFO,
    "zen_tuner.core": logging.INFO,
    "zen_tuner.logger": logging.WARNING,  # Logger module itself should be quiet
    # Libraries/third-party
    "numpy": logging.ERROR,
    # Root logger
    "": logging.ERROR,
}

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> None:
    """Set up logging configuration for the application.

    Args:
        level: If provided, override all 'zen_tuner' log levels with this level (e.g., "DEBUG").
    """
    global _console_handler

    # Create a single, shared console handler if it doesn't exist
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        _console_handler.setFormatter(formatter)

    # Determine log levels
    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            for module_name in log_levels:
                if module_name.startswith("zen_tuner"):
                    log_levels[module_name] = numeric_level
        else:
            logging.getLogger(__name__).error(f"Invalid log level: {level}")

    # Only the package loggers and the root get the handler; child module
    # loggers propagate up to their subpackage logger.
    for module_name, module_level in log_levels.items():
        logger = logging.getLogger(module_name if module_name else "")
        logger.setLevel(module_level)

        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
        if module_name in ("zen_tuner", ""):
            logger.addHandler(_console_handler)
            logger.propagate = False

    logging.getLogger("zen_tuner").info("Logging configuration complete")

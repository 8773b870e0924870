"""Console logging for the tab_practice command line.

Library modules only ask for loggers (see logger.get_logger). The application
calls setup_logging() once to attach a single stdout handler to the
``tab_practice`` package logger; module loggers propagate to it.
"""

import logging
import sys
from typing import Optional

from .logger import PACKAGE_LOGGER

# Log levels for different modules
MODULE_LOG_LEVELS = {
    PACKAGE_LOGGER: logging.INFO,
    "tab_practice.chords": logging.INFO,  # Set to DEBUG for rule-by-rule matching info
    "tab_practice.mock_player": logging.WARNING,  # Mock player logs every command
}

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Shared console handler
_console_handler: Optional[logging.Handler] = None


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """Send tab_practice log records to stdout.

    Calling this again only updates levels; the handler is attached once.

    Args:
        level: If provided, override every module level with this one (e.g., "DEBUG")

    Returns:
        The package logger
    """
    global _console_handler

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if _console_handler is None:
        _console_handler = logging.StreamHandler(sys.stdout)
        _console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    else:
        # stdout may have been replaced since the last call
        _console_handler.setStream(sys.stdout)
    if _console_handler not in package_logger.handlers:
        package_logger.addHandler(_console_handler)
    # Records stop at the package logger so the root handlers never repeat them
    package_logger.propagate = False

    log_levels = MODULE_LOG_LEVELS.copy()
    if level:
        numeric_level = logging.getLevelName(level.upper())
        if isinstance(numeric_level, int):
            log_levels = {name: numeric_level for name in log_levels}
        else:
            package_logger.error(f"Invalid log level: {level}")

    for module_name, module_level in log_levels.items():
        logging.getLogger(module_name).setLevel(module_level)

    package_logger.debug("Logging configuration complete")
    return package_logger

"""Per-module loggers for tab_practice.

Library modules log through these; nothing is printed until the application
calls logging_config.setup_logging().
"""
import logging
from typing import Dict

PACKAGE_LOGGER = "tab_practice"

_logger_cache: Dict[str, logging.Logger] = {}

# Silent by default when used as a library
logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """
    Get a cached logger for a module of the package.

    Args:
        name: The full module name (e.g., 'tab_practice.practice_loop')

    Returns:
        The logger for that module
    """
    logger = _logger_cache.get(name)
    if logger is None:
        logger = _logger_cache[name] = logging.getLogger(name)
    return logger

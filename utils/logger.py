"""
logger.py - Logging setup for the agent control layer.

Every module logs through logging.getLogger(__name__); this module only
decides where those records go and at which level.
"""

import logging
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Loggers owned by this project
PROJECT_LOGGERS = ('botkit', 'integration', 'utils')


def configure_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> None:
    """
    Configure root logging for a bot script.

    Args:
        level: Log level for the project loggers
        log_file: Optional file to also write records to
    """
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, handlers=handlers)
    set_level(level)


def set_level(level: int) -> None:
    """Set the level of every project logger."""
    for name in PROJECT_LOGGERS:
        logging.getLogger(name).setLevel(level)

"""
Utilities module for the agent control layer.

This module provides common utilities:
- Logging configuration
- Configuration management
- Random seed management
- Position string helpers
"""

from .logger import configure_logging, set_level
from .config import (
    set_seed,
    load_config,
    save_config,
    Config
)
from .helpers import position_to_string, position_from_string, round_half_up

__all__ = [
    'configure_logging',
    'set_level',
    'set_seed',
    'load_config',
    'save_config',
    'Config',
    'position_to_string',
    'position_from_string',
    'round_half_up',
]

"""
config.py - Configuration management for the agent control layer.

This module provides utilities for:
- Loading configuration from YAML/JSON files
- Setting random seeds for reproducible wandering
- Managing tunable behaviour constants (stuck detection, sort weights)
"""

import os
import json
import random
import logging
from pathlib import Path
from typing import Dict, Optional, Any

import numpy as np
import yaml

logger = logging.getLogger(__name__)


def set_seed(seed: int) -> None:
    """
    Set random seed for reproducibility.

    Sets seed for:
    - NumPy random
    - Python random

    Args:
        seed: Random seed value
    """
    np.random.seed(seed)
    random.seed(seed)
    os.environ['PYTHONHASHSEED'] = str(seed)


def load_config(path: str) -> Optional[Dict[str, Any]]:
    """
    Load configuration from a YAML or JSON file.

    Args:
        path: Path to configuration file

    Returns:
        Configuration dictionary, or None if the file is missing or unreadable
    """
    if not os.path.exists(path):
        logger.warning(f"Config file not found: {path}")
        return None

    try:
        with open(path, 'r') as f:
            if path.endswith('.yaml') or path.endswith('.yml'):
                return yaml.safe_load(f) or {}
            return json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Error loading config {path}: {e}")
        return None


def save_config(config: Dict[str, Any], path: str) -> None:
    """
    Save configuration to a file.

    Args:
        config: Configuration dictionary
        path: Path to save to
    """
    Path(path).parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        if path.endswith('.yaml') or path.endswith('.yml'):
            yaml.safe_dump(config, f, default_flow_style=False)
        else:
            json.dump(config, f, indent=2)


class Config:
    """
    Tunable constants for the control layer.

    The ranking weights were tuned by experiment rather than derived, so
    they are exposed here instead of being hard-coded.

    Usage:
        config = Config.from_yaml('botkit.yaml')
        config.stuck_interval_ms = 3000
        config.save('botkit_modified.yaml')
    """

    DEFAULTS = {
        # Stuck detection
        'stuck_interval_ms': 5000,
        'stuck_distance': 2.0,
        'notify_on_stuck': False,

        # Containers
        'container_warn_interval': 5.0,

        # Search ranges
        'find_blocks_max_distance': 30,
        'collect_max_distance': 50,

        # Game clock
        'tick_seconds': 0.05,

        # Ranking weights
        'block_distance_weight': 1.0,
        'block_dig_time_weight': 1.0,
        'entity_value_weight': 2.0,
        'entity_health_weight': 0.5,
        'entity_distance_weight': 1.1,
        'item_value_weight': 2.0,
        'item_distance_weight': 1.1,
    }

    def __init__(self, **kwargs):
        """Initialize config with defaults and overrides."""
        for key, value in self.DEFAULTS.items():
            setattr(self, key, value)

        for key, value in kwargs.items():
            if key in self.DEFAULTS:
                setattr(self, key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {key}")

    @classmethod
    def from_yaml(cls, path: str) -> 'Config':
        """Load configuration from YAML file."""
        config_dict = load_config(path) or {}
        return cls(**config_dict)

    @classmethod
    def from_json(cls, path: str) -> 'Config':
        """Load configuration from JSON file."""
        config_dict = load_config(path) or {}
        return cls(**config_dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert config to dictionary."""
        return {
            key: getattr(self, key)
            for key in self.DEFAULTS.keys()
        }

    def save(self, path: str) -> None:
        """Save configuration to file."""
        save_config(self.to_dict(), path)

    def __repr__(self) -> str:
        items = ', '.join(f'{k}={v}' for k, v in self.to_dict().items())
        return f'Config({items})'

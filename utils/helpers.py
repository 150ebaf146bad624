"""
helpers.py - Small utility functions shared across the control layer.

- Position string conversion for chat commands
- Half-up rounding for tick counts
"""

import logging
import math
from typing import Optional

from integration.mc_client import Position

logger = logging.getLogger(__name__)


def position_to_string(position: Position) -> str:
    """
    Represent a position as 'x, y, z'.

    Example:
        position_to_string(Position(15.0, 63, -22.2)) -> "15.0, 63, -22.2"
    """
    return f"{position.x}, {position.y}, {position.z}"


def position_from_string(position_string: str) -> Optional[Position]:
    """
    Parse a position from 'x, y, z'.

    Useful for chat commands carrying coordinates from a player.

    Args:
        position_string: Comma separated coordinates

    Returns:
        The position, or None if the string is malformed
    """
    coordinates = position_string.split(",")
    if len(coordinates) != 3:
        logger.warning(f"position_from_string: invalid position string {position_string!r}")
        return None

    try:
        x, y, z = (float(c.strip()) for c in coordinates)
    except ValueError:
        logger.warning(f"position_from_string: non-numeric coordinate in {position_string!r}")
        return None

    return Position(x, y, z)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))

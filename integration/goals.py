"""
goals.py - Goal descriptions handed to the mover.

Goals are plain values; the pathfinding search that satisfies them lives
behind MinecraftClient.goto / set_goal.
"""

from dataclasses import dataclass
from typing import Any

from .mc_client import Entity, Position


@dataclass
class GoalNear:
    """Be within range of a point."""
    x: float
    y: float
    z: float
    range: float = 1.0


@dataclass
class GoalXZ:
    """Reach a column, any height."""
    x: float
    z: float


@dataclass
class GoalLookAtBlock:
    """Stand somewhere the block face is visible and within reach."""
    position: Position
    reach: float = 5.0


@dataclass
class GoalPlaceBlock:
    """Stand somewhere a block can be placed against the target."""
    position: Position
    range: float = 5.0


@dataclass
class GoalFollow:
    """Keep within range of a (moving) entity."""
    entity: Entity
    range: float = 2.0


@dataclass
class GoalInvert:
    """Satisfied whenever the wrapped goal is not."""
    goal: Any

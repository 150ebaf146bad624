"""
Integration module for the agent control layer.

This module provides the contract with the external Minecraft client:
- MinecraftClient: mover, world query, inventory and event source
- Position / Block / Entity / Item: shared data model
- Goals handed to the mover
- Block properties for dig time estimation
"""

from .mc_client import (
    MinecraftClient,
    ContainerWindow,
    GoalChanged,
    Position,
    Block,
    Entity,
    Item,
)
from .goals import GoalNear, GoalXZ, GoalLookAtBlock, GoalPlaceBlock, GoalFollow, GoalInvert
from .block_data import BlockProperties, get_block_properties, can_harvest, parse_tool

__all__ = [
    'MinecraftClient',
    'ContainerWindow',
    'GoalChanged',
    'Position',
    'Block',
    'Entity',
    'Item',
    'GoalNear',
    'GoalXZ',
    'GoalLookAtBlock',
    'GoalPlaceBlock',
    'GoalFollow',
    'GoalInvert',
    'BlockProperties',
    'get_block_properties',
    'can_harvest',
    'parse_tool',
]

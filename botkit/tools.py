"""
tools.py - Harvest tool selection.

Computes how long a block takes to break with a given item (or the empty
hand) and picks the fastest option in the agent's inventory. An infinite
dig time is the authoritative "cannot dig this now" signal.
"""

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional

from integration.mc_client import MinecraftClient, Block, Item
from integration.block_data import TIER_SPEEDS, get_block_properties, parse_tool, can_harvest

logger = logging.getLogger(__name__)

TICKS_PER_SECOND = 20


@dataclass
class BestHarvestTool:
    """
    The best tool for a block and the time it takes.

    Attributes:
        tool: Item to hold, None for the empty hand (or when not diggable)
        dig_time: Seconds to break the block, math.inf if not diggable
    """
    tool: Optional[Item] = None
    dig_time: float = math.inf

    @property
    def diggable(self) -> bool:
        return self.dig_time < math.inf


class HarvestToolSelector:
    """
    Picks the inventory item that breaks a block fastest.

    Usage:
        selector = HarvestToolSelector(client)
        best = selector.best_harvest_tool(block)
        if best.diggable:
            await client.equip(best.tool, 'hand')
    """

    def __init__(self, client: MinecraftClient):
        self.client = client

    def dig_time(
        self,
        block: Block,
        tool: Optional[Item],
        effects: Optional[Dict[str, int]] = None
    ) -> float:
        """
        Seconds needed to break a block.

        Follows the game's breaking formula: the right tool class speeds
        things up by its tier, Efficiency adds level^2 + 1, Haste and
        Mining Fatigue scale the result. Blocks the item cannot harvest
        are reported as not diggable.

        Args:
            block: Block to break
            tool: Held item, None for the empty hand
            effects: Active status effects (name -> amplifier)

        Returns:
            Dig time in seconds, 0 for instant breaks, math.inf if the
            block is unbreakable or cannot be harvested with this item
        """
        properties = get_block_properties(block.name)
        hardness = properties.hardness
        if hardness is None or hardness < 0:
            return math.inf
        if hardness == 0:
            return 0.0

        tool_name = tool.name if tool else None
        if not can_harvest(block.name, tool_name):
            return math.inf

        tool_class, tier = parse_tool(tool_name)
        speed = 1.0
        if tool_class is not None and tool_class == properties.tool:
            speed = TIER_SPEEDS[tier]
            efficiency = tool.enchantments.get('efficiency', 0)
            if efficiency > 0:
                speed += efficiency * efficiency + 1

        effects = effects or {}
        if 'haste' in effects:
            speed *= 1.0 + 0.2 * (effects['haste'] + 1)
        if 'mining_fatigue' in effects:
            speed *= 0.3 ** min(effects['mining_fatigue'] + 1, 4)

        damage = speed / hardness / 30.0
        if damage > 1:
            return 0.0

        ticks = math.ceil(1.0 / damage)
        return ticks / TICKS_PER_SECOND

    def best_harvest_tool(self, block: Block) -> BestHarvestTool:
        """
        Find the fastest way to break a block with what the agent holds.

        The empty hand is tried first, so it wins ties against tools.

        Args:
            block: The block to evaluate

        Returns:
            BestHarvestTool; dig_time is math.inf and tool None when
            nothing (not even bare hands) can break the block
        """
        effects = self.client.entity.effects
        fastest = math.inf
        best_tool = None

        for tool in [None] + list(self.client.inventory_items()):
            dig_time = self.dig_time(block, tool, effects)
            if dig_time < fastest:
                fastest = dig_time
                best_tool = tool

        return BestHarvestTool(best_tool, fastest)

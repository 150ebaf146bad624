"""
harvesting.py - Digging and placing blocks.

This module provides the block actions of the agent:
- Equipping the best harvest tool for a block
- Digging a block in reach, supervised for target disappearance
- Approaching, digging and collecting the drop
- Placing a block from the inventory
"""

import logging
from typing import Optional

from integration.mc_client import MinecraftClient, Block, Position, GoalChanged
from integration.goals import GoalPlaceBlock
from utils.config import Config
from utils.helpers import position_to_string
from .collection import Collector
from .events import subscribed
from .naming import names_match
from .navigation import Navigator
from .ranking import CandidateRanker
from .tools import HarvestToolSelector

logger = logging.getLogger(__name__)

# Replaceable plants; placing "on" them means placing on the block below
GRASS_BLOCKS = {'grass', 'short_grass', 'tall_grass'}


class Harvester:
    """
    Block actions for the agent.

    Usage:
        harvester = Harvester(client, navigator, ranker, selector, collector)
        await harvester.find_and_dig_block('coal_ore')
    """

    def __init__(
        self,
        client: MinecraftClient,
        navigator: Navigator,
        ranker: CandidateRanker,
        tool_selector: HarvestToolSelector,
        collector: Collector,
        config: Optional[Config] = None
    ):
        self.client = client
        self.navigator = navigator
        self.ranker = ranker
        self.tool_selector = tool_selector
        self.collector = collector
        self.config = config or Config()

    async def equip_best_harvest_tool(self, block: Block) -> bool:
        """
        Hold the item that breaks a block fastest.

        Returns:
            True if the block can be dug with what the agent now holds
        """
        best = self.tool_selector.best_harvest_tool(block)
        if not best.diggable:
            return False

        if best.tool is not None and self.client.held_item is not best.tool:
            logger.debug(f"Equipping {best.tool.name} to dig {block.name}")
            try:
                await self.client.equip(best.tool, 'hand')
            except Exception as e:
                logger.warning(f"Error equipping {best.tool.name} to dig {block.name}: {e!r}")
                return False
        return True

    async def dig_block(self, block: Optional[Block]) -> bool:
        """
        Dig a block in reach with the best available tool.

        The dig is aborted when the mover resets its path (block update or
        dig error) and the target is gone: either the block changed, or the
        mover is still mining with no dig target left.

        Args:
            block: The block to dig

        Returns:
            True if the block was dug
        """
        if block is None:
            logger.warning("dig_block: block was None")
            return False

        best = self.tool_selector.best_harvest_tool(block)
        if not best.diggable:
            logger.info(f"No tool in inventory can dig {block.name} at {position_to_string(block.position)}")
            return False

        if not await self.equip_best_harvest_tool(block):
            return False

        def on_path_reset(reason: str) -> None:
            if reason not in ('block_updated', 'dig_error'):
                return
            current = self.client.block_at(block.position)
            changed = current is None or current.name != block.name
            if changed or (self.client.is_mining() and self.client.target_dig_block is None):
                logger.debug(f"Cancelling dig of {block.name}, target block no longer exists")
                self.client.stop_digging()
                try:
                    self.client.set_goal(None)
                except GoalChanged:
                    logger.debug("Goal change raised while stopping dig path")

        try:
            with subscribed(self.client, 'path_reset', on_path_reset):
                await self.client.dig(block)
        except Exception as e:
            logger.warning(f"Error digging {block.name} at {position_to_string(block.position)}: {e!r}")
            return False

        logger.debug(f"Dug {block.name} in {best.dig_time:.2f}s")
        return True

    async def approach_and_dig_block(
        self,
        block: Optional[Block],
        skip_collection: bool = False,
        reach: float = 5
    ) -> bool:
        """
        Walk to a block, dig it and pick up what it drops.

        Args:
            block: The block to dig
            skip_collection: Leave the drop on the ground
            reach: How close to get before digging

        Returns:
            True if the block was dug (collection failures are ignored)
        """
        if block is None:
            logger.warning("approach_and_dig_block: block was None")
            return False

        if not await self.navigator.approach_block(block, reach):
            return False

        if not await self.dig_block(block):
            return False

        if not skip_collection:
            # Give the drop time to spawn
            await self.client.wait_for_ticks(5)
            drop_name = block.name.replace('_ore', '')
            drop = self.ranker.find_item_on_ground(drop_name, partial_match=True, max_distance=5)
            if drop is not None:
                await self.collector.collect_item_on_ground(drop)
            else:
                logger.debug(f"No {drop_name} drop found near {position_to_string(block.position)}")

        return True

    async def find_and_dig_block(
        self,
        block_type: str,
        partial_match: bool = False,
        only_find_top_blocks: bool = False,
        max_distance: Optional[float] = None,
        skip_collection: bool = False
    ) -> bool:
        """
        Find the best block of a type, dig it and collect the drop.

        Example:
            await harvester.find_and_dig_block('_log', partial_match=True)
        """
        block = self.ranker.find_block(
            block_type,
            partial_match=partial_match,
            only_find_top_blocks=only_find_top_blocks,
            max_distance=max_distance
        )
        if block is None:
            logger.info(f"No diggable {block_type} found nearby")
            return False

        return await self.approach_and_dig_block(block, skip_collection=skip_collection)

    async def place_block(
        self,
        block_name: str,
        target_block: Optional[Block],
        face: Optional[Position] = None,
        reach: float = 5
    ) -> bool:
        """
        Place a block from the inventory against a face of target_block.

        Placing on grass places on the block below it instead.

        Args:
            block_name: Inventory item to place
            target_block: Reference block
            face: Face direction (default up)
            reach: How close to get before placing

        Returns:
            True if the block was placed
        """
        if target_block is None:
            logger.warning("place_block: target block was None")
            return False

        face = face or Position(0, 1, 0)
        if target_block.name in GRASS_BLOCKS:
            below = self.client.block_at(target_block.position.offset(0, -1, 0))
            if below is not None:
                target_block = below

        item = next((i for i in self.client.inventory_items() if names_match(block_name, i)), None)
        if item is None:
            logger.info(f"No {block_name} in inventory to place")
            return False

        destination = target_block.position.plus(face)
        goal = GoalPlaceBlock(destination, reach)
        if not await self.navigator.handle_path(lambda: self.client.goto(goal)):
            return False

        try:
            await self.client.equip(item, 'hand')
            await self.client.place_block(target_block, face)
        except Exception as e:
            logger.warning(f"Error placing {block_name} at {position_to_string(destination)}: {e!r}")
            return False

        return True

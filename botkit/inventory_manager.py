"""
inventory_manager.py - Inventory, crafting and container management.

This module provides inventory and container operations:
- Inventory queries by item name
- Dropping items
- Crafting and holding items
- Opening chests and moving items in and out of them
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Sequence

from integration.mc_client import MinecraftClient, ContainerWindow, Block, Item
from utils.config import Config
from utils.helpers import position_to_string
from .context import InteractionContext
from .naming import names_match

logger = logging.getLogger(__name__)


def _matches(names: Sequence[str], item: Item, partial_match: bool) -> bool:
    if not names:
        return True
    return any(names_match(name, item, partial_match) for name in names)


class InventoryManager:
    """
    Inventory and container management for the agent.

    Handles:
    - Counting and listing inventory items
    - Dropping, crafting and holding items
    - Container windows, with a watchdog warning about windows left open
    """

    def __init__(
        self,
        client: MinecraftClient,
        context: InteractionContext,
        config: Optional[Config] = None
    ):
        """
        Initialize the inventory manager.

        Args:
            client: Minecraft client for inventory operations
            context: Shared busy flags
            config: Tunable constants
        """
        self.client = client
        self.context = context
        self.config = config or Config()
        self._watchdogs: Dict[int, asyncio.Task] = {}

    # Queries

    def get_all_inventory_items(self) -> List[Item]:
        return list(self.client.inventory_items())

    def get_inventory_items(self, name: str, partial_match: bool = False) -> List[Item]:
        """Inventory stacks whose name matches."""
        return [item for item in self.client.inventory_items() if names_match(name, item, partial_match)]

    def get_inventory_item_quantity(self, name: str, partial_match: bool = False) -> int:
        """
        Total count of an item across every stack.

        Example:
            get_inventory_item_quantity('_planks', partial_match=True)
        """
        return sum(item.count for item in self.get_inventory_items(name, partial_match))

    def inventory_contains_item(self, name: str, partial_match: bool = False, quantity: int = 1) -> bool:
        """
        Check whether the inventory holds at least quantity of an item.

        Args:
            name: Item name
            partial_match: Accept names containing name
            quantity: Minimum count (must be at least 1)

        Returns:
            True if enough of the item is present
        """
        if quantity < 1:
            logger.warning(f"inventory_contains_item: quantity must be at least 1, got {quantity}")
            return False
        return self.get_inventory_item_quantity(name, partial_match) >= quantity

    def is_inventory_slots_full(self) -> bool:
        return self.client.first_empty_inventory_slot() is None

    # Dropping

    async def drop_inventory_item(self, name: str, partial_match: bool = False, quantity: int = 1) -> int:
        """
        Drop an item on the ground.

        Args:
            name: Item name
            partial_match: Accept names containing name
            quantity: How many to drop; negative drops every stack

        Returns:
            Number of items dropped
        """
        remaining = None if quantity < 0 else quantity
        dropped = 0

        for item in self.get_inventory_items(name, partial_match):
            if remaining is not None and remaining <= 0:
                break
            count = item.count if remaining is None else min(item.count, remaining)
            try:
                await self.client.toss(item.type_id, None, count)
            except Exception as e:
                logger.warning(f"Error dropping {count} {item.name}: {e!r}")
                break
            dropped += count
            if remaining is not None:
                remaining -= count

        logger.debug(f"Dropped {dropped} {name}")
        return dropped

    async def drop_all_inventory_item(self, name: str) -> int:
        """Drop every stack of an item."""
        return await self.drop_inventory_item(name, quantity=-1)

    async def drop_all_inventory_items(self, names: Optional[Sequence[str]] = None, partial_match: bool = False) -> int:
        """
        Drop everything, or every item matching one of names.

        Returns:
            Number of items dropped
        """
        dropped = 0
        for item in self.get_all_inventory_items():
            if names and not _matches(names, item, partial_match):
                continue
            try:
                await self.client.toss(item.type_id, None, item.count)
            except Exception as e:
                logger.warning(f"Error dropping {item.name}: {e!r}")
                continue
            dropped += item.count
        return dropped

    # Crafting and holding

    async def craft_item(
        self,
        name: str,
        quantity: int = 1,
        crafting_table: Optional[Block] = None
    ) -> Optional[Item]:
        """
        Craft an item.

        Stuck detection is suspended while crafting.

        Args:
            name: Item to craft
            quantity: Number of times to apply the recipe
            crafting_table: Table in reach, for 3x3 recipes

        Returns:
            The crafted item stack, None if it could not be crafted
        """
        with self.context.crafting():
            recipes = self.client.recipes_for(name, crafting_table)
            if not recipes:
                logger.info(f"No recipe available to craft {name}")
                return None
            try:
                await self.client.craft(recipes[0], quantity, crafting_table)
            except Exception as e:
                logger.warning(f"Error crafting {quantity} {name}: {e!r}")
                return None

        crafted = self.get_inventory_items(name)
        return crafted[0] if crafted else None

    async def hold_item(self, name: str) -> Optional[Item]:
        """
        Hold an item in the main hand.

        Returns:
            The held item, None if it is not in the inventory
        """
        held = self.client.held_item
        if held is not None and names_match(name, held):
            return held

        items = self.get_inventory_items(name)
        if not items:
            logger.info(f"No {name} in inventory to hold")
            return None

        try:
            await self.client.equip(items[0], 'hand')
        except Exception as e:
            logger.warning(f"Error equipping {name}: {e!r}")
            return None
        return items[0]

    # Containers

    async def open_container(self, block: Optional[Block]) -> Optional[ContainerWindow]:
        """
        Open a container in reach.

        The window is tracked as open until close_container is called;
        a warning is logged periodically while it stays open.

        Returns:
            The container window, None if it could not be opened
        """
        if block is None:
            logger.warning("open_container: block was None")
            return None

        try:
            window = await self.client.open_container(block)
        except Exception as e:
            logger.warning(f"Error opening {block.name} at {position_to_string(block.position)}: {e!r}")
            return None

        self.context.mark_container_open(window.id)
        previous = self._watchdogs.pop(window.id, None)
        if previous is not None:
            previous.cancel()
        self._watchdogs[window.id] = asyncio.ensure_future(self._watch_open(window.id))
        return window

    async def _watch_open(self, window_id: int) -> None:
        interval = self.config.container_warn_interval
        while True:
            await asyncio.sleep(interval)
            logger.warning(f"Container window {window_id} is still open; close it to resume stuck detection")

    async def close_container(self, window: Optional[ContainerWindow]) -> None:
        """Close a container window and stop tracking it."""
        if window is None:
            return

        watchdog = self._watchdogs.pop(window.id, None)
        if watchdog is not None:
            watchdog.cancel()
        try:
            await window.close()
        finally:
            if self.context.open_container_id == window.id:
                self.context.clear_container()

    @asynccontextmanager
    async def opened_container(self, block: Block) -> AsyncIterator[Optional[ContainerWindow]]:
        """
        Open a container for the duration of the block.

        Usage:
            async with inventory.opened_container(chest) as window:
                if window:
                    await inventory.withdraw_items_from_container(window, ['bread'])
        """
        window = await self.open_container(block)
        try:
            yield window
        finally:
            await self.close_container(window)

    def get_container_contents(self, window: ContainerWindow) -> List[Item]:
        """Items in the container's own slots."""
        return [item for item in window.slots[:window.inventory_start] if item is not None]

    async def withdraw_items_from_container(
        self,
        window: ContainerWindow,
        names: Sequence[str] = (),
        partial_match: bool = False,
        quantity: Optional[int] = None
    ) -> bool:
        """
        Take items out of an open container.

        Args:
            window: Open container window
            names: Items to take (empty = any)
            partial_match: Accept names containing one of names
            quantity: Max items per name (None = all)

        Returns:
            True if anything was withdrawn
        """
        items = self.get_container_contents(window)
        return await self._transfer(window.withdraw, items, names, partial_match, quantity, 'withdraw')

    async def deposit_items_to_container(
        self,
        window: ContainerWindow,
        names: Sequence[str] = (),
        partial_match: bool = False,
        quantity: Optional[int] = None
    ) -> bool:
        """
        Put items from the agent inventory and hotbar into an open container.

        Returns:
            True if anything was deposited
        """
        items = [item for item in window.slots[window.inventory_start:] if item is not None]
        return await self._transfer(window.deposit, items, names, partial_match, quantity, 'deposit')

    async def _transfer(self, move, items, names, partial_match, quantity, action) -> bool:
        moved: Dict[str, int] = {}
        for item in items:
            if not _matches(names, item, partial_match):
                continue
            count = item.count
            if quantity is not None:
                count = min(count, quantity - moved.get(item.name, 0))
            if count <= 0:
                continue
            try:
                await move(item.type_id, None, count)
            except Exception as e:
                logger.warning(f"Failed to {action} {count} {item.name}: {e!r}")
                continue
            moved[item.name] = moved.get(item.name, 0) + count

        if moved:
            logger.debug(f"{action.capitalize()}: {moved}")
        return bool(moved)

"""
controller.py - Agent facade and main loop.

This module implements the controller that:
- Wires the subsystems around one client and one interaction context
- Exposes small conveniences (username, position, chat, waits)
- Runs an agent's step function in a loop, logging and surviving errors

Subsystems:
- navigator: supervised movement
- ranker: ranked search for entities, blocks and ground items
- tool_selector: harvest tool choice and dig time
- harvester: dig and place actions
- combat: melee attacks with weapon cooldown
- collector: dropped item collection
- inventory: inventory, crafting and containers
"""

import logging
import time
from typing import Awaitable, Callable, Optional

from integration.mc_client import MinecraftClient, Position
from utils.config import Config
from utils.helpers import position_to_string, position_from_string
from .collection import Collector
from .combat import Combat, WeaponCooldownGate
from .context import InteractionContext
from .harvesting import Harvester
from .inventory_manager import InventoryManager
from .navigation import Navigator
from .ranking import CandidateRanker
from .tools import HarvestToolSelector

logger = logging.getLogger(__name__)

StepFunction = Callable[['BotController'], Awaitable[Optional[bool]]]


class BotController:
    """
    High-level controller for an agent.

    Usage:
        controller = BotController(client, Config.from_yaml('bot.yaml'))

        async def step(bot):
            return await bot.harvester.find_and_dig_block('coal_ore')

        await controller.run(step)
    """

    def __init__(self, client: MinecraftClient, config: Optional[Config] = None):
        """
        Initialize the controller.

        Args:
            client: Connected Minecraft client
            config: Tunable constants (defaults if omitted)
        """
        self.client = client
        self.config = config or Config()
        self.context = InteractionContext()

        self.navigator = Navigator(client, self.context, self.config)
        self.tool_selector = HarvestToolSelector(client)
        self.ranker = CandidateRanker(client, self.tool_selector, self.config)
        self.collector = Collector(client, self.navigator, self.ranker, self.config)
        self.harvester = Harvester(
            client, self.navigator, self.ranker, self.tool_selector, self.collector, self.config
        )
        self.combat = Combat(
            client, self.context, self.navigator, WeaponCooldownGate(client, self.context, self.config)
        )
        self.inventory = InventoryManager(client, self.context, self.config)

        self._running = False
        logger.info(f"BotController initialized for {client.username}")

    def username(self) -> str:
        return self.client.username

    def position(self) -> Position:
        return self.client.position

    async def wait(self, ticks: int) -> None:
        """Wait a number of game ticks (20 per second)."""
        await self.client.wait_for_ticks(ticks)

    def chat(self, message: str) -> None:
        self.client.chat(message)

    def whisper(self, username: str, message: str) -> None:
        self.client.whisper(username, message)

    def set_debug(self, debug: bool) -> None:
        """Toggle debug logging for the control layer."""
        logging.getLogger('botkit').setLevel(logging.DEBUG if debug else logging.INFO)

    @staticmethod
    def position_to_string(position: Position) -> str:
        return position_to_string(position)

    @staticmethod
    def position_from_string(position_string: str) -> Optional[Position]:
        return position_from_string(position_string)

    @property
    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Ask the main loop to end after the current step."""
        self._running = False

    async def run(self, step: StepFunction, max_iterations: Optional[int] = None) -> int:
        """
        Main agent loop.

        Awaits step(controller) repeatedly until it returns False, stop()
        is called or max_iterations steps have run. Errors raised by a step
        are logged and the loop carries on with the next step.

        Args:
            step: Coroutine function making one decision
            max_iterations: Maximum number of steps (None = unbounded)

        Returns:
            Number of steps run
        """
        logger.info(f"Starting main loop for {self.client.username}")
        self._running = True
        iterations = 0
        start_time = time.monotonic()

        try:
            while self._running:
                if max_iterations is not None and iterations >= max_iterations:
                    logger.info("Iteration limit reached, stopping...")
                    break

                iterations += 1
                try:
                    if await step(self) is False:
                        logger.info("Step requested stop")
                        break
                except Exception as e:
                    logger.error(f"Error in main loop step {iterations}: {e}", exc_info=True)
        finally:
            self._running = False
            elapsed = time.monotonic() - start_time
            logger.info(f"Main loop ended after {iterations} steps ({elapsed:.1f}s)")

        return iterations

"""
navigation.py - Supervised movement for the agent.

This module provides navigation functionality:
- handle_path: run a movement coroutine under stuck detection
- Approaching entities, blocks and positions
- Following and avoiding entities
- Moving away from a point and wandering

The path search itself is done by the client's mover; this module only
decides where to go and when to give up.
"""

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from integration.mc_client import MinecraftClient, Position, Block, Entity, GoalChanged
from integration.goals import GoalNear, GoalXZ, GoalLookAtBlock, GoalFollow, GoalInvert
from utils.config import Config
from utils.helpers import position_to_string
from .context import InteractionContext
from .naming import get_entity_name

logger = logging.getLogger(__name__)


@dataclass
class StuckState:
    """Stuck bookkeeping for a single handle_path call."""
    last_position: Position
    stuck: bool = False


class Navigator:
    """
    Movement system for the agent.

    Every movement goes through handle_path, which watches the agent's
    position while the mover works and cancels the goal if the agent stops
    making progress without being busy with something else.
    """

    def __init__(
        self,
        client: MinecraftClient,
        context: InteractionContext,
        config: Optional[Config] = None
    ):
        """
        Initialize the navigator.

        Args:
            client: Minecraft client providing the mover
            context: Shared busy flags
            config: Tunable constants
        """
        self.client = client
        self.context = context
        self.config = config or Config()

    async def handle_path(
        self,
        path_func: Callable[[], Awaitable[None]],
        interval: Optional[float] = None
    ) -> bool:
        """
        Run a movement coroutine, cancelling it if the agent gets stuck.

        The agent is stuck when, between two checks, it moved less than
        stuck_distance while not mining, crafting or using a container.

        Args:
            path_func: Zero-argument coroutine function driving the mover
            interval: Milliseconds between checks (default from config)

        Returns:
            True if the movement completed, False if it was cancelled for
            being stuck or failed for any other reason

        Example:
            goal = GoalNear(pos.x, pos.y, pos.z, 2)
            ok = await navigator.handle_path(lambda: client.goto(goal))
        """
        interval_ms = interval or self.config.stuck_interval_ms
        state = StuckState(last_position=self.client.position.copy())

        monitor = asyncio.ensure_future(self._monitor(state, interval_ms / 1000.0))
        try:
            await path_func()
        except Exception as e:
            if state.stuck:
                # The goal was cleared by the monitor
                logger.debug(f"Path ended after stuck cancel: {e!r}")
            else:
                logger.warning(
                    f"Path interrupted: {e!r}. The target may no longer exist, "
                    f"the path may have become invalid, or path computation took too long."
                )
            return False
        finally:
            monitor.cancel()

        return not state.stuck

    async def _monitor(self, state: StuckState, interval: float) -> None:
        """Check progress every interval seconds until stuck."""
        while not state.stuck:
            await asyncio.sleep(interval)
            try:
                self._check_progress(state)
            except Exception as e:
                logger.debug(f"Stuck check failed, retrying next interval: {e!r}")

    def _check_progress(self, state: StuckState) -> None:
        current = self.client.position.copy()
        moved = current.distance_to(state.last_position)

        if moved < self.config.stuck_distance and not self._is_busy():
            logger.warning(
                f"Agent is stuck at {position_to_string(current)}. It may be wedged "
                f"inside a block or have no way to reach its goal; cancelling the path."
            )
            state.stuck = True
            if self.config.notify_on_stuck:
                self.client.chat("I'm stuck!")
            try:
                self.client.set_goal(None)
            except GoalChanged:
                logger.debug("Goal change raised while cancelling stuck path")
        else:
            state.last_position = current

    def _is_busy(self) -> bool:
        return self.client.is_mining() or self.context.is_busy

    async def approach_position(self, position: Position, reach: float = 1) -> bool:
        """
        Move within reach of a position.

        Args:
            position: Target position
            reach: How close to get (in blocks)

        Returns:
            True if the agent reached the position
        """
        if position is None:
            logger.warning("approach_position: position was None")
            return False

        goal = GoalNear(position.x, position.y, position.z, reach)
        return await self.handle_path(lambda: self.client.goto(goal))

    async def approach_entity(self, entity: Optional[Entity], reach: float = 1) -> bool:
        """
        Move within reach of an entity.

        Args:
            entity: The entity to approach
            reach: How close to get (in blocks)

        Returns:
            True if the agent reached the entity
        """
        if entity is None:
            logger.warning("approach_entity: entity was None")
            return False

        distance = self.client.position.distance_to(entity.position)
        logger.debug(
            f"Approaching {get_entity_name(entity)} from range {distance:.1f} within reach of {reach}"
        )
        return await self.approach_position(entity.position, reach)

    async def approach_block(self, block: Optional[Block], reach: float = 5) -> bool:
        """
        Move somewhere the block can be reached and seen.

        Args:
            block: The block to approach
            reach: How close to get (in blocks)

        Returns:
            True if pathing completed
        """
        if block is None:
            logger.warning("approach_block: block was None")
            return False

        distance = self.client.position.distance_to(block.position)
        logger.debug(f"Approaching {get_entity_name(block)} from range {distance:.1f}")
        goal = GoalLookAtBlock(block.position, reach)
        return await self.handle_path(lambda: self.client.goto(goal))

    def follow_entity(self, entity: Optional[Entity], reach: float = 2) -> None:
        """
        Keep following an entity until the goal is replaced.

        Args:
            entity: The entity to follow
            reach: Distance to keep
        """
        if entity is None:
            logger.warning("follow_entity: entity was None")
            return

        logger.debug(f"Following {get_entity_name(entity)} within reach of {reach}")
        self.client.set_goal(GoalFollow(entity, reach), dynamic=True)

    def avoid_entity(self, entity: Optional[Entity], reach: float = 5) -> None:
        """
        Keep away from an entity until the goal is replaced.

        Args:
            entity: The entity to avoid
            reach: Minimum distance to keep
        """
        if entity is None:
            logger.warning("avoid_entity: entity was None")
            return

        logger.debug(f"Avoiding {get_entity_name(entity)} at a minimum reach of {reach}")
        self.client.set_goal(GoalInvert(GoalFollow(entity, reach)), dynamic=True)

    async def move_away_from(self, position: Position, distance: float) -> bool:
        """
        Move at least distance away from a position on the XZ plane.

        Draws a line from the position through the agent and paths to the
        point at the requested distance along it.

        Args:
            position: The position to move away from
            distance: Minimum distance to reach

        Returns:
            True if the agent moved away or was already far enough
        """
        origin = Position(position.x, 0, position.z)
        current = Position(self.client.position.x, 0, self.client.position.z)

        if current.xz_distance_to(origin) >= distance:
            return True

        direction = current.minus(origin).normalized()
        if direction.x == 0 and direction.z == 0:
            # Standing on the point itself; any direction will do
            direction = Position(1.0, 0, 0)

        target = origin.plus(direction.scaled(distance))
        goal = GoalXZ(target.x, target.z)
        return await self.handle_path(lambda: self.client.goto(goal))

    async def wander(self, min_distance: float = 10, max_distance: float = 10) -> bool:
        """
        Walk to a random point around the agent.

        Args:
            min_distance: Minimum distance along each of X and Z
            max_distance: Maximum distance along each of X and Z

        Returns:
            True if the agent reached its wander goal
        """
        min_distance = max(1, min_distance)
        max_distance = max(min_distance, max_distance)

        x_range = (min_distance + random.random() * (max_distance - min_distance)) * random.choice((-1, 1))
        z_range = (min_distance + random.random() * (max_distance - min_distance)) * random.choice((-1, 1))

        pos = self.client.position
        goal = GoalXZ(pos.x + x_range, pos.z + z_range)
        logger.debug(f"Wandering to ({goal.x:.1f}, {goal.z:.1f})")
        return await self.handle_path(lambda: self.client.goto(goal))

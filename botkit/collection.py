"""
collection.py - Picking up dropped items.

Pickups are observed through the client's 'playerCollect' event
(collector, collected); only pickups made by the agent itself count.
"""

import logging
from typing import List, Optional, Sequence, Set

from integration.mc_client import MinecraftClient, Entity
from utils.config import Config
from .events import subscribed
from .naming import get_entity_name
from .navigation import Navigator
from .ranking import CandidateRanker

logger = logging.getLogger(__name__)

COLLECT_EVENT = 'playerCollect'


class Collector:
    """
    Ground item collection for the agent.

    Usage:
        collector = Collector(client, navigator, ranker)
        collected = await collector.find_and_collect_items_on_ground(['wheat'])
    """

    def __init__(
        self,
        client: MinecraftClient,
        navigator: Navigator,
        ranker: CandidateRanker,
        config: Optional[Config] = None
    ):
        self.client = client
        self.navigator = navigator
        self.ranker = ranker
        self.config = config or Config()

    async def collect_item_on_ground(self, item_entity: Optional[Entity]) -> bool:
        """
        Walk onto a dropped item to pick it up.

        Args:
            item_entity: The item entity lying on the ground

        Returns:
            True if the agent picked the item up
        """
        if item_entity is None:
            logger.warning("collect_item_on_ground: item was None")
            return False

        collected: List[Entity] = []

        def on_collect(collector: Entity, entity: Entity) -> None:
            if collector is self.client.entity:
                collected.append(entity)

        logger.debug(f"Collecting {get_entity_name(item_entity)}")
        with subscribed(self.client, COLLECT_EVENT, on_collect):
            await self.navigator.approach_entity(item_entity, reach=1)

        # A confirmed pickup counts even if the path then ended in an error
        return any(entity.id == item_entity.id for entity in collected)

    async def find_and_collect_items_on_ground(
        self,
        names: Sequence[str] = (),
        partial_match: bool = False,
        max_distance: Optional[float] = None
    ) -> List[Entity]:
        """
        Collect every matching dropped item in range, best first.

        Each item is approached at most once per call, so items the agent
        failed to reach are not retried.

        Args:
            names: Item names to collect (empty = any)
            partial_match: Accept names containing one of names
            max_distance: Search range (default collect_max_distance)

        Returns:
            The item entities the agent picked up
        """
        if max_distance is None:
            max_distance = self.config.collect_max_distance

        collected: List[Entity] = []
        visited: Set[int] = set()

        def on_collect(collector: Entity, entity: Entity) -> None:
            if collector is self.client.entity:
                collected.append(entity)

        with subscribed(self.client, COLLECT_EVENT, on_collect):
            while True:
                results = self.ranker.find_items_on_ground(
                    names=names,
                    partial_match=partial_match,
                    max_distance=max_distance,
                    max_count=None
                )
                remaining = [r.result for r in results if r.result.id not in visited]
                if not remaining:
                    break

                target = remaining[0]
                logger.debug(f"Collecting {get_entity_name(target)}")
                visited.add(target.id)
                if not await self.navigator.approach_entity(target, reach=1):
                    logger.debug(f"Could not reach {get_entity_name(target)}, skipping it")

        logger.info(f"Collected {len(collected)} items from the ground")
        return collected

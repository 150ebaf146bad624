"""
ranking.py - Ranked search for entities, blocks and items on the ground.

Every search follows the same pipeline:
1. Gather candidates within range from the world
2. Drop those whose name does not match or whose intrinsic value is negative
3. Score each candidate from its distance, value and domain cost
4. Stable-sort ascending (lower is better) and keep max_count

Only the cost differs by domain: health for entities, dig time for blocks,
nothing for ground items.
"""

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, Generic, List, Optional, Sequence, TypeVar

import numpy as np

from integration.mc_client import MinecraftClient, Position, Block, Entity, Item
from utils.config import Config
from .naming import names_match
from .tools import BestHarvestTool, HarvestToolSelector

logger = logging.getLogger(__name__)

T = TypeVar('T')

ValueFunction = Callable[[str], float]


class CandidateKind(Enum):
    """What a candidate refers to."""
    ENTITY = auto()
    BLOCK = auto()
    GROUND_ITEM = auto()


@dataclass(frozen=True)
class Candidate:
    """
    A world object under evaluation.

    Built during a single ranking call and never kept: the target goes
    stale as soon as the world changes.
    """
    kind: CandidateKind
    target: Any
    name: str
    position: Position
    value: float = 0.0
    health: float = 0.0
    defense: float = 0.0
    toughness: float = 0.0
    dig_time: float = 0.0


@dataclass
class FindResult(Generic[T]):
    """A search result and the sort value computed for it (lower is better)."""
    result: T
    value: float


@dataclass
class SortWeights:
    """
    Weights of the default sort value functions.

    Character running speed is 5 blocks per second, and distance often
    implies digging through other blocks, so value - distance - dig time
    balances points against time to reach them.
    """
    block_distance: float = 1.0
    block_dig_time: float = 1.0
    entity_value: float = 2.0
    entity_health: float = 0.5
    entity_distance: float = 1.1
    item_value: float = 2.0
    item_distance: float = 1.1

    @classmethod
    def from_config(cls, config: Config) -> 'SortWeights':
        return cls(
            block_distance=config.block_distance_weight,
            block_dig_time=config.block_dig_time_weight,
            entity_value=config.entity_value_weight,
            entity_health=config.entity_health_weight,
            entity_distance=config.entity_distance_weight,
            item_value=config.item_value_weight,
            item_distance=config.item_distance_weight,
        )

    def block_sort_value(self, distance: float, point_value: float = 0.0, dig_time: float = 0.0) -> float:
        """-(value - distance - dig time in seconds)"""
        return -(point_value - self.block_distance * distance - self.block_dig_time * dig_time)

    def entity_sort_value(
        self,
        distance: float,
        point_value: float = 0.0,
        health: float = 10.0,
        defense: float = 0.0,
        toughness: float = 0.0
    ) -> float:
        """
        -(2 * value - health / 2 - 1.1 * distance)

        10 is passive animal health and half the maximum for other entities.
        Defense and toughness are accepted for custom functions but unused.
        """
        return -(self.entity_value * point_value - self.entity_health * health - self.entity_distance * distance)

    def item_sort_value(self, distance: float, point_value: float = 0.0) -> float:
        """-(2 * value - 1.1 * distance)"""
        return -(self.item_value * point_value - self.item_distance * distance)


DEFAULT_SORT_WEIGHTS = SortWeights()

default_find_blocks_sort_value = DEFAULT_SORT_WEIGHTS.block_sort_value
default_find_entities_sort_value = DEFAULT_SORT_WEIGHTS.entity_sort_value
default_find_items_on_ground_sort_value = DEFAULT_SORT_WEIGHTS.item_sort_value


def zero_value(name: str) -> float:
    """Default intrinsic value: every name is worth the same."""
    return 0.0


def rank_candidates(
    origin: Position,
    candidates: Sequence[Candidate],
    sort_value: Callable[[Candidate, float], float],
    max_count: Optional[int] = 1
) -> List[FindResult]:
    """
    Score and order candidates.

    Args:
        origin: Agent position distances are measured from
        candidates: Candidates in discovery order
        sort_value: (candidate, distance) -> sort value, lower wins
        max_count: Maximum results to keep (None keeps all)

    Returns:
        FindResults sorted ascending by value; ties keep discovery order
    """
    if not candidates:
        return []

    points = np.array([c.position.to_tuple() for c in candidates], dtype=np.float64)
    distances = np.linalg.norm(points - np.array(origin.to_tuple(), dtype=np.float64), axis=1)

    values = np.array(
        [sort_value(candidate, float(distance)) for candidate, distance in zip(candidates, distances)],
        dtype=np.float64
    )
    order = np.argsort(values, kind='stable')
    if max_count is not None:
        order = order[:max(0, max_count)]

    return [FindResult(candidates[i].target, float(values[i])) for i in order]


def _matches_any(names: Sequence[str], obj: Any, partial_match: bool) -> bool:
    if not names:
        return True
    return any(names_match(name, obj, partial_match) for name in names)


class CandidateRanker:
    """
    Finds the best entities, blocks and ground items around the agent.

    Usage:
        ranker = CandidateRanker(client, HarvestToolSelector(client))
        best = ranker.find_blocks(names=['spruce_log'], max_count=3)
        if best:
            block = best[0].result
    """

    def __init__(
        self,
        client: MinecraftClient,
        tool_selector: HarvestToolSelector,
        config: Optional[Config] = None
    ):
        """
        Initialize the ranker.

        Args:
            client: Minecraft client for world queries
            tool_selector: Used to estimate block dig times
            config: Tunable constants (sort weights, ranges)
        """
        self.client = client
        self.tool_selector = tool_selector
        self.config = config or Config()
        self.weights = SortWeights.from_config(self.config)

    def find_entities(
        self,
        names: Sequence[str] = (),
        attackable: bool = False,
        partial_match: bool = False,
        max_distance: Optional[float] = None,
        max_count: Optional[int] = 1,
        value_function: Optional[ValueFunction] = None,
        sort_value_function: Optional[Callable[..., float]] = None
    ) -> List[FindResult[Entity]]:
        """
        Find the best entities matching the search criteria.

        Args:
            names: Usernames or names to consider (empty = any)
            attackable: Only consider mobs and players
            partial_match: Accept names containing one of names
            max_distance: Max range to consider (None = unbounded)
            max_count: Max results to return
            value_function: Intrinsic value by username or name; return a
                negative value to exclude an entity (default 0)
            sort_value_function: (distance, value, health, defense, toughness)
                -> sort value, lower is better

        Returns:
            Ranked results; the head is the best entity. Empty if none match.
        """
        value_function = value_function or zero_value
        sort_value_function = sort_value_function or self.weights.entity_sort_value
        origin = self.client.position

        candidates = []
        for entity in self.client.entities.values():
            if entity is self.client.entity or not entity.is_valid:
                continue
            if not _matches_any(names, entity, partial_match):
                continue
            if attackable and entity.type not in ('mob', 'player'):
                continue
            if max_distance is not None and origin.distance_to(entity.position) > max_distance:
                continue

            name = entity.username or entity.name
            value = value_function(name)
            if value < 0:
                continue

            candidates.append(Candidate(
                kind=CandidateKind.ENTITY,
                target=entity,
                name=name,
                position=entity.position,
                value=value,
                health=entity.health or 0.0,
            ))

        result = rank_candidates(
            origin,
            candidates,
            lambda c, d: sort_value_function(d, c.value, c.health, c.defense, c.toughness),
            max_count
        )
        logger.debug(f"Detected {len(candidates)} matching entities, returning {len(result)}")
        return result

    def find_entity(self, target_name: Optional[str] = None, attackable: bool = False) -> Optional[Entity]:
        """
        Find the nearest entity matching the search criteria.

        Example:
            ranker.find_entity('chicken')
        """
        names = [target_name] if target_name else []
        results = self.find_entities(names=names, attackable=attackable)
        return results[0].result if results else None

    def find_blocks(
        self,
        names: Sequence[str] = (),
        partial_match: bool = False,
        only_find_top_blocks: bool = False,
        max_distance: Optional[float] = None,
        max_count: Optional[int] = 1,
        value_function: Optional[ValueFunction] = None,
        sort_value_function: Optional[Callable[..., float]] = None
    ) -> List[FindResult[Block]]:
        """
        Find the best diggable blocks near the agent.

        Large ranges are expensive: 30 means up to 60x60x60 blocks may be
        evaluated by the world query.

        Args:
            names: Block names to consider (empty = any)
            partial_match: Accept names containing one of names
            only_find_top_blocks: Skip blocks with a block directly above
            max_distance: Max range (default find_blocks_max_distance)
            max_count: Max results to return
            value_function: Intrinsic value by block name; negative excludes
            sort_value_function: (distance, value, dig_time) -> sort value

        Returns:
            Ranked results; the head is the best block. Empty if none match.
        """
        value_function = value_function or zero_value
        sort_value_function = sort_value_function or self.weights.block_sort_value
        if max_distance is None:
            max_distance = self.config.find_blocks_max_distance
        origin = self.client.position

        logger.debug(f"Detecting up to {max_count} blocks within a max distance of {max_distance}")

        # Per name: (intrinsic value, best tool); None when not usable
        block_data: Dict[str, Optional[tuple]] = {}

        def matching(block: Block) -> bool:
            if not _matches_any(names, block, partial_match):
                return False
            if only_find_top_blocks and not self._is_top_block(block):
                return False
            if block.name not in block_data:
                block_data[block.name] = self._evaluate_block(block, value_function)
            return block_data[block.name] is not None

        # Evaluate more than max_count matches so there is something to rank;
        # 9 is only a 3x3 patch
        count = 9 + max(0, max_count or 0)
        positions = self.client.find_blocks(origin, max_distance, count, matching)

        candidates = []
        for position in positions:
            block = self.client.block_at(position)
            if block is None or block_data.get(block.name) is None:
                continue
            value, tool = block_data[block.name]
            candidates.append(Candidate(
                kind=CandidateKind.BLOCK,
                target=block,
                name=block.name,
                position=block.position,
                value=value,
                dig_time=tool.dig_time,
            ))

        result = rank_candidates(
            origin,
            candidates,
            lambda c, d: sort_value_function(d, c.value, c.dig_time),
            max_count
        )
        logger.debug(f"Detected {len(candidates)} useful blocks in range, returning {len(result)}")
        return result

    def _evaluate_block(self, block: Block, value_function: ValueFunction) -> Optional[tuple]:
        tool: BestHarvestTool = self.tool_selector.best_harvest_tool(block)
        if not tool.diggable:
            return None
        value = value_function(block.name)
        if value < 0:
            return None
        return value, tool

    def _is_top_block(self, block: Block) -> bool:
        above = self.client.block_at(block.position.offset(0, 1, 0))
        return above is None or above.is_air

    def find_block(
        self,
        block_type: Optional[str],
        partial_match: bool = False,
        only_find_top_blocks: bool = False,
        max_distance: Optional[float] = None
    ) -> Optional[Block]:
        """
        Find the best block of a type near the agent.

        Example:
            ranker.find_block('log', partial_match=True)
        """
        names = [block_type] if block_type else []
        results = self.find_blocks(
            names=names,
            partial_match=partial_match,
            only_find_top_blocks=only_find_top_blocks,
            max_distance=max_distance,
            max_count=1
        )
        return results[0].result if results else None

    def find_items_on_ground(
        self,
        names: Sequence[str] = (),
        partial_match: bool = False,
        max_distance: Optional[float] = None,
        max_count: Optional[int] = 1,
        value_function: Optional[ValueFunction] = None,
        sort_value_function: Optional[Callable[..., float]] = None
    ) -> List[FindResult[Entity]]:
        """
        Find the best dropped items around the agent.

        Args:
            names: Item names to consider (empty = any)
            partial_match: Accept names containing one of names
                (e.g. '_boots' matches 'iron_boots')
            max_distance: Max range (None = unbounded)
            max_count: Max results to return
            value_function: Intrinsic value by item name; negative excludes
            sort_value_function: (distance, value) -> sort value

        Returns:
            Ranked results holding the item entities. Empty if none match.
        """
        value_function = value_function or zero_value
        sort_value_function = sort_value_function or self.weights.item_sort_value
        origin = self.client.position

        logger.debug(f"Detecting items on the ground within a max distance of {max_distance}")

        item_values: Dict[str, float] = {}
        candidates = []
        for entity in self.client.entities.values():
            item: Optional[Item] = entity.dropped_item
            if entity.object_type != 'Item' or not entity.on_ground or item is None:
                continue
            if max_distance is not None and origin.distance_to(entity.position) > max_distance:
                continue
            if not _matches_any(names, item, partial_match):
                continue

            if item.name not in item_values:
                item_values[item.name] = value_function(item.name)
            value = item_values[item.name]
            if value < 0:
                continue

            candidates.append(Candidate(
                kind=CandidateKind.GROUND_ITEM,
                target=entity,
                name=item.name,
                position=entity.position,
                value=value,
            ))

        result = rank_candidates(
            origin,
            candidates,
            lambda c, d: sort_value_function(d, c.value),
            max_count
        )
        logger.debug(f"Detected {len(candidates)} useful items to collect in range")
        return result

    def find_item_on_ground(
        self,
        item_name: Optional[str],
        partial_match: bool = False,
        max_distance: Optional[float] = None
    ) -> Optional[Entity]:
        """Find the best dropped item with a name, or None."""
        names = [item_name] if item_name else []
        results = self.find_items_on_ground(names=names, partial_match=partial_match, max_distance=max_distance)
        return results[0].result if results else None

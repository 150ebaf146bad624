"""Pytest configuration and fixtures."""

import asyncio
from typing import Any, Callable, Dict, List, Optional

import pytest

from integration.mc_client import (
    MinecraftClient,
    ContainerWindow,
    GoalChanged,
    Position,
    Block,
    Entity,
    Item,
)
from integration.goals import GoalNear, GoalXZ
from utils.config import Config
from botkit.context import InteractionContext
from botkit.navigation import Navigator
from botkit.tools import HarvestToolSelector
from botkit.ranking import CandidateRanker
from botkit.collection import Collector
from botkit.harvesting import Harvester


class FakeContainer(ContainerWindow):
    """In-memory chest window: 27 chest slots followed by 36 inventory slots."""

    def __init__(self, window_id: int = 1, contents: Optional[List[Optional[Item]]] = None):
        self.id = window_id
        self.inventory_start = 27
        self.slots = [None] * 63
        for index, item in enumerate(contents or []):
            self.slots[index] = item
        self.withdrawn: List[tuple] = []
        self.deposited: List[tuple] = []
        self.closed = False

    async def withdraw(self, item_type: int, metadata: Optional[int], count: int) -> None:
        self.withdrawn.append((item_type, count))

    async def deposit(self, item_type: int, metadata: Optional[int], count: int) -> None:
        self.deposited.append((item_type, count))

    async def close(self) -> None:
        self.closed = True


class FakeClient(MinecraftClient):
    """
    In-memory client.

    Movement arrives instantly unless hang is set, in which case goto only
    returns once the goal is cleared (raising GoalChanged like a real mover).
    """

    def __init__(self, username: str = 'agent', position: Optional[Position] = None):
        self.username = username
        self.entity = Entity(
            id=0,
            name='player',
            position=position or Position(0.0, 64.0, 0.0),
            type='player',
            username=username,
            health=20.0,
        )
        self.entities: Dict[int, Entity] = {0: self.entity}
        self.held_item: Optional[Item] = None
        self.target_dig_block: Optional[Block] = None

        self.blocks: Dict[tuple, Block] = {}
        self.inventory: List[Item] = []
        self.recipes: Dict[str, List[Any]] = {}
        self.containers: Dict[tuple, FakeContainer] = {}
        self.handlers: Dict[str, List[Callable[..., Any]]] = {}

        self.hang = False
        self.goto_error: Optional[Exception] = None
        self.dig_error: Optional[Exception] = None
        self.mining = False
        self.on_goto: Optional[Callable[[Any], None]] = None
        self.on_dig: Optional[Callable[[Block], None]] = None

        self.goals: List[Any] = []
        self.set_goal_calls: List[tuple] = []
        self.equipped: List[Item] = []
        self.tossed: List[tuple] = []
        self.dug: List[Block] = []
        self.placed: List[tuple] = []
        self.attacks: List[Entity] = []
        self.crafted: List[tuple] = []
        self.chat_log: List[str] = []
        self.whispers: List[tuple] = []
        self.tick_waits: List[int] = []
        self.stop_digging_calls = 0
        self._pending: Optional[asyncio.Future] = None
        self._next_entity_id = 1

    # World setup

    def add_block(self, name: str, x: float, y: float, z: float) -> Block:
        block = Block(name, Position(x, y, z))
        self.blocks[(x, y, z)] = block
        return block

    def add_entity(self, name: str, x: float, y: float, z: float, **kwargs) -> Entity:
        entity = Entity(id=self._next_entity_id, name=name, position=Position(x, y, z), **kwargs)
        self.entities[entity.id] = entity
        self._next_entity_id += 1
        return entity

    def add_ground_item(self, item_name: str, x: float, y: float, z: float, count: int = 1) -> Entity:
        return self.add_entity(
            'item', x, y, z,
            type='object',
            object_type='Item',
            dropped_item=Item(item_name, count),
        )

    def add_item(self, name: str, count: int = 1, **kwargs) -> Item:
        item = Item(name, count, slot=len(self.inventory) + 9, type_id=len(self.inventory) + 100, **kwargs)
        self.inventory.append(item)
        return item

    def emit(self, event: str, *args) -> None:
        for handler in list(self.handlers.get(event, [])):
            handler(*args)

    # Mover

    async def goto(self, goal: Any) -> None:
        self.goals.append(goal)
        if self.goto_error is not None:
            raise self.goto_error
        if self.hang:
            self._pending = asyncio.get_running_loop().create_future()
            await self._pending
            return
        if isinstance(goal, GoalNear):
            self.entity.position = Position(goal.x, goal.y, goal.z)
        elif isinstance(goal, GoalXZ):
            self.entity.position = Position(goal.x, self.entity.position.y, goal.z)
        if self.on_goto is not None:
            self.on_goto(goal)

    def set_goal(self, goal: Any, dynamic: bool = False) -> None:
        self.set_goal_calls.append((goal, dynamic))
        if goal is None and self._pending is not None and not self._pending.done():
            self._pending.set_exception(GoalChanged('goal cleared'))

    def is_mining(self) -> bool:
        return self.mining

    # World query

    def find_blocks(self, origin, max_distance, count, matching) -> List[Position]:
        found = []
        for block in sorted(self.blocks.values(), key=lambda b: origin.distance_to(b.position)):
            if len(found) >= count:
                break
            if origin.distance_to(block.position) <= max_distance and matching(block):
                found.append(block.position)
        return found

    def block_at(self, position: Position) -> Optional[Block]:
        return self.blocks.get(position.to_tuple())

    # Inventory

    def inventory_items(self) -> List[Item]:
        return list(self.inventory)

    async def equip(self, item: Item, destination: str) -> None:
        self.equipped.append(item)
        self.held_item = item

    async def toss(self, item_type: int, metadata: Optional[int], count: int) -> None:
        self.tossed.append((item_type, count))

    def first_empty_inventory_slot(self) -> Optional[int]:
        return None if len(self.inventory) >= 36 else len(self.inventory) + 9

    def recipes_for(self, item_name: str, crafting_table: Optional[Block]) -> List[Any]:
        return self.recipes.get(item_name, [])

    async def craft(self, recipe: Any, count: int, crafting_table: Optional[Block]) -> None:
        self.crafted.append((recipe, count))
        if isinstance(recipe, Exception):
            raise recipe
        self.add_item(recipe, count)

    # Actions

    async def dig(self, block: Block) -> None:
        self.dug.append(block)
        if self.on_dig is not None:
            self.on_dig(block)
        if self.dig_error is not None:
            raise self.dig_error
        self.blocks.pop(block.position.to_tuple(), None)

    def stop_digging(self) -> None:
        self.stop_digging_calls += 1

    async def place_block(self, reference_block: Block, face: Position) -> None:
        self.placed.append((reference_block, face))

    def attack(self, entity: Entity) -> None:
        self.attacks.append(entity)

    async def open_container(self, block: Block) -> ContainerWindow:
        container = self.containers.get(block.position.to_tuple())
        if container is None:
            raise RuntimeError(f'{block.name} is not a container')
        return container

    def chat(self, message: str) -> None:
        self.chat_log.append(message)

    def whisper(self, username: str, message: str) -> None:
        self.whispers.append((username, message))

    async def wait_for_ticks(self, ticks: int) -> None:
        self.tick_waits.append(ticks)
        await asyncio.sleep(0)

    # Event source

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def off(self, event: str, handler: Callable[..., Any]) -> None:
        self.handlers.get(event, []).remove(handler)

    def handler_count(self, event: str) -> int:
        return len(self.handlers.get(event, []))


@pytest.fixture
def client() -> FakeClient:
    """Fake client with the agent at the origin, y 64."""
    return FakeClient()


@pytest.fixture
def config() -> Config:
    """Config with a short stuck interval."""
    return Config(stuck_interval_ms=20, container_warn_interval=0.01)


@pytest.fixture
def context() -> InteractionContext:
    return InteractionContext()


@pytest.fixture
def navigator(client: FakeClient, context: InteractionContext, config: Config) -> Navigator:
    return Navigator(client, context, config)


@pytest.fixture
def selector(client: FakeClient) -> HarvestToolSelector:
    return HarvestToolSelector(client)


@pytest.fixture
def ranker(client: FakeClient, selector: HarvestToolSelector, config: Config) -> CandidateRanker:
    return CandidateRanker(client, selector, config)


@pytest.fixture
def collector(client: FakeClient, navigator: Navigator, ranker: CandidateRanker, config: Config) -> Collector:
    return Collector(client, navigator, ranker, config)


@pytest.fixture
def harvester(
    client: FakeClient,
    navigator: Navigator,
    ranker: CandidateRanker,
    selector: HarvestToolSelector,
    collector: Collector,
    config: Config
) -> Harvester:
    return Harvester(client, navigator, ranker, selector, collector, config)

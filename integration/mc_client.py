"""
mc_client.py - Minecraft client abstraction consumed by the agent control layer.

This module defines the data model shared by every behaviour and the
collaborator contract the behaviours are written against:
- Position, Block, Entity, Item value types
- MinecraftClient: mover, world query, inventory and event source
- ContainerWindow: an open chest/dispenser window

The actual game client (protocol handling, pathfinding search, world data)
lives behind MinecraftClient. Swapping client libraries means writing one
subclass; nothing else in the codebase talks to the game directly.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple


class GoalChanged(Exception):
    """Raised by the mover when the active goal is replaced or cleared mid-path."""


@dataclass
class Position:
    """3D position in the world (x south, y up, z west)."""
    x: float
    y: float
    z: float

    def to_tuple(self) -> Tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def distance_to(self, other: 'Position') -> float:
        """Calculate Euclidean distance to another position."""
        return math.sqrt(
            (self.x - other.x) ** 2 +
            (self.y - other.y) ** 2 +
            (self.z - other.z) ** 2
        )

    def xz_distance_to(self, other: 'Position') -> float:
        """Horizontal distance, ignoring the vertical axis."""
        return math.sqrt((self.x - other.x) ** 2 + (self.z - other.z) ** 2)

    def offset(self, dx: float, dy: float, dz: float) -> 'Position':
        return Position(self.x + dx, self.y + dy, self.z + dz)

    def plus(self, other: 'Position') -> 'Position':
        return Position(self.x + other.x, self.y + other.y, self.z + other.z)

    def minus(self, other: 'Position') -> 'Position':
        return Position(self.x - other.x, self.y - other.y, self.z - other.z)

    def scaled(self, factor: float) -> 'Position':
        return Position(self.x * factor, self.y * factor, self.z * factor)

    def normalized(self) -> 'Position':
        """Unit vector in the same direction (zero vector stays zero)."""
        length = math.sqrt(self.x ** 2 + self.y ** 2 + self.z ** 2)
        if length == 0:
            return Position(0.0, 0.0, 0.0)
        return self.scaled(1.0 / length)

    def copy(self) -> 'Position':
        return Position(self.x, self.y, self.z)


@dataclass
class Block:
    """
    A block instance in the world.

    Properties such as hardness and the preferred tool are not carried
    here; they are looked up by name in integration.block_data.
    """
    name: str  # e.g., "spruce_log"
    position: Position
    type_id: int = 0
    display_name: Optional[str] = None

    @property
    def is_air(self) -> bool:
        return self.name in ("air", "cave_air", "void_air")


@dataclass
class Item:
    """An item stack held in an inventory or container slot."""
    name: str  # e.g., "iron_pickaxe"
    count: int = 1
    slot: int = 0
    type_id: int = 0
    display_name: Optional[str] = None
    nbt: Optional[Dict[str, Any]] = None

    @property
    def enchantments(self) -> Dict[str, int]:
        """
        Enchantment levels keyed by short name.

        Reads the simplified NBT form:
        {"Enchantments": [{"id": "minecraft:efficiency", "lvl": 3}]}
        """
        if not self.nbt:
            return {}

        result = {}
        for entry in self.nbt.get("Enchantments", []):
            enchant_id = str(entry.get("id", ""))
            if ":" in enchant_id:
                enchant_id = enchant_id.split(":", 1)[1]
            if enchant_id:
                result[enchant_id] = int(entry.get("lvl", 1))
        return result


@dataclass
class Entity:
    """
    Entity information.

    Dropped items are entities with object_type "Item"; the stack they
    represent is available as dropped_item.
    """
    id: int
    name: str  # e.g., "chicken", "player", "item"
    position: Position
    type: str = "mob"  # "mob", "player", "object", ...
    username: Optional[str] = None
    display_name: Optional[str] = None
    health: Optional[float] = None
    is_valid: bool = True
    object_type: Optional[str] = None
    on_ground: bool = True
    effects: Dict[str, int] = field(default_factory=dict)  # name -> amplifier
    dropped_item: Optional[Item] = None


class ContainerWindow(ABC):
    """
    An open container window.

    Slots are laid out with the container's own slots first, followed by
    the agent inventory and finally the hotbar. inventory_start is the
    index of the first agent inventory slot.
    """

    id: int
    slots: List[Optional[Item]]
    inventory_start: int = 27

    @abstractmethod
    async def withdraw(self, item_type: int, metadata: Optional[int], count: int) -> None:
        """Move items of a type from the container into the agent inventory."""

    @abstractmethod
    async def deposit(self, item_type: int, metadata: Optional[int], count: int) -> None:
        """Move items of a type from the agent inventory into the container."""

    @abstractmethod
    async def close(self) -> None:
        """Close the window."""


class MinecraftClient(ABC):
    """
    Contract for the underlying game client.

    Groups the collaborators the control layer depends on:
    - Mover: goto / set_goal / is_mining
    - World query: entities, find_blocks, block_at, nearest_entity
    - Inventory: inventory_items, equip, toss, recipes_for, craft
    - Actions: dig, place_block, attack, open_container, chat
    - Event source: on / off

    Every coroutine suspends at network or timer bound points and runs on
    the same event loop as the caller.
    """

    username: str
    entity: Entity
    entities: Dict[int, Entity]
    held_item: Optional[Item] = None
    target_dig_block: Optional[Block] = None

    @property
    def position(self) -> Position:
        """Current position of the agent."""
        return self.entity.position

    # Mover

    @abstractmethod
    async def goto(self, goal: Any) -> None:
        """Path to a goal; raises GoalChanged when the goal is replaced."""

    @abstractmethod
    def set_goal(self, goal: Any, dynamic: bool = False) -> None:
        """Set (or with None, clear) the mover goal."""

    @abstractmethod
    def is_mining(self) -> bool:
        """Whether the mover is currently breaking a block along its path."""

    # World query

    @abstractmethod
    def find_blocks(
        self,
        origin: Position,
        max_distance: float,
        count: int,
        matching: Callable[[Block], bool]
    ) -> List[Position]:
        """Approximate range query for block positions matching a predicate."""

    @abstractmethod
    def block_at(self, position: Position) -> Optional[Block]:
        """Block at a position, or None if not loaded."""

    def nearest_entity(
        self,
        predicate: Callable[[Entity], bool]
    ) -> Optional[Entity]:
        """Nearest entity (other than the agent) matching a predicate."""
        best = None
        best_distance = math.inf
        for entity in self.entities.values():
            if entity is self.entity or not predicate(entity):
                continue
            distance = self.position.distance_to(entity.position)
            if distance < best_distance:
                best = entity
                best_distance = distance
        return best

    # Inventory

    @abstractmethod
    def inventory_items(self) -> List[Item]:
        """Items currently in the agent inventory."""

    @abstractmethod
    async def equip(self, item: Item, destination: str) -> None:
        """Equip an item to a destination ('hand', 'head', ...)."""

    @abstractmethod
    async def toss(self, item_type: int, metadata: Optional[int], count: int) -> None:
        """Drop items of a type on the ground."""

    @abstractmethod
    def first_empty_inventory_slot(self) -> Optional[int]:
        """Index of the first empty inventory slot, None if every slot is used."""

    @abstractmethod
    def recipes_for(self, item_name: str, crafting_table: Optional[Block]) -> List[Any]:
        """Recipes for an item that the agent can craft with what it holds."""

    @abstractmethod
    async def craft(self, recipe: Any, count: int, crafting_table: Optional[Block]) -> None:
        """Craft a recipe count times."""

    # Actions

    @abstractmethod
    async def dig(self, block: Block) -> None:
        """Break a block in reach with the held item."""

    @abstractmethod
    def stop_digging(self) -> None:
        """Abort the dig in progress."""

    @abstractmethod
    async def place_block(self, reference_block: Block, face: Position) -> None:
        """Place the held block against a face of a reference block."""

    @abstractmethod
    def attack(self, entity: Entity) -> None:
        """Swing at an entity once with the held item."""

    @abstractmethod
    async def open_container(self, block: Block) -> ContainerWindow:
        """Open a chest/dispenser in reach."""

    @abstractmethod
    def chat(self, message: str) -> None:
        """Send a chat message."""

    @abstractmethod
    def whisper(self, username: str, message: str) -> None:
        """Send a private message to a player."""

    @abstractmethod
    async def wait_for_ticks(self, ticks: int) -> None:
        """Suspend for a number of game ticks."""

    # Event source

    @abstractmethod
    def on(self, event: str, handler: Callable[..., Any]) -> None:
        """Register an event handler."""

    @abstractmethod
    def off(self, event: str, handler: Callable[..., Any]) -> None:
        """Remove a previously registered event handler."""

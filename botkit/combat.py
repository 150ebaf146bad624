"""
combat.py - Melee attacks and weapon cooldown.

Attacking again before a weapon has recharged deals reduced damage, so
each attack first waits for the cooldown of the weapon used last.
"""

import logging
import time
from typing import Callable, Iterable, Optional

from integration.mc_client import MinecraftClient, Entity, Item
from utils.config import Config
from utils.helpers import round_half_up
from .context import InteractionContext
from .naming import get_entity_name, names_match
from .navigation import Navigator

logger = logging.getLogger(__name__)

# Melee weapon classes, best first
MELEE_PREFERENCE = ('_sword', 'trident', '_axe', '_pickaxe')


def weapon_cooldown_ticks(item: Optional[Item]) -> int:
    """
    Ticks a weapon needs to fully recharge.

    Example:
        iron_sword -> 12, stone_axe -> 25, empty hand -> 5
    """
    name = item.name if item else ''
    if name.endswith('_sword'):
        return 12
    if name == 'trident':
        return 18
    if name.endswith('_pickaxe'):
        return 17
    if name.endswith('_axe'):
        if name in ('wooden_axe', 'stone_axe'):
            return 25
        if name == 'iron_axe':
            return 22
        return 20
    return 5


def best_attack_item_melee(items: Iterable[Item]) -> Optional[Item]:
    """
    Pick the best melee weapon: sword, then trident, then axe, then pickaxe.

    Returns:
        The first item of the best available class, None if there is none
    """
    items = list(items)
    for suffix in MELEE_PREFERENCE:
        for item in items:
            name = item.name
            if suffix == '_axe' and name.endswith('_pickaxe'):
                continue
            if name.endswith(suffix) or name == suffix:
                return item
    return None


class WeaponCooldownGate:
    """Delays attacks until the last used weapon has recharged."""

    def __init__(
        self,
        client: MinecraftClient,
        context: InteractionContext,
        config: Optional[Config] = None,
        clock: Callable[[], float] = time.monotonic
    ):
        self.client = client
        self.context = context
        self.config = config or Config()
        self.clock = clock

    def remaining_ticks(self) -> int:
        """Whole ticks left before the last weapon has recharged."""
        if self.context.last_attack_time is None:
            return 0

        elapsed = (self.clock() - self.context.last_attack_time) / self.config.tick_seconds
        cooldown = weapon_cooldown_ticks(self.context.last_attack_item)
        return round_half_up(max(0.0, cooldown - elapsed))

    async def wait_for_weapon_cooldown(self) -> None:
        ticks = self.remaining_ticks()
        if ticks > 0:
            logger.debug(f"Waiting {ticks} ticks for weapon cooldown")
            await self.client.wait_for_ticks(ticks)


class Combat:
    """
    Melee combat for the agent.

    Usage:
        combat = Combat(client, context, navigator)
        await combat.attack_entity(zombie, attack_item='iron_sword')
    """

    def __init__(
        self,
        client: MinecraftClient,
        context: InteractionContext,
        navigator: Navigator,
        cooldown: Optional[WeaponCooldownGate] = None
    ):
        self.client = client
        self.context = context
        self.navigator = navigator
        self.cooldown = cooldown or WeaponCooldownGate(client, context)

    async def attack_entity(
        self,
        entity: Optional[Entity],
        reach: float = 2,
        attack_item: Optional[str] = None
    ) -> bool:
        """
        Approach an entity and hit it once.

        The agent keeps following the target after the hit, so repeated
        calls chase it down.

        Args:
            entity: The entity to attack
            reach: Distance to attack from
            attack_item: Inventory item to hit with (default the best melee
                weapon in the inventory, else the held item)

        Returns:
            True if the attack was made
        """
        if entity is None or not entity.is_valid:
            logger.warning("attack_entity: target is no longer valid")
            return False

        try:
            if not await self.navigator.approach_entity(entity, reach):
                return False

            self.navigator.follow_entity(entity, reach)
            await self.cooldown.wait_for_weapon_cooldown()

            weapon = self._attack_weapon(attack_item)
            if weapon is not None and self.client.held_item is not weapon:
                await self.client.equip(weapon, 'hand')

            self.context.record_attack(self.client.held_item, now=self.cooldown.clock())
            self.client.attack(entity)
        except Exception as e:
            logger.warning(f"Error attacking {get_entity_name(entity)}: {e!r}")
            return False

        logger.debug(f"Attacked {get_entity_name(entity)}")
        return True

    def _attack_weapon(self, attack_item: Optional[str]) -> Optional[Item]:
        """Inventory item to hit with: the named one, else the best melee weapon."""
        held = self.client.held_item
        if attack_item is None:
            return best_attack_item_melee(self.client.inventory_items())

        if held is not None and names_match(attack_item, held):
            return held
        item = next((i for i in self.client.inventory_items() if names_match(attack_item, i)), None)
        if item is None:
            logger.info(f"No {attack_item} in inventory, attacking with the held item")
        return item

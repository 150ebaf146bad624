"""
Agent control layer for Minecraft bots.

This module provides the behaviours an agent script is written with:
- BotController: facade composing every subsystem and the main loop
- Navigator: movement supervised by stuck detection
- CandidateRanker: ranked search for entities, blocks and ground items
- HarvestToolSelector / Harvester: tool choice, digging and placing
- Combat: melee attacks gated by weapon cooldown
- Collector: dropped item collection
- InventoryManager: inventory, crafting and containers

SAFETY NOTE:
Only run agents where automation is explicitly allowed by the server
owner (your own worlds, private servers, or servers that permit it).
"""

from .context import InteractionContext
from .naming import names_match, names_match_loose, get_entity_name
from .events import Subscription, subscribed
from .navigation import Navigator
from .tools import HarvestToolSelector, BestHarvestTool
from .ranking import (
    CandidateKind,
    Candidate,
    FindResult,
    SortWeights,
    CandidateRanker,
    rank_candidates,
    default_find_blocks_sort_value,
    default_find_entities_sort_value,
    default_find_items_on_ground_sort_value,
)
from .collection import Collector
from .harvesting import Harvester
from .combat import Combat, WeaponCooldownGate, weapon_cooldown_ticks, best_attack_item_melee
from .inventory_manager import InventoryManager
from .controller import BotController

__all__ = [
    'InteractionContext',
    'names_match',
    'names_match_loose',
    'get_entity_name',
    'Subscription',
    'subscribed',
    'Navigator',
    'HarvestToolSelector',
    'BestHarvestTool',
    'CandidateKind',
    'Candidate',
    'FindResult',
    'SortWeights',
    'CandidateRanker',
    'rank_candidates',
    'default_find_blocks_sort_value',
    'default_find_entities_sort_value',
    'default_find_items_on_ground_sort_value',
    'Collector',
    'Harvester',
    'Combat',
    'WeaponCooldownGate',
    'weapon_cooldown_ticks',
    'best_attack_item_melee',
    'InventoryManager',
    'BotController',
]

"""
block_data.py - Block properties used for dig time estimation.

Each block has a hardness, the tool class that breaks it fastest and the
minimum tool tier needed for the block to drop anything.

To extend:
- Add the block name to BLOCK_PROPERTIES
- Unknown names fall back to DEFAULT_PROPERTIES
"""

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class BlockProperties:
    """
    Properties for a block type.

    Attributes:
        hardness: Base hardness (0 = instant, None = unbreakable)
        tool: Tool class that speeds up breaking ('pickaxe', 'axe', 'shovel', 'hoe', 'sword') or None
        tool_required: Minimum tier needed to harvest ('none', 'wooden', 'stone', 'iron', 'diamond')
    """
    hardness: Optional[float]
    tool: Optional[str] = None
    tool_required: str = 'none'


# Tool tiers in harvest order; golden tools harvest like wooden ones
TIER_LEVELS = {
    'wooden': 0,
    'golden': 0,
    'stone': 1,
    'iron': 2,
    'diamond': 3,
    'netherite': 4,
}

# Tier to harvest level for the 'tool_required' field
REQUIRED_LEVELS = {
    'none': -1,
    'wooden': 0,
    'stone': 1,
    'iron': 2,
    'diamond': 3,
}

# Mining speed multiplier when using the right tool class
TIER_SPEEDS = {
    'wooden': 2.0,
    'stone': 4.0,
    'iron': 6.0,
    'diamond': 8.0,
    'netherite': 9.0,
    'golden': 12.0,
}

TOOL_CLASSES = ('pickaxe', 'axe', 'shovel', 'hoe', 'sword')

DEFAULT_PROPERTIES = BlockProperties(1.0)

BLOCK_PROPERTIES = {
    'air': BlockProperties(0.0),
    'cave_air': BlockProperties(0.0),
    'water': BlockProperties(None),
    'lava': BlockProperties(None),
    'bedrock': BlockProperties(None),
    'barrier': BlockProperties(None),
    'end_portal_frame': BlockProperties(None),

    'grass': BlockProperties(0.0),
    'tall_grass': BlockProperties(0.0),
    'dirt': BlockProperties(0.5, 'shovel'),
    'grass_block': BlockProperties(0.6, 'shovel'),
    'sand': BlockProperties(0.5, 'shovel'),
    'gravel': BlockProperties(0.6, 'shovel'),
    'snow_block': BlockProperties(0.2, 'shovel', 'wooden'),
    'clay': BlockProperties(0.6, 'shovel'),

    'oak_log': BlockProperties(2.0, 'axe'),
    'spruce_log': BlockProperties(2.0, 'axe'),
    'birch_log': BlockProperties(2.0, 'axe'),
    'jungle_log': BlockProperties(2.0, 'axe'),
    'oak_planks': BlockProperties(2.0, 'axe'),
    'spruce_planks': BlockProperties(2.0, 'axe'),
    'birch_planks': BlockProperties(2.0, 'axe'),
    'crafting_table': BlockProperties(2.5, 'axe'),
    'chest': BlockProperties(2.5, 'axe'),
    'oak_leaves': BlockProperties(0.2, 'hoe'),
    'spruce_leaves': BlockProperties(0.2, 'hoe'),
    'melon': BlockProperties(1.0, 'axe'),
    'pumpkin': BlockProperties(1.0, 'axe'),

    'stone': BlockProperties(1.5, 'pickaxe', 'wooden'),
    'cobblestone': BlockProperties(2.0, 'pickaxe', 'wooden'),
    'deepslate': BlockProperties(3.0, 'pickaxe', 'wooden'),
    'netherrack': BlockProperties(0.4, 'pickaxe', 'wooden'),
    'end_stone': BlockProperties(3.0, 'pickaxe', 'wooden'),
    'furnace': BlockProperties(3.5, 'pickaxe', 'wooden'),
    'bell': BlockProperties(5.0, 'pickaxe'),
    'coal_ore': BlockProperties(3.0, 'pickaxe', 'wooden'),
    'iron_ore': BlockProperties(3.0, 'pickaxe', 'stone'),
    'lapis_ore': BlockProperties(3.0, 'pickaxe', 'stone'),
    'gold_ore': BlockProperties(3.0, 'pickaxe', 'iron'),
    'redstone_ore': BlockProperties(3.0, 'pickaxe', 'iron'),
    'diamond_ore': BlockProperties(3.0, 'pickaxe', 'iron'),
    'emerald_ore': BlockProperties(3.0, 'pickaxe', 'iron'),
    'iron_block': BlockProperties(5.0, 'pickaxe', 'stone'),
    'gold_block': BlockProperties(3.0, 'pickaxe', 'iron'),
    'diamond_block': BlockProperties(5.0, 'pickaxe', 'iron'),
    'obsidian': BlockProperties(50.0, 'pickaxe', 'diamond'),

    'cobweb': BlockProperties(4.0, 'sword'),
}


def get_block_properties(block_name: str) -> BlockProperties:
    """Get the properties of a block by name."""
    return BLOCK_PROPERTIES.get(block_name, DEFAULT_PROPERTIES)


def parse_tool(item_name: Optional[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Split a tool item name into (tool class, tier).

    'iron_pickaxe' -> ('pickaxe', 'iron'); anything that is not a tiered
    tool -> (None, None).
    """
    if not item_name:
        return None, None

    tier, _, tool_class = item_name.partition('_')
    if tool_class in TOOL_CLASSES and tier in TIER_LEVELS:
        return tool_class, tier
    return None, None


def can_harvest(block_name: str, item_name: Optional[str]) -> bool:
    """
    Check if a block drops anything when broken with the given item.

    Blocks with tool_required 'none' can be harvested with anything,
    including an empty hand.
    """
    properties = get_block_properties(block_name)
    if properties.tool_required == 'none':
        return True

    tool_class, tier = parse_tool(item_name)
    if tool_class != properties.tool:
        return False

    return TIER_LEVELS[tier] >= REQUIRED_LEVELS.get(properties.tool_required, 0)

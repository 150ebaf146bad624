"""
naming.py - Identity matching for entities, blocks and items.

An entity's name is a unique identifier ("ender_dragon", "grass_block");
its display name is the human readable form ("Ender Dragon"). Players
additionally carry a username. Matching works on username and name only,
case-sensitively; names_match_loose is the explicitly relaxed variant.
"""

from typing import Any, Optional


def _field_matches(value: Optional[str], target_name: str, partial_match: bool) -> bool:
    if not value:
        return False
    return value == target_name or (partial_match and target_name in value)


def names_match(target_name: str, entity: Any, partial_match: bool = False) -> bool:
    """
    Check whether an entity's username or name equals target_name.

    Matching is case-sensitive and does not consider display names. The
    username is checked first; the name is only considered when the
    username does not match.

    Args:
        target_name: Name to look for
        entity: Entity, Block or Item
        partial_match: Also accept names containing target_name
            (e.g. '_planks' matches 'spruce_planks')

    Returns:
        True if either field matches

    Example:
        names_match('iron_axe', item)           -> True
        names_match('Iron Axe', item)           -> False
        names_match('_axe', item, True)         -> True
    """
    if _field_matches(getattr(entity, 'username', None), target_name, partial_match):
        return True
    return _field_matches(getattr(entity, 'name', None), target_name, partial_match)


def names_match_loose(target_name: str, entity: Any, partial_match: bool = False) -> bool:
    """
    Case-insensitive match that also considers the display name.

    Use for player-typed names ("Spruce Log"); ranking and inventory
    operations use the strict names_match.
    """
    target = target_name.lower()
    for attribute in ('username', 'name', 'display_name'):
        value = getattr(entity, attribute, None)
        if value and _field_matches(value.lower(), target, partial_match):
            return True
    return False


def get_entity_name(entity: Any) -> Optional[str]:
    """
    Get the identifying name of an entity, block or item.

    Returns the username if present, the item name for items lying on the
    ground, otherwise the name. Display names are never used.

    Example:
        {username: "NinaTheDragon", name: "ender_dragon"} -> "NinaTheDragon"
        {username: None, name: "ender_dragon"}            -> "ender_dragon"
        {username: None, name: None}                      -> None
    """
    username = getattr(entity, 'username', None)
    if username:
        return username

    dropped_item = getattr(entity, 'dropped_item', None)
    if getattr(entity, 'object_type', None) == 'Item' and getattr(entity, 'on_ground', False) and dropped_item:
        return dropped_item.name

    return getattr(entity, 'name', None) or None

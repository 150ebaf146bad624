"""Tests for digging and placing blocks."""

from unittest.mock import AsyncMock

import pytest

from integration.mc_client import Position
from integration.goals import GoalNear, GoalPlaceBlock


@pytest.mark.asyncio
async def test_dig_block_without_capable_tool(client, harvester):
    obsidian = client.add_block('obsidian', 1, 64, 0)

    assert not await harvester.dig_block(obsidian)
    assert client.dug == []


@pytest.mark.asyncio
async def test_dig_block_equips_best_tool(client, harvester):
    client.add_item('wooden_pickaxe')
    iron = client.add_item('iron_pickaxe')
    stone = client.add_block('stone', 1, 64, 0)

    assert await harvester.dig_block(stone)

    assert client.equipped == [iron]
    assert client.dug == [stone]
    assert client.block_at(stone.position) is None
    assert client.handler_count('path_reset') == 0


@pytest.mark.asyncio
async def test_dig_block_by_hand_does_not_equip(client, harvester):
    dirt = client.add_block('dirt', 1, 64, 0)

    assert await harvester.dig_block(dirt)
    assert client.equipped == []


@pytest.mark.asyncio
async def test_dig_stops_when_target_changes(client, harvester):
    dirt = client.add_block('dirt', 1, 64, 0)

    def replace_block(block):
        client.add_block('air', 1, 64, 0)
        client.emit('path_reset', 'block_updated')
        client.emit('path_reset', 'goal_updated')

    client.on_dig = replace_block

    await harvester.dig_block(dirt)

    assert client.stop_digging_calls == 1


@pytest.mark.asyncio
async def test_dig_continues_when_target_unchanged(client, harvester):
    dirt = client.add_block('dirt', 1, 64, 0)
    client.on_dig = lambda block: client.emit('path_reset', 'block_updated')

    assert await harvester.dig_block(dirt)
    assert client.stop_digging_calls == 0


@pytest.mark.asyncio
async def test_dig_error_returns_false(client, harvester):
    dirt = client.add_block('dirt', 1, 64, 0)
    client.dig_error = RuntimeError('block out of reach')

    assert not await harvester.dig_block(dirt)
    assert client.handler_count('path_reset') == 0


@pytest.mark.asyncio
async def test_approach_and_dig_collects_drop(client, harvester):
    client.add_item('wooden_pickaxe')
    ore = client.add_block('coal_ore', 3, 64, 0)
    client.on_dig = lambda block: client.add_ground_item('coal', 3, 64, 0)

    assert await harvester.approach_and_dig_block(ore)

    assert client.dug == [ore]
    assert client.tick_waits == [5]
    assert client.goals[-1] == GoalNear(3, 64, 0, 1)


@pytest.mark.asyncio
async def test_approach_and_dig_skip_collection(client, harvester):
    dirt = client.add_block('dirt', 3, 64, 0)

    assert await harvester.approach_and_dig_block(dirt, skip_collection=True)
    assert client.tick_waits == []
    assert len(client.goals) == 1


@pytest.mark.asyncio
async def test_approach_failure_skips_dig(client, harvester):
    dirt = client.add_block('dirt', 3, 64, 0)
    client.goto_error = RuntimeError('no path')

    assert not await harvester.approach_and_dig_block(dirt)
    assert client.dug == []


@pytest.mark.asyncio
async def test_find_and_dig_block(client, harvester):
    client.add_block('spruce_log', 8, 64, 0)
    near = client.add_block('oak_log', 3, 64, 0)

    assert await harvester.find_and_dig_block('_log', partial_match=True, skip_collection=True)
    assert client.dug == [near]


@pytest.mark.asyncio
async def test_find_and_dig_block_nothing_found(client, harvester):
    assert not await harvester.find_and_dig_block('diamond_ore')


@pytest.mark.asyncio
async def test_place_block_on_grass_uses_block_below(client, harvester):
    dirt_item = client.add_item('dirt', 5)
    ground = client.add_block('grass_block', 2, 63, 0)
    grass = client.add_block('tall_grass', 2, 64, 0)

    assert await harvester.place_block('dirt', grass)

    assert client.held_item is dirt_item
    assert client.placed == [(ground, Position(0, 1, 0))]
    assert client.goals == [GoalPlaceBlock(Position(2, 64, 0), 5)]


@pytest.mark.asyncio
async def test_place_block_missing_item(client, harvester):
    target = client.add_block('stone', 2, 63, 0)

    assert not await harvester.place_block('cobblestone', target)
    assert client.placed == []


@pytest.mark.asyncio
async def test_equip_best_harvest_tool(client, harvester):
    client.add_item('stone_pickaxe')
    stone = client.add_block('stone', 1, 64, 0)

    assert await harvester.equip_best_harvest_tool(stone)
    assert client.held_item.name == 'stone_pickaxe'


@pytest.mark.asyncio
async def test_equip_best_harvest_tool_without_capable_tool(client, harvester):
    obsidian = client.add_block('obsidian', 1, 64, 0)

    assert not await harvester.equip_best_harvest_tool(obsidian)
    assert client.equipped == []


@pytest.mark.asyncio
async def test_equip_failure_returns_false(client, harvester):
    client.add_item('wooden_pickaxe')
    stone = client.add_block('stone', 1, 64, 0)
    client.equip = AsyncMock(side_effect=RuntimeError('equip failed'))

    assert not await harvester.equip_best_harvest_tool(stone)
    assert not await harvester.dig_block(stone)
    assert client.dug == []


@pytest.mark.asyncio
async def test_dig_error_reset_cancels_dig_without_target(client, harvester):
    dirt = client.add_block('dirt', 1, 64, 0)
    client.mining = True
    client.target_dig_block = None
    client.on_dig = lambda block: client.emit('path_reset', 'dig_error')

    await harvester.dig_block(dirt)

    assert client.stop_digging_calls == 1
    assert client.set_goal_calls == [(None, False)]


@pytest.mark.asyncio
async def test_dig_error_reset_keeps_live_dig(client, harvester):
    dirt = client.add_block('dirt', 1, 64, 0)
    client.mining = True
    client.target_dig_block = dirt
    client.on_dig = lambda block: client.emit('path_reset', 'dig_error')

    assert await harvester.dig_block(dirt)
    assert client.stop_digging_calls == 0


@pytest.mark.asyncio
async def test_dig_error_reset_stops_when_target_gone(client, harvester):
    dirt = client.add_block('dirt', 1, 64, 0)

    def break_elsewhere(block):
        client.add_block('air', 1, 64, 0)
        client.emit('path_reset', 'dig_error')

    client.on_dig = break_elsewhere

    await harvester.dig_block(dirt)

    assert client.stop_digging_calls == 1
    assert client.handler_count('path_reset') == 0

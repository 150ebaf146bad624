"""Tests for ground item collection."""

import pytest

from integration.mc_client import GoalChanged
from integration.goals import GoalNear


def pick_up_on_arrival(client):
    """Make the fake mover collect any item the agent walks onto."""
    def on_goto(goal):
        if not isinstance(goal, GoalNear):
            return
        for entity in list(client.entities.values()):
            if entity.object_type == 'Item' and entity.position.to_tuple() == (goal.x, goal.y, goal.z):
                del client.entities[entity.id]
                client.emit('playerCollect', client.entity, entity)
    client.on_goto = on_goto


@pytest.mark.asyncio
async def test_collect_item_on_ground(client, collector):
    pick_up_on_arrival(client)
    item = client.add_ground_item('wheat', 4, 64, 0)

    assert await collector.collect_item_on_ground(item)
    assert item.id not in client.entities
    assert client.handler_count('playerCollect') == 0


@pytest.mark.asyncio
async def test_collect_ignores_other_collectors(client, collector):
    item = client.add_ground_item('wheat', 4, 64, 0)
    other = client.add_entity('player', 5, 64, 0, type='player', username='Alex')
    client.on_goto = lambda goal: client.emit('playerCollect', other, item)

    assert not await collector.collect_item_on_ground(item)


@pytest.mark.asyncio
async def test_collect_none(collector):
    assert not await collector.collect_item_on_ground(None)


@pytest.mark.asyncio
async def test_find_and_collect_items_nearest_first(client, collector):
    pick_up_on_arrival(client)
    far = client.add_ground_item('wheat', 9, 64, 0)
    near = client.add_ground_item('wheat', 2, 64, 0)
    client.add_ground_item('dirt', 3, 64, 0)

    collected = await collector.find_and_collect_items_on_ground(['wheat'])

    assert collected == [near, far]
    assert client.handler_count('playerCollect') == 0


@pytest.mark.asyncio
async def test_find_and_collect_gives_up_on_unreachable_items(client, collector):
    client.add_ground_item('wheat', 9, 64, 0)
    client.add_ground_item('seeds', 2, 64, 0)
    client.goto_error = RuntimeError('no path')

    collected = await collector.find_and_collect_items_on_ground()

    assert collected == []
    assert len(client.goals) == 2
    assert client.handler_count('playerCollect') == 0


@pytest.mark.asyncio
async def test_find_and_collect_respects_range(client, collector):
    pick_up_on_arrival(client)
    client.add_ground_item('wheat', 80, 64, 0)

    assert await collector.find_and_collect_items_on_ground() == []
    assert client.goals == []


@pytest.mark.asyncio
async def test_collect_counts_pickup_when_path_ends_in_error(client, collector):
    item = client.add_ground_item('wheat', 4, 64, 0)

    def pick_up_then_fail(goal):
        del client.entities[item.id]
        client.emit('playerCollect', client.entity, item)
        raise GoalChanged('target entity despawned')

    client.on_goto = pick_up_then_fail

    assert await collector.collect_item_on_ground(item)
    assert client.handler_count('playerCollect') == 0

"""Tests for shared interaction state and scoped subscriptions."""

import pytest

from integration.mc_client import Item
from botkit.context import InteractionContext
from botkit.events import Subscription, subscribed


def test_crafting_flag_cleared_on_error():
    context = InteractionContext()

    with pytest.raises(RuntimeError):
        with context.crafting():
            assert context.is_crafting
            assert context.is_busy
            raise RuntimeError('craft failed')

    assert not context.is_crafting
    assert not context.is_busy


def test_container_open_scope():
    context = InteractionContext()

    with context.container_open(3):
        assert context.open_container_id == 3
        assert context.is_busy

    assert context.open_container_id is None


def test_record_attack():
    context = InteractionContext()
    sword = Item('iron_sword')

    context.record_attack(sword, now=12.5)

    assert context.last_attack_time == 12.5
    assert context.last_attack_item is sword


def test_subscribed_releases_on_error(client):
    calls = []

    with pytest.raises(KeyError):
        with subscribed(client, 'playerCollect', lambda *args: calls.append(args)):
            client.emit('playerCollect', 'a', 'b')
            raise KeyError('stop')

    client.emit('playerCollect', 'c', 'd')
    assert calls == [('a', 'b')]
    assert client.handler_count('playerCollect') == 0


def test_subscription_release_is_idempotent(client):
    subscription = Subscription(client, 'path_reset', lambda reason: None)

    subscription.release()
    subscription.release()

    assert not subscription.active
    assert client.handler_count('path_reset') == 0

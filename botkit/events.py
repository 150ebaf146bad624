"""
events.py - Scoped subscriptions to client events.

Listeners registered for the duration of one operation (pickup tracking,
dig supervision) are acquired as a Subscription and released when the
operation finishes, whatever the outcome.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterator

from integration.mc_client import MinecraftClient

logger = logging.getLogger(__name__)


class Subscription:
    """Handle for one registered event handler."""

    def __init__(self, client: MinecraftClient, event: str, handler: Callable[..., Any]):
        self.client = client
        self.event = event
        self.handler = handler
        self.active = True
        client.on(event, handler)

    def release(self) -> None:
        """Remove the handler. Safe to call more than once."""
        if not self.active:
            return
        self.active = False
        self.client.off(self.event, self.handler)
        logger.debug(f"Released '{self.event}' subscription")


@contextmanager
def subscribed(
    client: MinecraftClient,
    event: str,
    handler: Callable[..., Any]
) -> Iterator[Subscription]:
    """
    Listen for an event for the duration of the block.

    Usage:
        with subscribed(client, 'playerCollect', on_collect):
            await navigator.approach_entity(item)
    """
    subscription = Subscription(client, event, handler)
    try:
        yield subscription
    finally:
        subscription.release()

"""
context.py - Shared interaction state for the agent.

Operations that keep the agent legitimately busy without moving (crafting,
using a container) flag themselves here so stuck detection leaves them
alone. The last melee attack is recorded here for the weapon cooldown.

Flags are only ever set through the scoped helpers, which clear them on
every exit path.
"""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from integration.mc_client import Item

logger = logging.getLogger(__name__)


@dataclass
class InteractionContext:
    """
    Busy flags and attack bookkeeping shared by every subsystem.

    Attributes:
        is_crafting: True while a craft is in progress
        open_container_id: Window id of the open container, None if closed
        last_attack_time: time.monotonic() of the last attack, None if never
        last_attack_item: Item used for the last attack (None = empty hand)
    """
    is_crafting: bool = False
    open_container_id: Optional[int] = None
    last_attack_time: Optional[float] = None
    last_attack_item: Optional[Item] = None

    @property
    def is_busy(self) -> bool:
        """Whether a non-movement action is in progress."""
        return self.is_crafting or self.open_container_id is not None

    @contextmanager
    def crafting(self) -> Iterator['InteractionContext']:
        """Mark the agent as crafting for the duration of the block."""
        self.is_crafting = True
        try:
            yield self
        finally:
            self.is_crafting = False

    @contextmanager
    def container_open(self, window_id: int) -> Iterator['InteractionContext']:
        """Mark a container window as open for the duration of the block."""
        self.mark_container_open(window_id)
        try:
            yield self
        finally:
            self.clear_container()

    def mark_container_open(self, window_id: int) -> None:
        if self.open_container_id is not None and self.open_container_id != window_id:
            logger.warning(f"Container {self.open_container_id} still open while opening {window_id}")
        self.open_container_id = window_id

    def clear_container(self) -> None:
        self.open_container_id = None

    def record_attack(self, item: Optional[Item], now: Optional[float] = None) -> None:
        """Remember when and with what the agent last attacked."""
        self.last_attack_time = time.monotonic() if now is None else now
        self.last_attack_item = item

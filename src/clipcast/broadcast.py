#!/usr/bin/env python3
"""Connection registry and fan-out of clipboard values.

BroadcastServer keeps the set of connected subscribers and pushes every
new clipboard value to each of them. Each subscriber is served by its own
delivery task, so one slow or broken connection never holds back the
others. Any delivery failure removes the failing subscriber.

All registry mutation and iteration happens in synchronous code on the
event loop thread, so connect, disconnect and broadcast never interleave.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from clipcast.errors import SubscriberDeliveryFailure
from clipcast.poll_loop import ChangeResult

if TYPE_CHECKING:
    from clipcast.subscriber import Subscriber

logger = logging.getLogger(__name__)


class BroadcastServer:
    """Registry of live subscribers with per-subscriber delivery tasks."""

    def __init__(self) -> None:
        self._subscribers: dict[int, Subscriber] = {}
        self._tasks: dict[int, asyncio.Task[None]] = {}

    def __len__(self) -> int:
        return len(self._subscribers)

    def __contains__(self, subscriber: Subscriber) -> bool:
        return self._subscribers.get(subscriber.key) is subscriber

    @property
    def subscribers(self) -> list[Subscriber]:
        """Snapshot of the currently registered subscribers."""
        return list(self._subscribers.values())

    def on_connect(self, subscriber: Subscriber) -> bool:
        """Register subscriber and start delivering to it.

        A subscriber whose connection is already registered is rejected;
        the existing registration stays in place.

        Returns:
            True if registered, False if rejected as a duplicate.
        """
        if subscriber.key in self._subscribers:
            logger.warning("Connection already registered, rejecting %r", subscriber)
            return False
        self._subscribers[subscriber.key] = subscriber
        self._tasks[subscriber.key] = asyncio.create_task(
            self._deliver(subscriber), name=f"clipcast-deliver-{subscriber.key:x}"
        )
        logger.info("Subscriber connected (%d connected)", len(self))
        return True

    def on_disconnect(self, subscriber: Subscriber) -> bool:
        """Remove subscriber. Unknown or already removed is a no-op.

        Returns:
            True if the subscriber was registered and has been removed.
        """
        if subscriber not in self:
            return False
        del self._subscribers[subscriber.key]
        task = self._tasks.pop(subscriber.key)
        if task is not asyncio.current_task():
            task.cancel()
        subscriber.release()
        logger.info("Subscriber disconnected (%d connected)", len(self))
        return True

    def broadcast(self, value: str) -> None:
        """Queue value for every registered subscriber."""
        for subscriber in self.subscribers:
            try:
                subscriber.push(value)
            except SubscriberDeliveryFailure as e:
                logger.warning("Dropping subscriber: %s", e)
                self.on_disconnect(subscriber)
        logger.debug("Broadcast %d characters to %d subscribers", len(value), len(self))

    def handle_change(self, value: str) -> ChangeResult:
        """PollLoop change handler: broadcast and keep polling."""
        self.broadcast(value)
        return ChangeResult.CONTINUE

    async def flush(self) -> None:
        """Wait until every subscriber has sent or discarded its queue."""
        await asyncio.gather(*(s.join() for s in self.subscribers))

    def close(self) -> None:
        """Remove every subscriber."""
        for subscriber in self.subscribers:
            self.on_disconnect(subscriber)

    async def _deliver(self, subscriber: Subscriber) -> None:
        try:
            await subscriber.deliver()
        except SubscriberDeliveryFailure as e:
            logger.warning("Delivery failed, dropping subscriber: %s", e)
            self.on_disconnect(subscriber)

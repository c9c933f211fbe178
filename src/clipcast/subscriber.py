#!/usr/bin/env python3
"""Subscriber handle for one connected client.

A Subscriber wraps a Connection (anything that can send one text payload)
together with a bounded outbox. Values are pushed into the outbox without
waiting and a single consumer sends them in order, which gives FIFO
delivery per connection while never blocking the broadcaster on a slow
peer.
"""

from __future__ import annotations

import asyncio
from typing import Protocol

from clipcast.errors import SubscriberDeliveryFailure

# Maximum number of undelivered values per subscriber. A subscriber that
# falls this far behind is dropped.
DEFAULT_MAX_PENDING: int = 256


class Connection(Protocol):
    """Transport side of a subscriber."""

    async def send(self, text: str) -> None:
        """Send one payload.

        Raises:
            SubscriberDeliveryFailure: If the payload cannot be sent.
        """
        ...


class Subscriber:
    """A connected client registered to receive clipboard values.

    Attributes:
        connection: The transport used to reach the client.
        released: Set once the subscriber has been removed from the
            registry. The transport handler waits on it to close the
            connection.
    """

    def __init__(
        self, connection: Connection, max_pending: int = DEFAULT_MAX_PENDING
    ) -> None:
        self.connection = connection
        self.released = asyncio.Event()
        self._outbox: asyncio.Queue[str] = asyncio.Queue(maxsize=max_pending)

    def __repr__(self) -> str:
        return f"<Subscriber {self.key:#x} pending={self.pending}>"

    @property
    def key(self) -> int:
        """Registry key: the identity of the underlying connection."""
        return id(self.connection)

    @property
    def pending(self) -> int:
        """Number of values queued but not yet sent."""
        return self._outbox.qsize()

    def push(self, value: str) -> None:
        """Queue value for delivery without waiting.

        Raises:
            SubscriberDeliveryFailure: If the outbox is full.
        """
        try:
            self._outbox.put_nowait(value)
        except asyncio.QueueFull as e:
            raise SubscriberDeliveryFailure(
                f"{self!r} has {self._outbox.maxsize} undelivered values"
            ) from e

    async def deliver(self) -> None:
        """Send queued values in order, forever.

        Raises:
            SubscriberDeliveryFailure: When a send fails. Values still in
                the outbox are left for release() to discard.
        """
        while True:
            value = await self._outbox.get()
            try:
                await self.connection.send(value)
            finally:
                self._outbox.task_done()

    async def join(self) -> None:
        """Wait until every queued value has been sent or discarded."""
        await self._outbox.join()

    def release(self) -> None:
        """Discard undelivered values and signal the transport to close."""
        while True:
            try:
                self._outbox.get_nowait()
            except asyncio.QueueEmpty:
                break
            self._outbox.task_done()
        self.released.set()

#!/usr/bin/env python3
"""Tests for the Subscriber outbox."""
import asyncio
from contextlib import suppress

import pytest

from conftest import RecordingConnection

from clipcast.errors import SubscriberDeliveryFailure
from clipcast.subscriber import Subscriber


@pytest.mark.asyncio
async def test_deliver_sends_in_push_order() -> None:
    """Test values are sent in the order they were pushed."""
    connection = RecordingConnection()
    subscriber = Subscriber(connection)
    for value in ("a", "b", "c"):
        subscriber.push(value)

    task = asyncio.create_task(subscriber.deliver())
    await asyncio.wait_for(subscriber.join(), timeout=1)
    task.cancel()
    with suppress(asyncio.CancelledError):
        await task

    assert connection.sent == ["a", "b", "c"]


@pytest.mark.asyncio
async def test_push_on_full_outbox_raises() -> None:
    """Test pushing past max_pending raises SubscriberDeliveryFailure."""
    subscriber = Subscriber(RecordingConnection(), max_pending=2)
    subscriber.push("a")
    subscriber.push("b")

    with pytest.raises(SubscriberDeliveryFailure, match="2 undelivered"):
        subscriber.push("c")
    assert subscriber.pending == 2


@pytest.mark.asyncio
async def test_deliver_raises_on_send_failure() -> None:
    """Test a failing send ends delivery with SubscriberDeliveryFailure."""
    subscriber = Subscriber(RecordingConnection(fail=True))
    subscriber.push("a")

    with pytest.raises(SubscriberDeliveryFailure):
        await asyncio.wait_for(subscriber.deliver(), timeout=1)


@pytest.mark.asyncio
async def test_release_discards_pending_and_sets_event() -> None:
    """Test release() empties the outbox, unblocks join() and sets released."""
    subscriber = Subscriber(RecordingConnection())
    subscriber.push("a")
    subscriber.push("b")

    subscriber.release()

    assert subscriber.pending == 0
    assert subscriber.released.is_set()
    await asyncio.wait_for(subscriber.join(), timeout=1)


def test_key_is_connection_identity() -> None:
    """Test two subscribers on one connection share a key."""
    connection = RecordingConnection()
    assert Subscriber(connection).key == Subscriber(connection).key
    assert Subscriber(connection).key != Subscriber(RecordingConnection()).key

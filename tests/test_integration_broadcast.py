#!/usr/bin/env python3
"""
End-to-end test of PollLoop feeding BroadcastServer.

Uses an in-memory source and recording connections; no network.
"""
import asyncio

import pytest

from conftest import MutableSource, RecordingConnection, wait_until

from clipcast.broadcast import BroadcastServer
from clipcast.poll_loop import PollLoop
from clipcast.subscriber import Subscriber


@pytest.mark.asyncio
async def test_changes_reach_every_subscriber_once() -> None:
    """Test "" -> "hello" -> "" -> "hello" reaches two subscribers in order."""
    source = MutableSource("")
    broadcaster = BroadcastServer()
    loop = PollLoop(source, 1)
    task = loop.start(broadcaster.handle_change)

    # Initial empty clipboard is sampled before anyone connects
    await wait_until(lambda: loop.last_seen == "")
    connections = [RecordingConnection(), RecordingConnection()]
    for connection in connections:
        broadcaster.on_connect(Subscriber(connection))

    source.value = "hello"
    await wait_until(lambda: all(c.sent for c in connections))
    await asyncio.sleep(0.02)
    assert [c.sent for c in connections] == [["hello"], ["hello"]]

    source.value = ""
    await wait_until(lambda: loop.last_seen == "")
    source.value = "hello"
    await wait_until(lambda: all(len(c.sent) == 3 for c in connections))
    await asyncio.sleep(0.02)

    for connection in connections:
        assert connection.sent == ["hello", "", "hello"]

    loop.stop()
    await asyncio.wait_for(task, timeout=1)
    broadcaster.close()


@pytest.mark.asyncio
async def test_late_subscriber_only_sees_later_changes() -> None:
    """Test a subscriber joining after a change does not receive it."""
    source = MutableSource("before")
    broadcaster = BroadcastServer()
    loop = PollLoop(source, 1)
    task = loop.start(broadcaster.handle_change)

    await wait_until(lambda: loop.last_seen == "before")
    connection = RecordingConnection()
    broadcaster.on_connect(Subscriber(connection))
    source.value = "after"
    await wait_until(lambda: connection.sent == ["after"])

    loop.stop()
    await asyncio.wait_for(task, timeout=1)
    broadcaster.close()

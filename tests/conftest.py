#!/usr/bin/env python3
"""Pytest fixtures for clipcast tests.

Provides fake clipboard sources, recording connections and a helper to
wait for asynchronous conditions.
"""

import asyncio
from collections.abc import Callable, Iterable

import pytest

from clipcast.broadcast import BroadcastServer
from clipcast.errors import SubscriberDeliveryFailure


class ScriptedSource:
    """Source returning a fixed sequence of values, then the last one forever.

    Exception instances in the sequence are raised instead of returned.
    """

    def __init__(self, values: Iterable[object]) -> None:
        self.values = list(values)
        self.reads = 0

    async def read(self) -> str:
        index = min(self.reads, len(self.values) - 1)
        self.reads += 1
        value = self.values[index]
        if isinstance(value, Exception):
            raise value
        return value

    def close(self) -> None:
        pass


class MutableSource:
    """Source whose value the test sets directly."""

    def __init__(self, value: str = "") -> None:
        self.value = value
        self.reads = 0

    async def read(self) -> str:
        self.reads += 1
        return self.value

    def close(self) -> None:
        pass


class RecordingConnection:
    """Connection that records payloads, or fails every send."""

    def __init__(self, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[str] = []

    async def send(self, text: str) -> None:
        if self.fail:
            raise SubscriberDeliveryFailure("connection reset by peer")
        self.sent.append(text)


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Yield to the event loop until predicate() is true."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("Condition not met within timeout")
        await asyncio.sleep(0.001)


@pytest.fixture
def broadcaster() -> BroadcastServer:
    """Create an empty BroadcastServer."""
    return BroadcastServer()

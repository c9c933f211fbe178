#!/usr/bin/env python3
"""Clipboard change detection by periodic sampling.

PollLoop reads a text source every interval and reports each value that
differs from the previous sample. It owns the last seen value; nothing
else reads or writes it.

Ticks run strictly one after another. The wait for the next tick only
starts once the change handler of the current tick has returned, so a
slow handler delays sampling instead of piling up notifications. Any
clipboard mutations that happen between two ticks are collapsed into the
value seen at the second tick.
"""

from __future__ import annotations

import asyncio
import enum
import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Union

from clipcast.errors import SourceReadFailure
from clipcast.settings import validate_positive_int

if TYPE_CHECKING:
    from clipcast.source import TextSource

logger = logging.getLogger(__name__)


class ChangeResult(enum.Enum):
    """What the poll loop should do after a change handler returns."""

    CONTINUE = "continue"
    STOP = "stop"


class _Unset:
    """Type of the UNSET marker."""

    def __repr__(self) -> str:
        return "UNSET"


# Initial last seen value. Compares unequal to every string, so the first
# sample is always a change, even when it is the empty string.
UNSET = _Unset()

ChangeHandler = Callable[[str], Union[ChangeResult, Awaitable[ChangeResult]]]


class PollLoop:
    """Sample a TextSource at a fixed cadence and report changes.

    Attributes:
        interval_ms: Time between two samples in milliseconds.
        reads: Number of source reads performed so far.
    """

    def __init__(self, source: TextSource, interval_ms: int) -> None:
        """Create a loop over source.

        Raises:
            InvalidConfiguration: If interval_ms is not a positive integer.
        """
        self.interval_ms = validate_positive_int("interval", interval_ms)
        self.reads = 0
        self._source = source
        self._last_seen: str | _Unset = UNSET
        self._stop_requested = asyncio.Event()

    @property
    def last_seen(self) -> str | _Unset:
        """Most recently observed value, or UNSET before the first sample."""
        return self._last_seen

    def stop(self) -> None:
        """Request the loop to stop; the pending tick wait returns at once."""
        self._stop_requested.set()

    def start(self, on_change: ChangeHandler | None = None) -> asyncio.Task[None]:
        """Run the loop in a new task and return it."""
        return asyncio.create_task(self.run(on_change), name="clipcast-poll-loop")

    async def run(self, on_change: ChangeHandler | None = None) -> None:
        """Poll until stopped.

        Args:
            on_change: Called with each new value. May be a coroutine
                function. Must return ChangeResult.STOP to end the loop or
                ChangeResult.CONTINUE to keep polling. If None, changes only
                update the last seen value.

        A stop requested before run() is called ends that run at once. The
        request is cleared when run() returns, so the loop can be run again.

        Raises:
            TypeError: If on_change returns something other than a
                ChangeResult.
        """
        try:
            await self._poll(on_change)
        finally:
            self._stop_requested.clear()

    async def _poll(self, on_change: ChangeHandler | None) -> None:
        interval = self.interval_ms / 1000
        self._last_seen = UNSET
        logger.info("Polling the clipboard every %d milliseconds", self.interval_ms)

        while not await self._wait_for_tick(interval):
            try:
                value = await self._sample()
            except SourceReadFailure as e:
                logger.debug("Skipping tick, clipboard read failed: %s", e)
                continue

            if value == self._last_seen:
                continue
            self._last_seen = value
            logger.debug("Clipboard changed (%d characters)", len(value))

            if on_change is None:
                continue
            result = on_change(value)
            if inspect.isawaitable(result):
                result = await result
            if result is ChangeResult.STOP:
                logger.info("Change handler requested stop, polling ended")
                return
            if result is not ChangeResult.CONTINUE:
                raise TypeError(
                    f"Change handler must return a ChangeResult, got {result!r}"
                )

        logger.info("Polling stopped")

    async def _sample(self) -> str:
        self.reads += 1
        return await self._source.read()

    async def _wait_for_tick(self, interval: float) -> bool:
        """Wait one interval. Returns True if stop was requested instead."""
        try:
            await asyncio.wait_for(self._stop_requested.wait(), timeout=interval)
        except asyncio.TimeoutError:
            return False
        return True

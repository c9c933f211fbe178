#!/usr/bin/env python3
"""Waiting for X11 events with a deadline.

The X connection is only ever read from the worker thread performing a
clipboard read, so events that do not match are simply dropped.
"""

from __future__ import annotations

import select
import time
from collections.abc import Callable

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.protocol.rq import Event


def wait_for_event(
    display: "Display",
    matches: Callable[["Event"], bool],
    timeout: float,
) -> "Event":
    """Block until an event satisfying matches arrives.

    Drains queued events first, then sleeps on the display file
    descriptor until more data arrives or the deadline passes.

    Args:
        display: The X11 display connection.
        matches: Predicate selecting the wanted event.
        timeout: Maximum time to wait in seconds.

    Returns:
        The first matching event.

    Raises:
        TimeoutError: If no matching event arrives in time.
    """
    deadline = time.monotonic() + timeout
    while True:
        while display.pending_events():
            event = display.next_event()
            if matches(event):
                return event
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise TimeoutError(f"No matching X11 event within {timeout} seconds")
        select.select([display.fileno()], [], [], remaining)


def discard_pending_events(display: "Display") -> int:
    """Drop every event already received from the server.

    Returns:
        The number of events dropped.
    """
    dropped = 0
    while display.pending_events():
        display.next_event()
        dropped += 1
    return dropped


def is_selection_notify(window_id: int) -> Callable[["Event"], bool]:
    """Predicate for the SelectionNotify answering a conversion for window_id."""
    from Xlib import X

    def matches(event: "Event") -> bool:
        return event.type == X.SelectionNotify and event.requestor.id == window_id

    return matches


def is_new_property_value(window_id: int, prop_atom: int) -> Callable[["Event"], bool]:
    """Predicate for a PropertyNotify announcing a new value of prop_atom."""
    from Xlib import X

    def matches(event: "Event") -> bool:
        return (
            event.type == X.PropertyNotify
            and event.window.id == window_id
            and event.atom == prop_atom
            and event.state == X.PropertyNewValue
        )

    return matches

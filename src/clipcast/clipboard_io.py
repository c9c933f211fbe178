"""Reading X11 selection text.

This module implements the requestor side of the X11 selection protocol:
- Asking the owner to convert the selection to UTF8_STRING
- Reading the converted property, directly or via INCR chunks
- Mapping X11 errors and timeouts to SourceReadFailure

Every function here blocks and is meant to run in a worker thread.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from clipcast.errors import SourceReadFailure
from clipcast.selection_utils import (
    discard_pending_events,
    is_new_property_value,
    is_selection_notify,
    wait_for_event,
)

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window

# Timeout in seconds for each step of a clipboard read, so that an
# unresponsive owner cannot stall the poll loop.
CLIPBOARD_TIMEOUT: float = 1.0

# Largest clipboard text accepted, in bytes (10 MB).
MAX_CONTENT_SIZE: int = 10485760

# Property on our window that receives the converted selection.
TRANSFER_PROPERTY: str = "CLIPCAST_SEL"


def read_selection_text(
    display: Display,
    window: Window,
    selection_atom: int,
    timeout: float = CLIPBOARD_TIMEOUT,
) -> str:
    """Read the current text of a selection.

    A selection without an owner, or whose owner cannot provide text,
    reads as the empty string, the same as an empty clipboard.

    Args:
        display: The X11 display connection.
        window: The hidden window receiving the conversion.
        selection_atom: The selection atom, normally CLIPBOARD.
        timeout: Seconds to wait for each reply from the owner.

    Returns:
        The selection text decoded as UTF-8.

    Raises:
        SourceReadFailure: On timeout, X11 error or oversized content.
    """
    from Xlib import X
    from Xlib.error import ConnectionClosedError, XError

    try:
        owner = display.get_selection_owner(selection_atom)
        if owner == X.NONE:
            return ""

        utf8_atom = display.intern_atom("UTF8_STRING")
        prop_atom = display.intern_atom(TRANSFER_PROPERTY)
        # Replies to earlier requests that timed out must not answer this one
        discard_pending_events(display)
        window.convert_selection(selection_atom, utf8_atom, prop_atom, X.CurrentTime)
        display.flush()

        event = wait_for_event(display, is_selection_notify(window.id), timeout)
        if event.property == X.NONE:
            # Owner refused the conversion: it holds no text
            return ""
        data = _read_transfer_property(display, window, prop_atom, timeout)
    except TimeoutError as e:
        raise SourceReadFailure(f"Clipboard owner did not answer: {e}") from e
    except (XError, ConnectionClosedError, OSError) as e:
        raise SourceReadFailure(f"X11 error while reading clipboard: {e}") from e

    return data.decode("utf-8", errors="replace")


def _read_transfer_property(
    display: "Display", window: "Window", prop_atom: int, timeout: float
) -> bytes:
    """Read and delete the transfer property, following INCR if announced."""
    from Xlib import X

    prop = window.get_full_property(prop_atom, X.AnyPropertyType)
    window.delete_property(prop_atom)
    display.flush()

    if prop is None:
        raise SourceReadFailure("Selection reply carried no transfer property")
    if prop.property_type == display.intern_atom("INCR"):
        return _read_incr(display, window, prop_atom, timeout)
    data = _as_bytes(prop.value)
    _check_size(len(data))
    return data


def _read_incr(
    display: "Display", window: "Window", prop_atom: int, timeout: float
) -> bytes:
    """Collect an INCR transfer.

    Deleting the INCR property tells the owner to start writing chunks.
    Each chunk arrives as a new property value that we read and delete;
    a zero-length chunk ends the transfer.
    """
    from Xlib import X

    chunks: list[bytes] = []
    total = 0
    while True:
        wait_for_event(display, is_new_property_value(window.id, prop_atom), timeout)
        prop = window.get_full_property(prop_atom, X.AnyPropertyType)
        window.delete_property(prop_atom)
        display.flush()

        chunk = _as_bytes(prop.value) if prop is not None else b""
        if not chunk:
            return b"".join(chunks)
        total += len(chunk)
        _check_size(total)
        chunks.append(chunk)


def _check_size(size: int) -> None:
    if size > MAX_CONTENT_SIZE:
        raise SourceReadFailure(f"Clipboard content exceeds {MAX_CONTENT_SIZE} bytes")


def _as_bytes(data: object) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)

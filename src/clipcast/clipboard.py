"""X11 display and window setup for reading the clipboard.

Reading a selection under X11 is a conversation with the selection owner:
we ask it to convert the selection into a property on one of our windows
and wait for the answer. This module provides the display connection and
the hidden window used as the target of those conversions.
"""

from __future__ import annotations

import os

from Xlib import X

from typing import TYPE_CHECKING

from clipcast.errors import SourceUnavailable

if TYPE_CHECKING:
    from Xlib.display import Display
    from Xlib.xobject.drawable import Window


def open_display() -> Display:
    """Connect to the X11 display named by $DISPLAY.

    Called once at startup so that a missing X server is reported before
    the web server starts.

    Returns:
        Display object for X11 operations.

    Raises:
        SourceUnavailable: If DISPLAY is unset or the connection fails.
    """
    display_name = os.environ.get("DISPLAY")
    if not display_name:
        raise SourceUnavailable(
            "DISPLAY environment variable is not set; "
            "use --source pyperclip on systems without X11"
        )

    from Xlib.display import Display as XDisplay
    from Xlib.error import DisplayError

    try:
        return XDisplay(display_name)
    except (DisplayError, OSError) as e:
        raise SourceUnavailable(f"Failed to connect to X11 display: {e}") from e


def create_hidden_window(display: Display) -> Window:
    """Create a 1x1 unmapped window to receive selection conversions.

    The window listens for property changes, which is how INCR transfers
    deliver their chunks.

    Args:
        display: The X11 display connection.

    Returns:
        A Window object used as the conversion requestor.
    """
    screen = display.screen()
    window = screen.root.create_window(
        0, 0, 1, 1, 0, screen.root_depth, event_mask=X.PropertyChangeMask,
    )
    display.flush()
    return window

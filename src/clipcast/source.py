#!/usr/bin/env python3
"""Clipboard text sources sampled by the poll loop.

Two implementations are provided:
- X11ClipboardSource: talks to the X server directly via python-xlib
- PyperclipSource: uses pyperclip, for desktops without X11

Both do their blocking work in a worker thread so the event loop keeps
serving connections while the clipboard owner answers.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Protocol

from clipcast.clipboard_io import CLIPBOARD_TIMEOUT, read_selection_text
from clipcast.errors import SourceReadFailure

if TYPE_CHECKING:
    from Xlib.display import Display

logger = logging.getLogger(__name__)

# Names accepted by make_source().
SOURCE_NAMES: tuple[str, ...] = ("x11", "pyperclip")


class TextSource(Protocol):
    """An externally owned text value that can be sampled."""

    async def read(self) -> str:
        """Return the current text.

        Raises:
            SourceReadFailure: If the value cannot be read right now.
        """
        ...

    def close(self) -> None:
        """Release any resources held by the source."""
        ...


class X11ClipboardSource:
    """Read the X11 CLIPBOARD selection as UTF-8 text."""

    def __init__(
        self,
        display: Display | None = None,
        selection: str = "CLIPBOARD",
        timeout: float = CLIPBOARD_TIMEOUT,
    ) -> None:
        """Open the display and create the requestor window.

        Raises:
            SourceUnavailable: If no display is given and $DISPLAY cannot
                be opened.
        """
        from clipcast.clipboard import create_hidden_window, open_display

        self.display = display if display is not None else open_display()
        self.window = create_hidden_window(self.display)
        self.selection_atom = self.display.intern_atom(selection)
        self.timeout = timeout

    async def read(self) -> str:
        return await asyncio.to_thread(
            read_selection_text,
            self.display,
            self.window,
            self.selection_atom,
            self.timeout,
        )

    def close(self) -> None:
        self.window.destroy()
        self.display.close()


class PyperclipSource:
    """Read the system clipboard through pyperclip."""

    async def read(self) -> str:
        import pyperclip

        try:
            text = await asyncio.to_thread(pyperclip.paste)
        except pyperclip.PyperclipException as e:
            raise SourceReadFailure(f"pyperclip could not read clipboard: {e}") from e
        return text if text is not None else ""

    def close(self) -> None:
        pass


def make_source(name: str) -> TextSource:
    """Create the clipboard source called name.

    Raises:
        ValueError: If name is not one of SOURCE_NAMES.
        SourceUnavailable: If the source cannot be opened.
    """
    logger.debug("Opening %s clipboard source", name)
    if name == "x11":
        return X11ClipboardSource()
    if name == "pyperclip":
        return PyperclipSource()
    raise ValueError(f"Unknown clipboard source {name!r}, expected one of {SOURCE_NAMES}")

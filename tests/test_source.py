#!/usr/bin/env python3
"""Tests for clipboard sources and the source factory."""
from unittest.mock import MagicMock, patch

import pytest

from clipcast.errors import SourceReadFailure, SourceUnavailable
from clipcast.source import PyperclipSource, X11ClipboardSource, make_source


class TestX11ClipboardSource:
    """Tests for X11ClipboardSource with a mocked display."""

    def test_creates_window_and_interns_selection(self) -> None:
        """Test construction creates the requestor window and atom."""
        display = MagicMock()
        display.intern_atom.return_value = 77

        source = X11ClipboardSource(display=display)

        assert source.selection_atom == 77
        display.intern_atom.assert_called_once_with("CLIPBOARD")
        display.screen.return_value.root.create_window.assert_called_once()

    @pytest.mark.asyncio
    async def test_read_runs_selection_read(self) -> None:
        """Test read() delegates to read_selection_text."""
        display = MagicMock()
        source = X11ClipboardSource(display=display, timeout=0.5)

        with patch("clipcast.source.read_selection_text", return_value="copied") as mock_read:
            assert await source.read() == "copied"

        mock_read.assert_called_once_with(
            display, source.window, source.selection_atom, 0.5
        )

    @pytest.mark.asyncio
    async def test_read_propagates_failure(self) -> None:
        """Test SourceReadFailure from the X11 read reaches the caller."""
        source = X11ClipboardSource(display=MagicMock())

        with patch(
            "clipcast.source.read_selection_text",
            side_effect=SourceReadFailure("timeout"),
        ):
            with pytest.raises(SourceReadFailure):
                await source.read()

    def test_close_releases_window_and_display(self) -> None:
        """Test close() destroys the window and closes the display."""
        display = MagicMock()
        source = X11ClipboardSource(display=display)

        source.close()

        source.window.destroy.assert_called_once()
        display.close.assert_called_once()


class TestPyperclipSource:
    """Tests for PyperclipSource."""

    @pytest.mark.asyncio
    async def test_read_returns_paste(self) -> None:
        """Test read() returns pyperclip.paste()."""
        with patch("pyperclip.paste", return_value="from pyperclip"):
            assert await PyperclipSource().read() == "from pyperclip"

    @pytest.mark.asyncio
    async def test_read_maps_pyperclip_errors(self) -> None:
        """Test PyperclipException becomes SourceReadFailure."""
        import pyperclip

        with patch("pyperclip.paste", side_effect=pyperclip.PyperclipException("no xclip")):
            with pytest.raises(SourceReadFailure, match="no xclip"):
                await PyperclipSource().read()

    @pytest.mark.asyncio
    async def test_read_none_is_empty(self) -> None:
        """Test a None paste result reads as the empty string."""
        with patch("pyperclip.paste", return_value=None):
            assert await PyperclipSource().read() == ""


class TestMakeSource:
    """Tests for make_source."""

    def test_pyperclip(self) -> None:
        """Test "pyperclip" builds a PyperclipSource."""
        assert isinstance(make_source("pyperclip"), PyperclipSource)

    def test_x11_without_display_is_unavailable(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test "x11" fails with SourceUnavailable when DISPLAY is unset."""
        monkeypatch.delenv("DISPLAY", raising=False)
        with pytest.raises(SourceUnavailable, match="DISPLAY"):
            make_source("x11")

    def test_unknown_name(self) -> None:
        """Test an unknown name raises ValueError."""
        with pytest.raises(ValueError, match="Unknown clipboard source"):
            make_source("wayland")

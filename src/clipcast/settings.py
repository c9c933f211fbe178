#!/usr/bin/env python3
"""Application settings and their defaults.

The defaults match the values the browser client expects when no
arguments are given: port 8080 and a 100 ms clipboard polling interval.
"""

from __future__ import annotations

from dataclasses import dataclass

from clipcast.errors import InvalidConfiguration

# Port for both the bootstrap page and the WebSocket channel.
DEFAULT_PORT: int = 8080

# How often the clipboard is sampled, in milliseconds.
DEFAULT_INTERVAL_MS: int = 100

# Interface to listen on.
DEFAULT_HOST: str = "0.0.0.0"

# Name of the clipboard source used when none is given.
DEFAULT_SOURCE: str = "x11"

# Highest valid TCP port number.
MAX_PORT: int = 65535


@dataclass
class AppSettings:
    """Runtime configuration for clipcast.

    Attributes:
        port: TCP port serving the page and the WebSocket channel.
        interval_ms: Clipboard polling interval in milliseconds.
        host: Interface address to bind.
        source: Clipboard source name ("x11" or "pyperclip").
        open_browser: Open the client page in the default browser on start.
    """

    port: int = DEFAULT_PORT
    interval_ms: int = DEFAULT_INTERVAL_MS
    host: str = DEFAULT_HOST
    source: str = DEFAULT_SOURCE
    open_browser: bool = True


def validate_positive_int(name: str, value: object) -> int:
    """Return value if it is a positive integer.

    Args:
        name: Setting name used in the error message.
        value: Candidate value.

    Returns:
        The value unchanged.

    Raises:
        InvalidConfiguration: If value is not an int, is a bool, or is < 1.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfiguration(f"{name} must be an integer, got {value!r}")
    if value < 1:
        raise InvalidConfiguration(f"{name} must be positive, got {value}")
    return value


def validate_settings(settings: AppSettings) -> AppSettings:
    """Check port and interval, failing fast on bad values.

    Raises:
        InvalidConfiguration: On a non-positive or out of range value.
    """
    validate_positive_int("interval", settings.interval_ms)
    validate_positive_int("port", settings.port)
    if settings.port > MAX_PORT:
        raise InvalidConfiguration(
            f"port must be at most {MAX_PORT}, got {settings.port}"
        )
    return settings

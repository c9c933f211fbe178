#!/usr/bin/env python3
"""
Exception types for clipcast.

Each failure mode has its own exception so that the component able to
recover from it can catch exactly that and nothing else:
- InvalidConfiguration: bad port or interval, fatal at startup
- SourceReadFailure: clipboard unavailable for one tick, skipped
- SubscriberDeliveryFailure: one subscriber could not be reached, dropped
- TransportBindFailure: listening socket could not be bound, fatal
- SourceUnavailable: clipboard source cannot be opened at startup, fatal
"""


class ClipcastError(Exception):
    """Base class for all clipcast errors."""

    pass


class InvalidConfiguration(ClipcastError):
    """
    Raised when a configuration value is not a positive integer.

    Raised before any timer is armed or socket is bound.
    """

    pass


class SourceReadFailure(ClipcastError):
    """
    Raised when the clipboard cannot be sampled at tick time.

    The poll loop skips the tick and tries again at the next one.
    """

    pass


class SubscriberDeliveryFailure(ClipcastError):
    """
    Raised when a value cannot be pushed to one subscriber.

    Covers both a send error on the connection and an outbox that is
    full because the subscriber stopped reading. The subscriber is
    removed from the registry.
    """

    pass


class TransportBindFailure(ClipcastError):
    """Raised when the HTTP/WebSocket listener cannot be established."""

    pass


class SourceUnavailable(ClipcastError):
    """Raised at startup when the clipboard source cannot be opened."""

    pass

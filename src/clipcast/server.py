#!/usr/bin/env python3
"""Server mode implementation for clipcast.

Binds the listening socket, builds the application around an AppContext,
optionally opens the client page in a browser and serves HTTP and
WebSocket traffic with uvicorn until interrupted.

Usage:
    clipcast [PORT] [--interval MS] [--source x11|pyperclip]
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clipcast.settings import AppSettings
    from clipcast.source import TextSource


async def run_server(settings: AppSettings, source: TextSource) -> None:
    """Serve the page and the clipboard channel until shutdown.

    Uvicorn handles SIGINT and SIGTERM; shutting down runs the app
    lifespan exit, which stops the poll loop and releases subscribers.

    Args:
        settings: Validated runtime configuration.
        source: Clipboard source for the poll loop.

    Raises:
        TransportBindFailure: If the port cannot be bound.
    """
    import uvicorn

    from clipcast.app import AppContext, create_app
    from clipcast.server_socket import bind_socket, open_client, print_startup_message

    context = AppContext(settings=settings, source=source)
    app = create_app(context)

    sock = bind_socket(settings.host, settings.port)
    print_startup_message(sock)

    verbose = logging.getLogger().isEnabledFor(logging.DEBUG)
    config = uvicorn.Config(
        app,
        log_config=None,
        log_level="debug" if verbose else "warning",
        lifespan="on",
    )
    server = uvicorn.Server(config)

    if settings.open_browser:
        open_client(settings.port)

    try:
        await server.serve(sockets=[sock])
    finally:
        sock.close()

#!/usr/bin/env python3
"""Application context and ASGI app.

AppContext groups everything the running service owns: its settings, the
clipboard source, the one shared PollLoop and the BroadcastServer it
feeds. create_app() builds the FastAPI app around a context. The app's
lifespan starts polling on startup and stops it on shutdown.

Routes:
    GET /          bootstrap page with the WebSocket port filled in
    WebSocket /    clipboard channel, one text frame per change
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import HTMLResponse

from clipcast.bootstrap_page import render_client_page
from clipcast.broadcast import BroadcastServer
from clipcast.poll_loop import PollLoop
from clipcast.transport import serve_subscriber

if TYPE_CHECKING:
    from clipcast.settings import AppSettings
    from clipcast.source import TextSource

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    """State of one running clipcast service.

    Attributes:
        settings: Validated runtime configuration.
        source: The clipboard source being sampled.
        broadcaster: Registry of connected subscribers.
        poll_loop: Shared poller feeding broadcaster.
    """

    settings: AppSettings
    source: TextSource
    broadcaster: BroadcastServer = field(default_factory=BroadcastServer)
    poll_loop: PollLoop = field(init=False)

    def __post_init__(self) -> None:
        self.poll_loop = PollLoop(self.source, self.settings.interval_ms)


def log_poll_exit(task: asyncio.Task[None]) -> None:
    """Done callback for the poll task: log the error that ended it, if any."""
    if task.cancelled():
        return
    error = task.exception()
    if error is not None:
        logger.error("Clipboard polling stopped: %s", error, exc_info=error)


def create_app(context: AppContext) -> FastAPI:
    """Build the FastAPI app serving the page and the WebSocket channel."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        poll_task = context.poll_loop.start(context.broadcaster.handle_change)
        poll_task.add_done_callback(log_poll_exit)
        try:
            yield
        finally:
            context.poll_loop.stop()
            # A failure has already been logged by log_poll_exit
            await asyncio.gather(poll_task, return_exceptions=True)
            context.broadcaster.close()

    app = FastAPI(lifespan=lifespan, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.context = context

    @app.get("/", response_class=HTMLResponse)
    async def client_page(request: Request) -> HTMLResponse:
        logger.debug("HTTP %s from %s", request.method, request.client)
        return HTMLResponse(render_client_page(context.settings.port))

    @app.websocket("/")
    async def clipboard_channel(websocket: WebSocket) -> None:
        await serve_subscriber(context.broadcaster, websocket)

    return app

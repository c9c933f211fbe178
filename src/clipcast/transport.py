#!/usr/bin/env python3
"""WebSocket transport for subscribers.

Adapts a FastAPI WebSocket to the Connection interface used by
Subscriber, and runs the lifetime of one client connection: accept,
register with the BroadcastServer, wait for either side to end it,
unregister and close.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from fastapi import WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

from clipcast.errors import SubscriberDeliveryFailure
from clipcast.subscriber import Subscriber

if TYPE_CHECKING:
    from clipcast.broadcast import BroadcastServer

logger = logging.getLogger(__name__)


class WebSocketConnection:
    """Connection that sends text frames over a WebSocket."""

    def __init__(self, websocket: WebSocket) -> None:
        self.websocket = websocket

    async def send(self, text: str) -> None:
        try:
            await self.websocket.send_text(text)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            raise SubscriberDeliveryFailure(
                f"Send to {self.websocket.client} failed: {e!r}"
            ) from e


async def serve_subscriber(server: BroadcastServer, websocket: WebSocket) -> None:
    """Handle one WebSocket client for as long as it stays connected.

    The connection ends when the client disconnects or when the server
    drops the subscriber after a delivery failure, whichever comes first.
    Messages sent by the client are ignored.

    Args:
        server: Registry the subscriber is added to.
        websocket: The incoming, not yet accepted, WebSocket.
    """
    await websocket.accept()
    logger.info("WebSocket connection from %s", websocket.client)

    subscriber = Subscriber(WebSocketConnection(websocket))
    if not server.on_connect(subscriber):
        await _close(websocket)
        return

    peer_task = asyncio.create_task(_wait_for_peer_close(websocket))
    released_task = asyncio.create_task(subscriber.released.wait())
    try:
        await asyncio.wait(
            {peer_task, released_task}, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        peer_task.cancel()
        released_task.cancel()
        await asyncio.gather(peer_task, released_task, return_exceptions=True)
        server.on_disconnect(subscriber)
        await _close(websocket)
    logger.info("WebSocket connection from %s closed", websocket.client)


async def _wait_for_peer_close(websocket: WebSocket) -> None:
    """Read and discard client messages until the client disconnects."""
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


async def _close(websocket: WebSocket) -> None:
    if websocket.client_state is not WebSocketState.CONNECTED:
        return
    try:
        await websocket.close()
    except (RuntimeError, OSError) as e:
        logger.debug("Closing WebSocket failed: %s", e)

# chatrooms/services/connection.py

from __future__ import annotations

import asyncio
import uuid
from typing import Optional

from fastapi import WebSocket

from chatrooms.core.logging import get_logger

logger = get_logger(__name__)


class WebSocketConnection:
    """
    One live WebSocket session.

    Outbound payloads are queued with ``deliver()`` and written by a
    background task, so a slow or dead client never stalls whoever is
    broadcasting. Payloads reach the client in the order they were queued.

    Attributes:
        connection_id: Unique id for this session
        websocket: The underlying FastAPI WebSocket
        closed: Set once a send has failed; later payloads are discarded
    """

    def __init__(self, websocket: WebSocket, max_pending: int = 0) -> None:
        self.connection_id = str(uuid.uuid4())
        self.websocket = websocket
        self.closed = False
        self._outbox: asyncio.Queue = asyncio.Queue(maxsize=max_pending)
        self._writer: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start the writer task. Must be called from the event loop."""
        if self._writer is None:
            self._writer = asyncio.create_task(self._write_loop())

    def deliver(self, payload: dict) -> None:
        """Queue a payload for this client without waiting for the send."""
        if self.closed:
            return
        try:
            self._outbox.put_nowait(payload)
        except asyncio.QueueFull:
            logger.warning("Outbox full for %s, dropping %s event",
                           self.connection_id, payload.get("type"))

    async def drain(self) -> None:
        """Wait until every queued payload has been written (or discarded)."""
        if self.closed and self._writer is None:
            # Writer is gone; nothing will ever mark the remaining items done
            return
        await self._outbox.join()

    async def close(self) -> None:
        """Stop the writer task. Unsent payloads are dropped."""
        self.closed = True
        if self._writer is not None:
            self._writer.cancel()
            try:
                await self._writer
            except asyncio.CancelledError:
                pass
            self._writer = None

    async def _write_loop(self) -> None:
        while True:
            payload = await self._outbox.get()
            try:
                if not self.closed:
                    await self.websocket.send_json(payload)
            except Exception as e:
                # Connection gone; the disconnect itself is reported by the receive loop
                logger.warning("Send error on %s: %s", self.connection_id, e)
                self.closed = True
            finally:
                self._outbox.task_done()

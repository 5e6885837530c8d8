# chatrooms/api/websocket.py

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from pydantic import ValidationError

from chatrooms.core.state import ChatState
from chatrooms.models.models import (
    CLIENT_EVENT_TYPES,
    ErrorEvent,
    JoinRoomEvent,
    SendMessageEvent,
    client_event_adapter,
)
from chatrooms.services.connection import WebSocketConnection

logger = logging.getLogger(__name__)

router = APIRouter()

# ============================================================================
# WEBSOCKET ENDPOINT
# ============================================================================

@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket):
    """
    WebSocket endpoint for real-time room chat.

    Protocol:
    =========

    Client -> Server Events:
    ------------------------
    Join Room:
        {"type": "join-room", "roomId": "uuid-123", "username": "alice"}
        Unknown room ids are created as private rooms. Missing fields are ignored.

    Send Message:
        {"type": "chat-message", "text": "Hello!"}
        Ignored until the connection has joined a room.

    Server -> Client Events:
    ------------------------
    Membership Change:
        {"type": "system-message", "text": "alice joined the room.", "memberCount": 2}

    Room Snapshot:
        {"type": "room-meta", "id": "...", "name": "...", "isPublic": true,
         "createdAt": 1700000000000, "memberCount": 2}

    Chat Message:
        {"type": "chat-message", "id": "...", "username": "alice", "text": "Hello!", "ts": ...}

    Error (sent only to the offending connection):
        {"type": "error", "message": "Invalid JSON" | "Unknown event"}

    Lifecycle:
    ==========
    1. Client connects; a connection id is assigned
    2. Client sends "join-room"; the room is told about the new member
    3. Chat messages are broadcast to everyone in the same room
    4. On disconnect the room is told the member left
    """
    state: ChatState = websocket.app.state.chat

    await websocket.accept()
    connection = WebSocketConnection(websocket, max_pending=state.settings.OUTBOX_MAX_SIZE)
    connection.start()
    state.lifecycle.on_connect(connection)

    try:
        while True:
            data = await websocket.receive_text()

            try:
                frame = json.loads(data)
            except json.JSONDecodeError:
                connection.deliver(ErrorEvent(message="Invalid JSON").to_wire())
                continue

            try:
                event = client_event_adapter.validate_python(frame)
            except ValidationError as e:
                if isinstance(frame, dict) and frame.get("type") in CLIENT_EVENT_TYPES:
                    # Known event with a malformed payload: drop it
                    logger.debug("Dropped malformed %s from %s: %s",
                                 frame["type"], connection.connection_id, e)
                    continue
                logger.debug("Rejected frame from %s: %s", connection.connection_id, e)
                connection.deliver(ErrorEvent(message="Unknown event").to_wire())
                continue

            if isinstance(event, JoinRoomEvent):
                await state.lifecycle.on_join(connection.connection_id, event.room_id, event.username)
            elif isinstance(event, SendMessageEvent):
                await state.lifecycle.on_message(connection.connection_id, event.text)

    except WebSocketDisconnect:
        pass
    except Exception as e:
        logger.error("WebSocket error on %s: %s", connection.connection_id, e, exc_info=True)
    finally:
        await state.lifecycle.on_disconnect(connection.connection_id)
        await connection.close()

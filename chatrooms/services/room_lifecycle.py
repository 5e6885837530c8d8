# chatrooms/services/room_lifecycle.py

from __future__ import annotations

import asyncio
import uuid
from contextlib import AsyncExitStack, asynccontextmanager
from typing import AsyncIterator, Callable, Dict, Optional

from chatrooms.core.logging import get_logger
from chatrooms.models.models import (
    DEFAULT_ROOM_NAME,
    UNKNOWN_AUTHOR,
    ChatMessageEvent,
    Room,
    RoomMetaEvent,
    SystemMessageEvent,
    now_ms,
)
from chatrooms.services.broadcast_hub import BroadcastHub
from chatrooms.services.connection_registry import Connection, ConnectionRegistry
from chatrooms.services.room_directory import RoomDirectory

logger = get_logger(__name__)


# ============================================================================
# PER-ROOM LOCKS
# ============================================================================

class RoomLocks:
    """One asyncio.Lock per room id, created on first use."""

    def __init__(self) -> None:
        self._locks: Dict[str, asyncio.Lock] = {}

    def get(self, room_id: str) -> asyncio.Lock:
        lock = self._locks.get(room_id)
        if lock is None:
            lock = self._locks[room_id] = asyncio.Lock()
        return lock

    @asynccontextmanager
    async def hold(self, *room_ids: str) -> AsyncIterator[None]:
        """Hold the locks of all given rooms, acquired in sorted order."""
        async with AsyncExitStack() as stack:
            for room_id in sorted(set(room_ids)):
                await stack.enter_async_context(self.get(room_id))
            yield


# ============================================================================
# ROOM LIFECYCLE CONTROLLER
# ============================================================================

class RoomLifecycleController:
    """
    Coordinates join / message / disconnect events.

    Every event that touches a room runs under that room's lock: the
    registry mutation, the member count recompute and the resulting
    broadcasts form one unit, so no other event on the same room sees a
    torn member count. Events on different rooms never share a lock.

    Flow for a join:
        1. Ignore it if room id or username is missing
        2. Materialise unknown rooms as private "Untitled Room"s
        3. Bind the connection to the room
        4. Recompute memberCount from the registry and store it
        5. Broadcast "system-message" then "room-meta" to the room
    """

    def __init__(
        self,
        directory: RoomDirectory,
        registry: ConnectionRegistry,
        hub: BroadcastHub,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.directory = directory
        self.registry = registry
        self.hub = hub
        self.locks = RoomLocks()
        self.message_counter: int = 0
        self._clock = clock

    def on_connect(self, connection: Connection) -> None:
        self.registry.add(connection)

    async def on_join(self, connection_id: str, room_id: Optional[str], display_name: Optional[str]) -> None:
        if not room_id or not display_name:
            logger.debug("Dropped join from %s: room id and username are required", connection_id)
            return

        previous = self.registry.membership(connection_id)
        moved_from = previous.room_id if previous and previous.room_id != room_id else None
        touched = (room_id, moved_from) if moved_from else (room_id,)

        async with self.locks.hold(*touched):
            if self.directory.get_room(room_id) is None:
                # Clients may reference an id that was never created
                self.directory.upsert(room_id, Room(
                    id=room_id,
                    name=DEFAULT_ROOM_NAME,
                    is_public=False,
                    created_at=self._clock(),
                    member_count=0,
                ))
                logger.info("✓ Materialised private room %s on join", room_id)

            self.registry.register(connection_id, room_id, display_name)
            room = self._refresh_member_count(room_id)
            logger.info("→ %s joined %s (%s members)", display_name, room_id, room.member_count)
            self._announce(room, f"{display_name} joined the room.")

            if moved_from:
                self._announce_departure(moved_from, previous.display_name)

    async def on_message(self, connection_id: str, text: object) -> None:
        membership = self.registry.membership(connection_id)
        if membership is None:
            logger.debug("Dropped message from %s: not in a room", connection_id)
            return

        async with self.locks.hold(membership.room_id):
            message = ChatMessageEvent(
                id=str(uuid.uuid4()),
                username=membership.display_name or UNKNOWN_AUTHOR,
                text=text,
                ts=self._clock(),
            )
            self.hub.emit(membership.room_id, message)
            self.message_counter += 1

    async def on_disconnect(self, connection_id: str) -> None:
        membership = self.registry.membership(connection_id)
        if membership is None:
            self.registry.discard(connection_id)
            return

        async with self.locks.hold(membership.room_id):
            self.registry.unregister(connection_id)
            self.registry.discard(connection_id)
            self._announce_departure(membership.room_id, membership.display_name)

    def _announce_departure(self, room_id: str, display_name: Optional[str]) -> None:
        room = self._refresh_member_count(room_id)
        if room is None:
            return
        logger.info("← %s left %s (%s members)", display_name or "A user", room_id, room.member_count)
        self._announce(room, f"{display_name or 'A user'} left the room.")

    def _announce(self, room: Room, text: str) -> None:
        self.hub.emit(room.id, SystemMessageEvent(text=text, member_count=room.member_count))
        self.hub.emit(room.id, RoomMetaEvent.from_room(room))

    def _refresh_member_count(self, room_id: str) -> Optional[Room]:
        room = self.directory.get_room(room_id)
        if room is None:
            return None
        updated = room.model_copy(update={"member_count": self.registry.count_in_room(room_id)})
        self.directory.upsert(room_id, updated)
        return updated

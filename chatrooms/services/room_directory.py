# chatrooms/services/room_directory.py

from __future__ import annotations

import random
import uuid
from typing import Callable, Dict, List, Optional

from chatrooms.core.logging import get_logger
from chatrooms.models.models import Room, RoomSummary, now_ms

logger = get_logger(__name__)


class NoPublicRoomsError(LookupError):
    """Raised when a random public room is requested but none exist."""


# ============================================================================
# ROOM DIRECTORY
# ============================================================================
class RoomDirectory:
    """
    Authoritative in-memory store of room metadata.

    Rooms live for as long as the owning server instance. They are never
    deleted, even when their member count drops back to zero, so they stay
    discoverable.

    Attributes:
        rooms: Dictionary mapping room_id -> Room object (insertion ordered)

    Usage:
        directory = RoomDirectory()
        room = directory.create_room("Product Team", is_public=True)
        public = directory.list_public()
    """

    def __init__(
        self,
        clock: Callable[[], int] = now_ms,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.rooms: Dict[str, Room] = {}
        self._clock = clock
        self._rng = rng or random.Random()

    def create_room(self, name: str, is_public: bool) -> Room:
        """
        Create a new room with a fresh id and no members.

        Args:
            name: Display name
            is_public: Whether the room is listed by discovery queries

        Returns:
            Room: The newly created room object
        """
        room = Room(
            id=str(uuid.uuid4()),
            name=name,
            is_public=is_public,
            created_at=self._clock(),
            member_count=0,
        )
        self.rooms[room.id] = room
        logger.info("✓ Created room: %s (%s, %s)", room.name, room.id,
                    "public" if room.is_public else "private")
        return room

    def get_room(self, room_id: str) -> Optional[Room]:
        """
        Get a room by ID.

        Returns:
            Room object if found, None otherwise
        """
        return self.rooms.get(room_id)

    def upsert(self, room_id: str, room: Room) -> None:
        """
        Insert or replace the stored room for ``room_id``.

        Used for implicit room creation on join and for member count
        updates. Replacing an existing room keeps its listing position.
        """
        self.rooms[room_id] = room

    def list_rooms(self) -> List[Room]:
        """All rooms, public and private."""
        return list(self.rooms.values())

    def list_public(self) -> List[RoomSummary]:
        """
        Summaries of every public room, newest first.

        Rooms created in the same millisecond are ordered by creation
        sequence, latest first.
        """
        public = [room for room in reversed(self.rooms.values()) if room.is_public]
        public.sort(key=lambda room: room.created_at, reverse=True)
        return [
            RoomSummary(id=room.id, name=room.name, member_count=room.member_count)
            for room in public
        ]

    def pick_random_public(self) -> Room:
        """
        Uniform random choice over the public rooms at call time.

        Raises:
            NoPublicRoomsError: if there are no public rooms
        """
        public = [room for room in self.rooms.values() if room.is_public]
        if not public:
            raise NoPublicRoomsError("no public rooms")
        return self._rng.choice(public)

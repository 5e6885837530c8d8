# chatrooms/services/discovery.py

from __future__ import annotations

from typing import List, Optional

from chatrooms.models.models import DEFAULT_ROOM_NAME, Room, RoomSummary
from chatrooms.services.room_directory import RoomDirectory


class DiscoveryService:
    """Room creation and read-only room queries for the HTTP API."""

    def __init__(self, directory: RoomDirectory) -> None:
        self.directory = directory

    def create_room(self, name: Optional[str] = None, is_public: Optional[bool] = None) -> Room:
        """Create a room; a missing name becomes "Untitled Room", missing visibility means public."""
        if name is None:
            name = DEFAULT_ROOM_NAME
        return self.directory.create_room(name, True if is_public is None else bool(is_public))

    def list_public_rooms(self) -> List[RoomSummary]:
        return self.directory.list_public()

    def random_public_room(self) -> Room:
        # NoPublicRoomsError propagates to the route
        return self.directory.pick_random_public()

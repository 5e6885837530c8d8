# chatrooms/services/connection_registry.py

from __future__ import annotations

from typing import Dict, List, Optional, Protocol, Set

from chatrooms.core.logging import get_logger
from chatrooms.models.models import Membership

logger = get_logger(__name__)


class Connection(Protocol):
    """A live client session that can accept outbound payloads."""

    connection_id: str

    def deliver(self, payload: dict) -> None:
        ...


# ============================================================================
# CONNECTION REGISTRY
# ============================================================================

class ConnectionRegistry:
    """
    Tracks live connections and which room each one is bound to.

    Data Structures:
        connections: Maps connection_id -> Connection (transport handle)
                     Example: {"c-1": <WebSocketConnection>}

        memberships: Maps connection_id -> Membership(room_id, display_name)
                     Only present once the connection has joined a room.

        rooms: Maps room_id -> Set of connection_ids bound to that room
               Example: {"uuid-123": {"c-1", "c-2"}}

    A connection is bound to at most one room. Registering it again moves
    it, dropping the previous binding.
    """

    def __init__(self) -> None:
        self.connections: Dict[str, Connection] = {}
        self.memberships: Dict[str, Membership] = {}
        self.rooms: Dict[str, Set[str]] = {}

    # ------------------------------------------------------------------
    # transport sessions
    # ------------------------------------------------------------------

    def add(self, connection: Connection) -> None:
        """Start tracking a newly connected transport session."""
        self.connections[connection.connection_id] = connection
        logger.info("✓ Connection %s opened. Total: %d",
                    connection.connection_id, len(self.connections))

    def discard(self, connection_id: str) -> None:
        """Forget a transport session. Any room binding is dropped as well."""
        self._unbind(connection_id)
        if self.connections.pop(connection_id, None) is not None:
            logger.info("✗ Connection %s closed. Total: %d",
                        connection_id, len(self.connections))

    def get(self, connection_id: str) -> Optional[Connection]:
        return self.connections.get(connection_id)

    # ------------------------------------------------------------------
    # room bindings
    # ------------------------------------------------------------------

    def register(self, connection_id: str, room_id: str, display_name: str) -> Optional[Membership]:
        """
        Bind a connection to a room under a display name.

        Args:
            connection_id: The connection being bound
            room_id: Room to bind to
            display_name: Name shown to the other members

        Returns:
            The binding that was replaced, or None if there was none
        """
        previous = self._unbind(connection_id)
        self.memberships[connection_id] = Membership(room_id, display_name)
        self.rooms.setdefault(room_id, set()).add(connection_id)
        return previous

    def unregister(self, connection_id: str) -> Optional[Membership]:
        """
        Remove a connection's room binding.

        Returns:
            The binding as it was, or None if the connection never joined
        """
        return self._unbind(connection_id)

    def membership(self, connection_id: str) -> Optional[Membership]:
        return self.memberships.get(connection_id)

    def count_in_room(self, room_id: str) -> int:
        return len(self.rooms.get(room_id, ()))

    def members_of(self, room_id: str) -> Set[str]:
        """Snapshot of the connection ids bound to ``room_id``."""
        return set(self.rooms.get(room_id, ()))

    @property
    def connection_count(self) -> int:
        return len(self.connections)

    @property
    def active_room_ids(self) -> List[str]:
        """Rooms with at least one bound connection."""
        return list(self.rooms)

    def _unbind(self, connection_id: str) -> Optional[Membership]:
        membership = self.memberships.pop(connection_id, None)
        if membership is None:
            return None

        members = self.rooms.get(membership.room_id)
        if members is not None:
            members.discard(connection_id)
            # Clean up empty rooms from the index
            if not members:
                del self.rooms[membership.room_id]
        return membership

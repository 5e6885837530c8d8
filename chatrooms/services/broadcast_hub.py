# chatrooms/services/broadcast_hub.py

from __future__ import annotations

from chatrooms.core.logging import get_logger
from chatrooms.models.models import ServerEvent
from chatrooms.services.connection_registry import ConnectionRegistry

logger = get_logger(__name__)


class BroadcastHub:
    """
    Fans a server event out to every connection currently in a room.

    Delivery is fire-and-forget: each connection only queues the payload,
    and failures for one receiver are logged and never reach the sender.
    """

    def __init__(self, registry: ConnectionRegistry) -> None:
        self.registry = registry

    def emit(self, room_id: str, event: ServerEvent) -> int:
        """
        Broadcast ``event`` to the members of ``room_id``.

        Membership is evaluated at call time. The event kind travels in the
        payload's ``type`` field.

        Args:
            room_id: Target room
            event: Tagged server event

        Returns:
            Number of connections the payload was handed to
        """
        members = self.registry.members_of(room_id)
        if not members:
            logger.debug("[routing] Skipped %s: room=%s has 0 members", event.type, room_id)
            return 0

        payload = event.to_wire()
        delivered = 0
        for connection_id in members:
            connection = self.registry.get(connection_id)
            if connection is None:
                # Disconnected mid-broadcast
                continue
            try:
                connection.deliver(payload)
                delivered += 1
            except Exception as e:
                logger.warning("Delivery to %s failed: %s", connection_id, e)

        logger.debug("📨 %s to room %s: %d/%d clients",
                     event.type, room_id, delivered, len(members))
        return delivered

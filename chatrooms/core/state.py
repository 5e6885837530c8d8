# chatrooms/core/state.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from chatrooms.core.config import Settings, settings as default_settings
from chatrooms.services.broadcast_hub import BroadcastHub
from chatrooms.services.connection_registry import ConnectionRegistry
from chatrooms.services.discovery import DiscoveryService
from chatrooms.services.room_directory import RoomDirectory
from chatrooms.services.room_lifecycle import RoomLifecycleController


class ChatState:
    """
    Per-application service graph.

    Each FastAPI app built by ``create_app()`` owns one of these (stored on
    ``app.state.chat``), so independent instances never share rooms or
    connections.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        room_directory: Optional[RoomDirectory] = None,
    ) -> None:
        self.settings = settings or default_settings

        self.room_directory = room_directory or RoomDirectory()
        self.connection_registry = ConnectionRegistry()
        self.broadcast_hub = BroadcastHub(self.connection_registry)
        self.lifecycle = RoomLifecycleController(
            self.room_directory, self.connection_registry, self.broadcast_hub
        )
        self.discovery = DiscoveryService(self.room_directory)

        # Metrics
        self.app_start_time: datetime = datetime.now(timezone.utc)

    @property
    def message_counter(self) -> int:
        return self.lifecycle.message_counter

# chatrooms/api/routes/metrics.py
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from chatrooms.api.deps import get_state
from chatrooms.core.state import ChatState

router = APIRouter()

@router.get("/metrics")
async def get_metrics(state: ChatState = Depends(get_state)):
    """
    Usage metrics for this server instance.

    Counts are in-memory and reset when the process restarts.

    Example Response:
        {
            "total_messages": 1200,
            "uptime_hours": 2.5,
            "messages_per_second": 0.13,
            "concurrent_connections": 40,
            "total_rooms": 12,
            "public_rooms": 9,
            "active_rooms_with_members": 5
        }
    """
    uptime_seconds = (datetime.now(timezone.utc) - state.app_start_time).total_seconds()

    if uptime_seconds > 0:
        messages_per_second = state.message_counter / uptime_seconds
    else:
        messages_per_second = 0

    rooms = state.room_directory.list_rooms()

    return {
        # Statistics
        "total_messages": state.message_counter,
        "uptime_hours": round(uptime_seconds / 3600, 2) if uptime_seconds > 0 else 0,
        "messages_per_second": round(messages_per_second, 2),

        # Capacity
        "concurrent_connections": state.connection_registry.connection_count,
        "total_rooms": len(rooms),
        "public_rooms": sum(1 for room in rooms if room.is_public),
        "active_rooms_with_members": len(state.connection_registry.active_room_ids),
    }

# chatrooms/api/routes/health.py

from fastapi import APIRouter, Depends

from chatrooms.api.deps import get_state
from chatrooms.core.state import ChatState

router = APIRouter()

@router.get("/health")
async def health(state: ChatState = Depends(get_state)):
    """
    Health check endpoint.

    Returns current system status, connection counts, and room counts.
    Used by container health probes and monitoring.

    Returns:
        dict: Status, connection count, room count, active room count
    """
    return {
        "status": "healthy",
        "connections": state.connection_registry.connection_count,
        "rooms": len(state.room_directory.rooms),
        "active_rooms_with_members": len(state.connection_registry.active_room_ids),
    }

# chatrooms/api/routes/root.py

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
async def root():
    """
    Root endpoint - API information.

    Returns basic info about the API and its features.
    """
    return {
        "message": "Realtime Chat Rooms",
        "version": "1.0",
        "features": ["public_rooms", "private_rooms", "random_room", "live_member_counts"],
        "endpoints": {
            "websocket": "/ws",
            "rooms": "/api/rooms",
            "public_rooms": "/api/rooms/public",
            "random_room": "/api/rooms/random",
            "health": "/health",
            "metrics": "/metrics",
        },
    }

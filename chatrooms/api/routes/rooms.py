# chatrooms/api/routes/rooms.py

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException

from chatrooms.api.deps import get_state
from chatrooms.core.state import ChatState
from chatrooms.models.models import CreateRoomRequest, Room, RoomSummary
from chatrooms.services.room_directory import NoPublicRoomsError

router = APIRouter(prefix="/api/rooms", tags=["Rooms"])

# ============================================================================
# ROOM DISCOVERY ENDPOINTS
# ============================================================================

@router.post("", response_model=Room)
async def create_room(
    request: Optional[CreateRoomRequest] = None,
    state: ChatState = Depends(get_state),
):
    """
    Create a new chatroom.

    Body is optional; omitted fields default (name "Untitled Room", public).
    An explicit `"isPublic": null` counts as false.

    Args:
        request: CreateRoomRequest with name and isPublic

    Returns:
        Room: The newly created room with memberCount 0
    """
    request = request or CreateRoomRequest()
    is_public = request.is_public
    if is_public is None and "is_public" in request.model_fields_set:
        is_public = False
    return state.discovery.create_room(name=request.name, is_public=is_public)


@router.get("/public", response_model=List[RoomSummary])
async def list_public_rooms(state: ChatState = Depends(get_state)):
    """
    List public rooms, newest first.

    Returns:
        List[RoomSummary]: id, name and current memberCount of each room
    """
    return state.discovery.list_public_rooms()


@router.get("/random", response_model=Room)
async def random_public_room(state: ChatState = Depends(get_state)):
    """
    Pick a random public room to join.

    Raises:
        HTTPException: 404 if there are no public rooms
    """
    try:
        return state.discovery.random_public_room()
    except NoPublicRoomsError:
        raise HTTPException(status_code=404, detail="No public rooms available")


@router.get("/{room_id}", response_model=Room)
async def get_room(room_id: str, state: ChatState = Depends(get_state)):
    """
    Get details of a specific room, public or private.

    Raises:
        HTTPException: 404 if room not found
    """
    room = state.room_directory.get_room(room_id)
    if not room:
        raise HTTPException(status_code=404, detail="Room not found")
    return room

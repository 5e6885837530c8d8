# chatrooms/models/models.py

from __future__ import annotations

import time
from typing import Annotated, Any, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

DEFAULT_ROOM_NAME = "Untitled Room"
UNKNOWN_AUTHOR = "Unknown"


def now_ms() -> int:
    """Wall-clock time in epoch milliseconds."""
    return int(time.time() * 1000)


class WireModel(BaseModel):
    # snake_case in Python, camelCase on the wire
    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


# ============================================================================
# ROOMS
# ============================================================================

class Room(WireModel):
    id: str
    name: str = DEFAULT_ROOM_NAME
    is_public: bool = Field(default=True, alias="isPublic")
    created_at: int = Field(alias="createdAt")
    member_count: int = Field(default=0, ge=0, alias="memberCount")


class RoomSummary(WireModel):
    id: str
    name: str
    member_count: int = Field(default=0, alias="memberCount")


class CreateRoomRequest(WireModel):
    name: Optional[str] = None
    is_public: Optional[bool] = Field(default=None, alias="isPublic")


class Membership(NamedTuple):
    room_id: str
    display_name: str


# ============================================================================
# CLIENT -> SERVER EVENTS
# ============================================================================

class JoinRoomEvent(WireModel):
    # Numeric room ids join like their string form
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    type: Literal["join-room"]
    room_id: Optional[str] = Field(default=None, alias="roomId")
    username: Optional[str] = None


class SendMessageEvent(WireModel):
    type: Literal["chat-message"]
    text: Any = None


ClientEvent = Annotated[
    Union[JoinRoomEvent, SendMessageEvent], Field(discriminator="type")
]

CLIENT_EVENT_TYPES = ("join-room", "chat-message")

client_event_adapter: TypeAdapter = TypeAdapter(ClientEvent)


# ============================================================================
# SERVER -> CLIENT EVENTS
# ============================================================================

class SystemMessageEvent(WireModel):
    type: Literal["system-message"] = "system-message"
    text: str
    member_count: int = Field(alias="memberCount")


class RoomMetaEvent(Room):
    type: Literal["room-meta"] = "room-meta"

    @classmethod
    def from_room(cls, room: Room) -> "RoomMetaEvent":
        return cls.model_validate(room.model_dump())


class ChatMessageEvent(WireModel):
    type: Literal["chat-message"] = "chat-message"
    id: str
    username: str = UNKNOWN_AUTHOR
    text: Any = None
    ts: int


class ErrorEvent(WireModel):
    type: Literal["error"] = "error"
    message: str


ServerEvent = Union[SystemMessageEvent, RoomMetaEvent, ChatMessageEvent, ErrorEvent]

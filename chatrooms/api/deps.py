# chatrooms/api/deps.py

from fastapi import Request

from chatrooms.core.state import ChatState


def get_state(request: Request) -> ChatState:
    """FastAPI dependency returning the app's service graph."""
    return request.app.state.chat

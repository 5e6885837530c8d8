# chatrooms/main.py

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatrooms.api import websocket as websocket_module
from chatrooms.api.routes import health, metrics, root, rooms
from chatrooms.core.config import settings
from chatrooms.core.logging import get_logger, setup_logging
from chatrooms.core.state import ChatState

# Configure logging first
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("🚀 Application starting - listening for room events")
    yield
    chat: ChatState = app.state.chat
    logger.info(
        "👋 Application stopping - %d connections, %d rooms",
        chat.connection_registry.connection_count,
        len(chat.room_directory.rooms),
    )


def create_app(state: Optional[ChatState] = None) -> FastAPI:
    """Build a FastAPI app with its own rooms and connections."""
    app = FastAPI(title=settings.APP_TITLE, lifespan=lifespan)
    app.state.chat = state or ChatState()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials="*" not in settings.CORS_ORIGINS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # REST routes
    app.include_router(root.router)
    app.include_router(health.router)
    app.include_router(metrics.router)
    app.include_router(rooms.router)

    # WebSocket routes
    app.include_router(websocket_module.router)

    return app


app = create_app()


def run() -> None:
    import uvicorn
    uvicorn.run("chatrooms.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()

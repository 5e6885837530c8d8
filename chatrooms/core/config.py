# chatrooms/core/config.py
import os
from typing import List

from dotenv import load_dotenv


class Settings:
    """
    Setup environment variables.
        - APP_TITLE the title reported by the API
        - HOST / PORT the address uvicorn binds to
        - LOG_LEVEL the root logging level
        - CORS_ORIGINS comma separated list of allowed origins ("*" for any)
        - OUTBOX_MAX_SIZE pending outbound events kept per connection before dropping
    """

    # Load environment variables from the .env file
    load_dotenv()

    APP_TITLE: str = os.getenv("APP_TITLE", "Realtime Chat Rooms")

    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    CORS_ORIGINS: List[str] = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]

    OUTBOX_MAX_SIZE: int = int(os.getenv("OUTBOX_MAX_SIZE", "256"))

settings = Settings()

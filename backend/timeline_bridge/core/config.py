import os
from functools import lru_cache
from dotenv import load_dotenv

load_dotenv()  # loads .env if present


class Settings:
    PROJECT_NAME: str = "Timeline Overlay Bridge"
    API_V1_PREFIX: str = "/api/v1"

    BACKEND_CORS_ORIGINS: list[str] = [
        origin.strip()
        for origin in os.getenv("BACKEND_CORS_ORIGINS", "*").split(",")
        if origin.strip()
    ]

    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql+psycopg2://postgres:postgres@db:5432/timeline_bridge",
    )

    # Frame rate used when a request does not send one
    DEFAULT_FPS: int = int(os.getenv("DEFAULT_FPS", "30"))

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


@lru_cache
def get_settings():
    return Settings()

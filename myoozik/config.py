# ============================================================================
# FILE: myoozik/config.py
# ============================================================================
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    """Application configuration using Pydantic BaseSettings"""

    # App settings
    APP_NAME: str = "myoozik"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./myoozik.db"  # Change to PostgreSQL in production

    # Redis cache
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_EXPIRE_SECONDS: int = 3600

    # YouTube Data API v3
    YOUTUBE_API_KEY: str = ""
    YOUTUBE_API_SERVICE_NAME: str = "youtube"
    YOUTUBE_API_VERSION: str = "v3"
    YOUTUBE_MAX_PLAYLIST_ITEMS: int = 200

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]

    # Client (stores, player adapter)
    API_BASE_URL: str = "http://localhost:8000/api/v1"
    HTTP_TIMEOUT_SECONDS: float = 10.0
    PLAYER_POLL_INTERVAL_SECONDS: float = 1.0

    # Interaction rules
    NICKNAME_MAX_LENGTH: int = 30
    DEFAULT_NICKNAME: str = "Anonymous"
    TOP_PLAYLISTS_LIMIT: int = 3

    class Config:
        env_file = ".env"
        case_sensitive = True

settings = Settings()

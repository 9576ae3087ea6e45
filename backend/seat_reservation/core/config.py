"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Seat Reservation API"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Server (python -m seat_reservation)
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # Venue layout (11 rows x 7 seats = 77 seats)
    SEAT_ROWS: int = 11
    SEATS_PER_ROW: int = 7

    # Reservation store
    STORE_BACKEND: str = "memory"  # memory, redis
    LOCK_TIMEOUT_SECONDS: float = 2.0

    # Redis (only used when STORE_BACKEND=redis)
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_KEY_PREFIX: str = "seats"
    REDIS_LOCK_TTL_SECONDS: int = 5

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()

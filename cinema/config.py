"""Application configuration settings."""

from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Cinema Booking API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False

    # Storage: "sql" or "memory"
    STORAGE_BACKEND: str = "sql"

    # Database
    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = "password"
    DB_NAME: str = "cinema"
    DB_ECHO: bool = False

    # Redis
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_PASSWORD: str | None = None
    REDIS_DB: int = 0

    # Seat locking: "redis" or "local"
    SEAT_LOCK_BACKEND: str = "redis"

    # Booking settings
    MAX_SEATS_PER_BOOKING: int = 10
    DEFAULT_SEAT_PRICE: Decimal = Decimal("15.00")
    DEFAULT_HALL: str = "Theater 1"
    BOOKING_ID_RETRIES: int = 1

    # Admin
    ADMIN_API_KEY: str = "change-me"
    RECENT_ACTIVITY_LIMIT: int = 10

    # Distributed Lock settings
    LOCK_TIMEOUT_SECONDS: int = 30
    LOCK_RETRY_DELAY_MS: int = 100
    LOCK_MAX_RETRIES: int = 50

    @property
    def database_url(self) -> str:
        """Get async database URL."""
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"mysql+aiomysql://{self.DB_USER}:{self.DB_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
        )

    @property
    def redis_url(self) -> str:
        """Get Redis URL."""
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

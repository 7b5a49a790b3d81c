from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings.

    Values are read from environment variables (or a local .env file).
    MAX_ADD_BATCH_SIZE and MAX_STOCK are optional limits; leaving them
    unset keeps batches and stock levels unbounded.
    """
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Inventory Catalog Service"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./inventory.db"
    SEED_ON_STARTUP: bool = True

    # Redis cache
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_ENABLED: bool = True
    CACHE_TTL: int = 300  # 5 minutes

    # Business rules
    SYSTEM_ACTOR: str = "System"
    MAX_ADD_BATCH_SIZE: Optional[int] = None
    MAX_STOCK: Optional[int] = None


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()

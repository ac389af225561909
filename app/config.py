from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or a .env file."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    APP_NAME: str = "Product Catalog API"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///./products.db"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # HTTP surface
    API_PREFIX: str = "/api"
    CORS_ORIGINS: list[str] = ["*"]

    # Client and dev proxy
    API_BASE_URL: str = "http://localhost:8000"
    API_PROXY_TARGET: str = "http://localhost:8000"


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()

"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Usage Pulse API"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # development, staging, production

    # Portal REST backend
    BACKEND_API_URL: str = "http://localhost:8000/api"
    BACKEND_TIMEOUT: float = 30.0

    # Tokens issued by the portal auth service (HS256 shared secret)
    SECRET_KEY: str = "change-me-in-production"
    ALGORITHM: str = "HS256"
    COOKIE_NAME: str = "token"

    # Activity snapshot sizes
    SELF_ACTIVITY_LIMIT: int = 1000
    COMPANY_ACTIVITY_LIMIT: int = 2000

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()

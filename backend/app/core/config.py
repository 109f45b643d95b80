"""
Application configuration settings.
"""
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_ENV: str = "development"
    DEBUG: bool = True
    APP_NAME: str = "NonprofitSuite API"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "postgresql+asyncpg://nonprofitsuite:nonprofitsuite@db:5432/nonprofitsuite"
    DB_ECHO: bool = False

    # JWT Authentication
    SECRET_KEY: str = "your-super-secret-key-change-in-production"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days

    # Document share grants handed to anonymous visitors after the access form
    SHARE_GRANT_EXPIRE_MINUTES: int = 30

    # CORS
    CORS_ORIGINS: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Agenda/minutes exports
    EXPORT_DIR: str = "/app/exports"
    EXPORT_URL: str = "/exports"

    # Site URL
    SITE_URL: str = "http://localhost:8000"

    # Listing
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100

    # AJAX rate limits: action class -> (requests, window seconds)
    RATE_LIMITS: dict[str, tuple[int, int]] = {
        "ajax_general": (60, 60),
        "ajax_write": (30, 60),
        "ajax_export": (10, 60),
        "ajax_autosave": (120, 60),
    }

    class Config:
        env_file = ".env"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()

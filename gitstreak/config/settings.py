"""Application settings and configuration"""

from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Application
    APP_NAME: str = "GitStreak"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # GitHub account (token only needs `read:user` scope)
    GITHUB_USERNAME: Optional[str] = None
    GITHUB_TOKEN: Optional[str] = None

    # GitHub API
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_GRAPHQL_PATH: str = "/graphql"

    # GitHub client resilience controls
    GITHUB_TIMEOUT_SECONDS: float = 30.0
    GITHUB_MAX_RETRIES: int = 3
    GITHUB_BACKOFF_BASE_SECONDS: float = 1.0
    GITHUB_BACKOFF_MAX_SECONDS: float = 16.0
    GITHUB_RATE_LIMIT_BUFFER_SECONDS: int = 2
    USER_AGENT: str = "GitStreak/1.0"

    # Refresh cadence handed to the external scheduler
    STREAK_REFRESH_INTERVAL_SECONDS: int = 3600

    # Display format (built-in tag or "custom")
    STREAK_DISPLAY_FORMAT: str = "emoji"
    STREAK_CUSTOM_FORMAT: str = ""

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignore extra fields in .env


settings = Settings()

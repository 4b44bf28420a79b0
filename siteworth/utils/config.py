"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Google PageSpeed Insights (Optional - raises the anonymous quota)
    PAGESPEED_API_KEY: Optional[str] = None
    PAGESPEED_STRATEGY: str = "desktop"

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # HTTP
    HTTP_TIMEOUT: float = 15.0
    MAX_RETRIES: int = 3
    USER_AGENT: str = "SiteWorth/2.1 (+https://siteworth.app; website valuation)"

    # Timeouts
    SOCIAL_SCRAPE_TIMEOUT: float = 10.0

    # Limits
    RECOMMENDATION_LIMIT: int = 10

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()

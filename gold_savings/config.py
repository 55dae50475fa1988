"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
import secrets
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "Gold Savings Scheme"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/gold_savings"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")

    # Logging
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Price feed: "database" reads the prices table,
    # "http" reads PRICE_FEED_URL
    PRICE_SOURCE: str = os.getenv("PRICE_SOURCE", "database").lower()
    PRICE_FEED_URL: str = os.getenv("PRICE_FEED_URL", "")
    PRICE_FEED_TIMEOUT: float = float(os.getenv("PRICE_FEED_TIMEOUT", "10"))

    # Quotes older than this are rejected at commit. 0 disables the check.
    QUOTE_MAX_AGE_SECONDS: int = int(os.getenv("QUOTE_MAX_AGE_SECONDS", "0"))

    # Signs quotes so commit only accepts prices this server quoted.
    # Set it when several workers share one database.
    QUOTE_SECRET: str = os.getenv("QUOTE_SECRET") or secrets.token_hex(32)

    # Local session cache
    SESSION_CACHE_PATH: str = os.getenv(
        "SESSION_CACHE_PATH", ".gold_savings_session.json"
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Using lru_cache means the Settings object is created once
    and reused for all subsequent calls. This avoids reading
    environment variables repeatedly.
    """
    return Settings()

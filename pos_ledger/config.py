"""
Application configuration.

All configuration is loaded from environment variables.
Never hardcode secrets or connection strings in code.
"""

import os
from functools import lru_cache

from dotenv import load_dotenv

# Load .env file into environment variables
load_dotenv()


class Settings:
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "POS Ledger"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "8000"))

    # Database
    DATABASE_URL: str = os.getenv(
        "DATABASE_URL",
        "postgresql://localhost:5432/pos_ledger"
    )
    INIT_SCHEMA_ON_STARTUP: bool = (
        os.getenv("INIT_SCHEMA_ON_STARTUP", "true").lower() == "true"
    )

    # Environment
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Accounting
    DEFAULT_CURRENCY: str = os.getenv("DEFAULT_CURRENCY", "INR")
    RECEIVABLE_DUE_DAYS: int = int(os.getenv("RECEIVABLE_DUE_DAYS", "30"))

    # Dashboard
    OVERDUE_AFTER_DAYS: int = int(os.getenv("OVERDUE_AFTER_DAYS", "30"))
    LOW_STOCK_THRESHOLD: int = int(os.getenv("LOW_STOCK_THRESHOLD", "5"))
    RECENT_TRANSACTIONS_LIMIT: int = int(
        os.getenv("RECENT_TRANSACTIONS_LIMIT", "10")
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Return cached settings instance.

    Settings are read from the environment once and reused
    for every subsequent call.
    """
    return Settings()

"""Application configuration loaded from environment variables"""
import os
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

# load_dotenv searches the current dir and its parents for a .env file
load_dotenv()


class Settings:
    """Settings read once at process start."""

    APP_NAME: str = "Ledger Entries API"
    APP_VERSION: str = "0.1.0"

    # Server
    HOST: str = os.getenv("HOST", "0.0.0.0")
    PORT: int = int(os.getenv("PORT", "3000"))

    # Database
    MONGODB_URI: str = os.getenv("MONGODB_URI", "mongodb://localhost:27017")
    DB_NAME: str = os.getenv("DB_NAME", "ledger_db")
    ENTRIES_COLLECTION: str = os.getenv("ENTRIES_COLLECTION", "entries")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
    CORS_ORIGINS: List[str] = [
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()
    ]


@lru_cache()
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()

"""
Configuration module for Pastebin Lite.
Loads environment variables and provides config objects.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379")
        self.USE_IN_MEMORY: bool = _env_flag("USE_IN_MEMORY", "False")
        self.PASTE_KEY_PREFIX: str = os.getenv("PASTE_KEY_PREFIX", "paste:")
        self.DEBUG: bool = _env_flag("DEBUG", "True")
        self.APP_DOMAIN: str = os.getenv("APP_DOMAIN", "http://localhost:8000")
        self.TEST_MODE: bool = _env_flag("TEST_MODE", "0")
        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()


def get_settings() -> Settings:
    """FastAPI dependency returning the process-wide settings."""
    return settings

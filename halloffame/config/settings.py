"""
halloffame/config/settings.py
Environment-driven configuration

All settings are loaded from environment variables (a local .env file is
read first). Call get_settings() for the process-wide instance or
Settings.from_env() for a fresh one.
"""
import os
import logging
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "dev-secret-key-change-in-production"
DEV_SETUP_KEY = "change-this-secret-key"

DEFAULT_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
]


def get_bool_env(key: str, default: bool = False) -> bool:
    """Get a boolean value from environment variable."""
    value = os.getenv(key, str(default)).lower()
    return value in ('true', '1', 'yes', 'on', 'enabled')


def get_int_env(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Ignoring non-integer value for {key}: {value!r}")
        return default


class Settings:
    """
    Application settings.

    To add a new setting:
    1. Read it from the environment in __init__
    2. Document it in .env.example
    """

    def __init__(self):
        self.ENVIRONMENT: str = os.getenv("ENVIRONMENT", "development")
        self.DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./nominations.db")
        self.SQL_ECHO: bool = get_bool_env("SQL_ECHO", False)

        self.JWT_SECRET_KEY: str = os.getenv("JWT_SECRET_KEY", DEV_JWT_SECRET)
        self.JWT_ALGORITHM: str = "HS256"
        self.ACCESS_TOKEN_EXPIRE_HOURS: int = get_int_env("ACCESS_TOKEN_EXPIRE_HOURS", 24)
        self.BCRYPT_ROUNDS: int = get_int_env("BCRYPT_ROUNDS", 10)

        self.SETUP_KEY: str = os.getenv("SETUP_KEY", DEV_SETUP_KEY)

        self.RATE_LIMIT_ENABLED: bool = get_bool_env("RATE_LIMIT_ENABLED", True)
        self.LOGIN_RATE_LIMIT: str = os.getenv("LOGIN_RATE_LIMIT", "30/minute")

        self.LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.ALLOWED_ORIGINS: List[str] = [
            origin.strip()
            for origin in os.getenv("ALLOWED_ORIGINS", "").split(",")
            if origin.strip()
        ]

    @classmethod
    def from_env(cls) -> "Settings":
        return cls()

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT == "development"

    @property
    def cors_origins(self) -> List[str]:
        return DEFAULT_ORIGINS + self.ALLOWED_ORIGINS

    def warn_insecure_defaults(self) -> None:
        """Log a warning for each secret still set to its development value."""
        if self.is_development:
            return
        if self.JWT_SECRET_KEY == DEV_JWT_SECRET:
            logger.warning("JWT_SECRET_KEY is using the development default")
        if self.SETUP_KEY == DEV_SETUP_KEY:
            logger.warning("SETUP_KEY is using the development default")


@lru_cache
def get_settings() -> Settings:
    return Settings.from_env()

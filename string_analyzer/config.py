import os
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables only for local development
if os.path.exists(".env"):
    load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def normalize_database_url(url: str) -> str:
    """Railway-style mysql:// URLs need the pymysql driver spelled out for SQLAlchemy."""
    if url.startswith("mysql://"):
        return url.replace("mysql://", "mysql+pymysql://", 1)
    return url


@dataclass
class Settings:
    """Service configuration, read from the environment."""

    database_url: str = field(
        default_factory=lambda: normalize_database_url(os.getenv("DATABASE_URL", "sqlite:///./strings.db"))
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO").upper())
    cors_origins: List[str] = field(default_factory=lambda: _env_list("CORS_ORIGINS", "*"))

    # Rate limiting (fixed window per client)
    rate_limit_enabled: bool = field(default_factory=lambda: _env_bool("RATE_LIMIT_ENABLED", True))
    rate_limit_requests: int = field(default_factory=lambda: int(os.getenv("RATE_LIMIT_REQUESTS", "100")))
    rate_limit_window_seconds: int = field(
        default_factory=lambda: int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900"))
    )

    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))

    def __post_init__(self):
        self.database_url = normalize_database_url(self.database_url)
        self.log_level = self.log_level.upper()
        if self.rate_limit_requests < 1:
            raise ValueError("RATE_LIMIT_REQUESTS must be at least 1")
        if self.rate_limit_window_seconds < 1:
            raise ValueError("RATE_LIMIT_WINDOW_SECONDS must be at least 1")


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    logger.info(f"Settings loaded - database: {settings.database_url.split('://')[0]}")
    return settings

"""Engine configuration via environment variables."""

import logging
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # App
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "info"
    TIMEZONE: str = "UTC"

    # Grouping
    OVERLAP_LOOKAHEAD_DAYS: int = 30
    LOW_OVERLAP_THRESHOLD: float = 0.5

    # Analytics
    ANALYTICS_CACHE_TTL_SECONDS: float = 30.0
    DEFAULT_PARENTAL_LEAVE_DAYS: int = 90
    WORKING_DAYS_TAG_HORIZON: int = 10


settings = Settings()


def configure_logging(level: Optional[str] = None) -> None:
    """Install the root handler used by the calling layer and scripts."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

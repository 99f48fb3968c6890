"""Configuration loading for Reindexer."""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

NOTIFICATION_TYPES = ("URL_UPDATED", "URL_DELETED")

# Published Indexing API quota for this deployment
DAILY_QUOTA = 200
PER_MINUTE_QUOTA = 600


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="REINDEXER_")

    # File locations
    credential_path: Path = Field(
        default=Path("service-account.json"),
        description="Service account JSON key file",
    )
    input_path: Path = Field(
        default=Path("sitemap-urls.txt"),
        description="Line-delimited file of URLs to submit",
    )
    failure_output_path: Path = Field(
        default=Path("failed-urls.txt"),
        description="Where URLs that failed in the last run are written",
    )
    deferred_output_path: Path = Field(
        default=Path("deferred-urls.txt"),
        description="Where URLs skipped by the request quota are written",
    )

    # Submission settings
    pacing_interval_ms: int = Field(
        default=500, ge=0, description="Delay between consecutive requests"
    )
    max_requests_per_window: int = Field(
        default=DAILY_QUOTA, ge=1, description="Requests allowed in one run"
    )
    notification_type: str = Field(
        default="URL_UPDATED", description="URL_UPDATED or URL_DELETED"
    )

    # Application settings
    log_level: str = Field(default="WARNING", description="Logging level")

    @field_validator("notification_type")
    @classmethod
    def validate_notification_type(cls, v: str) -> str:
        """Normalize and validate the notification type."""
        v = v.strip().upper()
        if v not in NOTIFICATION_TYPES:
            raise ValueError(
                f"REINDEXER_NOTIFICATION_TYPE '{v}' is not valid. "
                f"Use one of: {', '.join(NOTIFICATION_TYPES)}."
            )
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level is a known logging level name."""
        v = v.strip().upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"REINDEXER_LOG_LEVEL '{v}' is not a valid logging level.")
        return v

    @property
    def pacing_interval(self) -> float:
        """Pacing interval in seconds."""
        return self.pacing_interval_ms / 1000


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()

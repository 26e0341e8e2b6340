"""cloudfetch centralized configuration management.

Uses pydantic-settings to load configuration from environment variables
and .env files with validation.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .constants import DEFAULT_REGION, MAX_WORKERS_LIMIT


class Settings(BaseSettings):
    """cloudfetch settings.

    All settings can be overridden via environment variables
    prefixed with CLOUDFETCH_.

    Example:
        CLOUDFETCH_REGION=eu-west-1
        CLOUDFETCH_MAX_WORKERS=32
    """

    # AWS session
    profile: Optional[str] = Field(default=None, description="AWS profile name")
    region: Optional[str] = Field(default=None, description="Active region (falls back to the session region)")

    # Buckets reporting no location constraint are treated as living here
    default_region: str = Field(
        default=DEFAULT_REGION,
        description="Region assumed for resources with an unspecified location",
    )

    # Concurrency
    max_workers: Optional[int] = Field(
        default=None,
        description="Concurrency cap per fan-out (unset runs one worker per item)",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    class Config:
        env_prefix = "CLOUDFETCH_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @field_validator("max_workers")
    @classmethod
    def _check_max_workers(cls, value: Optional[int]) -> Optional[int]:
        if value is None:
            return value
        if value < 1:
            raise ValueError(f"max_workers must be >= 1, got {value}")
        return min(value, MAX_WORKERS_LIMIT)

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, value: str) -> str:
        return value.upper()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings instance loaded from environment
    """
    return Settings()

"""Application settings with environment variable support.

Uses pydantic-settings for typed configuration validation.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class AppSettings(BaseSettings):
    """Core configuration loaded from environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    json_logs: bool = Field(default=False, description="Render logs as JSON")

    # Tax defaults
    fiscal_year: int = Field(default=2025, ge=2000, le=2100, description="Fiscal year of the bracket table")

    # Amortization engine
    replay_cache_enabled: bool = Field(default=True, description="Memoize loan replays within a call")

    # Export
    export_dir: str = Field(default="results", description="Directory for JSON exports")

    model_config = {
        "env_prefix": "IMMOFISCAL_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> AppSettings:
    """Get cached application settings."""
    return AppSettings()

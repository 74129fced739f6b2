"""Configuration management for benchboard.

This module provides configuration classes using pydantic-settings
for environment variable management and validation.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SCHEMA: list[str] = ["name", "platform", "os", "keySize", "api", "category"]
DEFAULT_GROUP_BY: list[str] = ["os"]
DEFAULT_PLOTLY_URL = "https://cdn.plot.ly/plotly-3.0.0.min.js"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings can be configured via environment variables with
    the BENCHBOARD_ prefix.

    Attributes:
        default_schema: Schema used when a suite declares none.
        default_group_by: GroupBy used when a suite declares none.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        max_items: Maximum runs kept per suite (None = unlimited).
        change_threshold: Percent change below which a comparison is neutral.
        plotly_cdn_url: Script URL of the plotting library in dashboards.
        request_timeout_seconds: Timeout for fetching remote history.

    Example:
        >>> # export BENCHBOARD_MAX_ITEMS=200
        >>> settings = Settings()
        >>> settings.max_items
        200

    Environment Variables:
        BENCHBOARD_DEFAULT_SCHEMA: JSON list (default: name,platform,os,keySize,api,category)
        BENCHBOARD_DEFAULT_GROUP_BY: JSON list (default: ["os"])
        BENCHBOARD_LOG_LEVEL: Logging level (default: WARNING)
        BENCHBOARD_MAX_ITEMS: Runs kept per suite (optional)
        BENCHBOARD_CHANGE_THRESHOLD: Neutral band in percent (default: 2.0)
        BENCHBOARD_PLOTLY_CDN_URL: Plotly script URL
        BENCHBOARD_REQUEST_TIMEOUT_SECONDS: HTTP timeout (default: 30.0)
    """

    model_config = SettingsConfigDict(
        env_prefix="BENCHBOARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    default_schema: list[str] = Field(
        default_factory=lambda: list(DEFAULT_SCHEMA),
        description="Schema used when a suite declares none",
    )
    default_group_by: list[str] = Field(
        default_factory=lambda: list(DEFAULT_GROUP_BY),
        description="GroupBy used when a suite declares none",
    )

    log_level: LogLevel = Field(
        default="WARNING",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    max_items: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of runs kept per suite",
    )
    change_threshold: float = Field(
        default=2.0,
        ge=0,
        description="Percent change treated as noise in comparison reports",
    )
    plotly_cdn_url: str = Field(
        default=DEFAULT_PLOTLY_URL,
        description="Script URL of the plotting library",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout for fetching remote history documents",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value


def get_settings() -> Settings:
    """Load settings from the environment."""
    return Settings()

"""Configuration models for Birdwatch.

This module contains all configuration-related Pydantic models used throughout the application.
"""

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Structlog-based logging configuration."""

    level: str = "INFO"
    json_logs: bool | None = None  # None = auto-detect based on environment
    include_caller: bool = False  # Include file:line info (useful for debugging)
    extra_fields: dict[str, str] = Field(default_factory=lambda: {"service": "birdwatch"})


class BirdwatchConfig(BaseModel):
    """Configuration settings for the Birdwatch application."""

    site_name: str = "Birdwatch"

    # Paging defaults applied when a caller does not ask for a window
    default_page_size: int = 5

    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("default_page_size")
    @classmethod
    def validate_default_page_size(cls, v: int) -> int:
        """Reject page sizes the paginator would refuse anyway."""
        if v <= 0:
            raise ValueError(f"default_page_size must be positive, got {v}")
        return v

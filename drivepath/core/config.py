"""Application configuration using pydantic-settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="DRIVEPATH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Logging
    debug: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Provider identity stamped on every FileRecord
    provider_name: str = Field(
        default="google_drive",
        description="Provider identifier reported in normalized file records",
    )

    # Virtual namespace
    shared_prefix: str = Field(
        default="Shared",
        description="Top-level path segment that maps to items shared with the caller",
    )

    # Listing
    page_size: int = Field(
        default=100,
        ge=1,
        le=1000,
        description="Items requested per page when listing a folder (1-1000)",
    )
    max_pages: int = Field(
        default=1000,
        ge=1,
        description="Hard cap on pages fetched for a single listing",
    )

    # Resolution
    ambiguity_policy: Literal["first", "error"] = Field(
        default="first",
        description=(
            "What to do when several items share a name under one parent: "
            "'first' takes the first result, 'error' raises AmbiguousPathError"
        ),
    )


# Global settings instance
settings = Settings()

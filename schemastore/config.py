"""
Configuration for schemastore.

Uses pydantic-settings for environment variable loading. Every setting
has a default suitable for embedding the store in a migration tool.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """schemastore configuration loaded from environment."""

    # Logging
    log_level: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    log_format: Literal["text", "json"] = Field(default="text", description="Log line format")

    # Store behavior
    validate_inserts: bool = Field(
        default=False,
        description="Validate every inserted record against its kind's field config",
    )

    # Diff behavior
    default_diff_mode: Literal["all", "create", "drop", "alter", "createdrop"] = Field(
        default="all",
        description="Phases run by diff() when no mode is passed",
    )

    model_config = {"env_prefix": "SCHEMASTORE_"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read from the environment once."""
    return Settings()

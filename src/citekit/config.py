"""Configuration management for citekit."""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables (prefix ``CITEKIT_``)."""

    model_config = SettingsConfigDict(
        env_prefix="CITEKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Styles
    default_style: str = "nature"
    fallback_style: str = "vancouver"  # Used when a requested style id is unknown

    # Rendering defaults
    output_format: str = "markdown"  # "markdown", "html", "latex" or "plain"
    citation_order: Optional[str] = None  # "appearance" / "alphabetical"; None derives from style
    in_text_max_authors: int = 3

    # Style import over HTTP
    style_import_timeout: float = 15.0

    # Logging
    log_level: str = "WARNING"
    log_format: str = "standard"  # "standard" or "json"
    log_file: Optional[str] = None


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

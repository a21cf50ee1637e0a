"""
Configuration management for PaddleRank.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults for development. Secrets (cron secret, provider
credentials, affiliate IDs) should be set via environment variables or
a .env file.

Usage:
    from paddlerank.config import settings
    print(settings.database_url)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Environment variables can be set directly or via a .env file
    in the project root directory.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # ==========================================================================
    # Database Configuration
    # ==========================================================================

    database_url: str = Field(
        default="sqlite:///./paddlerank.db",
        description="SQLAlchemy connection URL for the primary database",
    )
    db_pool_size: int = Field(
        default=5,
        description="Number of connections to keep in the pool (ignored for SQLite)",
    )
    db_max_overflow: int = Field(
        default=10,
        description="Max additional connections beyond pool_size (ignored for SQLite)",
    )

    # ==========================================================================
    # Sync Configuration
    # ==========================================================================

    cron_secret: Optional[str] = Field(
        default=None,
        description="Shared secret expected as a bearer token on sync endpoints",
    )
    apt_api_key: Optional[str] = Field(
        default=None,
        description="AllPickleballTournaments API key",
    )
    ppa_api_token: Optional[str] = Field(
        default=None,
        description="PPA Tour API token",
    )
    adapter_max_retries: int = Field(
        default=3,
        description="Maximum attempts for a single adapter HTTP call",
    )
    adapter_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout for adapter HTTP calls",
    )

    # ==========================================================================
    # Player Matching Configuration
    # ==========================================================================

    player_match_threshold: float = Field(
        default=0.9,
        description="Minimum name similarity to accept a fuzzy player match",
    )

    # ==========================================================================
    # Affiliate Configuration
    # ==========================================================================

    selkirk_affiliate_id: Optional[str] = Field(default=None)
    justpaddles_affiliate_id: Optional[str] = Field(default=None)
    pickleballsuperstore_id: Optional[str] = Field(default=None)
    amazon_associate_tag: Optional[str] = Field(default=None)

    # ==========================================================================
    # Leaderboard Configuration
    # ==========================================================================

    leaderboard_cache_ttl_seconds: int = Field(
        default=3600,
        description="How long a computed leaderboard stays valid",
    )
    leaderboard_default_limit: int = Field(default=10)
    leaderboard_max_limit: int = Field(default=100)

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()

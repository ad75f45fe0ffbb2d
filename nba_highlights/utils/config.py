"""Configuration management using environment variables."""

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=False, extra="ignore")

    # Cache Configuration
    cache_dir: str = Field(default="cache", description="Directory for cached pages and game logs")
    cache_enabled: bool = Field(default=True, description="Enable page caching")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="console", description="Log format (json or console)")
    log_dir: str = Field(default="logs", description="Directory for log files")

    # Play-by-play source
    games_dir: str = Field(default="games", description="Directory of JSON game logs")
    stats_base_url: str = Field(
        default="https://stats.nba.com", description="Base URL for box-score and play-by-play pages"
    )
    request_rate_limit: int = Field(default=8, description="Page requests per minute")
    request_timeout: float = Field(default=30.0, description="Page request timeout in seconds")
    request_retry_attempts: int = Field(default=3, description="Attempts per page request")
    request_retry_delay: float = Field(default=5.0, description="Initial retry delay in seconds")

    # Video
    ffmpeg_path: str = Field(default="ffmpeg", description="ffmpeg executable used to join clips")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid option."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format is a valid option."""
        if v not in {"json", "console"}:
            raise ValueError("log_format must be 'json' or 'console'")
        return v

    @field_validator("request_rate_limit")
    @classmethod
    def validate_rate_limit(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("request_rate_limit must be positive")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings.
    """
    return Settings()


def ensure_directories() -> None:
    """Create the cache and log directories if they don't exist."""
    settings = get_settings()

    for path_key in ["cache_dir", "log_dir"]:
        path = getattr(settings, path_key)
        Path(path).mkdir(parents=True, exist_ok=True)

"""Client settings loaded from environment variables and .env file."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .version import __version__

DEFAULT_BASE_URL = "https://api.clickup.com/api/v2/"


class Settings(BaseSettings):
    """Settings for the ClickUp API client."""

    model_config = SettingsConfigDict(
        env_prefix="CLICKUP_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    base_url: str = DEFAULT_BASE_URL
    personal_access_token: str | None = None
    oauth_access_token: str | None = None

    # Backoff retry: delay before retry k is retry_base_delay * 2**k (2s, 4s, 8s)
    retry_count: int = Field(default=3, ge=0)
    retry_base_delay: float = Field(default=1.0, ge=0)

    # Used when a 429 carries a Retry-After header we can't parse
    rate_limit_fallback_delay: float = Field(default=5.0, ge=0)

    circuit_breaker_failure_threshold: int = Field(default=5, gt=0)
    circuit_breaker_break_duration: float = Field(default=30.0, ge=0)

    request_timeout: float = Field(default=30.0, gt=0)
    user_agent: str = f"clickup-api-client-python/{__version__}"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

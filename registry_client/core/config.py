"""Client configuration (settings and environment).

Uses pydantic-settings with .env support. Variables are prefixed with
SCHEMA_REGISTRY_ (e.g. SCHEMA_REGISTRY_BASE_URLS='["http://sr:8081"]',
SCHEMA_REGISTRY_CACHE_CAPACITY=1024).
"""

from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from registry_client.core.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_CACHE_CAPACITY,
    DEFAULT_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    """Schema registry client settings loaded from environment and .env.

    Transport options (base URLs, timeout, auth) are handed to the
    RestService; cache options size every resolution domain.
    """

    # Transport
    base_urls: list[str] = Field(default_factory=lambda: [DEFAULT_BASE_URL])
    request_timeout_seconds: float = Field(default=DEFAULT_TIMEOUT_SECONDS, gt=0)
    forward: bool = False
    basic_auth: SecretStr | None = None  # base64 "user:password"
    bearer_token: SecretStr | None = None

    # Cache: capacity is per domain; max age disabled when unset
    cache_capacity: int = Field(default=DEFAULT_CACHE_CAPACITY, ge=1)
    cache_max_age_seconds: float | None = Field(default=None, gt=0)

    debug: bool = False

    model_config = SettingsConfigDict(
        env_prefix="SCHEMA_REGISTRY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_base_urls(self) -> "Settings":
        """Require at least one non-empty base URL."""
        if not self.base_urls or not all(url.strip() for url in self.base_urls):
            raise ValueError(
                "SCHEMA_REGISTRY_BASE_URLS must list at least one registry URL, "
                'e.g. \'["http://localhost:8081"]\'.'
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance. Call get_settings.cache_clear() after env changes."""
    return Settings()

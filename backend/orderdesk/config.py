"""Configuration management using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from orderdesk.services.address_lookup import DEFAULT_BASE_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App Config
    environment: str = "development"
    debug: bool = True
    log_json: bool = False
    frontend_url: str = "http://localhost:3000"

    # External API resilience (seconds / attempts)
    external_api_open_timeout: int = Field(default=5, ge=1)
    external_api_read_timeout: int = Field(default=10, ge=1)
    external_api_max_retries: int = Field(default=3, ge=1)

    # ViaCEP address lookup
    cep_api_url: str = DEFAULT_BASE_URL

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()

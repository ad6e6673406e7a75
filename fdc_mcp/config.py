"""Configuration for the FoodData Central MCP server."""

from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError

DEFAULT_FDC_BASE_URL = "https://api.nal.usda.gov/fdc/v1"
LOG_LEVELS = ("debug", "info", "warning", "error", "critical")


class Settings(BaseSettings):
    """Server settings loaded from environment variables.

    Reads ``USDA_API_KEY``, ``FDC_BASE_URL`` and ``LOG_LEVEL``; a local
    ``.env`` file is honoured as well.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # USDA FoodData Central
    usda_api_key: str
    fdc_base_url: str = Field(default=DEFAULT_FDC_BASE_URL)

    # Logging (goes to stderr; stdout carries the protocol)
    log_level: str = "info"

    @field_validator("usda_api_key")
    @classmethod
    def _require_api_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("USDA_API_KEY must not be empty")
        return value

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        value = value.strip().lower()
        if value not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of: {', '.join(LOG_LEVELS)}")
        return value

    @field_validator("fdc_base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def load_settings() -> Settings:
    """Load settings, failing fast when the API key is missing."""
    try:
        return get_settings()
    except ValidationError as exc:
        missing = [
            str(err["loc"][0]).upper() for err in exc.errors() if err["type"] == "missing"
        ]
        if missing:
            raise ConfigurationError(
                f"{', '.join(missing)} environment variable is not set"
            ) from exc
        raise ConfigurationError(f"Invalid configuration: {exc}") from exc

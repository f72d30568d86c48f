from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator


class Settings(BaseSettings):
    # Routing API
    API_BASE_URL: str = "https://api.mapbox.com"
    ACCESS_TOKEN: Optional[str] = None

    # Request defaults
    DEFAULT_PROFILE_IDENTIFIER: str = "mapbox/driving"
    COORDINATE_PRECISION: int = 6

    # Logging
    LOG_LEVEL: str = "INFO"

    # Environment name
    ENVIRONMENT: str = "development"

    model_config = SettingsConfigDict(
        case_sensitive=True,  # Variables are case-sensitive
        env_file=".env",  # Load environment variables from .env file
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("LOG_LEVEL")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        return v.upper()


@lru_cache()  # Cache the settings object for performance
def get_settings() -> Settings:
    return Settings()

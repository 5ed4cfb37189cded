"""Application configuration and settings management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from lesson_content.payload_decoder import DEFAULT_IMAGE_SEARCH_URL


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="LESSON_CONTENT_", extra="ignore")

    app_name: str = Field(default="Lesson Content API", description="Human readable application name.")
    environment: Literal["local", "development", "staging", "production"] = Field(
        default="local",
        description="Deployment environment name.",
    )
    log_level: str = Field(default="INFO", description="Root logging level for the service.")
    image_search_url: str = Field(
        default=DEFAULT_IMAGE_SEARCH_URL,
        description="Image search endpoint used to build links for figure search suggestions.",
    )
    max_content_length: int = Field(
        default=200_000,
        gt=0,
        description="Largest lesson text, in characters, accepted by the parse endpoints.",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        description="Origins allowed to call the API from a browser.",
    )


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings."""

    return Settings()


settings = get_settings()

"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CUSTOM_SEARCH_URL = "https://www.googleapis.com/customsearch/v1"


class GoogleSearchSettings(BaseModel):
    api_key: SecretStr | None = None
    engine_id: SecretStr | None = Field(
        default=None,
        description="Programmable Search Engine identifier (the `cx` parameter).",
    )
    base_url: AnyHttpUrl = Field(default=DEFAULT_CUSTOM_SEARCH_URL)
    request_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        le=120,
        description="Leave unset to use the HTTP client's default timeout.",
    )

    @field_validator("api_key", "engine_id", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class GFinderSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GFINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__"
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    telegram_token: SecretStr
    telegram_proxy: str | None = None
    admin_telegram_id: int | None = None
    default_language: str = "en"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    max_chat_forms: int = Field(default=10_000, ge=1, description="Chats whose form state is kept in memory")

    google: GoogleSearchSettings = Field(default_factory=GoogleSearchSettings)


@lru_cache
def get_settings() -> GFinderSettings:
    """Return cached settings instance."""

    return GFinderSettings()  # type: ignore[call-arg]


__all__ = [
    "DEFAULT_CUSTOM_SEARCH_URL",
    "GFinderSettings",
    "GoogleSearchSettings",
    "get_settings",
]

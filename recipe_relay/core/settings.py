from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(
        default="Recipe Relay API",
        validation_alias=AliasChoices("APP_NAME", "app_name"),
        description="Title shown in the OpenAPI docs.",
    )

    # HTTP server
    host: str = Field(
        default="0.0.0.0",
        validation_alias=AliasChoices("HOST", "host"),
        description="Interface the server binds to.",
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        validation_alias=AliasChoices("PORT", "port"),
        description="Port the server listens on.",
    )
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"],
        validation_alias=AliasChoices("CORS_ALLOW_ORIGINS", "cors_allow_origins"),
        description="Origins allowed by the CORS middleware.",
    )
    static_dir: str = Field(
        default="public",
        validation_alias=AliasChoices("STATIC_DIR", "static_dir"),
        description="Directory with the browser client. Served at / when it exists.",
    )

    # LLM integration (OpenAI)
    # The API key must never be logged.
    openai_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices("OPENAI_API_KEY", "openai_api_key"),
        description="OpenAI API key (required for /recipe).",
    )
    openai_model: str = Field(
        default="gpt-3.5-turbo",
        validation_alias=AliasChoices("OPENAI_MODEL", "openai_model"),
        description="OpenAI model identifier used for recipe generation.",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        validation_alias=AliasChoices("OPENAI_BASE_URL", "openai_base_url"),
        description="Base URL for OpenAI API (override for proxies/emulators).",
    )
    openai_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias=AliasChoices("OPENAI_TIMEOUT_SECONDS", "openai_timeout_seconds"),
        description="Overall deadline for one OpenAI API request (seconds).",
    )

    # Per-client rate limiting on /recipe
    rate_limit_enabled: bool = Field(
        default=True,
        validation_alias=AliasChoices("RATE_LIMIT_ENABLED", "rate_limit_enabled"),
        description="If false, /recipe is not rate limited.",
    )
    rate_limit_max_requests: int = Field(
        default=20,
        ge=1,
        validation_alias=AliasChoices("RATE_LIMIT_MAX_REQUESTS", "rate_limit_max_requests"),
        description="Maximum /recipe requests per client within one window.",
    )
    rate_limit_window_minutes: int = Field(
        default=15,
        ge=1,
        validation_alias=AliasChoices("RATE_LIMIT_WINDOW_MINUTES", "rate_limit_window_minutes"),
        description="Length of the fixed rate-limit window (minutes).",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()

"""Environment-based configuration for BoviSense."""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from BOVISENSE_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BOVISENSE_",
        case_sensitive=False,
    )

    # Server
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 8082
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Authentication for inbound requests (None = disabled)
    api_key: str | None = None

    # Upstream model gateway (credential is optional until a request needs it)
    gateway_api_key: str | None = None
    gateway_url: str = "https://ai.gateway.lovable.dev/v1/chat/completions"
    gateway_model: str = "google/gemini-2.5-flash"
    gateway_timeout: float = Field(default=120.0, gt=0)

    # CLI client
    proxy_url: str = "http://localhost:8082/api/v1/classify-livestock"


def get_settings() -> Settings:
    """Create and return application settings.

    Not cached: the gateway credential is read from the environment on every call.
    """
    return Settings()

"""HTTP server and API surface settings."""

from __future__ import annotations

from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

Environment = Literal["development", "staging", "production", "test"]


class AppSettings(BaseSettings):
    """Identity of the service and how its API is served.

    Environment variables use APP_ prefix.
    Example: APP_PORT=8080, APP_DISABLE_DOCS=true
    """

    service_name: str = Field(
        default="campus-events",
        pattern=r"^[a-z0-9]+(-[a-z0-9]+)*$",
        description="Value of the ``service`` field in logs and the info metric",
    )
    title: str = Field(default="Campus Events API", min_length=1)
    description: str = "Campus events, registrations and notification fan-out"
    version: str = Field(default="1.0.0", pattern=r"^\d+\.\d+\.\d+(-[a-zA-Z0-9]+)?$")
    environment: Environment = "development"

    api_prefix: str = Field(
        default="",
        pattern=r"^(/.*)?$",
        description="Mount point for feature routers; empty keeps the original root paths",
    )
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    host: str = "0.0.0.0"
    port: int = Field(default=5000, ge=1, le=65535)

    debug: bool = False
    disable_docs: bool = Field(default=False, description="Hide /docs and /openapi.json")

    model_config = SettingsConfigDict(
        env_prefix="APP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def _no_debug_in_production(self) -> AppSettings:
        if self.environment == "production" and self.debug:
            msg = "APP_DEBUG must be off when APP_ENVIRONMENT=production"
            raise ValueError(msg)
        return self

    def get_docs_url(self) -> str | None:
        return None if self.disable_docs else "/docs"

    def get_openapi_url(self) -> str | None:
        return None if self.disable_docs else "/openapi.json"

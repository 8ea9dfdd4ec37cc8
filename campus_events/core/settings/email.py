"""Outbound email settings.

Environment variables use EMAIL_ prefix.
Example: EMAIL_BACKEND=smtp, EMAIL_SMTP_HOST=smtp.gmail.com

``console`` logs each message and ``file`` writes one JSON document per
message under ``file_path``; neither opens a network connection.
"""

from __future__ import annotations

from pathlib import Path
from tempfile import gettempdir
from typing import Literal

from pydantic import EmailStr, Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_EMAIL_FILE_DIR = Path(gettempdir()) / "campus_events_emails"


class EmailSettings(BaseSettings):
    """Transport and sender identity for notification emails."""

    enabled: bool = Field(default=True, description="False turns every send into EMAIL_DISABLED")
    backend: Literal["smtp", "console", "file"] = "console"

    smtp_host: str = Field(default="localhost", min_length=1)
    smtp_port: int = Field(default=587, ge=1, le=65535)
    smtp_username: str | None = None
    smtp_password: SecretStr | None = None
    use_tls: bool = Field(default=True, description="STARTTLS after connecting")
    use_ssl: bool = Field(default=False, description="Implicit TLS, usually port 465")
    validate_certs: bool = True
    timeout: float = Field(default=30.0, ge=1.0, le=300.0, description="SMTP timeout in seconds")

    default_from_email: EmailStr = "noreply@campusconnect.example"
    default_from_name: str = Field(default="CampusConnect", max_length=100)

    file_path: str = str(DEFAULT_EMAIL_FILE_DIR)

    model_config = SettingsConfigDict(
        env_prefix="EMAIL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def _check_transport(self) -> EmailSettings:
        if self.use_tls and self.use_ssl:
            msg = "EMAIL_USE_TLS and EMAIL_USE_SSL are mutually exclusive"
            raise ValueError(msg)
        if (self.smtp_username is None) != (self.smtp_password is None):
            msg = "EMAIL_SMTP_USERNAME and EMAIL_SMTP_PASSWORD must be set together"
            raise ValueError(msg)
        return self

    @property
    def requires_auth(self) -> bool:
        return self.smtp_username is not None

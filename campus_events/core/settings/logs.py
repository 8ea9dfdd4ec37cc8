"""Logging settings."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Handlers and format for the root logger.

    Environment variables use LOG_ prefix.
    Example: LOG_LEVEL=debug, LOG_JSON_LOGS=false, LOG_FILE_ENABLED=true
    """

    service_name: str = "campus-events"
    level: LogLevel = "INFO"
    json_logs: bool = Field(default=True, description="One JSON object per line instead of text")

    console_enabled: bool = True
    console_level: LogLevel | None = Field(default=None, description="Defaults to ``level``")

    file_enabled: bool = False
    file_path: Path = Path("logs/campus-events.log.jsonl")
    file_max_bytes: int = Field(default=10_485_760, ge=1024)
    file_backup_count: int = Field(default=5, ge=0)

    include_context: bool = Field(
        default=True,
        description="Copy request_id, event_id and other contextvars onto every record",
    )
    capture_warnings: bool = True

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @field_validator("level", "console_level", mode="before")
    @classmethod
    def _upper(cls, v: str | None) -> str | None:
        return v.upper() if isinstance(v, str) else v

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for ``configure_logging``."""
        return {
            "service_name": self.service_name,
            "log_level": self.level,
            "json_logs": self.json_logs,
            "console_level": self.console_level or self.level,
            "console_enabled": self.console_enabled,
            "file_path": str(self.file_path) if self.file_enabled else None,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
        }

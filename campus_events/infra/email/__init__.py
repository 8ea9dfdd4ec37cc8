"""Outbound email: message schemas and backend clients."""

from __future__ import annotations

from .client import (
    BaseEmailClient,
    ConsoleClient,
    EmailClient,
    FileClient,
    SMTPClient,
    build_mime_message,
    get_email_client,
    start_email_client,
    stop_email_client,
)
from .schemas import EmailAttachment, EmailMessage, EmailResult, EmailStatus
from .templates import EmailTemplateRenderer, TemplateNotFoundError, get_template_renderer

__all__ = [
    "BaseEmailClient",
    "ConsoleClient",
    "EmailAttachment",
    "EmailClient",
    "EmailMessage",
    "EmailResult",
    "EmailStatus",
    "EmailTemplateRenderer",
    "FileClient",
    "SMTPClient",
    "TemplateNotFoundError",
    "build_mime_message",
    "get_email_client",
    "get_template_renderer",
    "start_email_client",
    "stop_email_client",
]

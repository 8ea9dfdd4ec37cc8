"""Email message, attachment and delivery result models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, EmailStr, Field


class EmailStatus(StrEnum):
    """Email delivery status."""

    SENT = "sent"
    FAILED = "failed"


class EmailAttachment(BaseModel):
    """Email attachment, given either as raw bytes or a file path.

    Setting ``content_id`` makes the attachment inline so the HTML body can
    reference it as ``cid:<content_id>``.

    Example:
        attachment = EmailAttachment(
            filename="poster.png",
            path="uploads/poster.png",
            content_type="image/png",
            content_id="event-image",
        )
    """

    filename: str = Field(min_length=1, max_length=255, description="Attachment filename")
    content: bytes | None = Field(default=None, description="Attachment content as bytes")
    path: str | None = Field(default=None, description="Path to file to attach")
    content_type: str = Field(default="application/octet-stream", description="MIME content type")
    content_id: str | None = Field(
        default=None,
        description="Content-ID for inline attachments referenced from the HTML body",
    )

    def model_post_init(self, __context: Any) -> None:
        if self.content is None and self.path is None:
            msg = "Either content or path must be provided"
            raise ValueError(msg)

    @property
    def is_inline(self) -> bool:
        """Whether the attachment is embedded in the HTML body."""
        return self.content_id is not None

    def read_bytes(self) -> bytes:
        """Return the attachment payload, reading it from disk if needed."""
        if self.content is not None:
            return self.content
        with open(self.path, "rb") as f:  # type: ignore[arg-type]
            return f.read()


class EmailMessage(BaseModel):
    """A complete outbound email.

    Example:
        message = EmailMessage(
            to=["a@x.com"],
            subject="New Event: Hack Night",
            body_text='A new event "Hack Night" has been added.',
        )
    """

    to: list[EmailStr] = Field(min_length=1, description="Primary recipients")
    from_email: EmailStr | None = Field(default=None, description="Sender email address")
    from_name: str | None = Field(default=None, max_length=100, description="Sender display name")

    subject: str = Field(min_length=1, max_length=500, description="Email subject line")
    body_text: str | None = Field(default=None, description="Plain text body")
    body_html: str | None = Field(default=None, description="HTML body")

    attachments: list[EmailAttachment] = Field(default_factory=list, description="Attachments")
    tags: list[str] = Field(default_factory=list, description="Tags for tracking/filtering")

    def model_post_init(self, __context: Any) -> None:
        if self.body_text is None and self.body_html is None:
            msg = "Either body_text or body_html must be provided"
            raise ValueError(msg)


class EmailResult(BaseModel):
    """Result of an email send operation.

    Backends report transport failures through ``success=False`` rather than
    raising, so callers can aggregate results without try/except per send.
    """

    success: bool = Field(description="Whether the email was sent successfully")
    message_id: str | None = Field(default=None, description="Message ID from the backend")
    status: EmailStatus = Field(description="Delivery status")
    error: str | None = Field(default=None, description="Error message if failed")
    error_code: str | None = Field(default=None, description="Error code for programmatic handling")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        description="When the operation completed",
    )
    recipients_accepted: list[str] = Field(default_factory=list)
    recipients_rejected: list[str] = Field(default_factory=list)
    backend: str = Field(default="smtp", description="Backend used for sending")

    @classmethod
    def success_result(
        cls,
        message_id: str | None = None,
        recipients: list[str] | None = None,
        backend: str = "smtp",
    ) -> EmailResult:
        """Create a success result."""
        return cls(
            success=True,
            message_id=message_id,
            status=EmailStatus.SENT,
            recipients_accepted=recipients or [],
            backend=backend,
        )

    @classmethod
    def failure_result(
        cls,
        error: str,
        error_code: str | None = None,
        backend: str = "smtp",
    ) -> EmailResult:
        """Create a failure result."""
        return cls(
            success=False,
            status=EmailStatus.FAILED,
            error=error,
            error_code=error_code,
            backend=backend,
        )

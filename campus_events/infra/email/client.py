"""Email client for SMTP and alternative backends.

Backends:
- SMTP: Production delivery via aiosmtplib
- Console: Print emails to stdout (development)
- File: Write emails as JSON files (integration testing)

The ``EmailClient`` facade is built once in the application lifespan and
shared by every request and background task.
"""

from __future__ import annotations

import json
import logging
import ssl
import uuid
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from email.mime.application import MIMEApplication
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import TYPE_CHECKING

import aiosmtplib

from .schemas import EmailMessage, EmailResult, EmailStatus

if TYPE_CHECKING:
    from email.mime.base import MIMEBase

    from campus_events.core.settings.email import EmailSettings

logger = logging.getLogger(__name__)


class BaseEmailClient(ABC):
    """Abstract base class for email backends."""

    @abstractmethod
    async def send(self, message: EmailMessage) -> EmailResult:
        """Send an email message.

        Args:
            message: The email message to send.

        Returns:
            EmailResult with delivery status.
        """
        ...

    async def connect(self) -> None:
        """Prepare the backend. Most backends need nothing here."""

    async def disconnect(self) -> None:
        """Release backend resources."""

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the email backend is healthy."""
        ...


def build_mime_message(message: EmailMessage, settings: EmailSettings) -> MIMEMultipart:
    """Build a MIME tree from an EmailMessage.

    Layout is ``mixed[related[alternative[text, html], inline images...], attachments...]``,
    collapsing any level that would hold a single part.
    """
    from_email = message.from_email or settings.default_from_email
    from_name = message.from_name or settings.default_from_name

    if message.body_text and message.body_html:
        body: MIMEBase = MIMEMultipart("alternative")
        body.attach(MIMEText(message.body_text, "plain", "utf-8"))
        body.attach(MIMEText(message.body_html, "html", "utf-8"))
    elif message.body_html:
        body = MIMEText(message.body_html, "html", "utf-8")
    else:
        body = MIMEText(message.body_text or "", "plain", "utf-8")

    inline = [a for a in message.attachments if a.is_inline]
    regular = [a for a in message.attachments if not a.is_inline]

    if inline:
        related = MIMEMultipart("related")
        related.attach(body)
        for attachment in inline:
            maintype, _, subtype = attachment.content_type.partition("/")
            if maintype == "image" and subtype:
                part: MIMEBase = MIMEImage(attachment.read_bytes(), _subtype=subtype)
            else:
                part = MIMEApplication(attachment.read_bytes(), Name=attachment.filename)
            part["Content-ID"] = f"<{attachment.content_id}>"
            part["Content-Disposition"] = f'inline; filename="{attachment.filename}"'
            related.attach(part)
        body = related

    mime_msg = MIMEMultipart("mixed")
    mime_msg["From"] = f"{from_name} <{from_email}>" if from_name else str(from_email)
    mime_msg["To"] = ", ".join(message.to)
    mime_msg["Subject"] = message.subject
    mime_msg["Message-ID"] = f"<{uuid.uuid4()}@{settings.smtp_host}>"
    mime_msg["Date"] = datetime.now(UTC).strftime("%a, %d %b %Y %H:%M:%S +0000")
    mime_msg.attach(body)

    for attachment in regular:
        part = MIMEApplication(attachment.read_bytes(), Name=attachment.filename)
        part["Content-Disposition"] = f'attachment; filename="{attachment.filename}"'
        mime_msg.attach(part)

    return mime_msg


class SMTPClient(BaseEmailClient):
    """SMTP email client using aiosmtplib.

    A connection is opened per send; aiosmtplib keeps no pool.
    """

    def __init__(self, settings: EmailSettings) -> None:
        self.settings = settings
        logger.info(
            "SMTP client initialized",
            extra={
                "host": settings.smtp_host,
                "port": settings.smtp_port,
                "use_tls": settings.use_tls,
                "use_ssl": settings.use_ssl,
            },
        )

    def _tls_context(self) -> ssl.SSLContext | None:
        if not (self.settings.use_tls or self.settings.use_ssl):
            return None
        context = ssl.create_default_context()
        if not self.settings.validate_certs:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context

    def _smtp(self, timeout: float) -> aiosmtplib.SMTP:
        return aiosmtplib.SMTP(
            hostname=self.settings.smtp_host,
            port=self.settings.smtp_port,
            use_tls=self.settings.use_ssl,  # implicit TLS
            start_tls=self.settings.use_tls,  # STARTTLS
            tls_context=self._tls_context(),
            timeout=timeout,
        )

    async def health_check(self) -> bool:
        """Check SMTP server connectivity."""
        smtp = self._smtp(timeout=5.0)
        try:
            await smtp.connect()
            await smtp.quit()
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.warning("SMTP health check failed: %s", e)
            return False
        return True

    async def send(self, message: EmailMessage) -> EmailResult:
        """Send email via SMTP.

        Transport errors are returned as failure results, never raised.
        """
        mime_message = build_mime_message(message, self.settings)
        message_id = mime_message["Message-ID"]

        try:
            async with self._smtp(timeout=self.settings.timeout) as smtp:
                if self.settings.requires_auth:
                    await smtp.login(
                        self.settings.smtp_username,
                        self.settings.smtp_password.get_secret_value(),
                    )
                errors, _ = await smtp.send_message(mime_message)
        except aiosmtplib.SMTPAuthenticationError as e:
            logger.error("SMTP authentication failed: %s", e)
            return EmailResult.failure_result(error=str(e), error_code="AUTH_FAILED")
        except aiosmtplib.SMTPRecipientsRefused as e:
            logger.warning("All recipients refused: %s", e)
            return EmailResult.failure_result(error=str(e), error_code="RECIPIENTS_REFUSED")
        except aiosmtplib.SMTPException as e:
            logger.warning("SMTP error: %s", e)
            return EmailResult.failure_result(error=str(e), error_code="SMTP_ERROR")
        except OSError as e:
            logger.warning("SMTP connection failed: %s", e)
            return EmailResult.failure_result(error=str(e), error_code="CONNECTION_ERROR")

        recipients_rejected = list(errors.keys()) if errors else []
        recipients_accepted = [r for r in message.to if r not in recipients_rejected]

        if recipients_rejected:
            logger.warning(
                "Some recipients rejected",
                extra={"message_id": message_id, "rejected": recipients_rejected},
            )

        logger.info(
            "Email sent",
            extra={
                "message_id": message_id,
                "recipients": len(recipients_accepted),
                "subject": message.subject[:50],
            },
        )

        if not recipients_accepted:
            return EmailResult.failure_result(
                error="All recipients rejected",
                error_code="RECIPIENTS_REFUSED",
            )

        return EmailResult(
            success=True,
            message_id=message_id,
            status=EmailStatus.SENT,
            recipients_accepted=recipients_accepted,
            recipients_rejected=recipients_rejected,
            backend="smtp",
        )


class ConsoleClient(BaseEmailClient):
    """Console email client for development.

    Prints emails to stdout instead of sending them.
    """

    def __init__(self, settings: EmailSettings) -> None:
        self.settings = settings
        logger.info("Console email client initialized (development mode)")

    async def health_check(self) -> bool:
        return True

    async def send(self, message: EmailMessage) -> EmailResult:
        message_id = f"console-{uuid.uuid4()}"

        separator = "=" * 60
        print(f"\n{separator}")
        print("EMAIL (Console Backend)")
        print(separator)
        print(
            f"From: {message.from_name or self.settings.default_from_name} "
            f"<{message.from_email or self.settings.default_from_email}>"
        )
        print(f"To: {', '.join(message.to)}")
        print(f"Subject: {message.subject}")
        if message.attachments:
            print(f"Attachments: {', '.join(a.filename for a in message.attachments)}")
        print(separator)
        print(message.body_text or message.body_html)
        print(f"{separator}\n")

        logger.info(
            "Email logged to console",
            extra={"message_id": message_id, "to": message.to, "subject": message.subject},
        )
        return EmailResult.success_result(
            message_id=message_id,
            recipients=list(message.to),
            backend="console",
        )


class FileClient(BaseEmailClient):
    """File email client for testing.

    Writes each email as a JSON document into ``settings.file_path``.
    """

    def __init__(self, settings: EmailSettings) -> None:
        self.settings = settings
        self.output_dir = Path(settings.file_path)
        logger.info("File email client initialized", extra={"output": str(self.output_dir)})

    async def connect(self) -> None:
        self.output_dir.mkdir(parents=True, exist_ok=True)

    async def health_check(self) -> bool:
        """Check if output directory is writable."""
        try:
            test_file = self.output_dir / ".health_check"
            test_file.touch()
            test_file.unlink()
        except OSError:
            return False
        return True

    async def send(self, message: EmailMessage) -> EmailResult:
        message_id = f"file-{uuid.uuid4()}"
        timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S_%f")
        filepath = self.output_dir / f"{timestamp}_{message_id}.json"

        email_data = {
            "message_id": message_id,
            "timestamp": datetime.now(UTC).isoformat(),
            "from_email": message.from_email or self.settings.default_from_email,
            "from_name": message.from_name or self.settings.default_from_name,
            "to": list(message.to),
            "subject": message.subject,
            "body_text": message.body_text,
            "body_html": message.body_html,
            "tags": message.tags,
            "attachments": [
                {
                    "filename": a.filename,
                    "content_type": a.content_type,
                    "content_id": a.content_id,
                    "path": a.path,
                }
                for a in message.attachments
            ],
        }

        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            with open(filepath, "w", encoding="utf-8") as f:
                json.dump(email_data, f, indent=2, default=str)
        except OSError as e:
            logger.error("Failed to write email to file: %s", e)
            return EmailResult.failure_result(
                error=str(e),
                error_code="FILE_WRITE_ERROR",
                backend="file",
            )

        logger.info(
            "Email written to file",
            extra={"message_id": message_id, "filepath": str(filepath), "to": message.to},
        )
        return EmailResult.success_result(
            message_id=message_id,
            recipients=list(message.to),
            backend="file",
        )


class EmailClient:
    """Email client facade that delegates to the configured backend.

    Example:
        client = EmailClient(settings)
        await client.connect()
        result = await client.send(message)
        await client.disconnect()
    """

    def __init__(self, settings: EmailSettings) -> None:
        self.settings = settings
        self._backend: BaseEmailClient

        if settings.backend == "smtp":
            self._backend = SMTPClient(settings)
        elif settings.backend == "console":
            self._backend = ConsoleClient(settings)
        elif settings.backend == "file":
            self._backend = FileClient(settings)
        else:
            raise ValueError(f"Unknown email backend: {settings.backend}")

    @property
    def backend_name(self) -> str:
        return self.settings.backend

    async def connect(self) -> None:
        await self._backend.connect()

    async def disconnect(self) -> None:
        await self._backend.disconnect()

    async def send(self, message: EmailMessage) -> EmailResult:
        """Send an email message through the configured backend.

        Returns a failure result without touching the backend when email is
        disabled.
        """
        if not self.settings.enabled:
            logger.warning("Email sending is disabled")
            return EmailResult.failure_result(
                error="Email sending is disabled",
                error_code="EMAIL_DISABLED",
                backend=self.settings.backend,
            )
        return await self._backend.send(message)

    async def health_check(self) -> bool:
        return await self._backend.health_check()


_email_client: EmailClient | None = None


async def start_email_client(settings: EmailSettings) -> EmailClient:
    """Create and connect the process-wide email client."""
    global _email_client

    if _email_client is None:
        client = EmailClient(settings)
        await client.connect()
        _email_client = client
        logger.info("Email client started", extra={"backend": settings.backend})
    return _email_client


def get_email_client() -> EmailClient:
    """Return the process-wide email client.

    Raises:
        RuntimeError: If ``start_email_client`` has not run.
    """
    if _email_client is None:
        raise RuntimeError("Email client not started. Call start_email_client() first.")
    return _email_client


async def stop_email_client() -> None:
    """Disconnect and forget the process-wide email client."""
    global _email_client

    if _email_client is not None:
        await _email_client.disconnect()
        _email_client = None
        logger.info("Email client stopped")

"""Email delivery channel over the shared EmailClient."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from campus_events.features.notifications.outcome import RecipientResult
from campus_events.infra.email.schemas import EmailMessage
from campus_events.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Collection

    from campus_events.core.settings.notifications import EmailPolicy
    from campus_events.features.notifications.channels.base import NotificationMessage
    from campus_events.infra.email.client import EmailClient
    from campus_events.infra.email.schemas import EmailResult

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)


class EmailChannel:
    """Sends notification emails through the configured email backend.

    Policies:
        per_recipient: One message per address, sent concurrently (at most
            ``max_concurrency`` in flight), each bounded by
            ``recipient_timeout``. A failure only affects its own recipient.
        batch: One message with every address in ``To``. The transport either
            accepts it or not, so every recipient shares the result.
    """

    channel_name = "email"

    def __init__(
        self,
        client: EmailClient,
        *,
        policy: EmailPolicy = "per_recipient",
        recipient_timeout: float = 15.0,
        max_concurrency: int = 20,
    ) -> None:
        self._client = client
        self._policy = policy
        self._timeout = recipient_timeout
        self._max_concurrency = max_concurrency

    @property
    def policy(self) -> EmailPolicy:
        return self._policy

    async def deliver(
        self,
        message: NotificationMessage,
        recipients: Collection[str],
    ) -> list[RecipientResult]:
        addresses = list(recipients)
        if not addresses:
            return []

        if self._policy == "batch":
            return await self._deliver_batch(message, addresses)

        semaphore = asyncio.Semaphore(self._max_concurrency)
        results = await asyncio.gather(
            *(self._deliver_one(message, address, semaphore) for address in addresses)
        )
        lazy_logger.debug(
            lambda: f"email.deliver: {sum(r.success for r in results)}/{len(results)} sent"
        )
        return list(results)

    async def _deliver_one(
        self,
        message: NotificationMessage,
        recipient: str,
        semaphore: asyncio.Semaphore,
    ) -> RecipientResult:
        async with semaphore:
            try:
                result = await asyncio.wait_for(
                    self._client.send(self._build(message, [recipient])),
                    timeout=self._timeout,
                )
            except TimeoutError:
                logger.warning(
                    "Email send timed out",
                    extra={"recipient": recipient, "timeout": self._timeout},
                )
                return RecipientResult.failed(
                    recipient, self.channel_name, f"timed out after {self._timeout:g}s"
                )
            except Exception as exc:  # noqa: BLE001 - one bad send must not abort the rest
                logger.warning(
                    "Email send raised",
                    extra={"recipient": recipient, "error": str(exc), "error_type": type(exc).__name__},
                )
                return RecipientResult.failed(recipient, self.channel_name, str(exc) or type(exc).__name__)

        return self._to_result(recipient, result)

    async def _deliver_batch(
        self,
        message: NotificationMessage,
        recipients: list[str],
    ) -> list[RecipientResult]:
        try:
            result = await asyncio.wait_for(
                self._client.send(self._build(message, recipients)),
                timeout=self._timeout,
            )
        except TimeoutError:
            cause = f"timed out after {self._timeout:g}s"
            logger.warning("Batch email send timed out", extra={"recipients": len(recipients)})
            return [RecipientResult.failed(r, self.channel_name, cause) for r in recipients]
        except Exception as exc:  # noqa: BLE001 - reported as failures for every recipient
            logger.warning(
                "Batch email send raised",
                extra={"recipients": len(recipients), "error": str(exc)},
            )
            cause = str(exc) or type(exc).__name__
            return [RecipientResult.failed(r, self.channel_name, cause) for r in recipients]

        return [self._to_result(r, result) for r in recipients]

    def _to_result(self, recipient: str, result: EmailResult) -> RecipientResult:
        if result.success and recipient not in result.recipients_rejected:
            return RecipientResult.ok(recipient, self.channel_name, result.message_id)

        cause = result.error or "rejected by mail server"
        logger.warning(
            "Email delivery failed",
            extra={"recipient": recipient, "error": cause, "error_code": result.error_code},
        )
        return RecipientResult.failed(recipient, self.channel_name, cause)

    @staticmethod
    def _build(message: NotificationMessage, to: list[str]) -> EmailMessage:
        return EmailMessage(
            to=to,
            subject=message.subject,
            body_text=message.body_text,
            body_html=message.body_html,
            attachments=list(message.attachments),
            tags=list(message.tags),
        )

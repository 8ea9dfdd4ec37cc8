"""Builds notification messages from events and registrations."""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING, Any

from campus_events.features.notifications.channels.base import NotificationMessage
from campus_events.infra.email.schemas import EmailAttachment

if TYPE_CHECKING:
    from campus_events.core.settings.notifications import NotificationSettings
    from campus_events.features.events.models import Event
    from campus_events.features.registrations.models import Registration
    from campus_events.infra.email.templates import EmailTemplateRenderer

logger = logging.getLogger(__name__)

MISSING_VALUE = "TBA"
INLINE_IMAGE_CID = "event-image"
UPLOADS_URL_PREFIX = "/uploads/"


class NotificationComposer:
    """Renders the email and realtime content for each notification kind.

    Event images given as an http(s) URL are linked from the HTML body. A
    local path is resolved inside the uploads directory and, if the file
    exists, attached inline and referenced as ``cid:event-image``. Anything
    else is left out of the email.
    """

    def __init__(self, renderer: EmailTemplateRenderer, settings: NotificationSettings) -> None:
        self._renderer = renderer
        self._uploads_dir = Path(settings.uploads_dir)
        self._signature = settings.signature

    def event_created(self, event: Event) -> NotificationMessage:
        context = self._event_context(event)
        attachments: tuple[EmailAttachment, ...] = ()

        image_src = None
        if event.image:
            if event.image.startswith(("http://", "https://")):
                image_src = event.image
            elif (attachment := self._inline_image(event.image)) is not None:
                attachments = (attachment,)
                image_src = f"cid:{INLINE_IMAGE_CID}"

        html, text = self._renderer.render("event_created", image_src=image_src, **context)
        return NotificationMessage(
            subject=f"New Event: {event.title}",
            body_text=text or "",
            body_html=html,
            attachments=attachments,
            announcement=f"New event added: {event.title}",
            tags=("event-created",),
        )

    def event_updated(self, event: Event) -> NotificationMessage:
        html, text = self._renderer.render("event_updated", **self._event_context(event))
        return NotificationMessage(
            subject=f"Event Updated: {event.title}",
            body_text=text or "",
            body_html=html,
            tags=("event-updated",),
        )

    def registration_confirmed(self, registration: Registration) -> NotificationMessage:
        html, text = self._renderer.render(
            "registration_confirmed",
            user_name=registration.user_name,
            event_title=registration.event_title,
            signature=self._signature,
        )
        return NotificationMessage(
            subject=f"Registration Confirmed: {registration.event_title}",
            body_text=text or "",
            body_html=html,
            tags=("registration-confirmed",),
        )

    def _event_context(self, event: Event) -> dict[str, Any]:
        return {
            "title": event.title,
            "date": event.date or MISSING_VALUE,
            "time": event.time or MISSING_VALUE,
            "location": event.location or MISSING_VALUE,
            "instruction": event.instruction,
            "link": event.link,
            "signature": self._signature,
        }

    def _inline_image(self, reference: str) -> EmailAttachment | None:
        """Resolve a stored image path to an inline attachment.

        Paths that escape the uploads directory or do not exist are skipped.
        """
        relative = reference.removeprefix(UPLOADS_URL_PREFIX).lstrip("/")
        root = self._uploads_dir.resolve()
        candidate = (root / relative).resolve()

        if not candidate.is_relative_to(root) or not candidate.is_file():
            logger.warning(
                "Event image not found in uploads directory, sending without it",
                extra={"image": reference, "uploads_dir": str(root)},
            )
            return None

        content_type, _ = mimetypes.guess_type(candidate.name)
        return EmailAttachment(
            filename=candidate.name,
            path=str(candidate),
            content_type=content_type or "application/octet-stream",
            content_id=INLINE_IMAGE_CID,
        )

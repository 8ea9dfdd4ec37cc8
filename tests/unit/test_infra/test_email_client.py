"""Tests for the email client backends and MIME building."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from campus_events.core.settings.email import EmailSettings
from campus_events.infra.email import (
    EmailAttachment,
    EmailClient,
    EmailMessage,
    build_mime_message,
)

if TYPE_CHECKING:
    from pathlib import Path


def _message(**overrides) -> EmailMessage:
    fields = {
        "to": ["a@x.com"],
        "subject": "New Event: Hack Night",
        "body_text": 'A new event "Hack Night" has been added.',
    }
    fields.update(overrides)
    return EmailMessage(**fields)


@pytest.mark.asyncio
async def test_console_backend_prints_and_succeeds(capsys: pytest.CaptureFixture[str]) -> None:
    client = EmailClient(EmailSettings(backend="console"))

    result = await client.send(_message())

    assert result.success is True
    assert result.backend == "console"
    assert result.recipients_accepted == ["a@x.com"]
    assert "Subject: New Event: Hack Night" in capsys.readouterr().out


@pytest.mark.asyncio
async def test_file_backend_writes_json(tmp_path: Path) -> None:
    client = EmailClient(EmailSettings(backend="file", file_path=str(tmp_path / "mail")))
    await client.connect()

    result = await client.send(_message(tags=["event-created"]))

    [written] = list((tmp_path / "mail").glob("*.json"))
    data = json.loads(written.read_text())
    assert result.success is True
    assert data["to"] == ["a@x.com"]
    assert data["tags"] == ["event-created"]
    assert await client.health_check() is True


@pytest.mark.asyncio
async def test_disabled_client_reports_failure_without_sending(
    capsys: pytest.CaptureFixture[str],
) -> None:
    client = EmailClient(EmailSettings(backend="console", enabled=False))

    result = await client.send(_message())

    assert result.success is False
    assert result.error_code == "EMAIL_DISABLED"
    assert capsys.readouterr().out == ""


def test_message_requires_a_body() -> None:
    with pytest.raises(ValueError, match="body_text or body_html"):
        EmailMessage(to=["a@x.com"], subject="Empty")


def test_mime_message_embeds_inline_image(tmp_path: Path) -> None:
    image = tmp_path / "poster.png"
    image.write_bytes(b"\x89PNG\r\n")
    message = _message(
        body_html='<img src="cid:event-image">',
        attachments=[
            EmailAttachment(
                filename="poster.png",
                path=str(image),
                content_type="image/png",
                content_id="event-image",
            )
        ],
    )

    mime = build_mime_message(message, EmailSettings())

    assert mime["To"] == "a@x.com"
    assert mime["From"] == "CampusConnect <noreply@campusconnect.example>"
    related = mime.get_payload()[0]
    assert related.get_content_type() == "multipart/related"
    alternative, inline = related.get_payload()
    assert alternative.get_content_type() == "multipart/alternative"
    assert inline["Content-ID"] == "<event-image>"


def test_settings_reject_tls_and_ssl_together() -> None:
    with pytest.raises(ValueError, match="mutually exclusive"):
        EmailSettings(use_tls=True, use_ssl=True)

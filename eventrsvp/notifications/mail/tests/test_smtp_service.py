import smtplib

import pytest

from eventrsvp.guests.tests.factories import make_event
from eventrsvp.notifications.mail.smtp_service import SMTPEmailService


class MockConfig:
    smtp_host = "localhost"
    smtp_port = 1025
    smtp_user = ""
    smtp_password = ""
    emails_from = "rsvp@example.com"
    app_url = "https://rsvp.example.com"


@pytest.mark.asyncio
async def test_reminder_builds_multipart_message(monkeypatch):
    service = SMTPEmailService(config=MockConfig())
    delivered = []
    monkeypatch.setattr(service, "_deliver", delivered.append)

    result = await service.send_reminder("ada@example.com", "Ada", make_event(), "tok-abc")

    assert result.sent is True
    msg = delivered[0]
    assert msg["To"] == "ada@example.com"
    assert msg["From"] == "rsvp@example.com"
    assert msg["Subject"] == "Reminder: RSVP needed for Autumn Gala"
    assert result.message_id == msg["Message-ID"]
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


@pytest.mark.asyncio
async def test_smtp_failure_is_reported(monkeypatch):
    service = SMTPEmailService(config=MockConfig())

    def _refuse(msg):
        raise smtplib.SMTPRecipientsRefused({"ada@example.com": (550, b"no such user")})

    monkeypatch.setattr(service, "_deliver", _refuse)

    result = await service.send_reminder("ada@example.com", "Ada", make_event(), "tok-abc")

    assert result.sent is False

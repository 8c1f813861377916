import httpx
import pytest

from eventrsvp.guests.dtos import GuestStatus
from eventrsvp.guests.tests.factories import NOW, make_event, make_guest
from eventrsvp.notifications.dispatcher import NotificationDispatcher
from eventrsvp.notifications.mail.email_logger import EmailLogger
from eventrsvp.notifications.mail.resend_service import RESEND_API_URL, ResendEmailService
from eventrsvp.notifications.tests.inmemory_services import InMemoryMarkerStore, InMemorySmsService
from eventrsvp.notifications.tests.mock_http import MockHttpClient, MockResponse
from eventrsvp.reminders.config import ReminderConfig


class MockConfig:
    resend_api_key = "test-api-key"
    emails_from = "rsvp@example.com"
    app_url = "https://rsvp.example.com"


class RecordingEmailLogger(EmailLogger):
    def __init__(self):
        self.attempts: list[dict] = []
        self.successes: list[str | None] = []
        self.failures: list[str] = []

    async def log_email_attempt(self, **kwargs):
        self.attempts.append(kwargs)
        return f"log-{len(self.attempts)}"

    async def log_email_success(self, log_uuid, provider_message_id):
        self.successes.append(provider_message_id)

    async def log_email_failure(self, log_uuid, error_message):
        self.failures.append(error_message)


@pytest.mark.asyncio
async def test_reminder_is_posted_to_resend_and_logged():
    client = MockHttpClient(MockResponse(json_data={"id": "re_123"}))
    email_logger = RecordingEmailLogger()
    service = ResendEmailService(config=MockConfig(), email_logger=email_logger, http_client_class=client)

    result = await service.send_reminder("ada@example.com", "Ada", make_event(), "tok-abc")

    assert result.sent is True
    assert result.message_id == "re_123"
    call = client.post_calls[0]
    assert call["url"] == RESEND_API_URL
    assert call["headers"]["Authorization"] == "Bearer test-api-key"
    assert call["json"]["to"] == ["ada@example.com"]
    assert call["json"]["subject"] == "Reminder: RSVP needed for Autumn Gala"
    assert "https://rsvp.example.com/rsvp/tok-abc" in call["json"]["text"]
    assert email_logger.attempts[0]["email_type"] == "reminder"
    assert email_logger.successes == ["re_123"]


@pytest.mark.asyncio
async def test_rejected_send_returns_failure_and_logs_it():
    client = MockHttpClient(MockResponse(status_code=422))
    email_logger = RecordingEmailLogger()
    service = ResendEmailService(config=MockConfig(), email_logger=email_logger, http_client_class=client)

    result = await service.send_confirmation(
        "ada@example.com", "Ada", make_event(), GuestStatus.ATTENDING, "tok-abc"
    )

    assert result.sent is False
    assert "422" in result.reason
    assert email_logger.successes == []
    assert len(email_logger.failures) == 1


@pytest.mark.asyncio
async def test_transport_error_returns_failure():
    client = MockHttpClient(raise_with=httpx.ConnectTimeout("timed out"))
    service = ResendEmailService(config=MockConfig(), http_client_class=client)

    result = await service.send_reminder("ada@example.com", None, make_event(), "tok-abc")

    assert result.sent is False
    assert result.reason == "timed out"


class FailingSuccessLogger(RecordingEmailLogger):
    async def log_email_success(self, log_uuid, provider_message_id):
        raise RuntimeError("email_logs unavailable")


@pytest.mark.asyncio
async def test_accepted_email_without_json_body_is_still_sent():
    client = MockHttpClient(MockResponse(invalid_json=True))
    email_logger = RecordingEmailLogger()
    service = ResendEmailService(config=MockConfig(), email_logger=email_logger, http_client_class=client)

    result = await service.send_reminder("ada@example.com", "Ada", make_event(), "tok-abc")

    assert result.sent is True
    assert result.message_id is None
    assert email_logger.successes == [None]


@pytest.mark.asyncio
async def test_accepted_email_stays_sent_when_success_log_fails():
    client = MockHttpClient(MockResponse(json_data={"id": "re_9"}))
    service = ResendEmailService(
        config=MockConfig(), email_logger=FailingSuccessLogger(), http_client_class=client
    )

    result = await service.send_reminder("ada@example.com", "Ada", make_event(), "tok-abc")

    assert result.sent is True
    assert result.message_id == "re_9"


@pytest.mark.asyncio
async def test_dispatcher_marks_email_accepted_despite_logging_failure():
    event = make_event()
    guest = make_guest(event)
    client = MockHttpClient(MockResponse(json_data={"id": "re_9"}))
    store = InMemoryMarkerStore()
    dispatcher = NotificationDispatcher(
        email_service=ResendEmailService(
            config=MockConfig(), email_logger=FailingSuccessLogger(), http_client_class=client
        ),
        sms_service=InMemorySmsService(),
        marker_store=store,
        config=ReminderConfig(app_url=MockConfig.app_url),
    )

    outcome = await dispatcher.dispatch_guest(event, guest, NOW)

    assert (outcome.emails_sent, outcome.errors) == (1, 0)
    assert store.email_sent_at == {guest.id: NOW}
    assert len(client.post_calls) == 1

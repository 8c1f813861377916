import httpx
import pytest

from eventrsvp.guests.dtos import GuestStatus
from eventrsvp.guests.tests.factories import make_event
from eventrsvp.notifications.sms.webhook_service import WebhookSmsService
from eventrsvp.notifications.tests.mock_http import MockHttpClient, MockResponse


class MockConfig:
    sms_webhook_url = "https://gateway.example.com/sms"
    app_url = "https://rsvp.example.com"


@pytest.mark.asyncio
async def test_confirmation_is_posted_as_json():
    client = MockHttpClient(MockResponse(json_data={"id": "gw-7"}))
    service = WebhookSmsService(config=MockConfig(), http_client_class=client)

    result = await service.send_confirmation("+15555550100", None, make_event(), GuestStatus.MAYBE)

    assert result.sent is True
    assert result.message_id == "gw-7"
    call = client.post_calls[0]
    assert call["url"] == "https://gateway.example.com/sms"
    assert call["json"]["to"] == "+15555550100"
    assert call["json"]["message"].startswith("Hi! Your RSVP for Autumn Gala")
    assert call["json"]["message"].endswith("is recorded: Maybe.")


@pytest.mark.asyncio
async def test_non_json_reply_still_counts_as_sent():
    client = MockHttpClient(MockResponse(status_code=204, headers={}))
    service = WebhookSmsService(config=MockConfig(), http_client_class=client)

    result = await service.send_sms("+15555550100", "hello")

    assert result.sent is True
    assert result.message_id is None


@pytest.mark.asyncio
async def test_gateway_failure_is_reported():
    client = MockHttpClient(raise_with=httpx.ConnectError("connection refused"))
    service = WebhookSmsService(config=MockConfig(), http_client_class=client)

    result = await service.send_sms("+15555550100", "hello")

    assert result.sent is False
    assert result.reason == "connection refused"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [
        MockResponse(json_data=["queued"]),
        MockResponse(invalid_json=True),
        MockResponse(json_data={"ok": True}),
    ],
)
async def test_accepted_sms_with_unexpected_body_is_still_sent(response):
    service = WebhookSmsService(config=MockConfig(), http_client_class=MockHttpClient(response))

    result = await service.send_sms("+15555550100", "hello")

    assert result.sent is True
    assert result.message_id is None

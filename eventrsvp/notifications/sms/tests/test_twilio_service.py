import httpx
import pytest

from eventrsvp.guests.tests.factories import make_event
from eventrsvp.notifications.sms.twilio_service import TwilioSmsService, format_phone_number
from eventrsvp.notifications.tests.mock_http import MockHttpClient, MockResponse


class MockConfig:
    twilio_account_sid = "AC123"
    twilio_auth_token = "secret"
    twilio_from_number = "+15550000000"
    app_url = "https://rsvp.example.com"


class UnconfiguredConfig(MockConfig):
    twilio_auth_token = ""


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("(555) 555-0100", "+15555550100"),
        ("1-555-555-0100", "+15555550100"),
        ("+15555550100", "+15555550100"),
        ("44 20 7946 0958", "+442079460958"),
        ("+44 20 7946 0958", "+44 20 7946 0958"),
    ],
)
def test_format_phone_number(raw, expected):
    assert format_phone_number(raw) == expected


@pytest.mark.asyncio
async def test_reminder_sms_posts_form_with_basic_auth():
    client = MockHttpClient(MockResponse(json_data={"sid": "SM42"}))
    service = TwilioSmsService(config=MockConfig(), http_client_class=client)

    result = await service.send_reminder("555-555-0100", "Ada", make_event(), "tok-abc")

    assert result.sent is True
    assert result.message_id == "SM42"
    call = client.post_calls[0]
    assert call["url"] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
    assert call["auth"] == ("AC123", "secret")
    assert call["data"]["To"] == "+15555550100"
    assert call["data"]["From"] == "+15550000000"
    assert call["data"]["Body"].startswith("Hi Ada! Reminder: You haven't responded to Autumn Gala")
    assert call["data"]["Body"].endswith("Please RSVP: https://rsvp.example.com/rsvp/tok-abc")


@pytest.mark.asyncio
async def test_provider_error_is_reported_not_raised():
    client = MockHttpClient(MockResponse(status_code=400))
    service = TwilioSmsService(config=MockConfig(), http_client_class=client)

    result = await service.send_sms("+15555550100", "hello")

    assert result.sent is False
    assert result.reason == "HTTP 400"


@pytest.mark.asyncio
async def test_unconfigured_service_never_calls_out():
    client = MockHttpClient(raise_with=httpx.ConnectError("should not be called"))
    service = TwilioSmsService(config=UnconfiguredConfig(), http_client_class=client)

    result = await service.send_sms("+15555550100", "hello")

    assert service.is_configured() is False
    assert result.reason == "SMS_NOT_CONFIGURED"
    assert client.post_calls == []


@pytest.mark.asyncio
async def test_accepted_sms_without_json_body_is_still_sent():
    client = MockHttpClient(MockResponse(invalid_json=True))
    service = TwilioSmsService(config=MockConfig(), http_client_class=client)

    result = await service.send_sms("+15555550100", "hello")

    assert result.sent is True
    assert result.message_id is None

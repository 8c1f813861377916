from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from eventrsvp.events.dtos import EventDTO
from eventrsvp.events.evaluator import ensure_utc
from eventrsvp.guests.dtos import GuestStatus
from eventrsvp.guests.urls import rsvp_page_url

STATUS_LABELS = {
    GuestStatus.ATTENDING: "Attending",
    GuestStatus.NOT_ATTENDING: "Not attending",
    GuestStatus.MAYBE: "Maybe",
    GuestStatus.PENDING: "No response yet",
}


@dataclass(frozen=True)
class DeliveryResult:
    """Outcome of one send on one channel."""

    sent: bool
    message_id: str | None = None
    reason: str | None = None

    @classmethod
    def success(cls, message_id: str | None = None) -> "DeliveryResult":
        return cls(sent=True, message_id=message_id)

    @classmethod
    def failure(cls, reason: str) -> "DeliveryResult":
        return cls(sent=False, reason=reason)


def message_id_from(response, key: str = "id") -> str | None:
    """Provider message id from an accepted response; None when the body carries none."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict) or body.get(key) is None:
        return None
    return str(body[key])


def format_event_date(value: datetime) -> str:
    value = ensure_utc(value).astimezone(UTC)
    return f"{value:%A, %B} {value.day}, {value:%Y} at {value:%H:%M} UTC"


class EmailServiceBase(ABC):
    @abstractmethod
    async def send_reminder(
        self,
        to_address: str,
        guest_name: str,
        event: EventDTO,
        rsvp_token: str,
        guest_id: UUID | None = None,
    ) -> DeliveryResult:
        pass

    @abstractmethod
    async def send_confirmation(
        self,
        to_address: str,
        guest_name: str,
        event: EventDTO,
        status: GuestStatus,
        rsvp_token: str,
        guest_id: UUID | None = None,
    ) -> DeliveryResult:
        pass


class SmsServiceBase(ABC):
    def __init__(self, app_url: str = "") -> None:
        self._app_url = app_url

    @abstractmethod
    async def send_sms(self, to_number: str, message: str) -> DeliveryResult:
        pass

    def is_configured(self) -> bool:
        return True

    async def send_reminder(
        self,
        to_number: str,
        guest_name: str | None,
        event: EventDTO,
        rsvp_token: str,
    ) -> DeliveryResult:
        rsvp_url = rsvp_page_url(self._app_url, rsvp_token)
        greeting = f"Hi {guest_name}!" if guest_name else "Hi!"
        message = (
            f"{greeting} Reminder: You haven't responded to {event.title} on "
            f"{format_event_date(event.date)}. Please RSVP: {rsvp_url}"
        )
        return await self.send_sms(to_number, message)

    async def send_confirmation(
        self,
        to_number: str,
        guest_name: str | None,
        event: EventDTO,
        status: GuestStatus,
    ) -> DeliveryResult:
        greeting = f"Hi {guest_name}!" if guest_name else "Hi!"
        message = (
            f"{greeting} Your RSVP for {event.title} on {format_event_date(event.date)} "
            f"is recorded: {STATUS_LABELS[status]}."
        )
        return await self.send_sms(to_number, message)


class DisabledSmsService(SmsServiceBase):
    """Used when no SMS provider is configured; every send reports failure."""

    def is_configured(self) -> bool:
        return False

    async def send_sms(self, to_number: str, message: str) -> DeliveryResult:
        return DeliveryResult.failure("SMS_NOT_CONFIGURED")

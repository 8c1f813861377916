from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING
from uuid import UUID

from eventrsvp.events.dtos import EventDTO

if TYPE_CHECKING:
    from eventrsvp.guests.repository.orm_models import Guest


class RSVPError(Exception):
    """Base class for rejected RSVP transitions."""


class RSVPNotFoundError(RSVPError):
    """No guest holds the token. Deliberately carries no detail about why."""

    def __init__(self) -> None:
        super().__init__("RSVP not found")


class RSVPDeadlinePassedError(RSVPError):
    def __init__(self, deadline: datetime) -> None:
        self.deadline = deadline
        super().__init__("The RSVP deadline for this event has passed")


class GuestLimitExceededError(RSVPError):
    """Raised with the validator's user-facing message."""


class GuestStatus(str, Enum):
    PENDING = "PENDING"
    ATTENDING = "ATTENDING"
    NOT_ATTENDING = "NOT_ATTENDING"
    MAYBE = "MAYBE"


# Statuses a guest may pick themself; PENDING is only ever the initial state
RESPONSE_STATUSES = (GuestStatus.ATTENDING, GuestStatus.NOT_ATTENDING, GuestStatus.MAYBE)


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"

    def __bool__(self) -> bool:
        return False


# Distinguishes "field not sent" from an explicit null in partial updates
UNSET = _Unset()


@dataclass(frozen=True)
class GuestDTO:
    """DTO for guest data."""

    id: UUID
    event_id: UUID
    email: str
    token: str
    status: GuestStatus = GuestStatus.PENDING
    name: str | None = None
    phone: str | None = None
    notify_by_email: bool = True
    notify_by_sms: bool = False
    dietary_notes: str | None = None
    max_guests: int | None = None
    additional_guests: list[str] = field(default_factory=list)
    responded_at: datetime | None = None
    reminder_sent_at: datetime | None = None
    sms_reminder_sent_at: datetime | None = None

    @classmethod
    def from_guest(cls, guest: "Guest") -> "GuestDTO":
        """Create GuestDTO from Guest ORM model (additional guests must be loaded)."""
        return cls(
            id=guest.uuid,
            event_id=guest.event_id,
            email=guest.email,
            token=guest.token,
            status=GuestStatus(guest.status),
            name=guest.name,
            phone=guest.phone,
            notify_by_email=guest.notify_by_email,
            notify_by_sms=guest.notify_by_sms,
            dietary_notes=guest.dietary_notes,
            max_guests=guest.max_guests,
            additional_guests=[extra.name for extra in guest.additional_guests],
            responded_at=guest.responded_at,
            reminder_sent_at=guest.reminder_sent_at,
            sms_reminder_sent_at=guest.sms_reminder_sent_at,
        )


@dataclass(frozen=True)
class RSVPInfoDTO:
    """DTO for the RSVP page: the guest, their event and what they may still do."""

    guest: GuestDTO
    event: EventDTO
    deadline_passed: bool
    # None when no cap applies
    remaining_guests: int | None = None


@dataclass(frozen=True)
class RSVPUpdateDTO:
    """A guest's self-service RSVP submission. ``None``/``UNSET`` fields are left as they are."""

    status: GuestStatus | None = None
    name: str | None = None
    phone: "str | None | _Unset" = UNSET
    additional_guests: list[str] | None = None
    dietary_notes: "str | None | _Unset" = UNSET

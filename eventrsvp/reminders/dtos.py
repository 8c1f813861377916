from dataclasses import dataclass, field
from enum import Enum
from uuid import UUID

from eventrsvp.events.dtos import EventDTO
from eventrsvp.guests.dtos import GuestDTO


class Channel(str, Enum):
    EMAIL = "email"
    SMS = "sms"


class ReminderBatchInProgressError(Exception):
    def __init__(self) -> None:
        super().__init__("Reminder batch already in progress")


@dataclass(frozen=True)
class ReminderCandidateDTO:
    """An upcoming event with its guests who have not responded yet."""

    event: EventDTO
    guests: list[GuestDTO] = field(default_factory=list)


@dataclass(frozen=True)
class GuestDispatchOutcome:
    guest_id: UUID
    emails_sent: int = 0
    sms_sent: int = 0
    errors: int = 0


@dataclass
class ReminderBatchResult:
    emails_sent: int = 0
    sms_sent: int = 0
    errors: int = 0
    events_due: int = 0

    def add(self, outcome: GuestDispatchOutcome) -> None:
        self.emails_sent += outcome.emails_sent
        self.sms_sent += outcome.sms_sent
        self.errors += outcome.errors

    def merge(self, other: "ReminderBatchResult") -> None:
        self.emails_sent += other.emails_sent
        self.sms_sent += other.sms_sent
        self.errors += other.errors
        self.events_due += other.events_due


class ReminderGuestNotFoundError(LookupError):
    def __init__(self, guest_id: UUID) -> None:
        self.guest_id = guest_id
        super().__init__(f"Guest {guest_id} not found")


class GuestAlreadyRespondedError(Exception):
    def __init__(self, guest_id: UUID, status: str) -> None:
        self.guest_id = guest_id
        self.status = status
        super().__init__(f"Guest {guest_id} already responded ({status})")

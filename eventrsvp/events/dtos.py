from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class ReminderType(str, Enum):
    DAY = "day"
    HOUR = "hour"


@dataclass(frozen=True)
class ReminderEntry:
    """One "N days/hours before the event" trigger of a reminder schedule."""

    type: ReminderType | str
    value: int | None

    def to_dict(self) -> dict:
        reminder_type = self.type.value if isinstance(self.type, ReminderType) else self.type
        return {"type": reminder_type, "value": self.value}


@dataclass(frozen=True)
class ScheduleValidation:
    valid: bool
    error: str | None = None

    @classmethod
    def ok(cls) -> "ScheduleValidation":
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str) -> "ScheduleValidation":
        return cls(valid=False, error=error)


@dataclass(frozen=True)
class EventDTO:
    """Event fields the reminder engine and the RSVP pages need."""

    id: UUID
    title: str
    date: datetime
    end_date: datetime | None = None
    location: str | None = None
    rsvp_deadline: datetime | None = None
    reminder_schedule: str | None = None
    max_guests_per_invitee: int | None = None

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from eventrsvp.config.table_names import TableNames
from eventrsvp.events.dtos import EventDTO
from eventrsvp.models.base import Base, TimeStamp


class Event(Base, TimeStamp):
    __tablename__ = TableNames.EVENTS.value

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    location: Mapped[str | None] = mapped_column(String(500), nullable=True)
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # Must not be after `date`; enforced by the event editor
    rsvp_deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # JSON list of {"type": "day"|"hour", "value": int}; NULL means the default rule
    reminder_schedule: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Total party size per invitee, invitee included; NULL means unlimited
    max_guests_per_invitee: Mapped[int | None] = mapped_column(Integer, nullable=True)

    def to_dto(self) -> EventDTO:
        return EventDTO(
            id=self.uuid,
            title=self.title,
            date=self.date,
            end_date=self.end_date,
            location=self.location,
            rsvp_deadline=self.rsvp_deadline,
            reminder_schedule=self.reminder_schedule,
            max_guests_per_invitee=self.max_guests_per_invitee,
        )

    def __repr__(self) -> str:
        return f"<Event {self.title} on {self.date}>"

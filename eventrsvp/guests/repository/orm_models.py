from datetime import datetime
from uuid import UUID

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eventrsvp.config.table_names import TableNames
from eventrsvp.events.repository.orm_models import Event
from eventrsvp.guests.dtos import GuestStatus
from eventrsvp.models.base import Base, TimeStamp


class Guest(Base, TimeStamp):
    __tablename__ = TableNames.GUESTS.value
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_guests_event_email"),)

    event_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.EVENTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    event: Mapped[Event] = relationship(Event)

    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)

    # RSVP status
    status: Mapped[str] = mapped_column(
        Enum(GuestStatus, name="guest_status_enum"),
        default=GuestStatus.PENDING,
        nullable=False,
        index=True,
    )
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    dietary_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Channels
    notify_by_email: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    notify_by_sms: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Access token for the RSVP links, immutable once issued
    token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True, index=True)

    # Per-channel "reminder already sent" markers. Set once, never cleared.
    reminder_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )
    sms_reminder_sent_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, default=None
    )

    # Overrides Event.max_guests_per_invitee when set
    max_guests: Mapped[int | None] = mapped_column(Integer, nullable=True)

    additional_guests: Mapped[list["AdditionalGuest"]] = relationship(
        "AdditionalGuest",
        back_populates="guest",
        cascade="all, delete-orphan",
        order_by="AdditionalGuest.position",
    )

    def __repr__(self) -> str:
        return f"<Guest {self.email} - {self.status}>"


class AdditionalGuest(Base, TimeStamp):
    """A named plus-one. Has no status of its own."""

    __tablename__ = TableNames.ADDITIONAL_GUESTS.value

    guest_id: Mapped[UUID] = mapped_column(
        ForeignKey(f"{TableNames.GUESTS.value}.uuid", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    guest: Mapped[Guest] = relationship(Guest, back_populates="additional_guests")
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    # Order the names were submitted in
    position: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self) -> str:
        return f"<AdditionalGuest {self.name} of {self.guest_id}>"

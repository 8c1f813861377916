"""Event read/write operations used by the reminder tooling. Returns DTOs, never ORM models."""

from abc import ABC, abstractmethod
from functools import partial
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventrsvp.config.database import async_session_manager
from eventrsvp.events.dtos import EventDTO, ReminderEntry
from eventrsvp.events.reminder_schedule import serialize_reminder_schedule, validate_reminders
from eventrsvp.events.repository.orm_models import Event


class EventNotFoundError(Exception):
    def __init__(self, event_id: UUID) -> None:
        self.event_id = event_id
        super().__init__(f"Event {event_id} not found")


class InvalidReminderScheduleError(ValueError):
    """Raised with a host-facing message when a schedule fails validation."""


class EventWriteModel(ABC):
    @abstractmethod
    async def get_event(self, event_id: UUID) -> EventDTO | None:
        raise NotImplementedError

    @abstractmethod
    async def set_reminder_schedule(
        self, event_id: UUID, entries: list[ReminderEntry]
    ) -> EventDTO:
        """Validate and persist a schedule. An empty list restores the default rule."""
        raise NotImplementedError


class SqlEventWriteModel(EventWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_event(self, event_id: UUID) -> EventDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await self._get_event(session, event_id)
            return event.to_dto() if event else None

    async def set_reminder_schedule(
        self, event_id: UUID, entries: list[ReminderEntry]
    ) -> EventDTO:
        validation = validate_reminders(entries)
        if not validation.valid:
            raise InvalidReminderScheduleError(validation.error)

        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            event = await self._get_event(session, event_id)
            if event is None:
                raise EventNotFoundError(event_id)

            event.reminder_schedule = serialize_reminder_schedule(entries)
            await session.flush()
            return event.to_dto()

    async def _get_event(self, session, event_id: UUID) -> Event | None:
        result = await session.execute(select(Event).where(Event.uuid == event_id))
        return result.scalar_one_or_none()

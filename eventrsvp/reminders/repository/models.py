"""Reminder batch persistence. Returns DTOs, never ORM models."""

import asyncio
import contextlib
import logging
from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from datetime import datetime
from functools import partial
from uuid import UUID

import sqlalchemy as sa
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.orm import selectinload

from eventrsvp.config.database import async_session_manager, engine
from eventrsvp.events.repository.orm_models import Event
from eventrsvp.guests.dtos import GuestDTO, GuestStatus
from eventrsvp.guests.repository.orm_models import Guest
from eventrsvp.reminders.dtos import ReminderCandidateDTO

logger = logging.getLogger(__name__)

# Arbitrary application-wide key for pg_try_advisory_lock
REMINDER_BATCH_LOCK_KEY = 7_315_001


class ReminderMarkerStore(ABC):
    @abstractmethod
    async def mark_reminders_sent(
        self,
        guest_id: UUID,
        email_sent_at: datetime | None = None,
        sms_sent_at: datetime | None = None,
    ) -> None:
        """
        Record successful sends for one guest in a single update.
        Markers that are already set keep their original value.
        """
        raise NotImplementedError


class ReminderRepository(ReminderMarkerStore):
    @abstractmethod
    async def load_candidates(
        self, window_start: datetime, window_end: datetime
    ) -> list[ReminderCandidateDTO]:
        """Events starting inside the window, each with its PENDING guests."""
        raise NotImplementedError

    @abstractmethod
    async def get_guest_candidate(self, guest_id: UUID) -> ReminderCandidateDTO | None:
        """One guest with their event, regardless of status."""
        raise NotImplementedError

    @abstractmethod
    def batch_lock(self) -> contextlib.AbstractAsyncContextManager[bool]:
        """Cross-process guard around a batch. Yields whether the lock was taken."""
        raise NotImplementedError


class SqlReminderRepository(ReminderRepository):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        bind: AsyncEngine | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self._bind = bind or engine
        # A shared session must not be used by concurrent dispatch tasks
        self._session_lock = asyncio.Lock()

    async def load_candidates(
        self, window_start: datetime, window_end: datetime
    ) -> list[ReminderCandidateDTO]:
        async with self._session() as session:
            events_result = await session.execute(
                select(Event)
                .where(Event.date >= window_start, Event.date <= window_end)
                .order_by(Event.date)
            )
            events = events_result.scalars().all()
            if not events:
                return []

            guests_result = await session.execute(
                select(Guest)
                .options(selectinload(Guest.additional_guests))
                .where(
                    Guest.event_id.in_([event.uuid for event in events]),
                    Guest.status == GuestStatus.PENDING,
                )
                .order_by(Guest.created_at)
            )
            guests_by_event: dict[UUID, list[GuestDTO]] = {}
            for guest in guests_result.scalars().all():
                guests_by_event.setdefault(guest.event_id, []).append(GuestDTO.from_guest(guest))

            return [
                ReminderCandidateDTO(event=event.to_dto(), guests=guests_by_event.get(event.uuid, []))
                for event in events
            ]

    async def get_guest_candidate(self, guest_id: UUID) -> ReminderCandidateDTO | None:
        async with self._session() as session:
            result = await session.execute(
                select(Guest)
                .options(selectinload(Guest.additional_guests), selectinload(Guest.event))
                .where(Guest.uuid == guest_id)
            )
            guest = result.scalar_one_or_none()
            if guest is None:
                return None
            return ReminderCandidateDTO(event=guest.event.to_dto(), guests=[GuestDTO.from_guest(guest)])

    async def mark_reminders_sent(
        self,
        guest_id: UUID,
        email_sent_at: datetime | None = None,
        sms_sent_at: datetime | None = None,
    ) -> None:
        values = {}
        if email_sent_at is not None:
            values["reminder_sent_at"] = sa.func.coalesce(
                Guest.reminder_sent_at, sa.literal(email_sent_at, Guest.reminder_sent_at.type)
            )
        if sms_sent_at is not None:
            values["sms_reminder_sent_at"] = sa.func.coalesce(
                Guest.sms_reminder_sent_at, sa.literal(sms_sent_at, Guest.sms_reminder_sent_at.type)
            )
        if not values:
            return

        async with self._session() as session:
            await session.execute(
                update(Guest)
                .where(Guest.uuid == guest_id)
                .values(**values)
                .execution_options(synchronize_session=False)
            )

    @contextlib.asynccontextmanager
    async def batch_lock(self) -> AsyncIterator[bool]:
        if self._bind.dialect.name != "postgresql":
            yield True
            return

        async with self._bind.connect() as conn:
            acquired = (
                await conn.execute(
                    sa.text("SELECT pg_try_advisory_lock(:key)"), {"key": REMINDER_BATCH_LOCK_KEY}
                )
            ).scalar()
            try:
                yield bool(acquired)
            finally:
                if acquired:
                    await conn.execute(
                        sa.text("SELECT pg_advisory_unlock(:key)"), {"key": REMINDER_BATCH_LOCK_KEY}
                    )

    @contextlib.asynccontextmanager
    async def _session(self) -> AsyncIterator[AsyncSession]:
        if self.session_overwrite is None:
            async with self.async_session_manager() as session:
                yield session
            return

        async with self._session_lock:
            async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
                yield session

import asyncio
import logging
from datetime import UTC, datetime
from uuid import UUID

from eventrsvp.events.evaluator import due_reminders, lookahead_until, resolve_schedule
from eventrsvp.events.reminder_schedule import format_reminder
from eventrsvp.guests.dtos import GuestStatus
from eventrsvp.notifications.dispatcher import NotificationDispatcher
from eventrsvp.reminders.config import ReminderConfig
from eventrsvp.reminders.dtos import (
    GuestAlreadyRespondedError,
    GuestDispatchOutcome,
    ReminderBatchInProgressError,
    ReminderBatchResult,
    ReminderGuestNotFoundError,
)
from eventrsvp.reminders.repository.models import ReminderRepository

logger = logging.getLogger(__name__)

# One batch per process at a time; the repository lock covers other processes
_batch_in_progress = asyncio.Lock()


class ReminderCronService:
    """One evaluation tick: load upcoming events, pick the due ones, remind their guests."""

    def __init__(
        self,
        repository: ReminderRepository,
        dispatcher: NotificationDispatcher,
        config: ReminderConfig,
    ) -> None:
        self.repository = repository
        self.dispatcher = dispatcher
        self.config = config

    async def run(self, now: datetime | None = None) -> ReminderBatchResult:
        if _batch_in_progress.locked():
            raise ReminderBatchInProgressError()

        async with _batch_in_progress:
            async with self.repository.batch_lock() as acquired:
                if not acquired:
                    raise ReminderBatchInProgressError()
                return await self._run_batch(now or datetime.now(UTC))

    async def _run_batch(self, now: datetime) -> ReminderBatchResult:
        until = lookahead_until(now, self.config.max_days_ahead, self.config.max_hours_ahead)
        candidates = await self.repository.load_candidates(now, until)
        logger.debug(f"Evaluating {len(candidates)} upcoming event(s) until {until.isoformat()}")

        result = ReminderBatchResult()
        for candidate in candidates:
            event = candidate.event
            due = due_reminders(now, event.date, resolve_schedule(event.reminder_schedule))
            if not due:
                continue

            logger.info(
                f"Event {event.id} ({event.title}) due for "
                f"{', '.join(format_reminder(entry) for entry in due)}; "
                f"{len(candidate.guests)} pending guest(s)"
            )
            result.merge(await self.dispatcher.dispatch_event(event, candidate.guests, now))

        logger.info(
            f"Reminder batch finished: {result.events_due} event(s) due, "
            f"{result.emails_sent} email(s), {result.sms_sent} SMS, {result.errors} error(s)"
        )
        return result

    async def remind_guest(self, guest_id: UUID, now: datetime | None = None) -> GuestDispatchOutcome:
        """Send a reminder to one pending guest right away, whatever was sent before."""
        candidate = await self.repository.get_guest_candidate(guest_id)
        if candidate is None or not candidate.guests:
            raise ReminderGuestNotFoundError(guest_id)

        guest = candidate.guests[0]
        if guest.status != GuestStatus.PENDING:
            raise GuestAlreadyRespondedError(guest_id, guest.status.value)

        outcome = await self.dispatcher.dispatch_guest(candidate.event, guest, now, force=True)
        logger.info(
            f"Manual reminder for guest {guest_id}: {outcome.emails_sent} email(s), "
            f"{outcome.sms_sent} SMS, {outcome.errors} error(s)"
        )
        return outcome

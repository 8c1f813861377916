import asyncio
import logging
from datetime import UTC, datetime

from eventrsvp.events.dtos import EventDTO
from eventrsvp.guests.dtos import GuestDTO, GuestStatus
from eventrsvp.notifications.base import DeliveryResult, EmailServiceBase, SmsServiceBase
from eventrsvp.reminders.config import ReminderConfig
from eventrsvp.reminders.dtos import Channel, GuestDispatchOutcome, ReminderBatchResult
from eventrsvp.reminders.repository.models import ReminderMarkerStore

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """
    Sends one reminder per eligible guest over every channel still open to them.

    Channels run concurrently and fail independently. The sent markers of the
    channels that succeeded are written together in one update per guest.
    """

    def __init__(
        self,
        email_service: EmailServiceBase,
        sms_service: SmsServiceBase,
        marker_store: ReminderMarkerStore,
        config: ReminderConfig,
    ) -> None:
        self.email_service = email_service
        self.sms_service = sms_service
        self.marker_store = marker_store
        self.config = config

    @staticmethod
    def channels_for(guest: GuestDTO, force: bool = False) -> list[Channel]:
        """Channels a reminder would go out on. ``force`` ignores the sent markers."""
        channels = []
        if guest.notify_by_email and (force or guest.reminder_sent_at is None):
            channels.append(Channel.EMAIL)
        if guest.notify_by_sms and guest.phone and (force or guest.sms_reminder_sent_at is None):
            channels.append(Channel.SMS)
        return channels

    async def _deliver(self, channel: Channel, event: EventDTO, guest: GuestDTO) -> DeliveryResult:
        try:
            if channel is Channel.EMAIL:
                return await self.email_service.send_reminder(
                    guest.email, guest.name, event, guest.token, guest_id=guest.id
                )
            return await self.sms_service.send_reminder(guest.phone, guest.name, event, guest.token)
        except Exception as e:
            logger.exception(f"Unexpected {channel.value} failure for guest {guest.id}")
            return DeliveryResult.failure(str(e) or type(e).__name__)

    async def dispatch_guest(
        self,
        event: EventDTO,
        guest: GuestDTO,
        now: datetime | None = None,
        force: bool = False,
    ) -> GuestDispatchOutcome:
        if guest.status != GuestStatus.PENDING and not force:
            return GuestDispatchOutcome(guest_id=guest.id)

        channels = self.channels_for(guest, force=force)
        if not channels:
            return GuestDispatchOutcome(guest_id=guest.id)

        now = now or datetime.now(UTC)
        results = await asyncio.gather(
            *(self._deliver(channel, event, guest) for channel in channels)
        )

        sent_channels = set()
        errors = 0
        for channel, result in zip(channels, results):
            if result.sent:
                sent_channels.add(channel)
            else:
                errors += 1
                logger.error(
                    f"Reminder {channel.value} to guest {guest.id} ({guest.email}) "
                    f"for event {event.id} failed: {result.reason}"
                )

        if sent_channels:
            try:
                await self.marker_store.mark_reminders_sent(
                    guest.id,
                    email_sent_at=now if Channel.EMAIL in sent_channels else None,
                    sms_sent_at=now if Channel.SMS in sent_channels else None,
                )
            except Exception:
                # The sends went out; only the markers are missing
                logger.exception(f"Could not record reminder markers for guest {guest.id}")
                errors += 1

        return GuestDispatchOutcome(
            guest_id=guest.id,
            emails_sent=int(Channel.EMAIL in sent_channels),
            sms_sent=int(Channel.SMS in sent_channels),
            errors=errors,
        )

    async def dispatch_event(
        self, event: EventDTO, guests: list[GuestDTO], now: datetime | None = None
    ) -> ReminderBatchResult:
        now = now or datetime.now(UTC)
        semaphore = asyncio.Semaphore(self.config.max_concurrency)

        async def _bounded(guest: GuestDTO) -> GuestDispatchOutcome:
            async with semaphore:
                return await self.dispatch_guest(event, guest, now)

        outcomes = await asyncio.gather(*(_bounded(guest) for guest in guests))

        result = ReminderBatchResult(events_due=1)
        for outcome in outcomes:
            result.add(outcome)
        return result

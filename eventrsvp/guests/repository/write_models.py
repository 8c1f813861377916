"""RSVP write model. Returns DTOs, never ORM models."""

import logging
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from functools import partial

from sqlalchemy.ext.asyncio import AsyncSession

from eventrsvp.config.database import async_session_manager
from eventrsvp.events.guest_limit import validate_guest_limit
from eventrsvp.guests.dtos import (
    UNSET,
    GuestLimitExceededError,
    GuestStatus,
    RSVPDeadlinePassedError,
    RSVPInfoDTO,
    RSVPNotFoundError,
    RSVPUpdateDTO,
)
from eventrsvp.guests.repository.orm_models import AdditionalGuest, Guest
from eventrsvp.guests.repository.read_models import build_rsvp_info, get_guest_by_token
from eventrsvp.guests.rsvp_status import is_deadline_passed
from eventrsvp.notifications.base import EmailServiceBase, SmsServiceBase

logger = logging.getLogger(__name__)


def clean_guest_names(names: list[str]) -> list[str]:
    return [name.strip() for name in names if name and name.strip()]


def _clean_text(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


class RSVPWriteModel(ABC):
    @abstractmethod
    async def submit_rsvp(
        self, token: str, update: RSVPUpdateDTO, now: datetime | None = None
    ) -> RSVPInfoDTO:
        """
        Apply a guest's RSVP form.
        Raises RSVPNotFoundError, RSVPDeadlinePassedError or GuestLimitExceededError.
        """
        raise NotImplementedError

    async def quick_rsvp(
        self, token: str, status: GuestStatus, now: datetime | None = None
    ) -> RSVPInfoDTO:
        """One-click status change from a reminder link."""
        return await self.submit_rsvp(token, RSVPUpdateDTO(status=status), now)


class SqlRSVPWriteModel(RSVPWriteModel):
    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(
        self,
        session_overwrite: AsyncSession | None = None,
        email_service: EmailServiceBase | None = None,
        sms_service: SmsServiceBase | None = None,
    ) -> None:
        self.session_overwrite = session_overwrite
        self.email_service = email_service
        self.sms_service = sms_service

    async def submit_rsvp(
        self, token: str, update: RSVPUpdateDTO, now: datetime | None = None
    ) -> RSVPInfoDTO:
        now = now or datetime.now(UTC)
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = await get_guest_by_token(session, token)
            if guest is None:
                raise RSVPNotFoundError()

            event = guest.event
            if is_deadline_passed(event.rsvp_deadline, now):
                raise RSVPDeadlinePassedError(event.rsvp_deadline)

            if update.additional_guests is not None:
                names = clean_guest_names(update.additional_guests)
            else:
                names = [extra.name for extra in guest.additional_guests]

            status = update.status or GuestStatus(guest.status)
            if status == GuestStatus.ATTENDING:
                limit = validate_guest_limit(
                    event.max_guests_per_invitee, len(names), guest.max_guests
                )
                if not limit.valid:
                    raise GuestLimitExceededError(limit.error)

            self._apply(guest, update, names, now)
            await session.flush()
            info = build_rsvp_info(guest, now)

        if update.status is not None:
            await self._send_confirmation(info)
        return info

    @staticmethod
    def _apply(guest: Guest, update: RSVPUpdateDTO, names: list[str], now: datetime) -> None:
        if update.name is not None and update.name.strip():
            guest.name = update.name.strip()
        if update.phone is not UNSET:
            guest.phone = _clean_text(update.phone)
            guest.notify_by_sms = bool(guest.phone)
        if update.dietary_notes is not UNSET:
            guest.dietary_notes = _clean_text(update.dietary_notes)
        if update.additional_guests is not None:
            guest.additional_guests = [
                AdditionalGuest(name=name, position=position) for position, name in enumerate(names)
            ]
        if update.status is not None:
            guest.status = update.status
        guest.responded_at = now

    async def _send_confirmation(self, info: RSVPInfoDTO) -> None:
        """Best effort; a failed confirmation never undoes the RSVP."""
        guest = info.guest
        if self.email_service and guest.notify_by_email:
            try:
                result = await self.email_service.send_confirmation(
                    guest.email, guest.name, info.event, guest.status, guest.token, guest_id=guest.id
                )
                if not result.sent:
                    logger.warning(f"Confirmation email to guest {guest.id} failed: {result.reason}")
            except Exception:
                logger.exception(f"Confirmation email to guest {guest.id} failed")

        if self.sms_service and guest.notify_by_sms and guest.phone:
            try:
                result = await self.sms_service.send_confirmation(
                    guest.phone, guest.name, info.event, guest.status
                )
                if not result.sent:
                    logger.warning(f"Confirmation SMS to guest {guest.id} failed: {result.reason}")
            except Exception:
                logger.exception(f"Confirmation SMS to guest {guest.id} failed")

import abc
from datetime import UTC, datetime
from functools import partial

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from eventrsvp.config.database import async_session_manager
from eventrsvp.events.guest_limit import validate_guest_limit
from eventrsvp.guests.dtos import GuestDTO, RSVPInfoDTO
from eventrsvp.guests.repository.orm_models import Guest
from eventrsvp.guests.rsvp_status import is_deadline_passed, is_well_formed_token


async def get_guest_by_token(session: AsyncSession, token: str) -> Guest | None:
    """Guest with their event and additional guests loaded. Malformed tokens never hit the database."""
    if not is_well_formed_token(token):
        return None
    result = await session.execute(
        select(Guest)
        .options(selectinload(Guest.event), selectinload(Guest.additional_guests))
        .where(Guest.token == token)
    )
    return result.scalar_one_or_none()


def build_rsvp_info(guest: Guest, now: datetime) -> RSVPInfoDTO:
    event = guest.event
    limit = validate_guest_limit(
        event.max_guests_per_invitee, len(guest.additional_guests), guest.max_guests
    )
    return RSVPInfoDTO(
        guest=GuestDTO.from_guest(guest),
        event=event.to_dto(),
        deadline_passed=is_deadline_passed(event.rsvp_deadline, now),
        remaining_guests=None if limit.unlimited else int(limit.remaining),
    )


class RSVPReadModel(abc.ABC):
    @abc.abstractmethod
    async def get_rsvp_info(self, token: str, now: datetime | None = None) -> RSVPInfoDTO | None:
        """
        Get RSVP info by token.
        Returns None for any token that does not resolve to a guest.
        """
        raise NotImplementedError


class SqlRSVPReadModel(RSVPReadModel):
    """SQL implementation of RSVP read model."""

    async_session_manager = staticmethod(partial(async_session_manager))

    def __init__(self, session_overwrite: AsyncSession | None = None) -> None:
        self.session_overwrite = session_overwrite

    async def get_rsvp_info(self, token: str, now: datetime | None = None) -> RSVPInfoDTO | None:
        async with self.async_session_manager(session_overwrite=self.session_overwrite) as session:
            guest = await get_guest_by_token(session, token)
            if guest is None:
                return None
            return build_rsvp_info(guest, now or datetime.now(UTC))

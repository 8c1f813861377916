from datetime import datetime
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from eventrsvp.guests.dtos import GuestStatus, RSVPInfoDTO
from eventrsvp.guests.repository.read_models import RSVPReadModel, SqlRSVPReadModel
from eventrsvp.guests.urls import GET_GUEST_INFO_URL

router = APIRouter()


class EventSummaryResponse(BaseModel):
    title: str
    date: datetime
    end_date: datetime | None = None
    location: str | None = None
    rsvp_deadline: datetime | None = None


class RSVPInfoResponse(BaseModel):
    """Response for RSVP info - token removed as it's in the URL."""

    guest_uuid: UUID
    email: str
    name: str | None = None
    phone: str | None = None
    status: GuestStatus
    responded_at: datetime | None = None
    dietary_notes: str | None = None
    additional_guests: list[str] = []
    # None when no cap applies
    remaining_guests: int | None = None
    deadline_passed: bool
    event: EventSummaryResponse


def to_rsvp_info_response(info: RSVPInfoDTO) -> RSVPInfoResponse:
    guest, event = info.guest, info.event
    return RSVPInfoResponse(
        guest_uuid=guest.id,
        email=guest.email,
        name=guest.name,
        phone=guest.phone,
        status=guest.status,
        responded_at=guest.responded_at,
        dietary_notes=guest.dietary_notes,
        additional_guests=guest.additional_guests,
        remaining_guests=info.remaining_guests,
        deadline_passed=info.deadline_passed,
        event=EventSummaryResponse(
            title=event.title,
            date=event.date,
            end_date=event.end_date,
            location=event.location,
            rsvp_deadline=event.rsvp_deadline,
        ),
    )


def get_rsvp_read_model() -> RSVPReadModel:
    """Dependency to get RSVP read model instance."""
    return SqlRSVPReadModel()


@router.get(GET_GUEST_INFO_URL, response_model=RSVPInfoResponse)
async def get_guest_info(
    token: str,
    read_model: RSVPReadModel = Depends(get_rsvp_read_model),
) -> RSVPInfoResponse:
    """
    Get RSVP page information by token.
    Returns guest and event details for rendering the RSVP form.
    """
    rsvp_info = await read_model.get_rsvp_info(token)

    if not rsvp_info:
        raise HTTPException(status_code=404, detail="RSVP not found")

    return to_rsvp_info_response(rsvp_info)

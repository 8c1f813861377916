from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from eventrsvp.guests.dtos import (
    UNSET,
    GuestLimitExceededError,
    RSVPDeadlinePassedError,
    RSVPNotFoundError,
    RSVPUpdateDTO,
)
from eventrsvp.guests.features.get_guest_info.router import RSVPInfoResponse, to_rsvp_info_response
from eventrsvp.guests.repository.write_models import RSVPWriteModel, SqlRSVPWriteModel
from eventrsvp.guests.rsvp_status import parse_rsvp_status
from eventrsvp.guests.urls import UPDATE_RSVP_URL
from eventrsvp.notifications import get_email_service, get_sms_service
from eventrsvp.results import Err

router = APIRouter()


class RSVPUpdateSubmit(BaseModel):
    """Fields left out of the request body are not changed."""

    status: str | None = None
    name: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=50)
    additional_guests: list[str] | None = None
    dietary_notes: str | None = Field(default=None, max_length=2000)


def get_rsvp_write_model() -> RSVPWriteModel:
    """Dependency to get RSVP write model instance."""
    return SqlRSVPWriteModel(email_service=get_email_service(), sms_service=get_sms_service())


def to_update_dto(rsvp_data: RSVPUpdateSubmit) -> RSVPUpdateDTO:
    status = None
    if rsvp_data.status is not None:
        parsed = parse_rsvp_status(rsvp_data.status)
        if isinstance(parsed, Err):
            raise HTTPException(status_code=400, detail="Invalid status")
        status = parsed.value

    sent = rsvp_data.model_fields_set
    return RSVPUpdateDTO(
        status=status,
        name=rsvp_data.name,
        phone=rsvp_data.phone if "phone" in sent else UNSET,
        additional_guests=rsvp_data.additional_guests,
        dietary_notes=rsvp_data.dietary_notes if "dietary_notes" in sent else UNSET,
    )


@router.patch(UPDATE_RSVP_URL, response_model=RSVPInfoResponse)
async def update_rsvp(
    token: str,
    rsvp_data: RSVPUpdateSubmit,
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> RSVPInfoResponse:
    """
    Submit or change a guest's RSVP.
    Rejected once the event's RSVP deadline has passed.
    """
    update = to_update_dto(rsvp_data)

    try:
        info = await write_model.submit_rsvp(token, update)
    except RSVPNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except (RSVPDeadlinePassedError, GuestLimitExceededError) as e:
        raise HTTPException(status_code=400, detail=str(e))

    return to_rsvp_info_response(info)

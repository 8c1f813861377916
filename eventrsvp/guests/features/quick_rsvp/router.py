import logging

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from eventrsvp.config.settings import settings
from eventrsvp.guests.dtos import GuestLimitExceededError, RSVPDeadlinePassedError, RSVPNotFoundError
from eventrsvp.guests.features.update_rsvp.router import get_rsvp_write_model
from eventrsvp.guests.repository.write_models import RSVPWriteModel
from eventrsvp.guests.rsvp_status import parse_rsvp_status
from eventrsvp.guests.urls import QUICK_RSVP_URL, landing_page_url, rsvp_page_url
from eventrsvp.results import Err

logger = logging.getLogger(__name__)

router = APIRouter()


def get_app_url() -> str:
    return settings.app_url


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


@router.get(QUICK_RSVP_URL, response_class=RedirectResponse)
async def quick_rsvp(
    token: str,
    status: str | None = None,
    app_url: str = Depends(get_app_url),
    write_model: RSVPWriteModel = Depends(get_rsvp_write_model),
) -> RedirectResponse:
    """
    One-click RSVP from a reminder link.
    Always answers with a redirect to the guest-facing pages.
    """
    parsed = parse_rsvp_status(status)
    if isinstance(parsed, Err):
        return _redirect(rsvp_page_url(app_url, token, error="invalid_status"))

    try:
        await write_model.quick_rsvp(token, parsed.value)
    except RSVPNotFoundError:
        return _redirect(landing_page_url(app_url, error="invalid_token"))
    except RSVPDeadlinePassedError:
        return _redirect(rsvp_page_url(app_url, token, error="deadline_passed"))
    except GuestLimitExceededError:
        return _redirect(rsvp_page_url(app_url, token, error="guest_limit"))
    except Exception:
        logger.exception("Quick RSVP failed")
        return _redirect(rsvp_page_url(app_url, token, error="rsvp_failed"))

    return _redirect(rsvp_page_url(app_url, token, success=f"rsvp_{parsed.value.value.lower()}"))

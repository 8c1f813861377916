"""Pure rules of the guest RSVP state machine."""

import re
import secrets
from datetime import datetime

from eventrsvp.events.evaluator import ensure_utc
from eventrsvp.guests.dtos import RESPONSE_STATUSES, GuestStatus
from eventrsvp.results import Err, Ok, Result

TOKEN_BYTES = 32
_TOKEN_RE = re.compile(r"^[A-Za-z0-9_-]{16,128}$")


def generate_token() -> str:
    """Opaque, unguessable access token; issued once per guest."""
    return secrets.token_urlsafe(TOKEN_BYTES)


def is_well_formed_token(token: str | None) -> bool:
    return bool(token) and _TOKEN_RE.match(token) is not None


def parse_rsvp_status(raw: str | None) -> Result[GuestStatus]:
    """Status a guest may choose for themself. PENDING and unknown values are rejected."""
    if not raw:
        return Err("missing_status")
    try:
        status = GuestStatus(raw.strip().upper())
    except ValueError:
        return Err("invalid_status")
    if status not in RESPONSE_STATUSES:
        return Err("invalid_status")
    return Ok(status)


def is_deadline_passed(deadline: datetime | None, now: datetime) -> bool:
    return deadline is not None and ensure_utc(now) > ensure_utc(deadline)

"""Decides, on each evaluation tick, whether an event's reminder is due.

Boundary rule: the time left until the event is rounded *up* to whole units
for both day and hour entries. An entry ``{day, 2}`` therefore matches for
every tick in the half-open window ``(date - 2 days, date - 1 day]``, and
``{hour, 6}`` for every tick in ``(date - 6h, date - 5h]``. Windows of one
unit never overlap, and the per-guest sent markers stop a window that spans
several ticks from producing more than one delivery.
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from eventrsvp.events.dtos import ReminderEntry, ReminderType
from eventrsvp.events.reminder_schedule import parse_reminder_schedule, validate_reminders

logger = logging.getLogger(__name__)

DEFAULT_REMINDER = ReminderEntry(type=ReminderType.DAY, value=2)

_UNITS = {
    ReminderType.DAY: timedelta(days=1),
    ReminderType.HOUR: timedelta(hours=1),
}


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes (as returned by SQLite) as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def units_until(event_date: datetime, now: datetime, unit: timedelta) -> int:
    """Whole ``unit``s until the event, rounded up."""
    remaining = ensure_utc(event_date) - ensure_utc(now)
    return -(-remaining // unit)


def reminder_matches(entry: ReminderEntry, event_date: datetime, now: datetime) -> bool:
    unit = _UNITS.get(entry.type)
    if unit is None or entry.value is None:
        return False
    return units_until(event_date, now, unit) == entry.value


def resolve_schedule(serialized: str | None) -> list[ReminderEntry]:
    """Entries to evaluate for a persisted schedule, falling back to the default rule."""
    entries = [
        entry
        for entry in parse_reminder_schedule(serialized)
        if validate_reminders([entry]).valid
    ]
    if not entries:
        if serialized:
            logger.warning("No usable entries in reminder schedule %r, using default", serialized)
        return [DEFAULT_REMINDER]
    return entries


def due_reminders(
    now: datetime, event_date: datetime, schedule: Iterable[ReminderEntry] | None = None
) -> list[ReminderEntry]:
    entries = list(schedule or []) or [DEFAULT_REMINDER]
    return [entry for entry in entries if reminder_matches(entry, event_date, now)]


def is_reminder_due(
    now: datetime, event_date: datetime, schedule: Iterable[ReminderEntry] | None = None
) -> bool:
    return bool(due_reminders(now, event_date, schedule))


def lookahead_until(now: datetime, max_days_ahead: int, max_hours_ahead: int) -> datetime:
    """Latest event start worth loading on this tick."""
    horizon = max(timedelta(days=max_days_ahead), timedelta(hours=max_hours_ahead))
    return ensure_utc(now) + horizon

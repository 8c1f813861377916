"""Reminder schedule codec.

The schedule is persisted on the event as a JSON string. Three shapes are
accepted when reading:

- ``[{"type": "day", "value": 7}, {"type": "hour", "value": 2}]`` (current)
- ``[7, 3, 1]`` (legacy, a list of day offsets)
- ``3`` (legacy, a single day offset)

Anything else, including ``None`` and empty strings, reads as "no custom
schedule" and the default rule applies.
"""

import json
import logging
from collections.abc import Iterable

from eventrsvp.events.dtos import ReminderEntry, ReminderType, ScheduleValidation

logger = logging.getLogger(__name__)

_TYPE_ORDER = {ReminderType.DAY: 0, ReminderType.HOUR: 1}


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _coerce_type(raw) -> ReminderType | str:
    try:
        return ReminderType(raw)
    except ValueError:
        return str(raw)


def _entry_from_dict(item: dict) -> ReminderEntry:
    value = item.get("value")
    return ReminderEntry(
        type=_coerce_type(item.get("type")),
        value=value if _is_int(value) else None,
    )


def parse_reminder_schedule(serialized: str | None) -> list[ReminderEntry]:
    if not serialized or not serialized.strip():
        return []

    try:
        parsed = json.loads(serialized)
    except ValueError:
        logger.warning("Ignoring unparseable reminder schedule: %r", serialized)
        return []

    if _is_int(parsed):
        return [ReminderEntry(type=ReminderType.DAY, value=parsed)]

    if not isinstance(parsed, list) or not parsed:
        return []

    first = parsed[0]
    if _is_int(first):
        return [ReminderEntry(type=ReminderType.DAY, value=day) for day in parsed if _is_int(day)]

    if isinstance(first, dict) and first.get("type") and "value" in first:
        return [_entry_from_dict(item) for item in parsed if isinstance(item, dict)]

    return []


def _sort_key(entry: ReminderEntry) -> tuple[int, int]:
    return (_TYPE_ORDER.get(entry.type, len(_TYPE_ORDER)), -(entry.value or 0))


def serialize_reminder_schedule(entries: Iterable[ReminderEntry]) -> str | None:
    """Serialize entries, earliest-firing first. An empty schedule is stored as ``None``."""
    ordered = sorted(entries, key=_sort_key)
    if not ordered:
        return None
    return json.dumps([entry.to_dict() for entry in ordered], separators=(",", ":"))


def format_reminder(entry: ReminderEntry) -> str:
    unit = entry.type.value if isinstance(entry.type, ReminderType) else str(entry.type)
    plural = "" if entry.value == 1 else "s"
    return f"{entry.value} {unit}{plural} before"


def validate_reminders(
    entries: Iterable[ReminderEntry], require_non_empty: bool = False
) -> ScheduleValidation:
    entries = list(entries)
    if require_non_empty and not entries:
        return ScheduleValidation.fail("At least one reminder is required")

    seen: set[tuple[ReminderType, int]] = set()
    for entry in entries:
        reminder_type = _coerce_type(entry.type)
        if not isinstance(reminder_type, ReminderType):
            return ScheduleValidation.fail(f"Invalid reminder type: {entry.type}")

        if entry.value is None:
            return ScheduleValidation.fail(
                f"Reminder value is required for {reminder_type.value} reminders"
            )

        if entry.value <= 0:
            return ScheduleValidation.fail(
                f"Reminder value must be positive: {format_reminder(entry)}"
            )

        key = (reminder_type, entry.value)
        if key in seen:
            return ScheduleValidation.fail(f"Duplicate reminder: {format_reminder(entry)}")
        seen.add(key)

    return ScheduleValidation.ok()

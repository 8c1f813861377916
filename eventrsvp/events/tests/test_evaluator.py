from datetime import UTC, datetime, timedelta

import pytest

from eventrsvp.events.dtos import ReminderEntry, ReminderType
from eventrsvp.events.evaluator import (
    DEFAULT_REMINDER,
    due_reminders,
    is_reminder_due,
    lookahead_until,
    resolve_schedule,
    units_until,
)

EVENT_DATE = datetime(2026, 11, 7, 18, 0, tzinfo=UTC)


def test_default_rule_fires_exactly_two_days_before():
    assert is_reminder_due(EVENT_DATE - timedelta(days=2), EVENT_DATE)


@pytest.mark.parametrize(
    "before, due",
    [
        (timedelta(days=2, seconds=1), False),
        (timedelta(days=2), True),
        (timedelta(days=1, hours=12), True),
        (timedelta(days=1, seconds=1), True),
        (timedelta(days=1), False),
        (timedelta(hours=3), False),
    ],
)
def test_default_rule_window_rounds_time_left_up(before, due):
    assert is_reminder_due(EVENT_DATE - before, EVENT_DATE) is due


@pytest.mark.parametrize(
    "before, due",
    [
        (timedelta(hours=6, minutes=1), False),
        (timedelta(hours=6), True),
        (timedelta(hours=5, minutes=30), True),
        (timedelta(hours=5), False),
    ],
)
def test_hour_entry_window(before, due):
    schedule = [ReminderEntry(ReminderType.HOUR, 6)]

    assert is_reminder_due(EVENT_DATE - before, EVENT_DATE, schedule) is due


def test_custom_schedule_replaces_default():
    schedule = [ReminderEntry(ReminderType.DAY, 1), ReminderEntry(ReminderType.HOUR, 6)]

    assert not is_reminder_due(EVENT_DATE - timedelta(days=2), EVENT_DATE, schedule)
    assert due_reminders(EVENT_DATE - timedelta(hours=20), EVENT_DATE, schedule) == [
        ReminderEntry(ReminderType.DAY, 1)
    ]
    assert due_reminders(EVENT_DATE - timedelta(hours=6), EVENT_DATE, schedule) == [
        ReminderEntry(ReminderType.DAY, 1),
        ReminderEntry(ReminderType.HOUR, 6),
    ]


def test_past_events_are_never_due():
    schedule = [ReminderEntry(ReminderType.DAY, 1), ReminderEntry(ReminderType.HOUR, 1)]

    assert not is_reminder_due(EVENT_DATE + timedelta(minutes=5), EVENT_DATE, schedule)
    assert not is_reminder_due(EVENT_DATE, EVENT_DATE, schedule)


def test_naive_datetimes_are_read_as_utc():
    naive_date = EVENT_DATE.replace(tzinfo=None)

    assert units_until(naive_date, EVENT_DATE - timedelta(days=2), timedelta(days=1)) == 2


def test_resolve_schedule_defaults_when_absent_or_unusable():
    assert resolve_schedule(None) == [DEFAULT_REMINDER]
    assert resolve_schedule("garbage") == [DEFAULT_REMINDER]
    assert resolve_schedule('[{"type":"week","value":1}]') == [DEFAULT_REMINDER]


def test_resolve_schedule_drops_only_invalid_entries():
    serialized = '[{"type":"day","value":3},{"type":"day","value":0},{"type":"fortnight","value":1}]'

    assert resolve_schedule(serialized) == [ReminderEntry(ReminderType.DAY, 3)]


def test_lookahead_covers_the_longer_horizon():
    now = datetime(2026, 11, 1, tzinfo=UTC)

    assert lookahead_until(now, 14, 48) == now + timedelta(days=14)
    assert lookahead_until(now, 1, 72) == now + timedelta(hours=72)

from uuid import uuid4

import pytest

from eventrsvp.events.dtos import ReminderEntry, ReminderType
from eventrsvp.events.repository.write_models import (
    EventNotFoundError,
    InvalidReminderScheduleError,
    SqlEventWriteModel,
)
from eventrsvp.guests.tests.factories import create_event


@pytest.mark.asyncio
async def test_set_reminder_schedule_persists_normalised_json(db_session):
    event = await create_event(db_session)
    write_model = SqlEventWriteModel(session_overwrite=db_session)

    updated = await write_model.set_reminder_schedule(
        event.uuid,
        [ReminderEntry(ReminderType.HOUR, 6), ReminderEntry(ReminderType.DAY, 1)],
    )

    assert updated.reminder_schedule == '[{"type":"day","value":1},{"type":"hour","value":6}]'
    stored = await write_model.get_event(event.uuid)
    assert stored.reminder_schedule == updated.reminder_schedule


@pytest.mark.asyncio
async def test_empty_schedule_clears_column(db_session):
    event = await create_event(db_session, reminder_schedule="[3]")
    write_model = SqlEventWriteModel(session_overwrite=db_session)

    updated = await write_model.set_reminder_schedule(event.uuid, [])

    assert updated.reminder_schedule is None


@pytest.mark.asyncio
async def test_invalid_schedule_is_rejected_before_touching_the_event(db_session):
    event = await create_event(db_session, reminder_schedule="[3]")
    write_model = SqlEventWriteModel(session_overwrite=db_session)

    with pytest.raises(InvalidReminderScheduleError, match="Duplicate reminder: 1 day before"):
        await write_model.set_reminder_schedule(
            event.uuid,
            [ReminderEntry(ReminderType.DAY, 1), ReminderEntry(ReminderType.DAY, 1)],
        )

    assert (await write_model.get_event(event.uuid)).reminder_schedule == "[3]"


@pytest.mark.asyncio
async def test_unknown_event(db_session):
    write_model = SqlEventWriteModel(session_overwrite=db_session)

    assert await write_model.get_event(uuid4()) is None
    with pytest.raises(EventNotFoundError):
        await write_model.set_reminder_schedule(uuid4(), [ReminderEntry(ReminderType.DAY, 2)])

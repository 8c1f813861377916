from datetime import UTC, datetime, timedelta

import pytest

from eventrsvp.guests.dtos import GuestStatus
from eventrsvp.guests.features.get_guest_info.router import get_rsvp_read_model
from eventrsvp.guests.rsvp_status import generate_token
from eventrsvp.guests.tests.factories import make_event, make_guest
from eventrsvp.guests.tests.inmemory_models import InMemoryRSVPReadModel, RSVPMemory
from eventrsvp.guests.urls import GET_GUEST_INFO_URL


@pytest.fixture
def event():
    return make_event(max_guests_per_invitee=3, date=datetime.now(UTC) + timedelta(days=10))


@pytest.fixture
def guest(event):
    return make_guest(event, name="Ada", additional_guests=["Charles"], dietary_notes="vegan")


@pytest.fixture
def read_model(event, guest):
    return InMemoryRSVPReadModel(RSVPMemory(event, [guest]))


@pytest.mark.asyncio
async def test_get_rsvp_info(client_factory, read_model, guest):
    overrides = {get_rsvp_read_model: lambda: read_model}

    async with client_factory(overrides) as client:
        response = await client.get(GET_GUEST_INFO_URL.format(token=guest.token))

    assert response.status_code == 200
    data = response.json()
    assert data["guest_uuid"] == str(guest.id)
    assert data["name"] == "Ada"
    assert data["status"] == GuestStatus.PENDING.value
    assert data["additional_guests"] == ["Charles"]
    assert data["dietary_notes"] == "vegan"
    assert data["remaining_guests"] == 1
    assert data["deadline_passed"] is False
    assert data["event"]["title"] == "Autumn Gala"
    assert "token" not in data


@pytest.mark.asyncio
async def test_get_rsvp_info_deadline_passed(client_factory):
    event = make_event(rsvp_deadline=datetime.now(UTC) - timedelta(days=1))
    guest = make_guest(event)
    read_model = InMemoryRSVPReadModel(RSVPMemory(event, [guest]))

    async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
        response = await client.get(GET_GUEST_INFO_URL.format(token=guest.token))

    assert response.status_code == 200
    assert response.json()["deadline_passed"] is True
    assert response.json()["remaining_guests"] is None


@pytest.mark.asyncio
async def test_get_rsvp_info_unknown_token(client_factory, read_model):
    async with client_factory({get_rsvp_read_model: lambda: read_model}) as client:
        response = await client.get(GET_GUEST_INFO_URL.format(token=generate_token()))

    assert response.status_code == 404
    assert response.json()["detail"] == "RSVP not found"

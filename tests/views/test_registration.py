import pytest
from blacksheep import HTTPException, Request
from oes.skating.entities.event import EventEntity
from oes.skating.entities.user import UserEntity
from oes.skating.serialization.json import json_loads
from oes.skating.services.event import EventService
from oes.skating.services.registration import RegistrationService
from oes.skating.services.user import UserService
from oes.skating.views.parameters import AttrsBody
from oes.skating.views.registration import (
    CreateRegistrationRequest,
    create_registration,
    list_registrations,
)
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def service(db: AsyncSession) -> RegistrationService:
    return RegistrationService(db, EventService(db), UserService(db))


def _body(event: EventEntity, skater_id: str, **kwargs):
    return AttrsBody(
        CreateRegistrationRequest(
            event_id=event.id,
            skater_id=skater_id,
            competition_id=event.competition_id,
            **kwargs,
        )
    )


@pytest.mark.asyncio
async def test_create_registration(
    service: RegistrationService,
    request_session,
    event: EventEntity,
    skater: UserEntity,
):
    with request_session():
        response = await create_registration(
            _body(event, skater.id, notes="Good luck"), service
        )

    assert response.status == 201
    body = json_loads(response.content.body)
    assert body["eventId"] == event.id
    assert body["skaterId"] == skater.id
    assert body["competitionId"] == event.competition_id
    assert body["notes"] == "Good luck"
    assert body["event"]["name"] == "Senior Ladies Free Skate"
    assert body["event"]["competition"] == {
        "id": event.competition_id,
        "name": "Spring Championship",
    }
    assert body["skater"] == {
        "id": skater.id,
        "name": "Emma",
        "email": "emma@test.com",
    }


@pytest.mark.asyncio
async def test_create_registration_duplicate(
    service: RegistrationService,
    request_session,
    event: EventEntity,
    skater: UserEntity,
):
    with request_session():
        await create_registration(_body(event, skater.id), service)

        with pytest.raises(HTTPException) as exc_info:
            await create_registration(_body(event, skater.id), service)

    assert exc_info.value.status == 400
    assert str(exc_info.value) == "Skater is already registered for this event"


@pytest.mark.asyncio
async def test_create_registration_full(
    service: RegistrationService,
    db: AsyncSession,
    request_session,
    event: EventEntity,
    skater: UserEntity,
    skater2: UserEntity,
):
    event_id = event.id
    with request_session():
        await create_registration(_body(event, skater.id), service)

        with pytest.raises(HTTPException) as exc_info:
            await create_registration(_body(event, skater2.id), service)

    assert exc_info.value.status == 400
    assert str(exc_info.value) == "Event is full"
    assert await EventService(db).count_registrations(event_id) == 1


@pytest.mark.asyncio
async def test_create_registration_event_not_found(
    service: RegistrationService,
    request_session,
    event: EventEntity,
    skater: UserEntity,
):
    body = AttrsBody(
        CreateRegistrationRequest(
            event_id="missing",
            skater_id=skater.id,
            competition_id=event.competition_id,
        )
    )
    with request_session():
        with pytest.raises(HTTPException) as exc_info:
            await create_registration(body, service)

    assert exc_info.value.status == 404
    assert str(exc_info.value) == "Event not found"


@pytest.mark.asyncio
async def test_create_registration_skater_not_found(
    service: RegistrationService, request_session, event: EventEntity
):
    with request_session():
        with pytest.raises(HTTPException) as exc_info:
            await create_registration(_body(event, "missing"), service)

    assert exc_info.value.status == 404


def test_create_registration_request_validation():
    with pytest.raises(ValueError):
        CreateRegistrationRequest(event_id="", skater_id="s", competition_id="c")


@pytest.mark.asyncio
async def test_list_registrations(
    service: RegistrationService,
    request_session,
    event: EventEntity,
    skater: UserEntity,
):
    with request_session():
        await create_registration(_body(event, skater.id), service)

    request = Request(
        "GET",
        f"/api/registrations?competitionId={event.competition_id}".encode(),
        None,
    )
    result = await list_registrations(request, service)
    assert [r["skaterId"] for r in result] == [skater.id]
    assert result[0]["event"]["competition"]["name"] == "Spring Championship"

    request = Request("GET", b"/api/registrations?skaterId=other", None)
    assert await list_registrations(request, service) == []


@pytest.mark.asyncio
async def test_single_entry_event(
    service: RegistrationService,
    db: AsyncSession,
    request_session,
    event: EventEntity,
    skater: UserEntity,
    skater2: UserEntity,
):
    event_id = event.id
    body_a = _body(event, skater.id)
    body_c = _body(event, skater2.id)
    statuses = []

    with request_session():
        response = await create_registration(body_a, service)
        statuses.append(response.status)

        for body in (body_a, body_c):
            with pytest.raises(HTTPException) as exc_info:
                await create_registration(body, service)
            statuses.append((exc_info.value.status, str(exc_info.value)))

    assert statuses == [
        201,
        (400, "Skater is already registered for this event"),
        (400, "Event is full"),
    ]
    assert await EventService(db).count_registrations(event_id) == 1

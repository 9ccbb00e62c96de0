import pytest
from blacksheep import HTTPException, Request
from oes.skating.entities.competition import CompetitionEntity
from oes.skating.entities.event import EventEntity
from oes.skating.entities.registration import RegistrationEntity
from oes.skating.entities.user import UserEntity
from oes.skating.serialization.json import json_loads
from oes.skating.services.competition import CompetitionService
from oes.skating.services.event import EventService
from oes.skating.views.event import CreateEventRequest, create_event, list_events
from oes.skating.views.parameters import AttrsBody
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def service(db: AsyncSession) -> EventService:
    return EventService(db)


@pytest.mark.asyncio
async def test_create_event(
    service: EventService,
    db: AsyncSession,
    request_session,
    competition: CompetitionEntity,
):
    body = AttrsBody(
        CreateEventRequest(
            competition_id=competition.id,
            name="Junior Men Short Program",
            level="Junior",
            entry_fee=60,
            max_entries=15,
        )
    )
    with request_session():
        response = await create_event(body, service, CompetitionService(db))

    assert response.status == 201
    result = json_loads(response.content.body)
    assert result["competitionId"] == competition.id
    assert result["maxEntries"] == 15
    assert result["entryFee"] == 60
    assert result["registrationCount"] == 0
    assert result["competition"]["name"] == "Spring Championship"


@pytest.mark.asyncio
async def test_create_event_competition_not_found(
    service: EventService, db: AsyncSession, request_session
):
    body = AttrsBody(CreateEventRequest(competition_id="missing", name="Test"))
    with request_session():
        with pytest.raises(HTTPException) as exc_info:
            await create_event(body, service, CompetitionService(db))

    assert exc_info.value.status == 404
    assert str(exc_info.value) == "Competition not found"


def test_create_event_request_validation():
    with pytest.raises(ValueError):
        CreateEventRequest(competition_id="c", name="Test", max_entries=0)

    with pytest.raises(ValueError):
        CreateEventRequest(competition_id="c", name="Test", entry_fee=-5)


@pytest.mark.asyncio
async def test_list_events(
    service: EventService,
    db: AsyncSession,
    event: EventEntity,
    skater: UserEntity,
):
    db.add(
        RegistrationEntity(event=event, skater=skater, competition=event.competition)
    )
    await db.commit()

    request = Request(
        "GET", f"/api/events?competitionId={event.competition_id}".encode(), None
    )
    result = await list_events(request, service)
    assert [e["id"] for e in result] == [event.id]
    assert result[0]["registrationCount"] == 1
    assert result[0]["registrations"][0]["skater"]["name"] == "Emma"

    request = Request("GET", b"/api/events?competitionId=other", None)
    assert await list_events(request, service) == []

from datetime import date

import pytest
import pytest_asyncio
from oes.skating.entities.competition import CompetitionEntity
from oes.skating.entities.event import EventEntity
from oes.skating.entities.user import UserEntity
from oes.skating.models.registration import (
    AlreadyRegisteredError,
    CompetitionMismatchError,
    EventFullError,
    EventNotFoundError,
    SkaterNotFoundError,
)
from oes.skating.services.event import EventService
from oes.skating.services.registration import RegistrationService
from oes.skating.services.user import UserService
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def event_service(db: AsyncSession) -> EventService:
    return EventService(db)


@pytest.fixture
def service(db: AsyncSession, event_service: EventService) -> RegistrationService:
    return RegistrationService(db, event_service, UserService(db))


@pytest_asyncio.fixture
async def open_event(db: AsyncSession, competition: CompetitionEntity) -> EventEntity:
    event = EventEntity(
        competition=competition,
        name="Juvenile Girls",
        max_entries=None,
        registrations=[],
    )
    db.add(event)
    await db.commit()
    return event


async def _admit(service: RegistrationService, event: EventEntity, skater_id: str):
    return await service.admit(
        event_id=event.id,
        skater_id=skater_id,
        competition_id=event.competition_id,
    )


@pytest.mark.asyncio
async def test_admit(
    service: RegistrationService,
    event_service: EventService,
    db: AsyncSession,
    event: EventEntity,
    skater: UserEntity,
):
    reg = await service.admit(
        event_id=event.id,
        skater_id=skater.id,
        competition_id=event.competition_id,
        notes="First competition",
    )
    await db.commit()

    assert reg.id
    assert reg.event_id == event.id
    assert reg.skater_id == skater.id
    assert reg.competition_id == event.competition_id
    assert reg.notes == "First competition"
    assert reg.created_at is not None
    assert reg.event.competition.id == event.competition_id
    assert reg.skater.email == "emma@test.com"
    assert await event_service.count_registrations(event.id) == 1


@pytest.mark.asyncio
async def test_admit_event_full(
    service: RegistrationService,
    event_service: EventService,
    db: AsyncSession,
    event: EventEntity,
    skater: UserEntity,
    skater2: UserEntity,
):
    await _admit(service, event, skater.id)
    await db.commit()

    with pytest.raises(EventFullError) as exc_info:
        await _admit(service, event, skater2.id)

    assert str(exc_info.value) == "Event is full"
    assert await event_service.count_registrations(event.id) == 1


@pytest.mark.asyncio
async def test_admit_duplicate_checked_before_capacity(
    service: RegistrationService,
    db: AsyncSession,
    event: EventEntity,
    skater: UserEntity,
):
    await _admit(service, event, skater.id)
    await db.commit()

    # the event is also full, but the duplicate is reported
    with pytest.raises(AlreadyRegisteredError) as exc_info:
        await _admit(service, event, skater.id)

    assert str(exc_info.value) == "Skater is already registered for this event"


@pytest.mark.asyncio
async def test_admit_event_not_found(
    service: RegistrationService, competition: CompetitionEntity, skater: UserEntity
):
    with pytest.raises(EventNotFoundError) as exc_info:
        await service.admit(
            event_id="missing",
            skater_id=skater.id,
            competition_id=competition.id,
        )

    assert str(exc_info.value) == "Event not found"


@pytest.mark.asyncio
async def test_admit_event_not_found_before_skater(
    service: RegistrationService, competition: CompetitionEntity
):
    with pytest.raises(EventNotFoundError):
        await service.admit(
            event_id="missing",
            skater_id="missing",
            competition_id=competition.id,
        )


@pytest.mark.asyncio
async def test_admit_unlimited(
    service: RegistrationService,
    event_service: EventService,
    db: AsyncSession,
    open_event: EventEntity,
    skater: UserEntity,
    skater2: UserEntity,
):
    await _admit(service, open_event, skater.id)
    await _admit(service, open_event, skater2.id)
    await db.commit()

    assert await event_service.count_registrations(open_event.id) == 2


@pytest.mark.asyncio
async def test_admit_skater_not_found(
    service: RegistrationService, open_event: EventEntity
):
    with pytest.raises(SkaterNotFoundError):
        await _admit(service, open_event, "missing")


@pytest.mark.asyncio
async def test_admit_competition_mismatch(
    service: RegistrationService,
    db: AsyncSession,
    open_event: EventEntity,
    skater: UserEntity,
):
    other = CompetitionEntity(
        name="Other",
        start_date=date(2025, 5, 1),
        end_date=date(2025, 5, 1),
        updated_at=None,
        events=[],
    )
    db.add(other)
    await db.commit()

    with pytest.raises(CompetitionMismatchError):
        await service.admit(
            event_id=open_event.id,
            skater_id=skater.id,
            competition_id=other.id,
        )


@pytest.mark.asyncio
async def test_admit_concurrent_duplicate(
    service: RegistrationService,
    db: AsyncSession,
    open_event: EventEntity,
    skater: UserEntity,
    monkeypatch: pytest.MonkeyPatch,
):
    event_id = open_event.id
    skater_id = skater.id
    competition_id = open_event.competition_id

    await _admit(service, open_event, skater_id)
    await db.commit()

    # simulate a registration inserted after the duplicate check
    orig = service.get_registration_for_skater
    calls = []

    async def get_registration_for_skater(event_id, skater_id):
        calls.append(event_id)
        if len(calls) == 1:
            return None
        return await orig(event_id, skater_id)

    monkeypatch.setattr(
        service, "get_registration_for_skater", get_registration_for_skater
    )

    with pytest.raises(AlreadyRegisteredError):
        await service.admit(
            event_id=event_id,
            skater_id=skater_id,
            competition_id=competition_id,
        )

    assert len(calls) == 2


@pytest.mark.asyncio
async def test_get_registration_for_skater(
    service: RegistrationService,
    db: AsyncSession,
    event: EventEntity,
    skater: UserEntity,
    skater2: UserEntity,
):
    reg = await _admit(service, event, skater.id)
    await db.commit()

    found = await service.get_registration_for_skater(event.id, skater.id)
    assert found is not None
    assert found.id == reg.id
    assert await service.get_registration_for_skater(event.id, skater2.id) is None


@pytest.mark.asyncio
async def test_list_registrations(
    service: RegistrationService,
    db: AsyncSession,
    event: EventEntity,
    open_event: EventEntity,
    skater: UserEntity,
    skater2: UserEntity,
):
    await _admit(service, event, skater.id)
    await _admit(service, open_event, skater.id)
    await _admit(service, open_event, skater2.id)
    await db.commit()

    res = await service.list_registrations()
    assert len(res) == 3

    res = await service.list_registrations(skater_id=skater2.id)
    assert [r.event_id for r in res] == [open_event.id]
    assert res[0].event.competition.id == open_event.competition_id
    assert res[0].skater.id == skater2.id

    res = await service.list_registrations(competition_id=event.competition_id)
    assert len(res) == 3

    res = await service.list_registrations(competition_id="other")
    assert res == []


@pytest.mark.asyncio
async def test_list_registrations_pagination(
    service: RegistrationService,
    db: AsyncSession,
    open_event: EventEntity,
    skater: UserEntity,
    skater2: UserEntity,
):
    await _admit(service, open_event, skater.id)
    await _admit(service, open_event, skater2.id)
    await db.commit()

    assert len(await service.list_registrations(per_page=1)) == 1
    assert len(await service.list_registrations(page=1, per_page=1)) == 1
    assert len(await service.list_registrations(page=1)) == 0

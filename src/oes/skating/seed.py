"""Fixture loader for demo and development data."""
import argparse
import asyncio
from collections.abc import Sequence
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from attrs import define, frozen
from loguru import logger
from oes.skating.config import load_config, yaml
from oes.skating.database import DBConfig
from oes.skating.entities.competition import CompetitionEntity
from oes.skating.entities.event import EventEntity
from oes.skating.entities.registration import RegistrationEntity
from oes.skating.entities.user import UserEntity
from oes.skating.log import setup_logging
from oes.skating.models.competition import CompetitionStatus
from oes.skating.models.user import UserRole
from oes.skating.serialization import get_config_converter
from oes.skating.services.competition import CompetitionService
from oes.skating.services.event import EventService
from oes.skating.services.registration import RegistrationService
from oes.skating.services.user import UserService
from sqlalchemy.ext.asyncio import AsyncSession


@frozen(kw_only=True)
class SeedUser:
    """A user in a fixture file."""

    email: str
    name: Optional[str] = None
    role: UserRole = UserRole.skater


@frozen(kw_only=True)
class SeedCompetition:
    """A competition in a fixture file."""

    id: str
    name: str
    description: Optional[str] = None
    start_date: date
    end_date: date
    venue: Optional[str] = None
    address: Optional[str] = None
    status: CompetitionStatus = CompetitionStatus.draft
    entry_fee: float = 0
    max_entries: Optional[int] = None
    organizer: Optional[str] = None
    """The organizer's email address."""


@frozen(kw_only=True)
class SeedEvent:
    """An event in a fixture file."""

    id: str
    competition_id: str
    name: str
    description: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None
    age_group: Optional[str] = None
    entry_fee: float = 0
    max_entries: Optional[int] = None
    requirements: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


@frozen(kw_only=True)
class SeedRegistration:
    """A registration in a fixture file."""

    id: Optional[str] = None
    event_id: str
    skater: str
    """The skater's email address."""

    notes: Optional[str] = None


@frozen(kw_only=True)
class SeedData:
    """The contents of a fixture file."""

    users: Sequence[SeedUser] = ()
    competitions: Sequence[SeedCompetition] = ()
    events: Sequence[SeedEvent] = ()
    registrations: Sequence[SeedRegistration] = ()


@define
class SeedResult:
    """The number of records created from a fixture."""

    users: int = 0
    competitions: int = 0
    events: int = 0
    registrations: int = 0


def load_seed_data(path: Path) -> SeedData:
    """Load a fixture file."""
    doc = yaml.load(path)
    return get_config_converter().structure(doc or {}, SeedData)


async def apply_seed_data(db: AsyncSession, data: SeedData) -> SeedResult:
    """Create the records in ``data`` that do not exist yet.

    Users are matched by email, competitions and events by ID, and registrations
    by event and skater. Existing records are left unchanged. Does not commit.

    Raises:
        ValueError: If a record refers to a user, competition or event that is
            not in the database or the fixture.
    """
    result = SeedResult()
    user_service = UserService(db)
    competition_service = CompetitionService(db)
    event_service = EventService(db)
    registration_service = RegistrationService(db, event_service, user_service)

    users: dict[str, UserEntity] = {}

    async def get_user(email: str) -> UserEntity:
        user = users.get(email)
        if user is None:
            user = await user_service.get_user_by_email(email)
        if user is None:
            raise ValueError(f"User not found: {email}")
        return user

    for seed_user in data.users:
        user = await user_service.get_user_by_email(seed_user.email)
        if user is None:
            user = UserEntity(
                email=seed_user.email,
                name=seed_user.name,
                role=seed_user.role,
            )
            await user_service.create_user(user)
            result.users += 1
        users[seed_user.email] = user

    for seed_comp in data.competitions:
        if await competition_service.get_competition(seed_comp.id) is not None:
            continue

        organizer = await get_user(seed_comp.organizer) if seed_comp.organizer else None
        competition = CompetitionEntity(
            id=seed_comp.id,
            name=seed_comp.name,
            description=seed_comp.description,
            start_date=seed_comp.start_date,
            end_date=seed_comp.end_date,
            venue=seed_comp.venue,
            address=seed_comp.address,
            status=seed_comp.status,
            entry_fee=seed_comp.entry_fee,
            max_entries=seed_comp.max_entries,
            organizer=organizer,
            updated_at=None,
            events=[],
        )
        await competition_service.create_competition(competition)
        result.competitions += 1

    for seed_event in data.events:
        if await event_service.get_event(seed_event.id) is not None:
            continue

        competition = await competition_service.get_competition(
            seed_event.competition_id
        )
        if competition is None:
            raise ValueError(f"Competition not found: {seed_event.competition_id}")

        event = EventEntity(
            id=seed_event.id,
            competition=competition,
            name=seed_event.name,
            description=seed_event.description,
            category=seed_event.category,
            level=seed_event.level,
            age_group=seed_event.age_group,
            entry_fee=seed_event.entry_fee,
            max_entries=seed_event.max_entries,
            requirements=seed_event.requirements,
            start_time=seed_event.start_time,
            end_time=seed_event.end_time,
            registrations=[],
        )
        await event_service.create_event(event)
        result.events += 1

    for seed_reg in data.registrations:
        skater = await get_user(seed_reg.skater)
        existing = await registration_service.get_registration_for_skater(
            seed_reg.event_id, skater.id
        )
        if existing is not None:
            continue

        event = await event_service.get_event(seed_reg.event_id)
        if event is None:
            raise ValueError(f"Event not found: {seed_reg.event_id}")

        registration = RegistrationEntity(
            event=event,
            skater=skater,
            competition=event.competition,
            notes=seed_reg.notes,
        )
        if seed_reg.id is not None:
            registration.id = seed_reg.id
        await registration_service.create_registration(registration)
        result.registrations += 1

    return result


async def seed_database(config_path: Path, fixture_path: Path) -> SeedResult:
    """Create tables if needed and apply a fixture file."""
    config = load_config(config_path)
    data = load_seed_data(fixture_path)
    db_config = DBConfig.create(config.database.url)

    try:
        await db_config.create_tables()
        async with db_config.session_factory() as session:
            result = await apply_seed_data(session, data)
            await session.commit()
    finally:
        await db_config.close()

    logger.info(
        "Seeded {} users, {} competitions, {} events, {} registrations",
        result.users,
        result.competitions,
        result.events,
        result.registrations,
    )
    return result


def run():
    """Entry point for the seed console script."""
    parser = argparse.ArgumentParser(
        description="Load a fixture file into the skating competition database",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="path to the config file",
        default=Path("config.yml"),
    )
    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="enable debug logging",
        default=False,
    )
    parser.add_argument("fixture", type=Path, help="path to the fixture file")

    args = parser.parse_args()
    setup_logging(debug=args.debug)
    asyncio.run(seed_database(args.config, args.fixture))

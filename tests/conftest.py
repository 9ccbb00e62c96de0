import os
from contextlib import contextmanager
from datetime import date
from pathlib import Path

import pytest
import pytest_asyncio
from oes.skating.database import DBConfig, session_context
from oes.skating.entities.base import import_entities
from oes.skating.entities.competition import CompetitionEntity
from oes.skating.entities.event import EventEntity
from oes.skating.entities.user import UserEntity
from oes.skating.models.competition import CompetitionStatus
from oes.skating.models.user import UserRole
from sqlalchemy.ext.asyncio import AsyncSession

import_entities()


@pytest.fixture
def data_dir() -> Path:
    return Path(__file__).parent / "test_data"


@pytest_asyncio.fixture
async def db_config(tmp_path: Path):
    # fall back to a throwaway SQLite database
    url = os.getenv("TEST_DB_URL", None)
    if url is None:
        url = f"sqlite+aiosqlite:///{tmp_path / 'test.db'}"

    config = DBConfig.create(url)
    await config.create_tables()
    yield config
    await config.drop_tables()
    await config.close()


@pytest_asyncio.fixture
async def db(db_config: DBConfig):
    session = db_config.session_factory()
    yield session
    await session.close()


@pytest.fixture
def request_session(db: AsyncSession):
    """Use ``db`` as the request's session, like the session middleware."""

    @contextmanager
    def use():
        token = session_context.set(db)
        try:
            yield db
        finally:
            session_context.reset(token)

    return use


@pytest_asyncio.fixture
async def organizer(db: AsyncSession) -> UserEntity:
    user = UserEntity(
        email="organizer@test.com", name="Sarah Johnson", role=UserRole.organizer
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def skater(db: AsyncSession) -> UserEntity:
    user = UserEntity(email="emma@test.com", name="Emma", role=UserRole.skater)
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def skater2(db: AsyncSession) -> UserEntity:
    user = UserEntity(email="michael@test.com", name="Michael", role=UserRole.skater)
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def competition(db: AsyncSession, organizer: UserEntity) -> CompetitionEntity:
    comp = CompetitionEntity(
        name="Spring Championship",
        description="Annual spring competition",
        start_date=date(2025, 4, 15),
        end_date=date(2025, 4, 17),
        venue="Ice Palace Arena",
        status=CompetitionStatus.registration_open,
        entry_fee=75,
        organizer=organizer,
        updated_at=None,
        events=[],
    )
    db.add(comp)
    await db.commit()
    return comp


@pytest_asyncio.fixture
async def event(db: AsyncSession, competition: CompetitionEntity) -> EventEntity:
    event = EventEntity(
        competition=competition,
        name="Senior Ladies Free Skate",
        category="Freestyle",
        level="Senior",
        entry_fee=75,
        max_entries=1,
        registrations=[],
    )
    db.add(event)
    await db.commit()
    return event

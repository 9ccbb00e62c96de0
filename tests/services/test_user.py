import pytest
from oes.skating.entities.user import UserEntity
from oes.skating.models.user import UserExistsError, UserRole
from oes.skating.services.user import UserService
from sqlalchemy.ext.asyncio import AsyncSession


@pytest.fixture
def service(db: AsyncSession) -> UserService:
    return UserService(db)


@pytest.mark.asyncio
async def test_create_user(service: UserService, db: AsyncSession):
    user = UserEntity(email="coach@test.com", name="David", role=UserRole.coach)
    await service.create_user(user)
    await db.commit()

    res = await service.get_user(user.id)
    assert res.email == "coach@test.com"
    assert res.role == UserRole.coach
    assert res.created_at is not None


@pytest.mark.asyncio
async def test_create_user_default_role(service: UserService, db: AsyncSession):
    user = UserEntity(email="new@test.com")
    await service.create_user(user)
    await db.commit()

    assert user.role == UserRole.skater


@pytest.mark.asyncio
async def test_create_user_exists(service: UserService, skater: UserEntity):
    with pytest.raises(UserExistsError):
        await service.create_user(UserEntity(email=skater.email))


@pytest.mark.asyncio
async def test_get_user_by_email(service: UserService, skater: UserEntity):
    res = await service.get_user_by_email("emma@test.com")
    assert res.id == skater.id
    assert await service.get_user_by_email("other@test.com") is None


@pytest.mark.asyncio
async def test_list_users(
    service: UserService,
    organizer: UserEntity,
    skater: UserEntity,
    skater2: UserEntity,
):
    res = await service.list_users()
    assert [u.name for u in res] == ["Emma", "Michael", "Sarah Johnson"]

    res = await service.list_users(role=UserRole.skater)
    assert [u.name for u in res] == ["Emma", "Michael"]

    res = await service.list_users(role=UserRole.organizer)
    assert [u.id for u in res] == [organizer.id]

    res = await service.list_users(page=1, per_page=2)
    assert [u.name for u in res] == ["Sarah Johnson"]

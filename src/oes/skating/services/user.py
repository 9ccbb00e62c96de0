"""User service."""
from collections.abc import Sequence
from typing import Optional

from oes.skating.entities.user import UserEntity
from oes.skating.log import AuditLogType, audit_log
from oes.skating.models.user import UserExistsError, UserRole
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession


class UserService:
    """User service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, id: str) -> Optional[UserEntity]:
        """Get a :class:`UserEntity` by ID."""
        return await self.db.get(UserEntity, id)

    async def get_user_by_email(self, email: str) -> Optional[UserEntity]:
        """Get a :class:`UserEntity` by email address."""
        q = select(UserEntity).where(UserEntity.email == email)
        res = await self.db.execute(q)
        return res.scalar_one_or_none()

    async def list_users(
        self, *, role: Optional[UserRole] = None, page: int = 0, per_page: int = 50
    ) -> Sequence[UserEntity]:
        """List users, optionally by role."""
        q = select(UserEntity)

        if role is not None:
            q = q.where(UserEntity.role == role.value)

        q = q.order_by(UserEntity.name, UserEntity.email)
        q = q.offset(page * per_page).limit(per_page)

        res = await self.db.scalars(q)
        return res.all()

    async def create_user(self, user: UserEntity):
        """Create a new user.

        Raises:
            UserExistsError: If the email address is already in use.
        """
        if await self.get_user_by_email(user.email) is not None:
            raise UserExistsError(f"A user with email {user.email} already exists")

        self.db.add(user)
        await self.db.flush()
        audit_log.bind(type=AuditLogType.user_create).success(
            "User {user} created", user=user
        )

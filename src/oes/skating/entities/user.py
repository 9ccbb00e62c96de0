"""User entities."""
from datetime import datetime
from typing import Optional

from oes.skating.entities.base import DEFAULT_MAX_ENUM_LENGTH, PKStr, Base
from oes.skating.models.user import UserRole
from oes.skating.util import get_now
from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column


class UserEntity(Base):
    """User entity.

    Accounts are managed by the authentication provider; this is the local
    record that competitions and registrations refer to.
    """

    __tablename__ = "user_account"

    id: Mapped[PKStr]
    """The user ID."""

    email: Mapped[str] = mapped_column(unique=True)
    """The email address."""

    name: Mapped[Optional[str]]
    """The display name."""

    role: Mapped[UserRole] = mapped_column(
        String(DEFAULT_MAX_ENUM_LENGTH),
        default=UserRole.skater,
    )
    """The user role."""

    created_at: Mapped[datetime] = mapped_column(default=lambda: get_now())
    """The date the user was created."""

    def __repr__(self):
        return f"<User id={self.id} email={self.email} role={self.role}>"

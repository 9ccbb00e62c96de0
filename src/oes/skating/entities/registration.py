"""Registration entities."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from oes.skating.entities.base import PKStr, Base
from oes.skating.util import get_now
from sqlalchemy import ForeignKey, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

if TYPE_CHECKING:
    from oes.skating.entities.competition import CompetitionEntity
    from oes.skating.entities.event import EventEntity
    from oes.skating.entities.user import UserEntity


class RegistrationEntity(Base):
    """A skater's registration for an event."""

    __tablename__ = "registration"

    __table_args__ = (
        UniqueConstraint(
            "event_id",
            "skater_id",
            name="uq_registration_event_id_skater_id",
        ),
    )

    id: Mapped[PKStr]
    """The registration ID."""

    event_id: Mapped[str] = mapped_column(
        ForeignKey("event.id", ondelete="CASCADE"), index=True
    )
    """The ID of the event."""

    skater_id: Mapped[str] = mapped_column(
        ForeignKey("user_account.id", ondelete="CASCADE"), index=True
    )
    """The ID of the registered skater."""

    competition_id: Mapped[str] = mapped_column(
        ForeignKey("competition.id", ondelete="CASCADE"), index=True
    )
    """The ID of the competition."""

    notes: Mapped[Optional[str]] = mapped_column(Text)
    """Free-text notes."""

    created_at: Mapped[datetime] = mapped_column(default=lambda: get_now())
    """The date the registration was created."""

    event: Mapped[EventEntity] = relationship(
        "EventEntity", back_populates="registrations"
    )
    """The event."""

    skater: Mapped[UserEntity] = relationship("UserEntity")
    """The skater."""

    competition: Mapped[CompetitionEntity] = relationship(
        "CompetitionEntity", back_populates="registrations"
    )
    """The competition."""

    def __repr__(self):
        return (
            "<Registration "
            f"id={self.id} "
            f"event_id={self.event_id} "
            f"skater_id={self.skater_id}"
            ">"
        )

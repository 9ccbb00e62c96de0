"""Event entities."""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from oes.skating.entities.base import DEFAULT_CASCADE_DELETE, PKStr, Base
from oes.skating.util import get_now
from sqlalchemy import ForeignKey, Numeric, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

if TYPE_CHECKING:
    from oes.skating.entities.competition import CompetitionEntity
    from oes.skating.entities.registration import RegistrationEntity


class EventEntity(Base):
    """An event within a competition, such as a single freestyle level."""

    __tablename__ = "event"

    id: Mapped[PKStr]
    """The event ID."""

    competition_id: Mapped[str] = mapped_column(
        ForeignKey("competition.id", ondelete="CASCADE"), index=True
    )
    """The ID of the competition this event belongs to."""

    name: Mapped[str]
    """The event name."""

    description: Mapped[Optional[str]] = mapped_column(Text)
    """The description."""

    category: Mapped[Optional[str]]
    """The category, e.g. Freestyle or Moves."""

    level: Mapped[Optional[str]]
    """The skating level."""

    age_group: Mapped[Optional[str]]
    """The age group."""

    entry_fee: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), default=0
    )
    """The entry fee."""

    max_entries: Mapped[Optional[int]]
    """The maximum number of registrations. Unlimited when not set."""

    requirements: Mapped[Optional[str]] = mapped_column(Text)
    """Entry requirements."""

    start_time: Mapped[Optional[datetime]]
    """The scheduled start time."""

    end_time: Mapped[Optional[datetime]]
    """The scheduled end time."""

    created_at: Mapped[datetime] = mapped_column(default=lambda: get_now())
    """The date the event was created."""

    competition: Mapped[CompetitionEntity] = relationship(
        "CompetitionEntity", back_populates="events"
    )
    """The competition."""

    registrations: Mapped[list[RegistrationEntity]] = relationship(
        "RegistrationEntity",
        back_populates="event",
        cascade=DEFAULT_CASCADE_DELETE,
        order_by="RegistrationEntity.created_at",
    )
    """The registrations for this event."""

    def __repr__(self):
        return f"<Event id={self.id} name={self.name!r}>"

    def is_full(self, registration_count: int) -> bool:
        """Whether an event with ``registration_count`` entries is full.

        An event without ``max_entries`` is never full.
        """
        return (
            self.max_entries is not None and registration_count >= self.max_entries
        )

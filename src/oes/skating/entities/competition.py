"""Competition entities."""
from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING, Optional

from oes.skating.entities.base import (
    DEFAULT_CASCADE_DELETE,
    DEFAULT_MAX_ENUM_LENGTH,
    ID_MAX_LENGTH,
    PKStr,
    Base,
)
from oes.skating.log import AuditLogType, audit_log
from oes.skating.models.competition import (
    CompetitionStatus,
    WritableCompetition,
    validate_date_range,
)
from oes.skating.util import get_now
from sqlalchemy import Date, ForeignKey, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

if TYPE_CHECKING:
    from oes.skating.entities.event import EventEntity
    from oes.skating.entities.registration import RegistrationEntity
    from oes.skating.entities.user import UserEntity


class CompetitionEntity(Base):
    """Competition entity."""

    __tablename__ = "competition"

    id: Mapped[PKStr]
    """The competition ID."""

    name: Mapped[str]
    """The competition name."""

    description: Mapped[Optional[str]] = mapped_column(Text)
    """The description."""

    start_date: Mapped[date] = mapped_column(Date)
    """The first day of the competition."""

    end_date: Mapped[date] = mapped_column(Date)
    """The last day of the competition."""

    venue: Mapped[Optional[str]]
    """The venue name."""

    address: Mapped[Optional[str]]
    """The venue address."""

    status: Mapped[CompetitionStatus] = mapped_column(
        String(DEFAULT_MAX_ENUM_LENGTH),
        default=CompetitionStatus.draft,
    )
    """The competition status."""

    entry_fee: Mapped[float] = mapped_column(
        Numeric(10, 2, asdecimal=False), default=0
    )
    """The base entry fee."""

    max_entries: Mapped[Optional[int]]
    """The maximum number of entries, if limited."""

    organizer_id: Mapped[Optional[str]] = mapped_column(
        String(ID_MAX_LENGTH), ForeignKey("user_account.id")
    )
    """The ID of the organizing user."""

    version: Mapped[int] = mapped_column(default=1)
    """The version of this record."""

    created_at: Mapped[datetime] = mapped_column(default=lambda: get_now())
    """The date the competition was created."""

    updated_at: Mapped[Optional[datetime]]
    """The date the competition was updated."""

    organizer: Mapped[Optional[UserEntity]] = relationship("UserEntity")
    """The organizing user."""

    events: Mapped[list[EventEntity]] = relationship(
        "EventEntity",
        back_populates="competition",
        cascade=DEFAULT_CASCADE_DELETE,
        order_by="EventEntity.created_at",
    )
    """The competition's events."""

    registrations: Mapped[list[RegistrationEntity]] = relationship(
        "RegistrationEntity",
        back_populates="competition",
        cascade=DEFAULT_CASCADE_DELETE,
    )
    """Registrations for all of the competition's events."""

    _updated: bool = False

    def __repr__(self):
        return (
            f"<Competition id={self.id} name={self.name!r} status={self.status}>"
        )

    def mark_updated(self) -> None:
        """Set ``updated_at`` and increment the ``version``.

        Only happens once per commit.
        """
        if not self._updated:
            self._updated = True
            self.version += 1
            self.updated_at = get_now()

    def set_status(self, status: CompetitionStatus) -> bool:
        """Change the status.

        Returns:
            Whether a change was made.
        """
        if self.status == status:
            return False

        audit_log.bind(type=AuditLogType.competition_update).success(
            "Competition {competition} status changed to {}",
            status.value,
            competition=self,
        )
        self.status = status
        self.mark_updated()
        return True

    def update_properties_from_model(self, v: WritableCompetition):
        """Update the entity's properties from a model.

        Properties that are ``None`` in the model are left unchanged. Updates the
        ``updated_at`` and ``version`` automatically.

        Raises:
            ValueError: If the resulting end date precedes the start date.
        """
        start_date = v.start_date if v.start_date is not None else self.start_date
        end_date = v.end_date if v.end_date is not None else self.end_date
        validate_date_range(start_date, end_date)

        for name in (
            "name",
            "description",
            "start_date",
            "end_date",
            "venue",
            "address",
            "entry_fee",
            "max_entries",
        ):
            value = getattr(v, name)
            if value is not None:
                setattr(self, name, value)

        if v.status is not None:
            self.set_status(v.status)

        self.mark_updated()
        audit_log.bind(type=AuditLogType.competition_update).success(
            "Competition {competition} updated", competition=self
        )

"""Competition service."""
from collections.abc import Iterable, Sequence
from datetime import date
from typing import Optional

from oes.skating.entities.competition import CompetitionEntity
from oes.skating.entities.event import EventEntity
from oes.skating.entities.registration import RegistrationEntity
from oes.skating.log import AuditLogType, audit_log
from oes.skating.models.competition import (
    PUBLIC_STATUSES,
    CompetitionStats,
    CompetitionStatus,
)
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload


class CompetitionService:
    """Competition service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_competition(
        self, id: str, *, lock: bool = False, include_details: bool = False
    ) -> Optional[CompetitionEntity]:
        """Get a :class:`CompetitionEntity` by ID.

        Args:
            id: The competition ID.
            lock: Whether to lock the row.
            include_details: Include the organizer, the events and their
                registrations and skaters.
        """
        opts = [selectinload(CompetitionEntity.events)]

        if include_details:
            opts = [
                selectinload(CompetitionEntity.organizer),
                selectinload(CompetitionEntity.events)
                .selectinload(EventEntity.registrations)
                .selectinload(RegistrationEntity.skater),
            ]

        return await self.db.get(
            CompetitionEntity,
            id,
            with_for_update=lock,
            options=opts,
            populate_existing=True,
        )

    async def list_competitions(
        self,
        *,
        status: Optional[CompetitionStatus] = None,
        public: bool = False,
        search: Optional[str] = None,
        page: int = 0,
        per_page: int = 50,
    ) -> Sequence[CompetitionEntity]:
        """List competitions, newest first.

        Args:
            status: Only include competitions with this status.
            public: Only include competitions shown on public listings.
            search: Case-insensitive text to match against the name, venue and
                description.
            page: The page number.
            per_page: The number of results per page.
        """
        q = select(CompetitionEntity).options(selectinload(CompetitionEntity.events))

        if status is not None:
            q = q.where(CompetitionEntity.status == status.value)

        if public:
            public_statuses = sorted(s.value for s in PUBLIC_STATUSES)
            q = q.where(CompetitionEntity.status.in_(public_statuses))

        if search:
            pattern = f"%{search}%"
            q = q.where(
                or_(
                    CompetitionEntity.name.ilike(pattern),
                    CompetitionEntity.venue.ilike(pattern),
                    CompetitionEntity.description.ilike(pattern),
                )
            )

        q = (
            q.order_by(CompetitionEntity.created_at.desc())
            .offset(page * per_page)
            .limit(per_page)
        )

        res = await self.db.scalars(q)
        return res.all()

    async def get_registration_counts(self, ids: Iterable[str]) -> dict[str, int]:
        """Count the registrations for each competition.

        Competitions without registrations are omitted.
        """
        q = (
            select(RegistrationEntity.competition_id, func.count())
            .where(RegistrationEntity.competition_id.in_(list(ids)))
            .group_by(RegistrationEntity.competition_id)
        )
        res = await self.db.execute(q)
        return {id_: count for id_, count in res.all()}

    async def create_competition(self, competition: CompetitionEntity):
        """Create a new competition."""
        self.db.add(competition)
        await self.db.flush()
        audit_log.bind(type=AuditLogType.competition_create).success(
            "Competition {competition} created", competition=competition
        )

    async def delete_competition(self, competition: CompetitionEntity):
        """Delete a competition along with its events and registrations."""
        await self.db.delete(competition)
        await self.db.flush()
        audit_log.bind(type=AuditLogType.competition_delete).success(
            "Competition {competition} deleted", competition=competition
        )

    async def get_stats(self, *, today: Optional[date] = None) -> CompetitionStats:
        """Get the dashboard counts.

        Args:
            today: The current date, for counting upcoming competitions.
        """
        today = today if today is not None else date.today()

        status_q = select(CompetitionEntity.status, func.count()).group_by(
            CompetitionEntity.status
        )
        res = await self.db.execute(status_q)
        by_status = {CompetitionStatus(s): count for s, count in res.all()}

        registrations_q = select(func.count()).select_from(RegistrationEntity)
        total_registrations = (await self.db.execute(registrations_q)).scalar_one()

        upcoming_q = (
            select(func.count())
            .select_from(CompetitionEntity)
            .where(CompetitionEntity.start_date >= today)
        )
        upcoming = (await self.db.execute(upcoming_q)).scalar_one()

        return CompetitionStats(
            total=sum(by_status.values()),
            draft=by_status.get(CompetitionStatus.draft, 0),
            published=by_status.get(CompetitionStatus.published, 0),
            active=sum(
                count for status, count in by_status.items() if status.is_active
            ),
            completed=by_status.get(CompetitionStatus.completed, 0),
            total_registrations=total_registrations,
            upcoming_competitions=upcoming,
        )

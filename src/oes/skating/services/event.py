"""Event service."""
from collections.abc import Sequence
from typing import Optional

from oes.skating.entities.event import EventEntity
from oes.skating.entities.registration import RegistrationEntity
from oes.skating.log import AuditLogType, audit_log
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload


class EventService:
    """Event service."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_event(
        self, id: str, *, lock: bool = False, include_registrations: bool = False
    ) -> Optional[EventEntity]:
        """Get a :class:`EventEntity` by ID.

        The event's competition is always loaded.

        Args:
            id: The event ID.
            lock: Whether to lock the row.
            include_registrations: Include the registrations and their skaters.
        """
        opts = [selectinload(EventEntity.competition)]

        if include_registrations:
            opts.append(
                selectinload(EventEntity.registrations).selectinload(
                    RegistrationEntity.skater
                )
            )

        return await self.db.get(
            EventEntity,
            id,
            with_for_update=lock,
            options=opts,
            populate_existing=True,
        )

    async def list_events(
        self, *, competition_id: Optional[str] = None
    ) -> Sequence[EventEntity]:
        """List events, newest first.

        Loads each event's competition and registrations.
        """
        q = select(EventEntity).options(
            selectinload(EventEntity.competition),
            selectinload(EventEntity.registrations).selectinload(
                RegistrationEntity.skater
            ),
        )

        if competition_id is not None:
            q = q.where(EventEntity.competition_id == competition_id)

        q = q.order_by(EventEntity.created_at.desc())

        res = await self.db.scalars(q)
        return res.all()

    async def create_event(self, event: EventEntity):
        """Create a new event."""
        self.db.add(event)
        await self.db.flush()
        audit_log.bind(type=AuditLogType.event_create).success(
            "Event {event} created", event=event
        )

    async def count_registrations(self, event_id: str) -> int:
        """Count the registrations for an event."""
        q = (
            select(func.count())
            .select_from(RegistrationEntity)
            .where(RegistrationEntity.event_id == event_id)
        )
        res = await self.db.execute(q)
        return res.scalar_one()

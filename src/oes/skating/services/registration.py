"""Registration service."""
from collections.abc import Sequence
from typing import Optional

from loguru import logger
from oes.skating.entities.event import EventEntity
from oes.skating.entities.registration import RegistrationEntity
from oes.skating.log import AuditLogType, audit_log
from oes.skating.models.registration import (
    AlreadyRegisteredError,
    CompetitionMismatchError,
    EventFullError,
    EventNotFoundError,
    RegistrationError,
    SkaterNotFoundError,
)
from oes.skating.services.event import EventService
from oes.skating.services.user import UserService
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload


class RegistrationService:
    """Registration service."""

    def __init__(
        self,
        db: AsyncSession,
        event_service: EventService,
        user_service: UserService,
    ):
        self.db = db
        self.event_service = event_service
        self.user_service = user_service

    async def get_registration_for_skater(
        self, event_id: str, skater_id: str
    ) -> Optional[RegistrationEntity]:
        """Get the registration for a skater in an event, if any."""
        q = select(RegistrationEntity).where(
            RegistrationEntity.event_id == event_id,
            RegistrationEntity.skater_id == skater_id,
        )
        res = await self.db.execute(q)
        return res.scalars().first()

    async def list_registrations(
        self,
        *,
        competition_id: Optional[str] = None,
        skater_id: Optional[str] = None,
        page: int = 0,
        per_page: int = 50,
    ) -> Sequence[RegistrationEntity]:
        """List registrations, newest first.

        Loads each registration's event, competition and skater.

        Args:
            competition_id: Only include registrations for events in this
                competition.
            skater_id: Only include this skater's registrations.
            page: The page number.
            per_page: The number of results per page.
        """
        q = select(RegistrationEntity).options(
            selectinload(RegistrationEntity.event).selectinload(
                EventEntity.competition
            ),
            selectinload(RegistrationEntity.skater),
        )

        if competition_id is not None:
            q = q.join(RegistrationEntity.event).where(
                EventEntity.competition_id == competition_id
            )

        if skater_id is not None:
            q = q.where(RegistrationEntity.skater_id == skater_id)

        q = (
            q.order_by(RegistrationEntity.created_at.desc())
            .offset(page * per_page)
            .limit(per_page)
        )

        res = await self.db.scalars(q)
        return res.all()

    async def create_registration(self, registration: RegistrationEntity):
        """Create a new registration entity."""
        self.db.add(registration)
        await self.db.flush()

        audit_log.bind(type=AuditLogType.registration_create).success(
            "Registration {registration} created", registration=registration
        )

    async def admit(
        self,
        *,
        event_id: str,
        skater_id: str,
        competition_id: str,
        notes: Optional[str] = None,
    ) -> RegistrationEntity:
        """Register a skater for an event.

        The event row is locked before its registrations are counted, so
        concurrent requests for the same event are admitted one at a time. The
        unique constraint on the event and skater catches a duplicate inserted
        between the duplicate check and the insert.

        Args:
            event_id: The event ID.
            skater_id: The skater's user ID.
            competition_id: The ID of the competition the event belongs to.
            notes: Free-text notes.

        Returns:
            The new :class:`RegistrationEntity`, with its event, competition and
            skater loaded.

        Raises:
            AlreadyRegisteredError: If the skater is already registered.
            EventNotFoundError: If the event does not exist.
            EventFullError: If the event has no remaining entries.
            SkaterNotFoundError: If the skater does not exist.
            CompetitionMismatchError: If the event is part of another
                competition.
        """
        try:
            return await self._admit(event_id, skater_id, competition_id, notes)
        except RegistrationError as e:
            logger.info(
                "Registration for skater {} in event {} rejected: {}",
                skater_id,
                event_id,
                e,
            )
            raise

    async def _admit(
        self,
        event_id: str,
        skater_id: str,
        competition_id: str,
        notes: Optional[str],
    ) -> RegistrationEntity:
        if await self.get_registration_for_skater(event_id, skater_id) is not None:
            raise AlreadyRegisteredError

        event = await self.event_service.get_event(event_id, lock=True)
        if event is None:
            raise EventNotFoundError

        count = await self.event_service.count_registrations(event.id)
        if event.is_full(count):
            raise EventFullError

        skater = await self.user_service.get_user(skater_id)
        if skater is None:
            raise SkaterNotFoundError

        if event.competition_id != competition_id:
            raise CompetitionMismatchError

        registration = RegistrationEntity(
            event=event,
            skater=skater,
            competition=event.competition,
            notes=notes,
        )

        try:
            await self.create_registration(registration)
        except IntegrityError:
            await self.db.rollback()
            if await self.get_registration_for_skater(event_id, skater_id):
                raise AlreadyRegisteredError
            raise

        return registration

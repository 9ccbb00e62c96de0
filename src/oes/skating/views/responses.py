"""Response types."""
from __future__ import annotations

from datetime import date, datetime  # noqa
from typing import Optional

from attrs import frozen
from cattrs import BaseValidationError
from oes.skating.entities.competition import CompetitionEntity
from oes.skating.entities.event import EventEntity
from oes.skating.entities.registration import RegistrationEntity
from oes.skating.entities.user import UserEntity
from oes.skating.models.competition import CompetitionStatus
from oes.skating.models.user import UserRole
from typing_extensions import Self


@frozen(kw_only=True)
class ExceptionDetails:
    """Exception details object."""

    exception: Optional[str] = None
    detail: Optional[str] = None
    children: Optional[list[ExceptionDetails]] = None

    @classmethod
    def _format_validation_error(cls, exc: BaseValidationError) -> ExceptionDetails:
        return cls(
            exception=type(exc).__qualname__,
            detail=exc.message,
            children=(
                [cls._format_exception(sub) for sub in exc.exceptions]
                if len(exc.exceptions) > 0
                else None
            ),
        )

    @classmethod
    def _format_exception(cls, exc: Exception) -> ExceptionDetails:
        if isinstance(exc, BaseValidationError):
            return cls._format_validation_error(exc)
        else:
            if len(exc.args) > 0 and isinstance(exc.args[0], str):
                detail = exc.args[0]
            else:
                detail = None
            type_ = type(exc).__qualname__
            return cls(exception=type_, detail=detail)

    @classmethod
    def create(cls, exc: Exception) -> ExceptionDetails:
        return cls._format_exception(exc)


@frozen
class ErrorResponse:
    """An error response body."""

    error: str
    details: Optional[ExceptionDetails] = None


class BodyValidationError(Exception):
    """Raised for validation errors."""

    def __init__(self, exc: Exception):
        super().__init__(422, "Unprocessable entity")
        self.exc = exc


@frozen
class UserSummaryResponse:
    """The public fields of a user."""

    id: str
    name: Optional[str]
    email: str

    @classmethod
    def create(cls, entity: UserEntity) -> Self:
        return cls(entity.id, entity.name, entity.email)


@frozen(kw_only=True)
class UserResponse:
    """A user."""

    id: str
    email: str
    name: Optional[str]
    role: UserRole
    created_at: datetime

    @classmethod
    def create(cls, entity: UserEntity) -> Self:
        return cls(
            id=entity.id,
            email=entity.email,
            name=entity.name,
            role=UserRole(entity.role),
            created_at=entity.created_at,
        )


@frozen
class CompetitionSummaryResponse:
    """A competition's ID and name."""

    id: str
    name: str

    @classmethod
    def create(cls, entity: CompetitionEntity) -> Self:
        return cls(entity.id, entity.name)


@frozen(kw_only=True)
class EventRegistrationResponse:
    """A registration listed under its event."""

    id: str
    skater_id: str
    notes: Optional[str]
    created_at: datetime
    skater: UserSummaryResponse

    @classmethod
    def create(cls, entity: RegistrationEntity) -> Self:
        return cls(
            id=entity.id,
            skater_id=entity.skater_id,
            notes=entity.notes,
            created_at=entity.created_at,
            skater=UserSummaryResponse.create(entity.skater),
        )


@frozen(kw_only=True)
class EventResponse:
    """An event."""

    id: str
    competition_id: str
    name: str
    description: Optional[str]
    category: Optional[str]
    level: Optional[str]
    age_group: Optional[str]
    entry_fee: float
    max_entries: Optional[int]
    requirements: Optional[str]
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    created_at: datetime
    competition: Optional[CompetitionSummaryResponse] = None
    registration_count: Optional[int] = None
    registrations: Optional[list[EventRegistrationResponse]] = None

    @classmethod
    def create(
        cls,
        entity: EventEntity,
        *,
        include_competition: bool = True,
        include_registrations: bool = False,
        registration_count: Optional[int] = None,
    ) -> Self:
        """Create a response from an event.

        Args:
            entity: The event, with its competition loaded when
                ``include_competition`` is set.
            include_competition: Include the competition summary.
            include_registrations: Include the registrations, which must be
                loaded with their skaters. Sets the registration count.
            registration_count: The registration count, if known.
        """
        registrations = None
        if include_registrations:
            registrations = [
                EventRegistrationResponse.create(r) for r in entity.registrations
            ]
            registration_count = len(registrations)

        return cls(
            id=entity.id,
            competition_id=entity.competition_id,
            name=entity.name,
            description=entity.description,
            category=entity.category,
            level=entity.level,
            age_group=entity.age_group,
            entry_fee=entity.entry_fee,
            max_entries=entity.max_entries,
            requirements=entity.requirements,
            start_time=entity.start_time,
            end_time=entity.end_time,
            created_at=entity.created_at,
            competition=(
                CompetitionSummaryResponse.create(entity.competition)
                if include_competition
                else None
            ),
            registration_count=registration_count,
            registrations=registrations,
        )


@frozen(kw_only=True)
class RegistrationResponse:
    """A registration with its event, competition and skater."""

    id: str
    event_id: str
    skater_id: str
    competition_id: str
    notes: Optional[str]
    created_at: datetime
    event: EventResponse
    skater: UserSummaryResponse

    @classmethod
    def create(cls, entity: RegistrationEntity) -> Self:
        return cls(
            id=entity.id,
            event_id=entity.event_id,
            skater_id=entity.skater_id,
            competition_id=entity.competition_id,
            notes=entity.notes,
            created_at=entity.created_at,
            event=EventResponse.create(entity.event),
            skater=UserSummaryResponse.create(entity.skater),
        )


@frozen(kw_only=True)
class CompetitionResponse:
    """A competition."""

    id: str
    name: str
    description: Optional[str]
    start_date: date
    end_date: date
    venue: Optional[str]
    address: Optional[str]
    status: CompetitionStatus
    entry_fee: float
    max_entries: Optional[int]
    organizer_id: Optional[str]
    version: int
    created_at: datetime
    updated_at: Optional[datetime]
    events: list[EventResponse]
    registration_count: int
    event_count: Optional[int] = None
    organizer: Optional[UserSummaryResponse] = None

    @classmethod
    def create(
        cls,
        entity: CompetitionEntity,
        *,
        registration_count: int = 0,
        include_details: bool = False,
    ) -> Self:
        """Create a response from a competition.

        Args:
            entity: The competition, with its events loaded.
            registration_count: The number of registrations. Ignored when
                ``include_details`` is set.
            include_details: Include the organizer and each event's
                registrations, which must be loaded.
        """
        events = [
            EventResponse.create(
                e,
                include_competition=False,
                include_registrations=include_details,
            )
            for e in entity.events
        ]

        if include_details:
            registration_count = sum(e.registration_count or 0 for e in events)

        return cls(
            id=entity.id,
            name=entity.name,
            description=entity.description,
            start_date=entity.start_date,
            end_date=entity.end_date,
            venue=entity.venue,
            address=entity.address,
            status=CompetitionStatus(entity.status),
            entry_fee=entity.entry_fee,
            max_entries=entity.max_entries,
            organizer_id=entity.organizer_id,
            version=entity.version,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
            events=events,
            registration_count=registration_count,
            event_count=len(events) if include_details else None,
            organizer=(
                UserSummaryResponse.create(entity.organizer)
                if include_details and entity.organizer is not None
                else None
            ),
        )

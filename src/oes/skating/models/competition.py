"""Competition models."""
from datetime import date
from enum import Enum
from typing import Optional

from attrs import field, frozen, validators


class CompetitionStatus(str, Enum):
    """The status of a competition."""

    draft = "DRAFT"
    published = "PUBLISHED"
    registration_open = "REGISTRATION_OPEN"
    in_progress = "IN_PROGRESS"
    completed = "COMPLETED"
    cancelled = "CANCELLED"

    @property
    def is_active(self) -> bool:
        """Whether the competition is taking entries or running."""
        return self in ACTIVE_STATUSES


PUBLIC_STATUSES = frozenset(
    {
        CompetitionStatus.published,
        CompetitionStatus.registration_open,
    }
)
"""Statuses shown on public listing pages."""

ACTIVE_STATUSES = frozenset(
    {
        CompetitionStatus.registration_open,
        CompetitionStatus.in_progress,
    }
)
"""Statuses counted as active on the dashboard."""


def validate_date_range(start_date: Optional[date], end_date: Optional[date]):
    """Raise :class:`ValueError` if the end date precedes the start date."""
    if start_date is not None and end_date is not None and end_date < start_date:
        raise ValueError("End date must not be before the start date")


@frozen(kw_only=True)
class WritableCompetition:
    """Competition model comprising only updatable fields.

    Fields that are ``None`` are left unchanged.
    """

    name: Optional[str] = None
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    venue: Optional[str] = None
    address: Optional[str] = None
    status: Optional[CompetitionStatus] = None
    entry_fee: Optional[float] = field(
        default=None, validator=validators.optional(validators.ge(0))
    )
    max_entries: Optional[int] = field(
        default=None, validator=validators.optional(validators.ge(1))
    )

    def __attrs_post_init__(self):
        validate_date_range(self.start_date, self.end_date)


@frozen(kw_only=True)
class CompetitionStats:
    """Competition counts shown on the organizer dashboard."""

    total: int = 0
    draft: int = 0
    published: int = 0
    active: int = 0
    completed: int = 0
    total_registrations: int = 0
    upcoming_competitions: int = 0

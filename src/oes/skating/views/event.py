"""Event views."""
from datetime import datetime
from typing import Optional

from attrs import field, frozen, validators
from blacksheep import Request, Response
from blacksheep.server.openapi.common import ContentInfo, ResponseInfo
from oes.skating.app import app, created_response
from oes.skating.database import transaction
from oes.skating.docs import docs, docs_helper
from oes.skating.entities.event import EventEntity
from oes.skating.services.competition import CompetitionService
from oes.skating.services.event import EventService
from oes.skating.util import check_not_found
from oes.skating.views.parameters import AttrsBody, get_query_value
from oes.skating.views.responses import EventResponse


@frozen(kw_only=True)
class CreateEventRequest:
    """Request body to create an event."""

    competition_id: str
    name: str = field(validator=validators.min_len(1))
    description: Optional[str] = None
    category: Optional[str] = None
    level: Optional[str] = None
    age_group: Optional[str] = None
    entry_fee: float = field(default=0, validator=validators.ge(0))
    max_entries: Optional[int] = field(
        default=None, validator=validators.optional(validators.ge(1))
    )
    requirements: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None


@app.router.get("/api/events")
@docs_helper(
    response_type=list[EventResponse],
    response_summary="The list of events",
    tags=["Event"],
)
async def list_events(request: Request, service: EventService) -> list[EventResponse]:
    """List events with their registrations.

    Filter with the ``competitionId`` query parameter.
    """
    results = await service.list_events(
        competition_id=get_query_value(request, "competitionId")
    )
    return [EventResponse.create(e, include_registrations=True) for e in results]


@app.router.post("/api/events")
@docs(
    responses={
        201: ResponseInfo(
            "The created event",
            content=[ContentInfo(EventResponse)],
        )
    },
    tags=["Event"],
)
@transaction
async def create_event(
    body: AttrsBody[CreateEventRequest],
    service: EventService,
    competition_service: CompetitionService,
) -> Response:
    """Create an event in a competition."""
    create = body.value
    competition = check_not_found(
        await competition_service.get_competition(create.competition_id),
        "Competition not found",
    )

    entity = EventEntity(
        competition=competition,
        name=create.name,
        description=create.description,
        category=create.category,
        level=create.level,
        age_group=create.age_group,
        entry_fee=create.entry_fee,
        max_entries=create.max_entries,
        requirements=create.requirements,
        start_time=create.start_time,
        end_time=create.end_time,
        registrations=[],
    )

    await service.create_event(entity)

    return created_response(EventResponse.create(entity, registration_count=0))

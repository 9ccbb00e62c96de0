"""Competition views."""
from datetime import date
from typing import Optional

from attrs import field, frozen, validators
from blacksheep import HTTPException, Request, Response
from blacksheep.server.openapi.common import ContentInfo, ResponseInfo
from oes.skating.app import app, created_response
from oes.skating.database import transaction
from oes.skating.docs import docs, docs_helper
from oes.skating.entities.competition import CompetitionEntity
from oes.skating.models.competition import (
    CompetitionStatus,
    WritableCompetition,
    validate_date_range,
)
from oes.skating.services.competition import CompetitionService
from oes.skating.services.user import UserService
from oes.skating.util import check_not_found
from oes.skating.views.parameters import (
    AttrsBody,
    get_page,
    get_per_page,
    get_query_bool,
    get_query_enum,
    get_query_value,
)
from oes.skating.views.responses import CompetitionResponse

NOT_FOUND_MESSAGE = "Competition not found"


@frozen(kw_only=True)
class CreateCompetitionRequest:
    """Request body to create a competition."""

    name: str = field(validator=validators.min_len(1))
    description: Optional[str] = None
    start_date: date
    end_date: date
    venue: Optional[str] = None
    address: Optional[str] = None
    status: CompetitionStatus = CompetitionStatus.draft
    entry_fee: float = field(default=0, validator=validators.ge(0))
    max_entries: Optional[int] = field(
        default=None, validator=validators.optional(validators.ge(1))
    )
    organizer_id: Optional[str] = None

    def __attrs_post_init__(self):
        validate_date_range(self.start_date, self.end_date)


@app.router.get("/api/competitions")
@docs_helper(
    response_type=list[CompetitionResponse],
    response_summary="The list of competitions",
    tags=["Competition"],
)
async def list_competitions(
    request: Request,
    service: CompetitionService,
) -> list[CompetitionResponse]:
    """List competitions.

    Filter with the ``status``, ``search`` and ``public`` query parameters.
    """
    results = await service.list_competitions(
        status=get_query_enum(request, "status", CompetitionStatus),
        public=get_query_bool(request, "public"),
        search=get_query_value(request, "search"),
        page=get_page(request),
        per_page=get_per_page(request),
    )
    counts = await service.get_registration_counts(c.id for c in results)
    return [
        CompetitionResponse.create(c, registration_count=counts.get(c.id, 0))
        for c in results
    ]


@app.router.post("/api/competitions")
@docs(
    responses={
        201: ResponseInfo(
            "The created competition",
            content=[ContentInfo(CompetitionResponse)],
        )
    },
    tags=["Competition"],
)
@transaction
async def create_competition(
    body: AttrsBody[CreateCompetitionRequest],
    service: CompetitionService,
    user_service: UserService,
) -> Response:
    """Create a competition."""
    create = body.value

    if create.organizer_id is not None:
        check_not_found(
            await user_service.get_user(create.organizer_id), "Organizer not found"
        )

    entity = CompetitionEntity(
        name=create.name,
        description=create.description,
        start_date=create.start_date,
        end_date=create.end_date,
        venue=create.venue,
        address=create.address,
        status=create.status,
        entry_fee=create.entry_fee,
        max_entries=create.max_entries,
        organizer_id=create.organizer_id,
        updated_at=None,
        events=[],
    )

    await service.create_competition(entity)

    return created_response(CompetitionResponse.create(entity))


@app.router.get("/api/competitions/{id}")
@docs_helper(
    response_type=CompetitionResponse,
    response_summary="The competition",
    tags=["Competition"],
)
async def read_competition(id: str, service: CompetitionService) -> CompetitionResponse:
    """Get a competition with its events and registrations."""
    competition = check_not_found(
        await service.get_competition(id, include_details=True), NOT_FOUND_MESSAGE
    )
    return CompetitionResponse.create(competition, include_details=True)


@app.router.put("/api/competitions/{id}")
@docs_helper(
    response_type=CompetitionResponse,
    response_summary="The updated competition",
    tags=["Competition"],
)
@transaction
async def update_competition(
    id: str,
    body: AttrsBody[WritableCompetition],
    service: CompetitionService,
) -> CompetitionResponse:
    """Update a competition.

    Properties that are omitted are left unchanged.
    """
    competition = check_not_found(
        await service.get_competition(id, lock=True), NOT_FOUND_MESSAGE
    )

    try:
        competition.update_properties_from_model(body.value)
    except ValueError as e:
        raise HTTPException(422, str(e))

    counts = await service.get_registration_counts([competition.id])
    return CompetitionResponse.create(
        competition, registration_count=counts.get(competition.id, 0)
    )


@app.router.delete("/api/competitions/{id}")
@docs(tags=["Competition"])
@transaction
async def delete_competition(id: str, service: CompetitionService) -> Response:
    """Delete a competition along with its events and registrations."""
    competition = check_not_found(
        await service.get_competition(id, lock=True), NOT_FOUND_MESSAGE
    )
    await service.delete_competition(competition)
    return Response(204)

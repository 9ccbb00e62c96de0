"""Registration views."""
from typing import Optional

from attrs import field, frozen, validators
from blacksheep import HTTPException, Request, Response
from blacksheep.server.openapi.common import ContentInfo, ResponseInfo
from oes.skating.app import app, created_response
from oes.skating.database import transaction
from oes.skating.docs import docs, docs_helper
from oes.skating.models.registration import (
    AlreadyRegisteredError,
    CompetitionMismatchError,
    EventFullError,
    EventNotFoundError,
    RegistrationError,
    SkaterNotFoundError,
)
from oes.skating.services.registration import RegistrationService
from oes.skating.views.parameters import (
    AttrsBody,
    get_page,
    get_per_page,
    get_query_value,
)
from oes.skating.views.responses import RegistrationResponse

_non_empty = validators.min_len(1)

ERROR_STATUS = {
    AlreadyRegisteredError: 400,
    EventFullError: 400,
    CompetitionMismatchError: 400,
    EventNotFoundError: 404,
    SkaterNotFoundError: 404,
}
"""HTTP status codes for rejected registrations."""


@frozen(kw_only=True)
class CreateRegistrationRequest:
    """Request body to create a registration."""

    event_id: str = field(validator=_non_empty)
    skater_id: str = field(validator=_non_empty)
    competition_id: str = field(validator=_non_empty)
    notes: Optional[str] = None


@app.router.get("/api/registrations")
@docs_helper(
    response_type=list[RegistrationResponse],
    response_summary="The list of registrations",
    tags=["Registration"],
)
async def list_registrations(
    request: Request,
    service: RegistrationService,
) -> list[RegistrationResponse]:
    """List registrations.

    Filter with the ``competitionId`` and ``skaterId`` query parameters.
    """
    results = await service.list_registrations(
        competition_id=get_query_value(request, "competitionId"),
        skater_id=get_query_value(request, "skaterId"),
        page=get_page(request),
        per_page=get_per_page(request),
    )
    return [RegistrationResponse.create(r) for r in results]


@app.router.post("/api/registrations")
@docs(
    responses={
        201: ResponseInfo(
            "The created registration",
            content=[ContentInfo(RegistrationResponse)],
        ),
        400: ResponseInfo("The skater is already registered or the event is full"),
        404: ResponseInfo("The event or skater was not found"),
    },
    tags=["Registration"],
)
@transaction
async def create_registration(
    body: AttrsBody[CreateRegistrationRequest],
    service: RegistrationService,
) -> Response:
    """Register a skater for an event."""
    create = body.value
    try:
        registration = await service.admit(
            event_id=create.event_id,
            skater_id=create.skater_id,
            competition_id=create.competition_id,
            notes=create.notes,
        )
    except RegistrationError as e:
        raise HTTPException(ERROR_STATUS.get(type(e), 400), str(e))

    return created_response(RegistrationResponse.create(registration))

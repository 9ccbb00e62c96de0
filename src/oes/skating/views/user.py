"""User views."""
from typing import Optional

from attrs import field, frozen, validators
from blacksheep import HTTPException, Request, Response
from blacksheep.server.openapi.common import ContentInfo, ResponseInfo
from oes.skating.app import app, created_response
from oes.skating.database import transaction
from oes.skating.docs import docs, docs_helper
from oes.skating.entities.user import UserEntity
from oes.skating.models.user import UserExistsError, UserRole
from oes.skating.services.user import UserService
from oes.skating.util import check_not_found
from oes.skating.views.parameters import (
    AttrsBody,
    get_page,
    get_per_page,
    get_query_enum,
)
from oes.skating.views.responses import UserResponse

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+$"


@frozen(kw_only=True)
class CreateUserRequest:
    """Request body to create a user."""

    email: str = field(validator=validators.matches_re(EMAIL_PATTERN))
    name: Optional[str] = None
    role: UserRole = UserRole.skater


@app.router.get("/api/users")
@docs_helper(
    response_type=list[UserResponse],
    response_summary="The list of users",
    tags=["User"],
)
async def list_users(request: Request, service: UserService) -> list[UserResponse]:
    """List users.

    Filter with the ``role`` query parameter.
    """
    results = await service.list_users(
        role=get_query_enum(request, "role", UserRole),
        page=get_page(request),
        per_page=get_per_page(request),
    )
    return [UserResponse.create(u) for u in results]


@app.router.post("/api/users")
@docs(
    responses={
        201: ResponseInfo(
            "The created user",
            content=[ContentInfo(UserResponse)],
        )
    },
    tags=["User"],
)
@transaction
async def create_user(
    body: AttrsBody[CreateUserRequest], service: UserService
) -> Response:
    """Create a user."""
    create = body.value
    entity = UserEntity(
        email=create.email.lower(),
        name=create.name,
        role=create.role,
    )

    try:
        await service.create_user(entity)
    except UserExistsError as e:
        raise HTTPException(400, str(e))

    return created_response(UserResponse.create(entity))


@app.router.get("/api/users/{id}")
@docs_helper(response_type=UserResponse, response_summary="The user", tags=["User"])
async def read_user(id: str, service: UserService) -> UserResponse:
    """Get a user by ID."""
    user = check_not_found(await service.get_user(id), "User not found")
    return UserResponse.create(user)

"""Parameter binding utilities."""
from enum import Enum
from typing import Any, Optional, Type, TypeVar

from blacksheep import Request
from blacksheep.exceptions import BadRequest
from blacksheep.server.bindings import BodyBinder, BoundValue
from cattrs import BaseValidationError
from loguru import logger
from oes.skating.serialization import get_converter
from oes.skating.serialization.json import json_loads
from oes.skating.views.responses import BodyValidationError

T = TypeVar("T")
E = TypeVar("E", bound=Enum)

MAX_PER_PAGE = 50
"""The maximum number of results per page."""


class AttrsBody(BoundValue[T]):
    """Parse an attrs class from the request body."""

    pass


class AttrsBinder(BodyBinder):
    """Binder for :class:`AttrsBody`."""

    handle = AttrsBody

    @property
    def content_type(self) -> str:
        return "application/json"

    def matches_content_type(self, request: Request) -> bool:
        return request.declares_json()

    async def read_data(self, request: Request) -> Any:
        return await request.json(loads=json_loads)

    def parse_value(self, data: dict) -> Any:
        try:
            return get_converter().structure(data, self.expected_type)
        except (BaseValidationError, ValueError, TypeError) as e:
            logger.opt(exception=e).debug("Invalid request")
            raise BodyValidationError(e)


def get_query_value(request: Request, name: str) -> Optional[str]:
    """Get the first value of a query parameter, or None if missing or empty."""
    values = request.query.get(name)
    if values and values[0]:
        return values[0]
    else:
        return None


def get_query_enum(request: Request, name: str, enum_type: Type[E]) -> Optional[E]:
    """Get a query parameter as an enum member.

    Raises:
        BadRequest: If the value is not a member of ``enum_type``.
    """
    value = get_query_value(request, name)
    if value is None:
        return None

    try:
        return enum_type(value.upper())
    except ValueError:
        raise BadRequest(f"Invalid {name}: {value}")


def get_query_bool(request: Request, name: str) -> bool:
    """Get a query parameter as a boolean flag."""
    value = get_query_value(request, name)
    return value is not None and value.lower() in ("1", "true", "yes")


def _get_query_int(request: Request, name: str) -> Optional[int]:
    value = get_query_value(request, name)
    if value is None:
        return None

    try:
        return int(value)
    except ValueError:
        raise BadRequest(f"Invalid {name}: {value}")


def get_page(request: Request) -> int:
    """Get the ``page`` parameter, starting at 0."""
    value = _get_query_int(request, "page")
    if value is None or value < 0:
        return 0
    else:
        return value


def get_per_page(request: Request) -> int:
    """Get the ``perPage`` parameter, between 1 and :data:`MAX_PER_PAGE`."""
    value = _get_query_int(request, "perPage")
    if value is not None:
        if value < 1:
            return 1
        elif value > MAX_PER_PAGE:
            return MAX_PER_PAGE
        else:
            return value
    else:
        return MAX_PER_PAGE

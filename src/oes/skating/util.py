"""Common utilities."""
import uuid
from datetime import datetime, timezone
from typing import Optional, TypeVar

from blacksheep.exceptions import NotFound

T = TypeVar("T")


def get_now() -> datetime:
    """Get the current tz-aware UTC datetime."""
    return datetime.now(tz=timezone.utc)


def generate_id() -> str:
    """Generate a new record ID."""
    return str(uuid.uuid4())


def check_not_found(obj: Optional[T], message: Optional[str] = None) -> T:
    """Raise :class:`NotFound` if the argument is null.

    Args:
        obj: The object.
        message: The error message to include.

    Returns:
        The not-None ``obj``.
    """
    if obj is None:
        raise NotFound(message)
    return obj


def to_camel_case(name: str) -> str:
    """Convert a ``snake_case`` name to ``camelCase``."""
    first, *rest = name.split("_")
    return first + "".join(part.capitalize() for part in rest)

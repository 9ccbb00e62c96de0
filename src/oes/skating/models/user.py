"""User models."""
from enum import Enum


class UserRole(str, Enum):
    """The role of a user."""

    organizer = "ORGANIZER"
    skater = "SKATER"
    coach = "COACH"
    admin = "ADMIN"


class UserExistsError(ValueError):
    """Raised when a user with the same email address already exists."""

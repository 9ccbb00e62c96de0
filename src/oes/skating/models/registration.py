"""Registration models."""


class RegistrationError(Exception):
    """Base class for rejected registration requests."""

    message = "Registration rejected"

    def __init__(self, message: str = ""):
        super().__init__(message or self.message)

    def __str__(self) -> str:
        return self.args[0]


class AlreadyRegisteredError(RegistrationError):
    """Raised when the skater already holds a registration for the event."""

    message = "Skater is already registered for this event"


class EventNotFoundError(RegistrationError):
    """Raised when the event does not exist."""

    message = "Event not found"


class EventFullError(RegistrationError):
    """Raised when the event has reached its maximum number of entries."""

    message = "Event is full"


class SkaterNotFoundError(RegistrationError):
    """Raised when the skater does not exist."""

    message = "Skater not found"


class CompetitionMismatchError(RegistrationError):
    """Raised when the event is not part of the given competition."""

    message = "Event does not belong to this competition"

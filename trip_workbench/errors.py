"""
Error taxonomy shared by the gateway, the session manager and the workbench.
"""
from typing import Optional


class WorkbenchError(Exception):
    """Base class for every failure surfaced to the traveler."""

    default_message = "Something went wrong"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(WorkbenchError):
    """Malformed input, e.g. a bad email format or missing form field."""
    default_message = "Invalid input"


class InvalidCredentials(WorkbenchError):
    """Login rejected by the service."""
    default_message = "Invalid email or password"


class Unauthorized(WorkbenchError):
    """Session missing or expired on a protected call."""
    default_message = "Your session has expired, please log in again"


class NotFound(WorkbenchError):
    """Operation on an itinerary that does not exist."""
    default_message = "Itinerary not found"


class Conflict(WorkbenchError):
    """Conflicting write, e.g. registering an email twice."""
    default_message = "Email already registered"


class GenerationFailed(WorkbenchError):
    """The upstream generator could not produce an itinerary."""
    default_message = "Failed to generate itinerary"


class TransportError(WorkbenchError):
    """Service unreachable or returned something unusable."""
    default_message = "Could not reach the itinerary service"


class InvalidTransition(Exception):
    """An action was invoked from a workbench state that does not offer it."""

    pass

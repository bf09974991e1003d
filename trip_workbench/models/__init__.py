"""Data models for the itinerary workbench."""
from .itinerary import (
    DayPlan,
    GeneratedPreview,
    GenerateRequest,
    ItineraryPayload,
    ItineraryRecord,
)
from .draft import Draft
from .session import Session, SessionState, Screen, TokenResponse, User
from .workbench_state import (
    Busy,
    Closed,
    Drafting,
    Listing,
    Viewing,
    WorkbenchMode,
    WorkbenchState,
)

__all__ = [
    "DayPlan",
    "GeneratedPreview",
    "GenerateRequest",
    "ItineraryPayload",
    "ItineraryRecord",
    "Draft",
    "Session",
    "SessionState",
    "Screen",
    "TokenResponse",
    "User",
    "Busy",
    "Closed",
    "Drafting",
    "Listing",
    "Viewing",
    "WorkbenchMode",
    "WorkbenchState",
]

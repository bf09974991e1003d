"""
Workbench states - Tagged union driving the list / form / detail screens.
"""
from pydantic import BaseModel, Field
from typing import Annotated, Literal, Optional, Union
from enum import Enum
import uuid

from .draft import Draft
from .itinerary import GeneratedPreview, ItineraryRecord


class WorkbenchMode(str, Enum):
    """Which workbench state is active."""
    LISTING = "listing"  # Browsing saved itineraries
    DRAFTING = "drafting"  # Editing the form, optionally with a preview
    VIEWING = "viewing"  # Looking at one saved itinerary
    CLOSED = "closed"  # Session ended; late results are dropped


class Busy(str, Enum):
    """In-flight network action of a drafting state."""
    NONE = "none"
    GENERATING = "generating"
    SAVING = "saving"


class Listing(BaseModel):
    mode: Literal[WorkbenchMode.LISTING] = WorkbenchMode.LISTING


class Drafting(BaseModel):
    mode: Literal[WorkbenchMode.DRAFTING] = WorkbenchMode.DRAFTING
    draft: Draft = Field(default_factory=Draft)
    preview: Optional[GeneratedPreview] = None
    busy: Busy = Busy.NONE
    draft_key: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Identifies this drafting session so late results can be matched"
    )


class Viewing(BaseModel):
    mode: Literal[WorkbenchMode.VIEWING] = WorkbenchMode.VIEWING
    record: ItineraryRecord


class Closed(BaseModel):
    mode: Literal[WorkbenchMode.CLOSED] = WorkbenchMode.CLOSED


WorkbenchState = Annotated[
    Union[Listing, Drafting, Viewing, Closed],
    Field(discriminator="mode"),
]

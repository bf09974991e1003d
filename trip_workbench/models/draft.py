"""
Draft form - The mutable staging area for an itinerary being created or edited.
"""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import date

from .itinerary import GenerateRequest, ItineraryRecord
from ..errors import ValidationError


class Draft(BaseModel):
    """
    Form state for a to-be-created-or-updated itinerary.

    ``interests`` is the editable list shown in the form and may contain
    blank slots while the traveler is typing; it never becomes empty.
    ``editing_id`` decides whether saving creates or updates.
    """
    model_config = ConfigDict(validate_assignment=True)

    destination: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    interests: list[str] = Field(default_factory=lambda: [""])
    editing_id: Optional[int] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def blank_date_is_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("interests", mode="before")
    @classmethod
    def at_least_one_slot(cls, v):
        if not v:
            return [""]
        return list(v)

    @classmethod
    def empty(cls) -> "Draft":
        return cls()

    @classmethod
    def from_record(cls, record: ItineraryRecord) -> "Draft":
        """Copy an existing record's fields into a draft that will update it."""
        return cls(
            destination=record.destination,
            start_date=record.start_date,
            end_date=record.end_date,
            interests=list(record.interests) or [""],
            editing_id=record.id,
        )

    @property
    def is_editing(self) -> bool:
        return self.editing_id is not None

    # Interest slots

    def add_interest(self, value: str = ""):
        self.interests.append(value)

    def edit_interest(self, index: int, value: str):
        if not 0 <= index < len(self.interests):
            raise IndexError(f"no interest slot {index}")
        self.interests[index] = value

    def remove_interest(self, index: int) -> bool:
        """Remove a slot. The last remaining slot is never removed."""
        if len(self.interests) <= 1:
            return False
        if not 0 <= index < len(self.interests):
            raise IndexError(f"no interest slot {index}")
        del self.interests[index]
        return True

    def submitted_interests(self) -> list[str]:
        """Interests as sent to the service: blank slots dropped."""
        return [i for i in self.interests if i.strip()]

    # Submission

    def validate_for_generation(self):
        """Check the required form fields before a generate call."""
        if not self.destination.strip():
            raise ValidationError("Destination is required")
        if self.start_date is None or self.end_date is None:
            raise ValidationError("Start and end dates are required")
        if self.start_date > self.end_date:
            raise ValidationError("End date must be on or after the start date")

    def to_request(self) -> GenerateRequest:
        self.validate_for_generation()
        return GenerateRequest(
            destination=self.destination,
            start_date=self.start_date,
            end_date=self.end_date,
            interests=self.submitted_interests(),
        )

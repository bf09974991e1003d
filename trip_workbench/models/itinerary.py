"""
Itinerary models - Generated previews, persisted records and request bodies.
"""
from pydantic import BaseModel, Field, model_validator
from datetime import date


def _check_days(days: list["DayPlan"], days_count: int):
    """Days must match days_count and be numbered 1..n without gaps."""
    if len(days) != days_count:
        raise ValueError(
            f"expected {days_count} day entries, got {len(days)}"
        )
    for expected, day in enumerate(days, start=1):
        if day.day != expected:
            raise ValueError(f"day {day.day} found where day {expected} was expected")


class DayPlan(BaseModel):
    """Plan for a single day."""
    day: int = Field(
        ...,
        ge=1,
        description="1-based day number in the trip"
    )
    activities: list[str] = Field(
        default_factory=list,
        description="Activities for the day, in order"
    )


class GeneratedPreview(BaseModel):
    """Ephemeral output of a generate call, held until saved or discarded."""
    days_count: int = Field(..., ge=1)
    itinerary: list[DayPlan] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_days(self) -> "GeneratedPreview":
        _check_days(self.itinerary, self.days_count)
        return self


class GenerateRequest(BaseModel):
    """Body of POST /api/itinerary/generate."""
    destination: str
    start_date: date
    end_date: date
    interests: list[str] = Field(default_factory=list)


class ItineraryPayload(GenerateRequest):
    """Body of create (POST) and update (PATCH) calls."""
    days_count: int = Field(..., ge=1)
    generated_itinerary: list[DayPlan] = Field(default_factory=list)

    @classmethod
    def from_preview(cls, request: GenerateRequest, preview: GeneratedPreview) -> "ItineraryPayload":
        """Combine the submitted form fields with a generated preview."""
        return cls(
            **request.model_dump(),
            days_count=preview.days_count,
            generated_itinerary=[day.model_copy() for day in preview.itinerary],
        )


class ItineraryRecord(BaseModel):
    """A persisted itinerary as returned by the remote store."""
    id: int = Field(..., description="Server-assigned identifier")
    destination: str
    start_date: date
    end_date: date
    interests: list[str] = Field(default_factory=list)
    days_count: int = Field(..., ge=1)
    generated_itinerary: list[DayPlan] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_record(self) -> "ItineraryRecord":
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")
        _check_days(self.generated_itinerary, self.days_count)
        return self

    def to_display_dict(self) -> dict:
        """Convert to a display-friendly dictionary."""
        return {
            "id": self.id,
            "destination": self.destination,
            "dates": f"{self.start_date.isoformat()} to {self.end_date.isoformat()}",
            "days_count": self.days_count,
            "interests": ", ".join(self.interests),
            "days": [
                {"day": day.day, "activities": list(day.activities)}
                for day in self.generated_itinerary
            ],
        }

"""Itinerary models - the trip plan produced by the gateway and edited by users.

Wire format uses camelCase keys (what the gateway emits and what is stored in
the ``data`` column); Python attributes are snake_case.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump to the JSON shape used on the wire and in storage."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Activity(CamelModel):
    """Single scheduled stop within a day."""

    time: str = Field("", description="Suggested start time, 24h HH:mm")
    location: str
    description: str = ""
    estimated_cost: str = Field("", description="Free-text price label, e.g. '₹500'")
    estimated_time: str = Field("", description="Free-text duration label, e.g. '2 hours'")
    cultural_insight: str = ""
    map_url: str | None = None


class DayItinerary(CamelModel):
    """Activities for a single day, in schedule order."""

    day: int = Field(..., ge=1)
    activities: list[Activity] = Field(default_factory=list)

    @field_validator("activities", mode="before")
    @classmethod
    def _missing_activities_are_empty(cls, value: Any) -> Any:
        return [] if value is None else value


class TravelOption(CamelModel):
    """Route option from the starting location to the destination."""

    mode: str = Field(..., description="Flight, Train, Bus, Private Taxi, ...")
    description: str = ""
    estimated_cost: str = ""
    duration: str = ""
    operator_details: str | None = None


class HotelRecommendation(CamelModel):
    """Suggested stay. ``name`` is the case-insensitive dedup key."""

    name: str
    description: str = ""
    estimated_price_per_night: str = ""
    amenities: list[str] = Field(default_factory=list)
    map_url: str | None = None
    google_rating: float | None = Field(None, ge=0, le=5)
    web_rating: float | None = Field(None, ge=0, le=5)
    review_count: str | None = None


class Itinerary(CamelModel):
    """Complete multi-day trip plan.

    ``days`` is expected to hold ``duration`` entries numbered 1..N, but edits
    never renumber days or re-check the count.
    """

    destination: str = Field(..., min_length=1)
    duration: int = Field(..., ge=1)
    theme: str = ""
    starting_location: str = ""
    travelers_count: int = Field(1, ge=1)
    days: list[DayItinerary] = Field(default_factory=list)
    travel_options: list[TravelOption] = Field(default_factory=list)
    hotel_recommendations: list[HotelRecommendation] = Field(default_factory=list)
    is_merged: bool | None = None

    @field_validator("days", "travel_options", "hotel_recommendations", mode="before")
    @classmethod
    def _missing_sections_are_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def theme_tags(self) -> list[str]:
        """Theme string split into individual tags."""
        return [t.strip() for t in self.theme.split(",") if t.strip()]


class ActivitySuggestions(CamelModel):
    """Envelope for discovery results from the gateway."""

    activities: list[Activity] = Field(default_factory=list)


class HotelSuggestions(CamelModel):
    """Envelope for hotel refresh results from the gateway."""

    hotels: list[HotelRecommendation] = Field(default_factory=list)

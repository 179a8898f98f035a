"""Planning request models - parameters handed to the AI gateway."""

from pydantic import BaseModel, Field


class TripRequest(BaseModel):
    """Structured itinerary generation parameters (planner form)."""

    destination: str = Field(..., min_length=1)
    duration: int = Field(3, ge=1, le=30, description="Trip length in days")
    themes: list[str] = Field(..., min_length=1)
    starting_location: str = Field(..., min_length=1)
    hotel_stars: int = Field(3, ge=1, le=5)
    travelers_count: int = Field(1, ge=1)

    @property
    def theme_string(self) -> str:
        """Themes joined the way they are stored on an itinerary."""
        return ", ".join(self.themes)

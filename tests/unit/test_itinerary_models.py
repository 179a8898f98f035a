"""Tests for itinerary wire format and model validation."""

import pytest
from pydantic import TypeAdapter, ValidationError

from locallens.itinerary.editing import remove_activity
from locallens.models.edits import ItineraryEdit, MoveActivity, UpdateActivityField
from locallens.models.itinerary import Itinerary
from locallens.models.planning import TripRequest

WIRE_ITINERARY = {
    "destination": "Varanasi",
    "duration": 2,
    "theme": "Spiritual, Food",
    "startingLocation": "Kolkata",
    "travelersCount": 3,
    "days": [
        {
            "day": 1,
            "activities": [
                {
                    "time": "05:30",
                    "location": "Dashashwamedh Ghat",
                    "description": "Sunrise boat ride",
                    "estimatedCost": "₹600",
                    "estimatedTime": "2 hours",
                    "culturalInsight": "Ganga aarti traditions",
                    "mapUrl": "https://maps.google.com/?q=ghat",
                }
            ],
        },
        {"day": 2},
    ],
    "travelOptions": [
        {"mode": "Train", "description": "Vande Bharat", "estimatedCost": "₹4500", "duration": "8h"}
    ],
    "hotelRecommendations": [
        {
            "name": "Ganges View",
            "estimatedPricePerNight": "₹3500",
            "amenities": ["WiFi"],
            "googleRating": 4.4,
            "reviewCount": "2K",
        }
    ],
}


def test_wire_keys_parse_to_attributes() -> None:
    """camelCase keys populate snake_case attributes."""
    itinerary = Itinerary.model_validate(WIRE_ITINERARY)

    assert itinerary.starting_location == "Kolkata"
    assert itinerary.travelers_count == 3
    assert itinerary.days[0].activities[0].cultural_insight == "Ganga aarti traditions"
    assert itinerary.days[1].activities == []
    assert itinerary.hotel_recommendations[0].google_rating == 4.4
    assert itinerary.is_merged is None


def test_to_wire_uses_camel_case() -> None:
    """Serialized form matches what the gateway emits."""
    wire = Itinerary.model_validate(WIRE_ITINERARY).to_wire()

    assert wire["startingLocation"] == "Kolkata"
    assert wire["days"][0]["activities"][0]["estimatedCost"] == "₹600"
    assert "isMerged" not in wire
    assert "starting_location" not in wire


def test_theme_tags_split() -> None:
    itinerary = Itinerary.model_validate(WIRE_ITINERARY)
    assert itinerary.theme_tags == ["Spiritual", "Food"]


def test_null_sections_read_as_empty() -> None:
    """Stored or generated plans with null lists load, and edits treat them as absent."""
    itinerary = Itinerary.model_validate(
        {
            "destination": "Goa",
            "duration": 1,
            "days": None,
            "travelOptions": None,
            "hotelRecommendations": None,
        }
    )

    assert itinerary.days == []
    assert itinerary.travel_options == []
    assert itinerary.hotel_recommendations == []
    assert remove_activity(itinerary, 0, 0) is itinerary


@pytest.mark.parametrize(
    "patch",
    [
        {"destination": ""},
        {"duration": 0},
        {"travelersCount": 0},
    ],
)
def test_invalid_itinerary_rejected(patch: dict) -> None:
    with pytest.raises(ValidationError):
        Itinerary.model_validate({**WIRE_ITINERARY, **patch})


def test_rating_out_of_range_rejected() -> None:
    bad = {**WIRE_ITINERARY, "hotelRecommendations": [{"name": "X", "googleRating": 7}]}
    with pytest.raises(ValidationError):
        Itinerary.model_validate(bad)


def test_edit_union_discriminates_on_op() -> None:
    adapter = TypeAdapter(ItineraryEdit)

    move = adapter.validate_python(
        {"op": "move", "day_index": 0, "activity_index": 1, "target_day_index": 2}
    )
    update = adapter.validate_python(
        {"op": "update", "day_index": 0, "activity_index": 0, "field": "mapUrl", "value": "u"}
    )

    assert isinstance(move, MoveActivity)
    assert isinstance(update, UpdateActivityField)

    with pytest.raises(ValidationError):
        adapter.validate_python({"op": "explode", "day_index": 0})


def test_trip_request_bounds() -> None:
    request = TripRequest(
        destination="Goa", themes=["Beach", "Nightlife"], starting_location="Mumbai"
    )
    assert request.duration == 3
    assert request.hotel_stars == 3
    assert request.theme_string == "Beach, Nightlife"

    with pytest.raises(ValidationError):
        TripRequest(destination="Goa", themes=[], starting_location="Mumbai")
    with pytest.raises(ValidationError):
        TripRequest(destination="Goa", themes=["Beach"], starting_location="Mumbai", hotel_stars=6)

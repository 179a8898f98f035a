"""Models package - re-exports for convenience."""

from locallens.models.booking import Booking, BookingStatus, NewMessage, RealtimeMessage
from locallens.models.edits import (
    AddActivity,
    ItineraryEdit,
    MoveActivity,
    RemoveActivity,
    ReorderActivity,
    UpdateActivityField,
)
from locallens.models.guide import Guide, GuideApplication, GuideUpdate
from locallens.models.itinerary import (
    Activity,
    ActivitySuggestions,
    DayItinerary,
    HotelRecommendation,
    HotelSuggestions,
    Itinerary,
    TravelOption,
)
from locallens.models.planning import TripRequest
from locallens.models.profile import Profile, ProfileUpdate

__all__ = [
    # Itinerary
    "Itinerary",
    "DayItinerary",
    "Activity",
    "TravelOption",
    "HotelRecommendation",
    "ActivitySuggestions",
    "HotelSuggestions",
    # Planning
    "TripRequest",
    # Edits
    "ItineraryEdit",
    "RemoveActivity",
    "AddActivity",
    "ReorderActivity",
    "MoveActivity",
    "UpdateActivityField",
    # Bookings
    "Booking",
    "BookingStatus",
    "RealtimeMessage",
    "NewMessage",
    # Guides
    "Guide",
    "GuideApplication",
    "GuideUpdate",
    # Profiles
    "Profile",
    "ProfileUpdate",
]

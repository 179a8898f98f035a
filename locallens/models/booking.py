"""Booking and booking-message models."""

from datetime import datetime
from enum import Enum
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, Field, model_validator

from locallens.models.guide import Guide
from locallens.models.itinerary import Itinerary
from locallens.models.profile import Profile


class BookingStatus(str, Enum):
    """Booking lifecycle state. ``approved``/``rejected`` are terminal."""

    pending = "pending"
    approved = "approved"
    rejected = "rejected"

    @property
    def is_terminal(self) -> bool:
        return self is not BookingStatus.pending


class Booking(BaseModel):
    """Request from a traveler (``user_id``) to engage a guide."""

    id: UUID
    user_id: UUID
    guide_id: UUID
    status: BookingStatus
    created_at: datetime
    guide: Guide | None = Field(None, description="Attached for the traveler view")
    traveler: Profile | None = Field(None, description="Attached for the guide view")


class RealtimeMessage(BaseModel):
    """Message exchanged between the parties of a booking."""

    id: UUID
    booking_id: UUID
    sender_id: UUID
    content: str
    created_at: datetime
    message_type: Literal["text", "itinerary"] = "text"
    metadata: Itinerary | None = None


class NewMessage(BaseModel):
    """Body for posting a booking message."""

    content: str = Field("", max_length=4000)
    message_type: Literal["text", "itinerary"] = "text"
    metadata: Itinerary | None = None

    @model_validator(mode="after")
    def _check_payload(self) -> "NewMessage":
        if self.message_type == "itinerary" and self.metadata is None:
            raise ValueError("itinerary messages must carry the itinerary in metadata")
        if self.message_type == "text" and not self.content.strip():
            raise ValueError("text messages must not be empty")
        return self

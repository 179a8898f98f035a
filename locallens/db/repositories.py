"""Repository protocol interfaces for data access."""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol
from uuid import UUID

from locallens.db.context import RequestContext
from locallens.models.booking import Booking, BookingStatus, NewMessage, RealtimeMessage
from locallens.models.guide import Guide, GuideApplication
from locallens.models.itinerary import Itinerary
from locallens.models.profile import Profile


@dataclass
class ItineraryRecord:
    """Saved itinerary row with its rehydrated plan."""

    id: UUID
    user_id: UUID
    itinerary: Itinerary
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


class ItineraryRepository(Protocol):
    """Repository for saved itineraries. Every call is scoped to ``ctx.user_id``."""

    async def insert(self, ctx: RequestContext, itinerary: Itinerary) -> ItineraryRecord:
        """Insert a new record owned by the current user."""
        ...

    async def update(
        self, ctx: RequestContext, record_id: UUID, itinerary: Itinerary
    ) -> ItineraryRecord | None:
        """Overwrite ``data`` of an owned record and clear its soft-delete marker.

        Returns:
            Updated record, or None if no owned record has that id
        """
        ...

    async def get(self, ctx: RequestContext, record_id: UUID) -> ItineraryRecord | None:
        """Get an owned record by id."""
        ...

    async def list_active(self, ctx: RequestContext, limit: int | None = None) -> list[ItineraryRecord]:
        """List records without a soft-delete marker, newest first.

        Args:
            ctx: Request context
            limit: Maximum number of rows, or None for all
        """
        ...

    async def delete(self, ctx: RequestContext, record_id: UUID) -> None:
        """Hard-delete an owned record. Deleting a missing id is not an error."""
        ...


class ProfileRepository(Protocol):
    """Repository for user profiles."""

    async def get(self, user_id: UUID) -> Profile | None:
        """Get profile by user id."""
        ...

    async def upsert(self, profile: Profile) -> Profile:
        """Insert or replace a profile."""
        ...


class GuideRepository(Protocol):
    """Repository for guide marketplace profiles."""

    async def get(self, guide_id: UUID) -> Guide | None:
        """Get guide by id."""
        ...

    async def list_guides(self, *, verified_only: bool = True) -> list[Guide]:
        """List guides ordered by name."""
        ...

    async def create(self, ctx: RequestContext, application: GuideApplication) -> Guide:
        """Create an unverified guide whose id is the applicant's user id."""
        ...

    async def update(self, guide_id: UUID, changes: dict[str, Any]) -> Guide | None:
        """Apply column changes. Returns None if the guide does not exist."""
        ...


class BookingRepository(Protocol):
    """Repository for bookings."""

    async def create(self, ctx: RequestContext, guide_id: UUID) -> Booking:
        """Insert a pending booking for the current user."""
        ...

    async def get(self, booking_id: UUID) -> Booking | None:
        """Get booking by id (not scoped; callers check the parties)."""
        ...

    async def update_status(self, booking_id: UUID, status: BookingStatus) -> Booking | None:
        """Write a new status. Does not check the current status."""
        ...

    async def list_for_traveler(self, user_id: UUID) -> list[Booking]:
        """Bookings requested by a traveler, newest first, with ``guide`` attached."""
        ...

    async def list_for_guide(self, guide_id: UUID) -> list[Booking]:
        """Bookings addressed to a guide, newest first, with ``traveler`` attached."""
        ...


class MessageRepository(Protocol):
    """Repository for booking messages."""

    async def add(self, booking_id: UUID, sender_id: UUID, message: NewMessage) -> RealtimeMessage:
        """Append a message to a booking conversation."""
        ...

    async def list_messages(self, booking_id: UUID) -> list[RealtimeMessage]:
        """List messages oldest first."""
        ...


@dataclass
class RetryAfter:
    """Rate limit retry-after information."""

    seconds: int


class RateLimiter(Protocol):
    """Rate limiter interface."""

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available.

        Args:
            key: Rate limit key
            now: Current timestamp

        Returns:
            RetryAfter if over quota, None if allowed
        """
        ...

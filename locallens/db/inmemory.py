"""In-memory implementations of repository interfaces."""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any

from locallens.db.context import RequestContext
from locallens.db.repositories import ItineraryRecord, RetryAfter
from locallens.models.booking import Booking, BookingStatus, NewMessage, RealtimeMessage
from locallens.models.guide import Guide, GuideApplication
from locallens.models.itinerary import Itinerary
from locallens.models.profile import Profile


def _now() -> datetime:
    return datetime.now(UTC)


def _newest_first(items: list[Any]) -> list[Any]:
    # Reverse first so insertion order breaks timestamp ties newest-first
    return sorted(reversed(items), key=lambda x: x.created_at, reverse=True)


class InMemoryItineraryRepository:
    """In-memory implementation of ItineraryRepository."""

    def __init__(self) -> None:
        self._records: dict[uuid.UUID, ItineraryRecord] = {}

    async def insert(self, ctx: RequestContext, itinerary: Itinerary) -> ItineraryRecord:
        """Insert a new record owned by the current user."""
        record = ItineraryRecord(
            id=uuid.uuid4(),
            user_id=ctx.user_id,
            itinerary=itinerary.model_copy(deep=True),
            created_at=_now(),
        )
        self._records[record.id] = record
        return record

    async def update(
        self, ctx: RequestContext, record_id: uuid.UUID, itinerary: Itinerary
    ) -> ItineraryRecord | None:
        """Overwrite data and clear the soft-delete marker."""
        record = self._records.get(record_id)

        # Enforce ownership
        if record is None or record.user_id != ctx.user_id:
            return None

        record.itinerary = itinerary.model_copy(deep=True)
        record.updated_at = _now()
        record.deleted_at = None
        return record

    async def get(self, ctx: RequestContext, record_id: uuid.UUID) -> ItineraryRecord | None:
        """Get an owned record by id."""
        record = self._records.get(record_id)

        if record is None or record.user_id != ctx.user_id:
            return None

        return record

    async def list_active(
        self, ctx: RequestContext, limit: int | None = None
    ) -> list[ItineraryRecord]:
        """List active records newest first."""
        owned = [
            r for r in self._records.values() if r.user_id == ctx.user_id and r.deleted_at is None
        ]
        results = _newest_first(owned)
        return results if limit is None else results[:limit]

    async def delete(self, ctx: RequestContext, record_id: uuid.UUID) -> None:
        """Hard-delete an owned record."""
        record = self._records.get(record_id)
        if record is not None and record.user_id == ctx.user_id:
            del self._records[record_id]

    def mark_deleted(self, record_id: uuid.UUID) -> None:
        """Set the soft-delete marker (rows written by older clients carry one)."""
        self._records[record_id].deleted_at = _now()


class InMemoryProfileRepository:
    """In-memory implementation of ProfileRepository."""

    def __init__(self) -> None:
        self._profiles: dict[uuid.UUID, Profile] = {}

    async def get(self, user_id: uuid.UUID) -> Profile | None:
        """Get profile by user id."""
        return self._profiles.get(user_id)

    async def upsert(self, profile: Profile) -> Profile:
        """Insert or replace a profile."""
        stored = profile.model_copy(update={"updated_at": _now()})
        self._profiles[profile.id] = stored
        return stored


class InMemoryGuideRepository:
    """In-memory implementation of GuideRepository."""

    def __init__(self) -> None:
        self._guides: dict[uuid.UUID, Guide] = {}

    def add(self, guide: Guide) -> Guide:
        """Seed a guide directly (verification happens outside the API)."""
        self._guides[guide.id] = guide
        return guide

    async def get(self, guide_id: uuid.UUID) -> Guide | None:
        """Get guide by id."""
        return self._guides.get(guide_id)

    async def list_guides(self, *, verified_only: bool = True) -> list[Guide]:
        """List guides ordered by name."""
        guides = [g for g in self._guides.values() if g.verified or not verified_only]
        return sorted(guides, key=lambda g: g.name)

    async def create(self, ctx: RequestContext, application: GuideApplication) -> Guide:
        """Create an unverified guide for the applicant."""
        guide = Guide(id=ctx.user_id, verified=False, **application.model_dump())
        self._guides[guide.id] = guide
        return guide

    async def update(self, guide_id: uuid.UUID, changes: dict[str, Any]) -> Guide | None:
        """Apply changes to an existing guide."""
        guide = self._guides.get(guide_id)
        if guide is None:
            return None
        updated = guide.model_copy(update=changes)
        self._guides[guide_id] = updated
        return updated


class InMemoryBookingRepository:
    """In-memory implementation of BookingRepository.

    Guide and traveler details are stitched in from the given repositories.
    """

    def __init__(
        self, guides: InMemoryGuideRepository, profiles: InMemoryProfileRepository
    ) -> None:
        self._guides = guides
        self._profiles = profiles
        self._bookings: dict[uuid.UUID, Booking] = {}

    async def create(self, ctx: RequestContext, guide_id: uuid.UUID) -> Booking:
        """Insert a pending booking."""
        booking = Booking(
            id=uuid.uuid4(),
            user_id=ctx.user_id,
            guide_id=guide_id,
            status=BookingStatus.pending,
            created_at=_now(),
        )
        self._bookings[booking.id] = booking
        return booking

    async def get(self, booking_id: uuid.UUID) -> Booking | None:
        """Get booking by id."""
        return self._bookings.get(booking_id)

    async def update_status(
        self, booking_id: uuid.UUID, status: BookingStatus
    ) -> Booking | None:
        """Write a new status without checking the current one."""
        booking = self._bookings.get(booking_id)
        if booking is None:
            return None
        updated = booking.model_copy(update={"status": status})
        self._bookings[booking_id] = updated
        return updated

    async def list_for_traveler(self, user_id: uuid.UUID) -> list[Booking]:
        """Traveler view with guide attached."""
        own = [b for b in self._bookings.values() if b.user_id == user_id]
        return [
            b.model_copy(update={"guide": await self._guides.get(b.guide_id)})
            for b in _newest_first(own)
        ]

    async def list_for_guide(self, guide_id: uuid.UUID) -> list[Booking]:
        """Guide view with traveler profile attached."""
        incoming = [b for b in self._bookings.values() if b.guide_id == guide_id]
        return [
            b.model_copy(update={"traveler": await self._profiles.get(b.user_id)})
            for b in _newest_first(incoming)
        ]


class InMemoryMessageRepository:
    """In-memory implementation of MessageRepository."""

    def __init__(self) -> None:
        self._messages: list[RealtimeMessage] = []

    async def add(
        self, booking_id: uuid.UUID, sender_id: uuid.UUID, message: NewMessage
    ) -> RealtimeMessage:
        """Append a message."""
        stored = RealtimeMessage(
            id=uuid.uuid4(),
            booking_id=booking_id,
            sender_id=sender_id,
            content=message.content,
            message_type=message.message_type,
            metadata=message.metadata,
            created_at=_now(),
        )
        self._messages.append(stored)
        return stored

    async def list_messages(self, booking_id: uuid.UUID) -> list[RealtimeMessage]:
        """List messages oldest first."""
        return [m for m in self._messages if m.booking_id == booking_id]


class InMemoryRateLimiter:
    """In-memory implementation of RateLimiter using fixed window."""

    def __init__(self, max_requests: int, window_seconds: int = 60) -> None:
        """Initialize rate limiter.

        Args:
            max_requests: Maximum requests per window
            window_seconds: Window size in seconds (default 60)
        """
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._windows: dict[str, tuple[datetime, int]] = {}

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Check if quota is available."""
        if key not in self._windows:
            self._windows[key] = (now, 1)
            return None

        window_start, count = self._windows[key]
        window_end = window_start + timedelta(seconds=self._window_seconds)

        if now >= window_end:
            self._windows[key] = (now, 1)
            return None

        if count >= self._max_requests:
            return RetryAfter(seconds=max(1, int((window_end - now).total_seconds())))

        self._windows[key] = (window_start, count + 1)
        return None

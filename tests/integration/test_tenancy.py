"""Tests for per-user isolation of saved itineraries and booking messages."""

import uuid

import pytest

from locallens.bookings.workflow import create_booking, list_bookings, post_message
from locallens.db.context import RequestContext
from locallens.db.inmemory import (
    InMemoryBookingRepository,
    InMemoryGuideRepository,
    InMemoryItineraryRepository,
    InMemoryMessageRepository,
    InMemoryProfileRepository,
)
from locallens.db.itinerary_store import delete_itinerary, list_all_itineraries, save_itinerary
from locallens.errors import PermissionDenied
from locallens.models.booking import NewMessage
from locallens.models.guide import Guide
from locallens.models.itinerary import Itinerary


@pytest.mark.asyncio
async def test_itinerary_repository_user_isolation(itinerary: Itinerary) -> None:
    """A user never sees, overwrites or deletes another user's plans."""
    repo = InMemoryItineraryRepository()
    ctx_a = RequestContext(user_id=uuid.uuid4())
    ctx_b = RequestContext(user_id=uuid.uuid4())

    record_a = await save_itinerary(repo, ctx_a, itinerary)
    record_b = await save_itinerary(repo, ctx_b, itinerary)
    assert record_a is not None and record_b is not None

    assert await repo.get(ctx_a, record_b.id) is None
    assert await repo.get(ctx_b, record_a.id) is None
    assert [r.id for r in await list_all_itineraries(repo, ctx_a)] == [record_a.id]

    # Deleting someone else's id succeeds but removes nothing
    assert (await delete_itinerary(repo, ctx_a, record_b.id)).success
    assert await repo.get(ctx_b, record_b.id) is not None


@pytest.mark.asyncio
async def test_bookings_visible_only_to_parties() -> None:
    guide_id = uuid.uuid4()
    guides = InMemoryGuideRepository()
    guides.add(Guide(id=guide_id, name="Ravi", location="Jaipur", verified=True))
    bookings = InMemoryBookingRepository(guides, InMemoryProfileRepository())
    messages = InMemoryMessageRepository()

    traveler_a = RequestContext(user_id=uuid.uuid4())
    traveler_b = RequestContext(user_id=uuid.uuid4())
    booking_a = await create_booking(bookings, guides, traveler_a, guide_id)
    await create_booking(bookings, guides, traveler_b, guide_id)

    assert [b.id for b in await list_bookings(bookings, traveler_a, "traveler")] == [booking_a.id]
    assert len(await list_bookings(bookings, RequestContext(user_id=guide_id), "guide")) == 2

    with pytest.raises(PermissionDenied):
        await post_message(bookings, messages, traveler_b, booking_a.id, NewMessage(content="hi"))

"""SQL repositories against in-memory SQLite."""

import uuid
from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import update
from sqlalchemy.exc import InvalidRequestError
from sqlalchemy.ext.asyncio import AsyncSession

from locallens.db import sql_repositories
from locallens.db.context import RequestContext
from locallens.db.itinerary_store import list_recent_itineraries
from locallens.db.models import ItineraryRow
from locallens.db.sql_repositories import (
    SqlBookingRepository,
    SqlGuideRepository,
    SqlItineraryRepository,
    SqlMessageRepository,
    SqlProfileRepository,
)
from locallens.models.booking import BookingStatus, NewMessage
from locallens.models.guide import GuideApplication
from locallens.models.itinerary import Itinerary
from locallens.models.profile import Profile


async def backdate(session: AsyncSession, record_id: uuid.UUID, minutes: int) -> None:
    await session.execute(
        update(ItineraryRow)
        .where(ItineraryRow.id == record_id)
        .values(created_at=datetime.now(UTC) - timedelta(minutes=minutes))
    )
    await session.commit()


@pytest.mark.asyncio
async def test_itinerary_round_trips_through_json(
    sqlite_session: AsyncSession, ctx: RequestContext, itinerary: Itinerary
) -> None:
    repo = SqlItineraryRepository(sqlite_session)

    record = await repo.insert(ctx, itinerary)
    fetched = await repo.get(ctx, record.id)

    assert fetched is not None
    assert fetched.itinerary == itinerary
    assert fetched.user_id == ctx.user_id


@pytest.mark.asyncio
async def test_itinerary_scoped_to_owner(
    sqlite_session: AsyncSession, ctx: RequestContext, itinerary: Itinerary
) -> None:
    repo = SqlItineraryRepository(sqlite_session)
    record = await repo.insert(ctx, itinerary)
    other = RequestContext(user_id=uuid.uuid4())

    assert await repo.get(other, record.id) is None
    assert await repo.update(other, record.id, itinerary) is None
    assert await repo.list_active(other) == []

    await repo.delete(other, record.id)
    assert await repo.get(ctx, record.id) is not None


@pytest.mark.asyncio
async def test_update_clears_soft_delete(
    sqlite_session: AsyncSession, ctx: RequestContext, itinerary: Itinerary, build_itinerary
) -> None:
    repo = SqlItineraryRepository(sqlite_session)
    record = await repo.insert(ctx, itinerary)
    await sqlite_session.execute(
        update(ItineraryRow)
        .where(ItineraryRow.id == record.id)
        .values(deleted_at=datetime.now(UTC))
    )
    await sqlite_session.commit()
    assert await repo.list_active(ctx) == []

    edited = build_itinerary(["Nahargarh"])
    updated = await repo.update(ctx, record.id, edited)

    assert updated is not None
    assert updated.deleted_at is None
    assert updated.updated_at is not None
    assert [r.itinerary for r in await repo.list_active(ctx)] == [edited]


@pytest.mark.asyncio
async def test_list_active_newest_first_with_limit(
    sqlite_session: AsyncSession, ctx: RequestContext, build_itinerary
) -> None:
    repo = SqlItineraryRepository(sqlite_session)
    oldest = await repo.insert(ctx, build_itinerary(["A"], destination="Agra"))
    middle = await repo.insert(ctx, build_itinerary(["B"], destination="Bikaner"))
    newest = await repo.insert(ctx, build_itinerary(["C"], destination="Chennai"))
    await backdate(sqlite_session, oldest.id, 30)
    await backdate(sqlite_session, middle.id, 20)
    await backdate(sqlite_session, newest.id, 10)

    assert [r.id for r in await repo.list_active(ctx)] == [newest.id, middle.id, oldest.id]
    assert [r.id for r in await repo.list_active(ctx, limit=2)] == [newest.id, middle.id]


@pytest.mark.asyncio
async def test_delete_missing_id_is_noop(sqlite_session: AsyncSession, ctx: RequestContext) -> None:
    await SqlItineraryRepository(sqlite_session).delete(ctx, uuid.uuid4())


@pytest.mark.asyncio
async def test_unreadable_row_does_not_hide_the_rest(
    sqlite_session: AsyncSession, ctx: RequestContext, itinerary: Itinerary
) -> None:
    """A stored plan that no longer validates is skipped, not fatal to the listing."""
    repo = SqlItineraryRepository(sqlite_session)
    good = await repo.insert(ctx, itinerary)
    sqlite_session.add(ItineraryRow(id=uuid.uuid4(), user_id=ctx.user_id, data={"duration": 1}))
    await sqlite_session.commit()

    recent = await list_recent_itineraries(repo, ctx)

    assert [r.id for r in recent] == [good.id]


@pytest.mark.asyncio
async def test_timestamps_reload_as_utc(
    sqlite_session: AsyncSession, ctx: RequestContext, itinerary: Itinerary
) -> None:
    repo = SqlItineraryRepository(sqlite_session)
    record = await repo.insert(ctx, itinerary)
    sqlite_session.expunge_all()

    fetched = await repo.get(ctx, record.id)

    assert fetched is not None
    assert fetched.created_at.utcoffset() == timedelta(0)
    assert fetched.created_at == record.created_at


@pytest.mark.asyncio
async def test_profile_upsert(sqlite_session: AsyncSession) -> None:
    repo = SqlProfileRepository(sqlite_session)
    user_id = uuid.uuid4()

    created = await repo.upsert(Profile(id=user_id, first_name="Asha"))
    changed = await repo.upsert(created.model_copy(update={"last_name": "Verma"}))

    assert changed.first_name == "Asha"
    assert changed.last_name == "Verma"
    assert changed.updated_at is not None
    assert (await repo.get(user_id)) == changed
    assert await repo.get(uuid.uuid4()) is None


@pytest.mark.asyncio
async def test_guides_create_list_update(sqlite_session: AsyncSession) -> None:
    repo = SqlGuideRepository(sqlite_session)
    ctx = RequestContext(user_id=uuid.uuid4())

    guide = await repo.create(
        ctx, GuideApplication(name="Meera", location="Udaipur", specialty=["Lakes"])
    )

    assert guide.id == ctx.user_id
    assert guide.verified is False
    assert await repo.list_guides() == []
    assert [g.id for g in await repo.list_guides(verified_only=False)] == [guide.id]

    verified = await repo.update(guide.id, {"verified": True, "bio": "Boat tours"})
    assert verified is not None
    assert verified.bio == "Boat tours"
    assert [g.specialty for g in await repo.list_guides()] == [["Lakes"]]
    assert await repo.update(uuid.uuid4(), {"bio": "x"}) is None


async def seed_booking(session: AsyncSession) -> tuple[SqlBookingRepository, uuid.UUID, uuid.UUID]:
    guide_ctx = RequestContext(user_id=uuid.uuid4())
    traveler = RequestContext(user_id=uuid.uuid4())
    await SqlGuideRepository(session).create(
        guide_ctx, GuideApplication(name="Ravi", location="Jaipur")
    )
    await SqlProfileRepository(session).upsert(Profile(id=traveler.user_id, first_name="Asha"))

    repo = SqlBookingRepository(session)
    await repo.create(traveler, guide_ctx.user_id)
    return repo, traveler.user_id, guide_ctx.user_id


@pytest.mark.asyncio
async def test_booking_views_join_other_party(sqlite_session: AsyncSession) -> None:
    repo, traveler_id, guide_id = await seed_booking(sqlite_session)

    as_traveler = await repo.list_for_traveler(traveler_id)
    as_guide = await repo.list_for_guide(guide_id)

    assert as_traveler[0].status is BookingStatus.pending
    assert as_traveler[0].guide is not None
    assert as_traveler[0].guide.name == "Ravi"
    assert as_guide[0].traveler is not None
    assert as_guide[0].traveler.first_name == "Asha"


@pytest.mark.asyncio
async def test_booking_views_fall_back_when_join_fails(
    sqlite_session: AsyncSession, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A failed join is retried as separate queries stitched by id."""
    repo, traveler_id, guide_id = await seed_booking(sqlite_session)

    def broken_join(*args: object) -> None:
        raise InvalidRequestError("relationship not found")

    monkeypatch.setattr(sql_repositories, "joinedload", broken_join)

    as_traveler = await repo.list_for_traveler(traveler_id)
    as_guide = await repo.list_for_guide(guide_id)

    assert as_traveler[0].guide is not None
    assert as_traveler[0].guide.id == guide_id
    assert as_guide[0].traveler is not None
    assert as_guide[0].traveler.id == traveler_id


@pytest.mark.asyncio
async def test_booking_status_update(sqlite_session: AsyncSession) -> None:
    repo, traveler_id, _ = await seed_booking(sqlite_session)
    booking = (await repo.list_for_traveler(traveler_id))[0]

    updated = await repo.update_status(booking.id, BookingStatus.approved)

    assert updated is not None
    assert updated.status is BookingStatus.approved
    assert (await repo.get(booking.id)).status is BookingStatus.approved
    assert await repo.update_status(uuid.uuid4(), BookingStatus.rejected) is None


@pytest.mark.asyncio
async def test_messages_store_shared_itinerary(
    sqlite_session: AsyncSession, itinerary: Itinerary
) -> None:
    repo, traveler_id, _ = await seed_booking(sqlite_session)
    booking = (await repo.list_for_traveler(traveler_id))[0]
    messages = SqlMessageRepository(sqlite_session)

    await messages.add(
        booking.id,
        traveler_id,
        NewMessage(content="Our plan", message_type="itinerary", metadata=itinerary),
    )

    thread = await messages.list_messages(booking.id)

    assert len(thread) == 1
    assert thread[0].message_type == "itinerary"
    assert thread[0].metadata == itinerary
    assert await messages.list_messages(uuid.uuid4()) == []

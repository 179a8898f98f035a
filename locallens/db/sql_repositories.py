"""SQL implementations of repository interfaces."""

import logging
import uuid
from typing import Any

from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.exc import InvalidRequestError, OperationalError, ProgrammingError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import joinedload

from locallens.db.context import RequestContext
from locallens.db.models import BookingRow, GuideRow, ItineraryRow, MessageRow, ProfileRow, utcnow
from locallens.db.queries import (
    select_active_itineraries,
    select_bookings_for_guide,
    select_bookings_for_traveler,
    select_itineraries,
)
from locallens.db.repositories import ItineraryRecord
from locallens.models.booking import Booking, BookingStatus, NewMessage, RealtimeMessage
from locallens.models.guide import Guide, GuideApplication
from locallens.models.itinerary import Itinerary
from locallens.models.profile import Profile

logger = logging.getLogger(__name__)

# Raised when the guide/traveler join cannot be resolved (schema drift,
# missing foreign key, relationship not configured on the server)
JOIN_FAILURES = (InvalidRequestError, ProgrammingError, OperationalError)


def _to_record(row: ItineraryRow) -> ItineraryRecord:
    return ItineraryRecord(
        id=row.id,
        user_id=row.user_id,
        itinerary=Itinerary.model_validate(row.data),
        created_at=row.created_at,
        updated_at=row.updated_at,
        deleted_at=row.deleted_at,
    )


def _to_guide(row: GuideRow) -> Guide:
    return Guide.model_validate(row, from_attributes=True)


def _to_profile(row: ProfileRow) -> Profile:
    return Profile.model_validate(row, from_attributes=True)


def _to_booking(
    row: BookingRow, guide: GuideRow | None = None, traveler: ProfileRow | None = None
) -> Booking:
    return Booking(
        id=row.id,
        user_id=row.user_id,
        guide_id=row.guide_id,
        status=BookingStatus(row.status),
        created_at=row.created_at,
        guide=_to_guide(guide) if guide is not None else None,
        traveler=_to_profile(traveler) if traveler is not None else None,
    )


def _to_message(row: MessageRow) -> RealtimeMessage:
    return RealtimeMessage(
        id=row.id,
        booking_id=row.booking_id,
        sender_id=row.sender_id,
        content=row.content,
        message_type=row.message_type,
        metadata=Itinerary.model_validate(row.metadata_) if row.metadata_ else None,
        created_at=row.created_at,
    )


class SqlItineraryRepository:
    """SQL implementation of ItineraryRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def insert(self, ctx: RequestContext, itinerary: Itinerary) -> ItineraryRecord:
        """Insert a new record owned by the current user."""
        row = ItineraryRow(id=uuid.uuid4(), user_id=ctx.user_id, data=itinerary.to_wire())

        self._session.add(row)
        await self._session.commit()

        return _to_record(row)

    async def update(
        self, ctx: RequestContext, record_id: uuid.UUID, itinerary: Itinerary
    ) -> ItineraryRecord | None:
        """Overwrite data and clear the soft-delete marker."""
        result = await self._session.execute(
            select_itineraries(ctx).where(ItineraryRow.id == record_id)
        )
        row = result.scalar_one_or_none()

        if row is None:
            return None

        row.data = itinerary.to_wire()
        row.updated_at = utcnow()
        row.deleted_at = None
        await self._session.commit()

        return _to_record(row)

    async def get(self, ctx: RequestContext, record_id: uuid.UUID) -> ItineraryRecord | None:
        """Get an owned record by id."""
        result = await self._session.execute(
            select_itineraries(ctx).where(ItineraryRow.id == record_id)
        )
        row = result.scalar_one_or_none()

        if row is None:
            return None

        return _to_record(row)

    async def list_active(
        self, ctx: RequestContext, limit: int | None = None
    ) -> list[ItineraryRecord]:
        """List active records newest first."""
        stmt = select_active_itineraries(ctx)
        if limit is not None:
            stmt = stmt.limit(limit)

        result = await self._session.execute(stmt)

        records = []
        for row in result.scalars().all():
            try:
                records.append(_to_record(row))
            except ValidationError as e:
                logger.warning(f"[itineraries] skipping unreadable record {row.id}: {e}")

        return records

    async def delete(self, ctx: RequestContext, record_id: uuid.UUID) -> None:
        """Hard-delete an owned record."""
        result = await self._session.execute(
            select_itineraries(ctx).where(ItineraryRow.id == record_id)
        )
        row = result.scalar_one_or_none()

        if row is None:
            return

        await self._session.delete(row)
        await self._session.commit()


class SqlProfileRepository:
    """SQL implementation of ProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, user_id: uuid.UUID) -> Profile | None:
        """Get profile by user id."""
        row = await self._session.get(ProfileRow, user_id)
        return _to_profile(row) if row is not None else None

    async def upsert(self, profile: Profile) -> Profile:
        """Insert or replace a profile."""
        values = profile.model_dump(exclude={"id", "updated_at"})
        row = await self._session.get(ProfileRow, profile.id)

        if row is None:
            row = ProfileRow(id=profile.id, **values)
            self._session.add(row)
        else:
            for key, value in values.items():
                setattr(row, key, value)

        row.updated_at = utcnow()
        await self._session.commit()

        return _to_profile(row)


class SqlGuideRepository:
    """SQL implementation of GuideRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, guide_id: uuid.UUID) -> Guide | None:
        """Get guide by id."""
        row = await self._session.get(GuideRow, guide_id)
        return _to_guide(row) if row is not None else None

    async def list_guides(self, *, verified_only: bool = True) -> list[Guide]:
        """List guides ordered by name."""
        stmt = select(GuideRow).order_by(GuideRow.name)
        if verified_only:
            stmt = stmt.where(GuideRow.verified.is_(True))

        result = await self._session.execute(stmt)
        return [_to_guide(row) for row in result.scalars().all()]

    async def create(self, ctx: RequestContext, application: GuideApplication) -> Guide:
        """Create an unverified guide for the applicant."""
        row = GuideRow(id=ctx.user_id, verified=False, **application.model_dump())

        self._session.add(row)
        await self._session.commit()

        return _to_guide(row)

    async def update(self, guide_id: uuid.UUID, changes: dict[str, Any]) -> Guide | None:
        """Apply changes to an existing guide."""
        row = await self._session.get(GuideRow, guide_id)

        if row is None:
            return None

        for key, value in changes.items():
            setattr(row, key, value)
        await self._session.commit()

        return _to_guide(row)


class SqlBookingRepository:
    """SQL implementation of BookingRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, ctx: RequestContext, guide_id: uuid.UUID) -> Booking:
        """Insert a pending booking."""
        row = BookingRow(
            id=uuid.uuid4(),
            user_id=ctx.user_id,
            guide_id=guide_id,
            status=BookingStatus.pending.value,
        )

        self._session.add(row)
        await self._session.commit()

        return _to_booking(row)

    async def get(self, booking_id: uuid.UUID) -> Booking | None:
        """Get booking by id."""
        row = await self._session.get(BookingRow, booking_id)
        return _to_booking(row) if row is not None else None

    async def update_status(
        self, booking_id: uuid.UUID, status: BookingStatus
    ) -> Booking | None:
        """Write a new status without checking the current one."""
        row = await self._session.get(BookingRow, booking_id)

        if row is None:
            return None

        row.status = status.value
        await self._session.commit()

        return _to_booking(row)

    async def list_for_traveler(self, user_id: uuid.UUID) -> list[Booking]:
        """Traveler view with guide attached."""
        try:
            result = await self._session.execute(
                select_bookings_for_traveler(user_id).options(joinedload(BookingRow.guide))
            )
            return [_to_booking(row, guide=row.guide) for row in result.scalars().all()]
        except JOIN_FAILURES as e:
            await self._session.rollback()
            logger.warning(f"[bookings] guide join failed, stitching separately: {e}")

        rows = (await self._session.execute(select_bookings_for_traveler(user_id))).scalars().all()
        guide_ids = {row.guide_id for row in rows}
        guides: dict[uuid.UUID, GuideRow] = {}
        if guide_ids:
            found = await self._session.execute(select(GuideRow).where(GuideRow.id.in_(guide_ids)))
            guides = {g.id: g for g in found.scalars().all()}

        return [_to_booking(row, guide=guides.get(row.guide_id)) for row in rows]

    async def list_for_guide(self, guide_id: uuid.UUID) -> list[Booking]:
        """Guide view with traveler profile attached."""
        try:
            result = await self._session.execute(
                select_bookings_for_guide(guide_id).options(joinedload(BookingRow.traveler))
            )
            return [_to_booking(row, traveler=row.traveler) for row in result.scalars().all()]
        except JOIN_FAILURES as e:
            await self._session.rollback()
            logger.warning(f"[bookings] traveler join failed, stitching separately: {e}")

        rows = (await self._session.execute(select_bookings_for_guide(guide_id))).scalars().all()
        user_ids = {row.user_id for row in rows}
        profiles: dict[uuid.UUID, ProfileRow] = {}
        if user_ids:
            found = await self._session.execute(
                select(ProfileRow).where(ProfileRow.id.in_(user_ids))
            )
            profiles = {p.id: p for p in found.scalars().all()}

        return [_to_booking(row, traveler=profiles.get(row.user_id)) for row in rows]


class SqlMessageRepository:
    """SQL implementation of MessageRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(
        self, booking_id: uuid.UUID, sender_id: uuid.UUID, message: NewMessage
    ) -> RealtimeMessage:
        """Append a message."""
        row = MessageRow(
            id=uuid.uuid4(),
            booking_id=booking_id,
            sender_id=sender_id,
            content=message.content,
            message_type=message.message_type,
            metadata_=message.metadata.to_wire() if message.metadata is not None else None,
        )

        self._session.add(row)
        await self._session.commit()

        return _to_message(row)

    async def list_messages(self, booking_id: uuid.UUID) -> list[RealtimeMessage]:
        """List messages oldest first."""
        result = await self._session.execute(
            select(MessageRow)
            .where(MessageRow.booking_id == booking_id)
            .order_by(MessageRow.created_at)
        )
        return [_to_message(row) for row in result.scalars().all()]

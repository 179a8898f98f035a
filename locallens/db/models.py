"""SQLAlchemy ORM models for the LocalLens tables."""

import uuid
from datetime import UTC, date, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Text,
    Uuid,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.engine import Dialect
from sqlalchemy.orm import DeclarativeBase, Mapped, foreign, mapped_column, relationship
from sqlalchemy.sql import func
from sqlalchemy.types import TypeDecorator

# JSONB on Postgres, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def utcnow() -> datetime:
    return datetime.now(UTC)


class UtcDateTime(TypeDecorator[datetime]):
    """Timezone-aware timestamp that always loads as UTC.

    SQLite drops the offset on storage; values written here are already UTC.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


class ProfileRow(Base):
    """Profile table - one row per authenticated user (id is the user id)."""

    __tablename__ = "profiles"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, default="traveler")
    email: Mapped[str | None] = mapped_column(Text, nullable=True)
    first_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    last_name: Mapped[str] = mapped_column(Text, nullable=False, default="")
    phone: Mapped[str] = mapped_column(Text, nullable=False, default="")
    date_of_birth: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)


class GuideRow(Base):
    """Guide table - marketplace profile of a user acting as a guide."""

    __tablename__ = "guides"
    __table_args__ = (Index("idx_guides_verified_location", "verified", "location"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str] = mapped_column(Text, nullable=False)
    bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    specialty: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    languages: Mapped[list[str]] = mapped_column(JSONType, nullable=False, default=list)
    price_per_day: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    experience_years: Mapped[str | None] = mapped_column(Text, nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=4.5)
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    verification_document_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    bookings: Mapped[list["BookingRow"]] = relationship("BookingRow", back_populates="guide")


class ItineraryRow(Base):
    """Itinerary table - saved plans, stored as an opaque JSON blob in ``data``."""

    __tablename__ = "itineraries"
    __table_args__ = (Index("idx_itineraries_user_created", "user_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, default=utcnow, server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)
    deleted_at: Mapped[datetime | None] = mapped_column(UtcDateTime, nullable=True)


class BookingRow(Base):
    """Booking table - traveler requests to guides."""

    __tablename__ = "bookings"
    __table_args__ = (
        Index("idx_bookings_user", "user_id", "created_at"),
        Index("idx_bookings_guide", "guide_id", "created_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    guide_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("guides.id"), nullable=False)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="pending")
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    guide: Mapped["GuideRow"] = relationship("GuideRow", back_populates="bookings")
    # Travelers may not have a profile row yet, so there is no FK constraint
    traveler: Mapped["ProfileRow | None"] = relationship(
        "ProfileRow",
        primaryjoin=lambda: foreign(BookingRow.user_id) == ProfileRow.id,
        viewonly=True,
    )
    messages: Mapped[list["MessageRow"]] = relationship(
        "MessageRow", back_populates="booking", cascade="all, delete-orphan"
    )


class MessageRow(Base):
    """Message table - conversation between the parties of a booking."""

    __tablename__ = "messages"
    __table_args__ = (Index("idx_messages_booking_created", "booking_id", "created_at"),)

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False
    )
    sender_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
    message_type: Mapped[str] = mapped_column(Text, nullable=False, default="text")
    # Shared itinerary for message_type == "itinerary"
    metadata_: Mapped[dict[str, Any] | None] = mapped_column("metadata", JSONType, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UtcDateTime, default=utcnow, server_default=func.now(), nullable=False
    )

    # Relationships
    booking: Mapped["BookingRow"] = relationship("BookingRow", back_populates="messages")

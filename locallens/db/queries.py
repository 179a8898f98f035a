"""Ownership-scoped query helpers."""

from uuid import UUID

from sqlalchemy import Select, select

from locallens.db.context import RequestContext
from locallens.db.models import BookingRow, ItineraryRow


def select_itineraries(ctx: RequestContext) -> Select[tuple[ItineraryRow]]:
    """Select itinerary rows with user scoping enforced.

    Args:
        ctx: Request context with user_id

    Returns:
        Select filtered by user_id
    """
    return select(ItineraryRow).where(ItineraryRow.user_id == ctx.user_id)


def select_active_itineraries(ctx: RequestContext) -> Select[tuple[ItineraryRow]]:
    """Select the user's itineraries without a soft-delete marker, newest first."""
    return (
        select_itineraries(ctx)
        .where(ItineraryRow.deleted_at.is_(None))
        .order_by(ItineraryRow.created_at.desc())
    )


def select_bookings_for_traveler(user_id: UUID) -> Select[tuple[BookingRow]]:
    """Select bookings requested by a traveler, newest first."""
    return (
        select(BookingRow)
        .where(BookingRow.user_id == user_id)
        .order_by(BookingRow.created_at.desc())
    )


def select_bookings_for_guide(guide_id: UUID) -> Select[tuple[BookingRow]]:
    """Select bookings addressed to a guide, newest first."""
    return (
        select(BookingRow)
        .where(BookingRow.guide_id == guide_id)
        .order_by(BookingRow.created_at.desc())
    )

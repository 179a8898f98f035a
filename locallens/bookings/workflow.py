"""Booking workflow: pending -> approved | rejected.

A booking is created ``pending`` by a traveler and moves exactly once to a
terminal state, by the guide it is addressed to.
"""

import logging
from typing import Literal
from uuid import UUID

from locallens.db.context import RequestContext
from locallens.db.repositories import BookingRepository, GuideRepository, MessageRepository
from locallens.errors import NotFoundError, PermissionDenied, ValidationFailure
from locallens.models.booking import Booking, BookingStatus, NewMessage, RealtimeMessage
from locallens.utils.metrics import booking_transitions_total

logger = logging.getLogger(__name__)

ViewRole = Literal["traveler", "guide"]

TERMINAL_STATUSES = (BookingStatus.approved, BookingStatus.rejected)


def can_book(guide_id: UUID, viewer_id: UUID) -> bool:
    """Travelers cannot book themselves."""
    return guide_id != viewer_id


async def create_booking(
    repo: BookingRepository, guides: GuideRepository, ctx: RequestContext, guide_id: UUID
) -> Booking:
    """Request a guide. The new booking is always ``pending``.

    Raises:
        ValidationFailure: If the guide is the requester or does not exist
    """
    if not can_book(guide_id, ctx.user_id):
        raise ValidationFailure("You cannot book yourself.")

    if await guides.get(guide_id) is None:
        raise ValidationFailure(f"Guide {guide_id} does not exist")

    booking = await repo.create(ctx, guide_id)
    logger.info(f"[bookings] {ctx.user_id} requested guide {guide_id}: booking {booking.id}")
    return booking


async def transition_booking(
    repo: BookingRepository,
    ctx: RequestContext,
    booking_id: UUID,
    new_status: BookingStatus,
) -> Booking:
    """Approve or reject a pending booking as its guide.

    Re-transitioning a booking that is already terminal leaves it untouched
    and returns it as it is.

    Raises:
        NotFoundError: If the booking does not exist
        PermissionDenied: If the acting user is not the booking's guide
        ValidationFailure: If ``new_status`` is not a terminal status
    """
    booking = await repo.get(booking_id)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found")

    if booking.guide_id != ctx.user_id:
        raise PermissionDenied("Only the booked guide can update this booking")

    if new_status not in TERMINAL_STATUSES:
        raise ValidationFailure(f"Cannot move a booking to '{new_status.value}'")

    if booking.status.is_terminal:
        logger.info(
            f"[bookings] {booking_id} already {booking.status.value}, "
            f"ignoring {new_status.value}"
        )
        return booking

    updated = await repo.update_status(booking_id, new_status)
    if updated is None:
        raise NotFoundError(f"Booking {booking_id} not found")

    booking_transitions_total.labels(status=new_status.value).inc()
    logger.info(f"[bookings] {booking_id} -> {new_status.value}")
    return updated


def is_actionable(booking: Booking) -> bool:
    """Approve/reject are offered only while the booking is pending."""
    return booking.status is BookingStatus.pending


def available_actions(booking: Booking, viewer_id: UUID) -> list[BookingStatus]:
    """Statuses the viewer may move the booking to."""
    if not is_actionable(booking) or booking.guide_id != viewer_id:
        return []
    return list(TERMINAL_STATUSES)


async def list_bookings(
    repo: BookingRepository, ctx: RequestContext, role: ViewRole
) -> list[Booking]:
    """Bookings seen by the current user as traveler or as guide."""
    if role == "guide":
        return await repo.list_for_guide(ctx.user_id)
    return await repo.list_for_traveler(ctx.user_id)


def _check_party(booking: Booking, user_id: UUID) -> None:
    if user_id not in (booking.user_id, booking.guide_id):
        raise PermissionDenied("Only the traveler and guide of a booking can see its messages")


async def post_message(
    bookings: BookingRepository,
    messages: MessageRepository,
    ctx: RequestContext,
    booking_id: UUID,
    message: NewMessage,
) -> RealtimeMessage:
    """Send a text message or share an itinerary within a booking.

    Raises:
        NotFoundError: If the booking does not exist
        PermissionDenied: If the sender is not a party to the booking
    """
    booking = await bookings.get(booking_id)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found")
    _check_party(booking, ctx.user_id)

    stored = await messages.add(booking_id, ctx.user_id, message)
    logger.info(f"[messages] {message.message_type} message on booking {booking_id}")
    return stored


async def list_messages(
    bookings: BookingRepository,
    messages: MessageRepository,
    ctx: RequestContext,
    booking_id: UUID,
) -> list[RealtimeMessage]:
    """Conversation of a booking, oldest first."""
    booking = await bookings.get(booking_id)
    if booking is None:
        raise NotFoundError(f"Booking {booking_id} not found")
    _check_party(booking, ctx.user_id)

    return await messages.list_messages(booking_id)

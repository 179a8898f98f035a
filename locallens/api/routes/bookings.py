"""Booking endpoints - requests to guides, approval and booking messages."""

import logging
import uuid
from typing import Annotated, Literal

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel

from locallens.api.auth import get_current_context
from locallens.api.deps import (
    enforce_rate_limit,
    get_booking_repository,
    get_guide_repository,
    get_message_repository,
    http_error,
)
from locallens.bookings.workflow import (
    create_booking,
    list_bookings,
    list_messages,
    post_message,
    transition_booking,
)
from locallens.db.context import RequestContext
from locallens.db.repositories import BookingRepository, GuideRepository, MessageRepository
from locallens.errors import LocalLensError
from locallens.models.booking import Booking, BookingStatus, NewMessage, RealtimeMessage

router = APIRouter(
    prefix="/bookings", tags=["bookings"], dependencies=[Depends(enforce_rate_limit)]
)
logger = logging.getLogger(__name__)


class CreateBookingRequest(BaseModel):
    """Request body for POST /bookings."""

    guide_id: uuid.UUID


class UpdateBookingRequest(BaseModel):
    """Request body for PATCH /bookings/{booking_id}."""

    status: BookingStatus


@router.post("", response_model=Booking, status_code=status.HTTP_201_CREATED)
async def create(
    request: CreateBookingRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[BookingRepository, Depends(get_booking_repository)],
    guides: Annotated[GuideRepository, Depends(get_guide_repository)],
) -> Booking:
    """Request a guide."""
    try:
        return await create_booking(repo, guides, ctx, request.guide_id)
    except LocalLensError as e:
        raise http_error(e) from e


@router.get("", response_model=list[Booking], status_code=status.HTTP_200_OK)
async def list_for_user(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[BookingRepository, Depends(get_booking_repository)],
    role: Annotated[Literal["traveler", "guide"], Query()] = "traveler",
) -> list[Booking]:
    """Bookings made by the user (traveler) or addressed to the user (guide)."""
    return await list_bookings(repo, ctx, role)


@router.patch("/{booking_id}", response_model=Booking, status_code=status.HTTP_200_OK)
async def update_status(
    booking_id: uuid.UUID,
    request: UpdateBookingRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[BookingRepository, Depends(get_booking_repository)],
) -> Booking:
    """Approve or reject a pending booking (guide only)."""
    try:
        return await transition_booking(repo, ctx, booking_id, request.status)
    except LocalLensError as e:
        logger.warning(f"[PATCH /bookings/{booking_id}] {type(e).__name__}: {e}")
        raise http_error(e) from e


@router.get(
    "/{booking_id}/messages", response_model=list[RealtimeMessage], status_code=status.HTTP_200_OK
)
async def get_messages(
    booking_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[BookingRepository, Depends(get_booking_repository)],
    messages: Annotated[MessageRepository, Depends(get_message_repository)],
) -> list[RealtimeMessage]:
    """Conversation of a booking, oldest first."""
    try:
        return await list_messages(repo, messages, ctx, booking_id)
    except LocalLensError as e:
        raise http_error(e) from e


@router.post(
    "/{booking_id}/messages", response_model=RealtimeMessage, status_code=status.HTTP_201_CREATED
)
async def send_message(
    booking_id: uuid.UUID,
    request: NewMessage,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[BookingRepository, Depends(get_booking_repository)],
    messages: Annotated[MessageRepository, Depends(get_message_repository)],
) -> RealtimeMessage:
    """Send a text message or share an itinerary."""
    try:
        return await post_message(repo, messages, ctx, booking_id, request)
    except LocalLensError as e:
        raise http_error(e) from e

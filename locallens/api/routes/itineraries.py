"""Saved itinerary endpoints - save (upsert), list, fetch and delete."""

import logging
import uuid
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from locallens.api.auth import get_current_context
from locallens.api.deps import enforce_rate_limit, get_itinerary_repository
from locallens.db.context import RequestContext
from locallens.db.itinerary_store import (
    delete_itinerary,
    get_itinerary,
    list_all_itineraries,
    list_recent_itineraries,
    save_itinerary,
)
from locallens.db.repositories import ItineraryRecord, ItineraryRepository
from locallens.models.itinerary import Itinerary

router = APIRouter(
    prefix="/itineraries", tags=["itineraries"], dependencies=[Depends(enforce_rate_limit)]
)
logger = logging.getLogger(__name__)


class SaveItineraryRequest(BaseModel):
    """Request body for POST /itineraries.

    With ``id`` the existing record is overwritten, otherwise a new one is created.
    """

    id: uuid.UUID | None = None
    itinerary: Itinerary


class SavedItineraryResponse(BaseModel):
    """A saved itinerary as listed in history."""

    id: str
    user_id: str
    created_at: datetime
    updated_at: datetime | None = None
    itinerary: Itinerary


def _to_response(record: ItineraryRecord) -> SavedItineraryResponse:
    return SavedItineraryResponse(
        id=str(record.id),
        user_id=str(record.user_id),
        created_at=record.created_at,
        updated_at=record.updated_at,
        itinerary=record.itinerary,
    )


@router.post("", response_model=SavedItineraryResponse, status_code=status.HTTP_200_OK)
async def save(
    request: SaveItineraryRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[ItineraryRepository, Depends(get_itinerary_repository)],
) -> SavedItineraryResponse:
    """Save the working copy (insert or overwrite)."""
    if request.id is not None and await get_itinerary(repo, ctx, request.id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Itinerary {request.id} not found",
        )

    record = await save_itinerary(repo, ctx, request.itinerary, record_id=request.id)

    if record is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save itinerary",
        )

    return _to_response(record)


@router.get("", response_model=list[SavedItineraryResponse], status_code=status.HTTP_200_OK)
async def list_recent(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[ItineraryRepository, Depends(get_itinerary_repository)],
) -> list[SavedItineraryResponse]:
    """Most recent saved itineraries, newest first."""
    return [_to_response(r) for r in await list_recent_itineraries(repo, ctx)]


@router.get("/all", response_model=list[SavedItineraryResponse], status_code=status.HTTP_200_OK)
async def list_all(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[ItineraryRepository, Depends(get_itinerary_repository)],
) -> list[SavedItineraryResponse]:
    """Every saved itinerary, newest first."""
    return [_to_response(r) for r in await list_all_itineraries(repo, ctx)]


@router.get("/{record_id}", response_model=SavedItineraryResponse, status_code=status.HTTP_200_OK)
async def get_one(
    record_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[ItineraryRepository, Depends(get_itinerary_repository)],
) -> SavedItineraryResponse:
    """Fetch one saved itinerary for viewing or editing."""
    record = await get_itinerary(repo, ctx, record_id)

    if record is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Itinerary {record_id} not found",
        )

    return _to_response(record)


@router.delete("/{record_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(
    record_id: uuid.UUID,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    repo: Annotated[ItineraryRepository, Depends(get_itinerary_repository)],
) -> None:
    """Hard-delete a saved itinerary. Unknown ids are not an error."""
    result = await delete_itinerary(repo, ctx, record_id)

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.error or "Failed to delete itinerary",
        )

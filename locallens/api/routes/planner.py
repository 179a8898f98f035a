"""Planner endpoints - itinerary synthesis, merge, discovery and local edits."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field

from locallens.api.auth import get_current_context
from locallens.api.deps import enforce_rate_limit, get_profile_repository, http_error
from locallens.db.context import RequestContext
from locallens.db.repositories import ProfileRepository
from locallens.errors import LocalLensError, ValidationFailure
from locallens.itinerary.editing import apply_edits, unique_extras, unique_hotels
from locallens.itinerary.merge import merge_itineraries
from locallens.llm.client import ItineraryGateway, get_llm_client
from locallens.models.edits import ItineraryEdit
from locallens.models.itinerary import Activity, HotelRecommendation, Itinerary
from locallens.models.planning import TripRequest

router = APIRouter(
    prefix="/planner", tags=["planner"], dependencies=[Depends(enforce_rate_limit)]
)
logger = logging.getLogger(__name__)


class PromptRequest(BaseModel):
    """Request body for POST /planner/prompt."""

    prompt: str = Field(..., max_length=4000, description="Free-text trip description")


class MergeRequest(BaseModel):
    """Request body for POST /planner/merge."""

    itineraries: list[Itinerary]


class SuggestionsRequest(BaseModel):
    """Request body for POST /planner/suggestions."""

    itinerary: Itinerary
    query: str | None = Field(None, max_length=500)


class HotelsRequest(BaseModel):
    """Request body for POST /planner/hotels."""

    itinerary: Itinerary
    hotel_stars: int = Field(3, ge=1, le=5)


class EditsRequest(BaseModel):
    """Request body for POST /planner/edits."""

    itinerary: Itinerary
    edits: list[ItineraryEdit] = Field(..., min_length=1)


async def require_named_profile(
    ctx: RequestContext, profiles: ProfileRepository
) -> None:
    """Synthesis is only offered to users whose profile carries a first name.

    Raises:
        ValidationFailure: If the profile is missing or has no first name
    """
    profile = await profiles.get(ctx.user_id)
    if profile is None or not profile.has_name:
        raise ValidationFailure("Please complete your profile (first name) before planning a trip.")


@router.post("/generate", response_model=Itinerary, status_code=status.HTTP_200_OK)
async def generate(
    request: TripRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repository)],
    gateway: Annotated[ItineraryGateway, Depends(get_llm_client)],
) -> Itinerary:
    """Generate an itinerary from the structured planner form."""
    try:
        await require_named_profile(ctx, profiles)
        itinerary = await gateway.generate_itinerary(request)
    except LocalLensError as e:
        logger.warning(f"[POST /planner/generate] {request.destination} failed: {e}")
        raise http_error(e) from e

    logger.info(f"[POST /planner/generate] {itinerary.destination}, {len(itinerary.days)} days")
    return itinerary


@router.post("/prompt", response_model=Itinerary, status_code=status.HTTP_200_OK)
async def generate_from_prompt(
    request: PromptRequest,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repository)],
    gateway: Annotated[ItineraryGateway, Depends(get_llm_client)],
) -> Itinerary:
    """Generate an itinerary from a free-text description."""
    try:
        if not request.prompt.strip():
            raise ValidationFailure("Please describe your trip.")
        await require_named_profile(ctx, profiles)
        return await gateway.generate_itinerary_from_prompt(request.prompt.strip())
    except LocalLensError as e:
        logger.warning(f"[POST /planner/prompt] failed: {e}")
        raise http_error(e) from e


@router.post("/merge", response_model=Itinerary, status_code=status.HTTP_200_OK)
async def merge(
    request: MergeRequest,
    gateway: Annotated[ItineraryGateway, Depends(get_llm_client)],
) -> Itinerary:
    """Merge two or more itineraries into a single plan."""
    try:
        return await merge_itineraries(gateway, request.itineraries)
    except LocalLensError as e:
        raise http_error(e) from e


@router.post("/suggestions", response_model=list[Activity], status_code=status.HTTP_200_OK)
async def suggestions(
    request: SuggestionsRequest,
    gateway: Annotated[ItineraryGateway, Depends(get_llm_client)],
) -> list[Activity]:
    """Discovery suggestions not already planned in the itinerary."""
    try:
        found = await gateway.suggest_activities(request.itinerary.destination, request.query)
    except LocalLensError as e:
        raise http_error(e) from e

    return unique_extras(request.itinerary, found)


@router.post("/hotels", response_model=list[HotelRecommendation], status_code=status.HTTP_200_OK)
async def hotels(
    request: HotelsRequest,
    gateway: Annotated[ItineraryGateway, Depends(get_llm_client)],
) -> list[HotelRecommendation]:
    """Fresh hotel options not already recommended on the itinerary."""
    itinerary = request.itinerary
    try:
        found = await gateway.refresh_hotels(
            itinerary.destination, request.hotel_stars, itinerary.travelers_count
        )
    except LocalLensError as e:
        raise http_error(e) from e

    return unique_hotels(itinerary, found)


@router.post("/edits", response_model=Itinerary, status_code=status.HTTP_200_OK)
async def edits(request: EditsRequest) -> Itinerary:
    """Apply edits, in order, to the posted working copy and return the result."""
    try:
        edited = apply_edits(request.itinerary, request.edits)
    except LocalLensError as e:
        raise http_error(e) from e

    return edited if edited is not None else request.itinerary

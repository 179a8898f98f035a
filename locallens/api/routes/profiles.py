"""Profile endpoints - the caller's own profile."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from locallens.api.auth import get_current_context
from locallens.api.deps import get_profile_repository
from locallens.db.context import RequestContext
from locallens.db.repositories import ProfileRepository
from locallens.models.profile import Profile, ProfileUpdate

router = APIRouter(prefix="/profiles", tags=["profiles"])
logger = logging.getLogger(__name__)


@router.get("/me", response_model=Profile, status_code=status.HTTP_200_OK)
async def get_me(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repository)],
) -> Profile:
    """The caller's profile."""
    profile = await profiles.get(ctx.user_id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.put("/me", response_model=Profile, status_code=status.HTTP_200_OK)
async def put_me(
    request: ProfileUpdate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repository)],
) -> Profile:
    """Create or update the caller's profile. Role and email are kept unless given."""
    if not request.first_name.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="First name is required")

    current = await profiles.get(ctx.user_id) or Profile(id=ctx.user_id)

    changes = request.model_dump(exclude_none=True)
    changes["first_name"] = request.first_name.strip()
    profile = current.model_copy(update=changes)

    saved = await profiles.upsert(profile)
    logger.info(f"[PUT /profiles/me] saved profile for {ctx.user_id}")
    return saved

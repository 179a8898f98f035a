"""Guide marketplace endpoints - search, application, own profile and uploads."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, status

from locallens.api.auth import get_current_context
from locallens.api.deps import get_guide_repository, get_object_store, http_error
from locallens.db.context import RequestContext
from locallens.db.repositories import GuideRepository
from locallens.errors import LocalLensError
from locallens.models.guide import Guide, GuideApplication, GuideUpdate
from locallens.storage.objects import Folder, ObjectStore

router = APIRouter(prefix="/guides", tags=["guides"])
logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = 10 * 1024 * 1024


async def _own_guide(ctx: RequestContext, guides: GuideRepository) -> Guide:
    guide = await guides.get(ctx.user_id)
    if guide is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No guide profile for this user",
        )
    return guide


@router.get("", response_model=list[Guide], status_code=status.HTTP_200_OK)
async def search(
    guides: Annotated[GuideRepository, Depends(get_guide_repository)],
    search: Annotated[str, Query(max_length=200)] = "",
) -> list[Guide]:
    """Verified guides whose location or specialty matches ``search``."""
    return [g for g in await guides.list_guides(verified_only=True) if g.matches(search)]


@router.post("", response_model=Guide, status_code=status.HTTP_201_CREATED)
async def apply(
    request: GuideApplication,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    guides: Annotated[GuideRepository, Depends(get_guide_repository)],
) -> Guide:
    """Apply as a guide. The new profile starts unverified."""
    if await guides.get(ctx.user_id) is not None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You already have a guide profile",
        )

    guide = await guides.create(ctx, request)
    logger.info(f"[POST /guides] {ctx.user_id} applied as guide in {guide.location}")
    return guide


@router.get("/me", response_model=Guide, status_code=status.HTTP_200_OK)
async def get_me(
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    guides: Annotated[GuideRepository, Depends(get_guide_repository)],
) -> Guide:
    """The caller's own guide profile."""
    return await _own_guide(ctx, guides)


@router.patch("/me", response_model=Guide, status_code=status.HTTP_200_OK)
async def update_me(
    request: GuideUpdate,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    guides: Annotated[GuideRepository, Depends(get_guide_repository)],
) -> Guide:
    """Update the caller's guide profile. Verification cannot be changed here."""
    await _own_guide(ctx, guides)

    updated = await guides.update(ctx.user_id, request.model_dump(exclude_unset=True))
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guide not found")
    return updated


async def _upload(
    file: UploadFile,
    folder: Folder,
    column: str,
    ctx: RequestContext,
    guides: GuideRepository,
    store: ObjectStore,
) -> Guide:
    await _own_guide(ctx, guides)

    content = await file.read()
    if len(content) > MAX_UPLOAD_BYTES:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail="File too large",
        )

    try:
        url = store.upload(folder, file.filename or "upload", content)
    except LocalLensError as e:
        raise http_error(e) from e
    except OSError as e:
        logger.error(f"[guides] upload to {folder} failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Upload failed. Please try again.",
        ) from e

    updated = await guides.update(ctx.user_id, {column: url})
    if updated is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Guide not found")
    return updated


@router.post("/me/avatar", response_model=Guide, status_code=status.HTTP_200_OK)
async def upload_avatar(
    file: UploadFile,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    guides: Annotated[GuideRepository, Depends(get_guide_repository)],
    store: Annotated[ObjectStore, Depends(get_object_store)],
) -> Guide:
    """Upload a profile photo and set ``image_url``."""
    return await _upload(file, "avatars", "image_url", ctx, guides, store)


@router.post("/me/document", response_model=Guide, status_code=status.HTTP_200_OK)
async def upload_document(
    file: UploadFile,
    ctx: Annotated[RequestContext, Depends(get_current_context)],
    guides: Annotated[GuideRepository, Depends(get_guide_repository)],
    store: Annotated[ObjectStore, Depends(get_object_store)],
) -> Guide:
    """Upload an identity document and set ``verification_document_url``."""
    return await _upload(file, "verification", "verification_document_url", ctx, guides, store)

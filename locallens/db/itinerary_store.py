"""Save/delete/list workflow for saved itineraries.

Saved plans are detached working copies: edits happen on the in-memory
itinerary and are only persisted by an explicit save. Failures here are
reported as values (``None``, ``DeleteResult``, empty lists) so that callers
can keep their optimistic view state consistent.
"""

import logging
from dataclasses import dataclass
from uuid import UUID

from locallens.config import get_settings
from locallens.db.context import RequestContext
from locallens.db.repositories import ItineraryRecord, ItineraryRepository
from locallens.models.itinerary import Itinerary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DeleteResult:
    """Outcome of a delete call."""

    success: bool
    error: str | None = None


async def save_itinerary(
    repo: ItineraryRepository,
    ctx: RequestContext,
    itinerary: Itinerary,
    record_id: UUID | None = None,
) -> ItineraryRecord | None:
    """Upsert an itinerary for the current user.

    With ``record_id`` the existing record's data is overwritten and its
    soft-delete marker cleared; otherwise a new record is inserted.

    Returns:
        The persisted record, or None if the write failed
    """
    try:
        if record_id is not None:
            record = await repo.update(ctx, record_id, itinerary)
            if record is None:
                logger.warning(f"[itineraries] save: no record {record_id} for user {ctx.user_id}")
            return record

        return await repo.insert(ctx, itinerary)
    except Exception as e:
        logger.error(f"[itineraries] save failed: {e}", exc_info=True)
        return None


async def delete_itinerary(
    repo: ItineraryRepository, ctx: RequestContext | None, record_id: UUID
) -> DeleteResult:
    """Hard-delete a saved itinerary.

    Deleting an id that does not exist counts as success.
    """
    if ctx is None:
        return DeleteResult(success=False, error="Not authenticated")

    try:
        await repo.delete(ctx, record_id)
    except Exception as e:
        logger.error(f"[itineraries] delete {record_id} failed: {e}", exc_info=True)
        return DeleteResult(success=False, error=str(e))

    logger.info(f"[itineraries] deleted {record_id}")
    return DeleteResult(success=True)


async def list_recent_itineraries(
    repo: ItineraryRepository, ctx: RequestContext, limit: int | None = None
) -> list[ItineraryRecord]:
    """List the most recent active itineraries, newest first."""
    if limit is None:
        limit = get_settings().recent_itineraries_limit

    try:
        return await repo.list_active(ctx, limit=limit)
    except Exception as e:
        logger.error(f"[itineraries] list recent failed: {e}", exc_info=True)
        return []


async def list_all_itineraries(
    repo: ItineraryRepository, ctx: RequestContext
) -> list[ItineraryRecord]:
    """List every active itinerary, newest first."""
    try:
        return await repo.list_active(ctx)
    except Exception as e:
        logger.error(f"[itineraries] list all failed: {e}", exc_info=True)
        return []


async def get_itinerary(
    repo: ItineraryRepository, ctx: RequestContext, record_id: UUID
) -> ItineraryRecord | None:
    """Fetch one owned itinerary for viewing or editing."""
    return await repo.get(ctx, record_id)

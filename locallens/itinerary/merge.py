"""Itinerary merge - delegated to the AI gateway.

There is no local merge algorithm: combining heterogeneous days into one
well-paced plan is left to the model. This module only checks the selection,
hands the inputs over and tags the result.
"""

import logging
from collections.abc import Sequence

from locallens.errors import ValidationFailure
from locallens.llm.client import ItineraryGateway
from locallens.models.itinerary import Itinerary

logger = logging.getLogger(__name__)

MIN_MERGE_SELECTION = 2


async def merge_itineraries(
    gateway: ItineraryGateway, itineraries: Sequence[Itinerary]
) -> Itinerary:
    """Merge two or more itineraries into one via the gateway.

    Args:
        gateway: AI gateway that performs the merge
        itineraries: Selected itineraries, in selection order

    Returns:
        The gateway's itinerary with ``is_merged`` set

    Raises:
        ValidationFailure: If fewer than two itineraries are selected
        GatewayError: If the gateway call fails
    """
    if len(itineraries) < MIN_MERGE_SELECTION:
        raise ValidationFailure(
            f"Please select at least {MIN_MERGE_SELECTION} itineraries to merge."
        )

    logger.info(
        f"[merge] merging {len(itineraries)} itineraries: "
        + ", ".join(i.destination for i in itineraries)
    )
    merged = await gateway.merge_itineraries(list(itineraries))
    return merged.model_copy(update={"is_merged": True})

"""Request context for ownership enforcement."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class RequestContext:
    """Identity of the authenticated user making the request.

    Passed explicitly into every persistence and workflow operation instead of
    being looked up ad hoc.
    """

    user_id: UUID

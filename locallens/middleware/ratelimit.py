"""Rate limiting middleware."""

from datetime import UTC, datetime

from locallens.db.context import RequestContext
from locallens.db.repositories import RateLimiter
from locallens.ratelimit import make_rate_limit_key


class RateLimitMiddleware:
    """Maps request paths to buckets and enforces each bucket's limit."""

    def __init__(self, limiters: dict[str, RateLimiter], bucket_map: dict[str, str]) -> None:
        """Initialize rate limit middleware.

        Args:
            limiters: Limiter per bucket name
            bucket_map: Mapping from path patterns to bucket names
        """
        self._limiters = limiters
        self._bucket_map = bucket_map

    def check_rate_limit(
        self, path: str, ctx: RequestContext, now: datetime | None = None
    ) -> tuple[bool, int]:
        """Check if request is allowed under rate limit.

        Args:
            path: Request path
            ctx: Request context
            now: Current time (for testing)

        Returns:
            Tuple of (allowed, retry_after_seconds)
        """
        if now is None:
            now = datetime.now(UTC)

        bucket = self._get_bucket(path)
        limiter = self._limiters.get(bucket) if bucket is not None else None

        if bucket is None or limiter is None:
            # No rate limit for this path
            return (True, 0)

        retry_after = limiter.check_quota(make_rate_limit_key(ctx, bucket), now)

        if retry_after is None:
            return (True, 0)

        return (False, retry_after.seconds)

    def _get_bucket(self, path: str) -> str | None:
        for pattern, bucket in self._bucket_map.items():
            if path.startswith(pattern):
                return bucket

        return None


def create_default_bucket_map() -> dict[str, str]:
    """Create default bucket mapping.

    Returns:
        Dictionary mapping path prefixes to bucket names
    """
    return {
        "/planner": "planning",
        "/concierge": "planning",
        "/itineraries": "crud",
        "/bookings": "crud",
    }

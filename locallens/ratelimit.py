"""Rate limiting utilities."""

from datetime import datetime

import redis

from locallens.db.context import RequestContext
from locallens.db.repositories import RetryAfter


def make_rate_limit_key(ctx: RequestContext, bucket: str) -> str:
    """Key a user's quota within a bucket ("planning" or "crud")."""
    return f"{ctx.user_id}:{bucket}"


class RedisRateLimiter:
    """Fixed-window limiter shared across API workers through Redis.

    Each window gets its own counter key; the counter expires with the window.
    """

    def __init__(self, redis_client: redis.Redis, max_requests: int, window_seconds: int = 60) -> None:
        self._redis = redis_client
        self._max_requests = max_requests
        self._window_seconds = window_seconds

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Count the request against the window containing ``now``.

        Returns:
            RetryAfter until the window closes if over quota, None if allowed
        """
        epoch = int(now.timestamp())
        window = epoch // self._window_seconds
        redis_key = f"ratelimit:{key}:{window}"

        with self._redis.pipeline() as pipe:
            pipe.incr(redis_key)
            pipe.expire(redis_key, self._window_seconds, nx=True)
            count, _ = pipe.execute()

        if count <= self._max_requests:
            return None

        window_end = (window + 1) * self._window_seconds
        return RetryAfter(seconds=max(1, window_end - epoch))

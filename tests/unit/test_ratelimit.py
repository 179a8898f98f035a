"""Tests for rate limiting."""

import uuid
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock

from locallens.db.context import RequestContext
from locallens.db.inmemory import InMemoryRateLimiter
from locallens.middleware.ratelimit import RateLimitMiddleware, create_default_bucket_map
from locallens.ratelimit import RedisRateLimiter, make_rate_limit_key


def test_rate_limiter_allows_under_quota() -> None:
    limiter = InMemoryRateLimiter(max_requests=5, window_seconds=60)
    now = datetime.now()

    for i in range(5):
        assert limiter.check_quota("user:planning", now + timedelta(seconds=i)) is None


def test_rate_limiter_blocks_over_quota() -> None:
    limiter = InMemoryRateLimiter(max_requests=3, window_seconds=60)
    now = datetime.now()

    for _ in range(3):
        assert limiter.check_quota("user:planning", now) is None

    retry_after = limiter.check_quota("user:planning", now)
    assert retry_after is not None
    assert retry_after.seconds == 60


def test_rate_limiter_resets_after_window() -> None:
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60)
    now = datetime.now()

    limiter.check_quota("k", now)
    limiter.check_quota("k", now)
    assert limiter.check_quota("k", now) is not None

    assert limiter.check_quota("k", now + timedelta(seconds=61)) is None


def test_rate_limiter_separate_keys() -> None:
    limiter = InMemoryRateLimiter(max_requests=1, window_seconds=60)
    now = datetime.now()

    limiter.check_quota("user1:crud", now)

    assert limiter.check_quota("user1:crud", now) is not None
    assert limiter.check_quota("user2:crud", now) is None


def test_make_rate_limit_key() -> None:
    user_id = uuid.uuid4()

    key = make_rate_limit_key(RequestContext(user_id=user_id), "planning")

    assert key == f"{user_id}:planning"


def test_middleware_uses_bucket_limiter() -> None:
    """Planning and CRUD buckets are counted independently."""
    middleware = RateLimitMiddleware(
        {
            "planning": InMemoryRateLimiter(max_requests=1),
            "crud": InMemoryRateLimiter(max_requests=5),
        },
        create_default_bucket_map(),
    )
    ctx = RequestContext(user_id=uuid.uuid4())
    now = datetime.now()

    assert middleware.check_rate_limit("/planner/generate", ctx, now) == (True, 0)

    allowed, retry_after = middleware.check_rate_limit("/concierge/chat", ctx, now)
    assert allowed is False
    assert retry_after > 0

    assert middleware.check_rate_limit("/itineraries", ctx, now) == (True, 0)


def test_middleware_no_limit_for_unmapped_path() -> None:
    middleware = RateLimitMiddleware(
        {"planning": InMemoryRateLimiter(max_requests=1)}, {"/planner": "planning"}
    )
    ctx = RequestContext(user_id=uuid.uuid4())
    now = datetime.now()

    for _ in range(3):
        assert middleware.check_rate_limit("/guides", ctx, now) == (True, 0)


def test_create_default_bucket_map() -> None:
    bucket_map = create_default_bucket_map()

    assert bucket_map["/planner"] == "planning"
    assert bucket_map["/concierge"] == "planning"
    assert bucket_map["/itineraries"] == "crud"
    assert bucket_map["/bookings"] == "crud"


def test_redis_limiter_counts_per_window() -> None:
    client = MagicMock()
    pipe = client.pipeline.return_value.__enter__.return_value
    pipe.execute.side_effect = [[1, True], [2, False], [3, False]]
    limiter = RedisRateLimiter(client, max_requests=2)
    now = datetime(2026, 1, 1, 12, 0, 30, tzinfo=UTC)

    assert limiter.check_quota("u:planning", now) is None
    assert limiter.check_quota("u:planning", now) is None
    retry_after = limiter.check_quota("u:planning", now)

    assert retry_after is not None
    assert retry_after.seconds == 30
    redis_key = pipe.incr.call_args.args[0]
    assert redis_key.startswith("ratelimit:u:planning:")
    pipe.expire.assert_called_with(redis_key, 60, nx=True)

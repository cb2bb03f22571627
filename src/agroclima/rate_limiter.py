"""Global sliding-window rate limiter backed by a Redis sorted set."""

import logging
import math
import time
import uuid
from typing import Callable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from agroclima.config import (
    REDIS_URL,
    RATE_LIMIT_REQUESTS_PER_SECOND,
    RATE_LIMIT_REDIS_KEY_PREFIX
)

logger = logging.getLogger(__name__)


class RateLimiter:
    """Admit at most ``max_requests`` requests per window across all clients.

    Each admitted request is a member of one sorted set scored by its arrival
    time. Rejected requests are removed again, so only admitted requests count
    against the window. Requests are allowed when Redis is unavailable.
    """

    def __init__(
        self,
        redis_client: Optional[redis.Redis] = None,
        max_requests: int = RATE_LIMIT_REQUESTS_PER_SECOND,
        window_seconds: float = 1.0,
        clock: Callable[[], float] = time.time
    ):
        """Initialize rate limiter.

        Args:
            redis_client: Optional Redis client. If None, one is created from REDIS_URL.
            max_requests: Requests admitted per window
            window_seconds: Window length in seconds
            clock: Source of the current time in seconds
        """
        self.redis_client = redis_client or redis.from_url(REDIS_URL)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.key = f"{RATE_LIMIT_REDIS_KEY_PREFIX}:global"

    def retry_after(self) -> int:
        """Seconds a rejected client should wait, rounded up."""
        return max(1, math.ceil(self.window_seconds))

    async def is_allowed(self) -> tuple[bool, int]:
        """Record the request and tell whether it fits in the current window.

        Returns:
            Tuple of (is_allowed, retry_after_seconds); retry_after is 0 when allowed
        """
        # Integer microsecond scores keep the window boundary exact
        now = int(round(self.clock() * 1_000_000))
        window = int(round(self.window_seconds * 1_000_000))
        member = f"{now}:{uuid.uuid4().hex}"

        try:
            pipe = self.redis_client.pipeline(transaction=True)
            pipe.zremrangebyscore(self.key, "-inf", now - window)
            pipe.zadd(self.key, {member: now})
            pipe.zcard(self.key)
            pipe.expire(self.key, max(1, int(self.window_seconds * 2)))
            _, _, admitted, _ = await pipe.execute()

            if admitted <= self.max_requests:
                return True, 0

            # Over the limit: take this request back out of the window
            await self.redis_client.zrem(self.key, member)
            logger.debug(f"Rate limited: window count={admitted}, max={self.max_requests}")
            return False, self.retry_after()

        except (RedisError, OSError) as e:
            logger.error(f"Rate limiter unavailable, allowing request: {e}")
            return True, 0

    async def close(self):
        """Close the Redis connection."""
        await self.redis_client.aclose()

# ABOUTME: Fixed-window rate limiter backed by Redis INCR + EXPIRE; keys are rl:user:<id> or rl:ip:<addr>.
# ABOUTME: Fails open (allows the request and logs) when Redis is unreachable or REDIS_URL is unusable.

import logging

import redis
from redis.exceptions import RedisError

from core.config import (
    RATE_LIMIT_REQUESTS,
    RATE_LIMIT_WINDOW_SECONDS,
    REDIS_SOCKET_TIMEOUT_SECONDS,
    REDIS_URL,
)

logger = logging.getLogger(__name__)


def rate_limit_key(identity: str | None, client_ip: str) -> str:
    """Prefer the authenticated identity so a signed-in user is limited the same on every network."""
    if identity:
        return f"rl:user:{identity}"
    return f"rl:ip:{client_ip}"


class RateLimiter:
    """Counts requests per key in a window that starts at the key's first hit and ends when it expires.

    Not a sliding window: a burst straddling the expiry can see up to twice the budget.
    """

    def __init__(
        self,
        client: redis.Redis,
        limit: int = RATE_LIMIT_REQUESTS,
        window_seconds: int = RATE_LIMIT_WINDOW_SECONDS,
    ):
        self._client = client
        self.limit = limit
        self.window_seconds = window_seconds

    def check_and_increment(self, key: str) -> bool:
        """Count one request against key and return True if it is within the budget."""
        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.incr(key)
            pipe.ttl(key)
            count, ttl = pipe.execute()
            if ttl == -1:
                # First hit of a window, or an earlier EXPIRE that never landed.
                self._client.expire(key, self.window_seconds)
        except (RedisError, OSError):
            logger.warning("rate-limit store unavailable, skipping check for %s", key, exc_info=True)
            return True
        return count <= self.limit


_rate_limiter: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter | None:
    """Return the process-wide limiter, connecting lazily to REDIS_URL.

    Returns None when the client cannot be built; callers skip the check.
    """
    global _rate_limiter
    if _rate_limiter is None:
        try:
            client = redis.Redis.from_url(
                REDIS_URL,
                socket_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
                socket_connect_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
                retry_on_timeout=False,
            )
        except (ValueError, RedisError):
            logger.warning("cannot build rate-limit client from REDIS_URL, skipping checks", exc_info=True)
            return None
        _rate_limiter = RateLimiter(client)
    return _rate_limiter

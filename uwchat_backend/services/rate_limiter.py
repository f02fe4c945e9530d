import logging
from dataclasses import dataclass

import redis

from uwchat_backend.core.config import Settings
from uwchat_backend.core.exceptions import QuotaExceeded, RateLimitStoreError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QuotaStatus:
    count: int
    remaining: int


class RateLimiter:
    """
    Fixed daily quota per client key, backed by a Redis-style counter store.

    The store needs get / incr / ttl / expire. The window starts at the first
    increment and the key disappears when it expires, which is the reset.
    Between the read and the increment, concurrent requests from one client
    can push the count past the limit by the number in flight.
    """

    def __init__(self, store, max_requests: int = 100, window_seconds: int = 86400, key_prefix: str = "rate_limit:"):
        self.store = store
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.key_prefix = key_prefix

    def key_for(self, client_key: str) -> str:
        return f"{self.key_prefix}{client_key}"

    def _remaining(self, count: int) -> int:
        return max(0, self.max_requests - count)

    def _current_count(self, key: str) -> int:
        try:
            raw = self.store.get(key)
        except redis.RedisError as exc:
            raise RateLimitStoreError(f"Could not read counter {key}: {exc}") from exc
        try:
            return int(raw) if raw else 0
        except (TypeError, ValueError) as exc:
            raise RateLimitStoreError(f"Counter {key} holds a non-integer value: {raw!r}") from exc

    def check_and_increment(self, client_key: str) -> QuotaStatus:
        key = self.key_for(client_key)
        count = self._current_count(key)
        if count >= self.max_requests:
            raise QuotaExceeded(client_key, self.max_requests)

        try:
            new_count = int(self.store.incr(key))
            # a TTL of -1 means an earlier expire was lost; the window must still end
            if new_count == 1 or self.store.ttl(key) == -1:
                self.store.expire(key, self.window_seconds)
        except redis.RedisError as exc:
            raise RateLimitStoreError(f"Could not increment counter {key}: {exc}") from exc

        return QuotaStatus(count=new_count, remaining=self._remaining(new_count))

    def remaining(self, client_key: str) -> int:
        return self._remaining(self._current_count(self.key_for(client_key)))


def build_rate_limiter(settings: Settings) -> RateLimiter:
    client = redis.Redis.from_url(
        settings.REDIS_URL,
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
    )
    return RateLimiter(
        client,
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        key_prefix=settings.RATE_LIMIT_KEY_PREFIX,
    )

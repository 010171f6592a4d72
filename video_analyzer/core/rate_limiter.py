"""
Sliding window rate limiting for the AI gateway.

Each client key owns the timestamps (ms since epoch) of its accepted requests
inside the trailing window. The limiter itself is stateless; the timestamps
live in a store passed to the constructor so tests and multi-instance
deployments can swap the backing storage.
"""

import threading
import time
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional

import redis

from video_analyzer.config import config
from video_analyzer.utils.logger import logging


def _now_ms() -> int:
    return int(time.time() * 1000)


class RateLimitStore(ABC):
    """Backing storage for rate limit windows."""

    @abstractmethod
    def hit(self, client_id: str, now: int, window_start: int, max_requests: int, window_ms: int) -> bool:
        """Purge stale entries, then record `now` for the client if it is under the limit."""

    @abstractmethod
    def reset(self) -> None:
        """Forget every client."""


class InMemoryRateLimitStore(RateLimitStore):
    """Process-local store. State is lost on restart and not shared between instances."""

    def __init__(self):
        self._windows: Dict[str, List[int]] = {}
        self._lock = threading.Lock()

    def hit(self, client_id: str, now: int, window_start: int, max_requests: int, window_ms: int) -> bool:
        with self._lock:
            # Sweep every key so idle clients do not accumulate
            for key in list(self._windows):
                recent = [t for t in self._windows[key] if t > window_start]
                if recent:
                    self._windows[key] = recent
                else:
                    del self._windows[key]

            timestamps = self._windows.get(client_id, [])
            if len(timestamps) >= max_requests:
                return False

            timestamps.append(now)
            self._windows[client_id] = timestamps
            return True

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()

    def snapshot(self) -> Dict[str, List[int]]:
        """Copy of the current windows."""
        with self._lock:
            return {key: list(values) for key, values in self._windows.items()}


class RedisRateLimitStore(RateLimitStore):
    """Shared store backed by one Redis sorted set per client."""

    HIT_SCRIPT = """
local key = KEYS[1]
local now = tonumber(ARGV[1])
local window_start = tonumber(ARGV[2])
local max_requests = tonumber(ARGV[3])
local window_ms = tonumber(ARGV[4])

redis.call('ZREMRANGEBYSCORE', key, '-inf', window_start)
if redis.call('ZCARD', key) >= max_requests then
    return 0
end
redis.call('ZADD', key, now, ARGV[5])
redis.call('PEXPIRE', key, window_ms)
return 1
"""

    def __init__(self, client: "redis.Redis", prefix: str = "videoanalyzer:ratelimit"):
        self.client = client
        self.prefix = prefix
        self._hit = client.register_script(self.HIT_SCRIPT)

    @classmethod
    def from_url(cls, redis_url: str, **kwargs) -> "RedisRateLimitStore":
        """Connect to Redis and build a store."""
        client = redis.from_url(redis_url)
        client.ping()
        logging.info("Redis rate limit store configured successfully")
        return cls(client, **kwargs)

    def _key(self, client_id: str) -> str:
        return f"{self.prefix}:{client_id}"

    def hit(self, client_id: str, now: int, window_start: int, max_requests: int, window_ms: int) -> bool:
        member = f"{now}-{uuid.uuid4().hex}"
        result = self._hit(
            keys=[self._key(client_id)],
            args=[now, window_start, max_requests, window_ms, member],
        )
        return bool(int(result))

    def reset(self) -> None:
        keys = list(self.client.scan_iter(match=f"{self.prefix}:*"))
        if keys:
            self.client.delete(*keys)


class RateLimiter:
    """Sliding window limiter: at most `max_requests` per `window_ms` per client."""

    def __init__(
        self,
        store: Optional[RateLimitStore] = None,
        max_requests: int = config.RATE_LIMIT_REQUESTS,
        window_ms: int = config.RATE_LIMIT_WINDOW_MS,
        clock: Callable[[], int] = _now_ms,
    ):
        self.store = store if store is not None else InMemoryRateLimitStore()
        self.max_requests = max_requests
        self.window_ms = window_ms
        self.clock = clock

    @classmethod
    def from_config(cls) -> "RateLimiter":
        """Use Redis when REDIS_URL is configured, process memory otherwise."""
        if config.REDIS_URL:
            return cls(store=RedisRateLimitStore.from_url(config.REDIS_URL))
        return cls()

    def check_and_record(self, client_id: str) -> bool:
        """
        Check whether the client may make another request and record it if so.

        Args:
            client_id: Key identifying the caller (usually its address)

        Returns:
            True if the request is accepted, False if the client is over its limit
        """
        now = self.clock()
        window_start = now - self.window_ms
        allowed = self.store.hit(client_id, now, window_start, self.max_requests, self.window_ms)
        if not allowed:
            logging.warning(f"Rate limit exceeded for client {client_id}")
        return allowed

    def reset(self) -> None:
        self.store.reset()

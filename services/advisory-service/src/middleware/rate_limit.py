import asyncio
import time
from collections import defaultdict, deque

from shared.service_settings import ServiceSettings

RATE_LIMITED_PATHS = frozenset({"/report", "/usage"})


class SimpleRateLimiter:
    """
    Sliding-window rate limiter keyed by client identifier.

    Each key keeps a deque of recent request timestamps; a request is refused once
    the window already holds `max_requests + burst` entries. State is in-process,
    so every worker enforces its own budget.
    """

    def __init__(self, max_requests: int, window_seconds: int = 60, burst: int = 0):
        self._max_requests = max(1, max_requests)
        self._window_seconds = max(1, window_seconds)
        self._burst = max(0, burst)
        self._buckets: dict[str, deque[float]] = defaultdict(deque)
        self._lock = asyncio.Lock()

    @property
    def capacity(self) -> int:
        return self._max_requests + self._burst

    async def allow(self, client_id: str) -> tuple[bool, float]:
        """
        Returns (allowed, retry_after_seconds); retry_after is 0.0 when allowed.
        """

        now = time.monotonic()
        async with self._lock:
            bucket = self._buckets[client_id]
            self._evict_old(bucket, now)

            if len(bucket) >= self.capacity:
                retry_after = self._window_seconds - (now - bucket[0])
                return False, max(retry_after, 0.0)

            bucket.append(now)
            return True, 0.0

    def remaining(self, client_id: str) -> int:
        bucket = self._buckets.get(client_id)
        if not bucket:
            return self.capacity
        return max(self.capacity - len(bucket), 0)

    def reset(self) -> None:
        self._buckets.clear()

    def _evict_old(self, bucket: deque[float], now: float) -> None:
        threshold = now - self._window_seconds
        while bucket and bucket[0] <= threshold:
            bucket.popleft()


def is_rate_limited_path(method: str, path: str) -> bool:
    return method.upper() == "POST" and path.rstrip("/") in RATE_LIMITED_PATHS


def build_rate_limiter(settings: ServiceSettings) -> SimpleRateLimiter:
    return SimpleRateLimiter(
        max_requests=settings.rate_limit_per_min,
        window_seconds=60,
        burst=settings.rate_limit_burst,
    )

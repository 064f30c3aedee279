"""Fixed-window rate limiting for evaluation endpoints."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

import redis.asyncio as redis
from fastapi import HTTPException, Request, status

from credit_engine.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitResult:
    """Outcome of a single increment-and-check."""

    allowed: bool
    current_count: int
    limit: int
    reset_in_seconds: float

    @property
    def remaining(self) -> int:
        return max(0, self.limit - self.current_count)


class RateLimiter(ABC):
    """Counter service with atomic increment-and-check semantics."""

    def __init__(self, max_requests: int, window_seconds: float):
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be positive")
        self.max_requests = max_requests
        self.window_seconds = window_seconds

    @abstractmethod
    async def hit(self, key: str) -> RateLimitResult:
        """Count one request for ``key`` and report whether it is allowed."""
        pass

    async def close(self) -> None:
        """Release any connection held by the limiter."""
        pass


class RedisRateLimiter(RateLimiter):
    """
    Fixed-window limiter shared by every worker through Redis.

    One counter per key lives at ``rate_limit:<key>``. The first request of
    a window creates it with a TTL of ``window_seconds``; every request
    increments it inside the same MULTI/EXEC transaction, so concurrent
    workers never lose an increment or leave a counter without expiry.
    """

    def __init__(self, redis_url: str, max_requests: int, window_seconds: float):
        super().__init__(max_requests, window_seconds)
        self.redis_url = redis_url
        self._redis: Optional[redis.Redis] = None

    async def _get_redis(self) -> redis.Redis:
        """Get Redis connection."""
        if self._redis is None:
            self._redis = redis.from_url(self.redis_url)
        return self._redis

    def _make_key(self, key: str) -> str:
        return f"rate_limit:{key}"

    async def hit(self, key: str) -> RateLimitResult:
        redis_client = await self._get_redis()
        redis_key = self._make_key(key)
        window = max(1, int(self.window_seconds))

        async with redis_client.pipeline(transaction=True) as pipeline:
            pipeline.set(redis_key, 0, ex=window, nx=True)
            pipeline.incr(redis_key)
            pipeline.ttl(redis_key)
            _, count, ttl = await pipeline.execute()

        count = int(count)
        # -1 (no expiry) or -2 (gone) only after an external write
        reset_in = ttl if ttl is not None and ttl >= 0 else window

        return RateLimitResult(
            allowed=count <= self.max_requests,
            current_count=count,
            limit=self.max_requests,
            reset_in_seconds=float(reset_in),
        )

    async def close(self) -> None:
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None


class FixedWindowRateLimiter(RateLimiter):
    """
    In-process fixed-window limiter.

    Counts are private to one process, so this backs tests and single
    worker development servers. Each key gets ``max_requests`` per
    ``window_seconds``; the window starts at the first request seen for
    that key. The clock is injectable so tests can drive windows
    deterministically.
    """

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(max_requests, window_seconds)
        self._clock = clock
        self._windows: Dict[str, Tuple[int, float]] = {}
        self._next_sweep = clock() + window_seconds

    def __len__(self) -> int:
        return len(self._windows)

    async def hit(self, key: str) -> RateLimitResult:
        # No await below: increment-and-check cannot interleave on the event loop
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep(now)

        count, reset_at = self._windows.get(key, (0, now + self.window_seconds))

        if now >= reset_at:
            count, reset_at = 0, now + self.window_seconds

        if count >= self.max_requests:
            return RateLimitResult(
                allowed=False,
                current_count=count,
                limit=self.max_requests,
                reset_in_seconds=reset_at - now,
            )

        count += 1
        self._windows[key] = (count, reset_at)
        return RateLimitResult(
            allowed=True,
            current_count=count,
            limit=self.max_requests,
            reset_in_seconds=reset_at - now,
        )

    def _sweep(self, now: float) -> None:
        """Drop every window that has already expired."""
        expired = [key for key, (_, reset_at) in self._windows.items() if now >= reset_at]
        for key in expired:
            del self._windows[key]
        self._next_sweep = now + self.window_seconds


def build_rate_limiter() -> RateLimiter:
    """Limiter for the configured backend: "redis" (default) or "memory"."""
    if settings.RATE_LIMIT_BACKEND == "memory":
        logger.warning("Using the in-process rate limiter; counts are not shared between workers")
        return FixedWindowRateLimiter(
            max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
            window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
        )
    return RedisRateLimiter(
        redis_url=settings.REDIS_URL,
        max_requests=settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )


_rate_limiter = build_rate_limiter()


def get_rate_limiter() -> RateLimiter:
    """Dependency returning the shared limiter; override in tests."""
    return _rate_limiter


async def close_rate_limiter() -> None:
    await _rate_limiter.close()


async def enforce_rate_limit(request: Request, limiter: RateLimiter, scope: str) -> None:
    """
    Apply ``limiter`` to the calling client.

    A limiter failure rejects the request instead of letting it through.

    Raises:
        HTTPException: 429 when the limit is exceeded, 503 when the limiter fails
    """
    client = request.client.host if request.client else "unknown"
    key = f"{scope}:{client}"

    try:
        result = await limiter.hit(key)
    except Exception as e:
        logger.error(f"Rate limiter failure for {key}: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Rate limiter unavailable",
        )

    if not result.allowed:
        logger.warning(
            f"Rate limit exceeded for {key}: {result.current_count}/{result.limit}"
        )
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Too many requests",
            headers={"Retry-After": str(max(1, int(result.reset_in_seconds)))},
        )

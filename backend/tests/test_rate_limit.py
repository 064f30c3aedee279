"""
Unit and endpoint tests for the rate limiters.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from credit_engine.core.rate_limit import (
    FixedWindowRateLimiter,
    RateLimiter,
    RedisRateLimiter,
)
from credit_engine.deps import get_rate_limiter
from credit_engine.main import app


class TestFixedWindowRateLimiter:
    """Test cases for FixedWindowRateLimiter."""

    @pytest.mark.asyncio
    async def test_allows_up_to_limit(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=3, window_seconds=60, clock=clock)

        results = [await limiter.hit("client") for _ in range(4)]

        assert [r.allowed for r in results] == [True, True, True, False]
        assert results[2].remaining == 0

    @pytest.mark.asyncio
    async def test_window_resets(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)

        assert (await limiter.hit("client")).allowed
        assert not (await limiter.hit("client")).allowed

        clock.advance(60)

        assert (await limiter.hit("client")).allowed

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)

        assert (await limiter.hit("a")).allowed
        assert (await limiter.hit("b")).allowed
        assert not (await limiter.hit("a")).allowed

    @pytest.mark.asyncio
    async def test_reset_in_seconds(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)
        await limiter.hit("client")
        clock.advance(15)

        denied = await limiter.hit("client")

        assert denied.reset_in_seconds == 45

    @pytest.mark.asyncio
    async def test_expired_windows_are_evicted(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=5, window_seconds=60, clock=clock)
        for n in range(10000):
            await limiter.hit(f"predict:10.0.{n // 256}.{n % 256}")
        assert len(limiter) == 10000

        clock.advance(61)
        await limiter.hit("predict:10.1.0.1")

        assert len(limiter) == 1

    @pytest.mark.asyncio
    async def test_live_windows_survive_eviction(self, clock):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)
        await limiter.hit("old")
        clock.advance(30)
        await limiter.hit("recent")

        clock.advance(31)
        await limiter.hit("other")

        assert len(limiter) == 2
        assert not (await limiter.hit("recent")).allowed

    @pytest.mark.parametrize("max_requests,window", [(0, 60), (1, 0)])
    def test_invalid_configuration(self, max_requests, window):
        with pytest.raises(ValueError):
            FixedWindowRateLimiter(max_requests=max_requests, window_seconds=window)


def redis_returning(*results):
    """Redis client mock whose transaction pipeline yields ``results`` in turn."""
    pipeline = MagicMock()
    pipeline.__aenter__.return_value = pipeline
    pipeline.__aexit__.return_value = False
    pipeline.execute = AsyncMock(side_effect=list(results))
    redis_client = MagicMock()
    redis_client.pipeline.return_value = pipeline
    return redis_client, pipeline


class TestRedisRateLimiter:
    """Test cases for RedisRateLimiter."""

    @pytest.fixture
    def limiter(self):
        return RedisRateLimiter("redis://localhost:6379/0", max_requests=2, window_seconds=60)

    @pytest.mark.asyncio
    async def test_increment_and_expiry_share_one_transaction(self, limiter):
        redis_client, pipeline = redis_returning([True, 1, 60])

        with patch.object(limiter, "_get_redis", new_callable=AsyncMock) as get_redis:
            get_redis.return_value = redis_client
            result = await limiter.hit("predict:10.0.0.1")

        redis_client.pipeline.assert_called_once_with(transaction=True)
        pipeline.set.assert_called_once_with("rate_limit:predict:10.0.0.1", 0, ex=60, nx=True)
        pipeline.incr.assert_called_once_with("rate_limit:predict:10.0.0.1")
        assert result.allowed
        assert result.current_count == 1
        assert result.remaining == 1

    @pytest.mark.asyncio
    async def test_denies_above_limit(self, limiter):
        redis_client, _ = redis_returning([None, 2, 40], [None, 3, 39])

        with patch.object(limiter, "_get_redis", new_callable=AsyncMock) as get_redis:
            get_redis.return_value = redis_client
            second = await limiter.hit("predict:10.0.0.1")
            third = await limiter.hit("predict:10.0.0.1")

        assert second.allowed
        assert not third.allowed
        assert third.reset_in_seconds == 39

    @pytest.mark.asyncio
    async def test_counter_without_ttl_reports_full_window(self, limiter):
        redis_client, _ = redis_returning([None, 3, -1])

        with patch.object(limiter, "_get_redis", new_callable=AsyncMock) as get_redis:
            get_redis.return_value = redis_client
            result = await limiter.hit("predict:10.0.0.1")

        assert not result.allowed
        assert result.reset_in_seconds == 60

    @pytest.mark.asyncio
    async def test_redis_errors_propagate(self, limiter):
        redis_client, pipeline = redis_returning()
        pipeline.execute.side_effect = RedisConnectionError("Connection refused")

        with patch.object(limiter, "_get_redis", new_callable=AsyncMock) as get_redis:
            get_redis.return_value = redis_client
            with pytest.raises(RedisConnectionError):
                await limiter.hit("predict:10.0.0.1")


class BrokenLimiter(RateLimiter):
    def __init__(self):
        super().__init__(max_requests=1, window_seconds=60)

    async def hit(self, key):
        raise RedisConnectionError("Connection refused")


class TestRateLimitedEndpoints:
    """Rate limiting at the HTTP boundary."""

    def test_predict_returns_429_when_exceeded(self, client, clock, strong_applicant):
        limiter = FixedWindowRateLimiter(max_requests=2, window_seconds=60, clock=clock)
        app.dependency_overrides[get_rate_limiter] = lambda: limiter

        statuses = [
            client.post("/api/v1/predict", json=strong_applicant).status_code for _ in range(3)
        ]

        assert statuses == [200, 200, 429]

    def test_retry_after_header(self, client, clock, strong_applicant):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)
        app.dependency_overrides[get_rate_limiter] = lambda: limiter

        client.post("/api/v1/predict", json=strong_applicant)
        response = client.post("/api/v1/predict", json=strong_applicant)

        assert response.status_code == 429
        assert response.headers["Retry-After"] == "60"

    def test_limiter_failure_rejects_request(self, client, strong_applicant):
        app.dependency_overrides[get_rate_limiter] = lambda: BrokenLimiter()

        response = client.post("/api/v1/predict", json=strong_applicant)

        assert response.status_code == 503

    def test_unreachable_redis_rejects_request(self, client, strong_applicant):
        limiter = RedisRateLimiter("redis://localhost:6379/0", max_requests=5, window_seconds=60)
        redis_client, pipeline = redis_returning()
        pipeline.execute.side_effect = RedisConnectionError("Connection refused")
        limiter._redis = redis_client
        app.dependency_overrides[get_rate_limiter] = lambda: limiter

        response = client.post("/api/v1/predict", json=strong_applicant)

        assert response.status_code == 503
        assert response.json()["detail"] == "Rate limiter unavailable"

    def test_rule_execution_is_limited(self, client, clock, strong_applicant):
        limiter = FixedWindowRateLimiter(max_requests=1, window_seconds=60, clock=clock)
        app.dependency_overrides[get_rate_limiter] = lambda: limiter

        body = {"applicant_data": strong_applicant}
        first = client.post("/api/v1/rules/execute", json=body)
        second = client.post("/api/v1/rules/execute", json=body)

        assert first.status_code == 200
        assert second.status_code == 429

"""Unit tests for InMemoryRateLimiter."""

from datetime import timedelta

import pytest

from authid.adapter.ratelimit import InMemoryRateLimiter


class TestInMemoryRateLimiter:
    """Tests for InMemoryRateLimiter."""

    @pytest.mark.asyncio
    async def test_allows_up_to_limit(self):
        limiter = InMemoryRateLimiter(limit=2, window_seconds=60)

        first = await limiter.check("key")
        second = await limiter.check("key")
        third = await limiter.check("key")

        assert (first.allowed, first.remaining) == (True, 1)
        assert (second.allowed, second.remaining) == (True, 0)
        assert third.allowed is False

    @pytest.mark.asyncio
    async def test_keys_are_independent(self):
        limiter = InMemoryRateLimiter(limit=1, window_seconds=60)

        await limiter.check("a")

        assert (await limiter.check("b")).allowed is True

    @pytest.mark.asyncio
    async def test_window_resets(self):
        limiter = InMemoryRateLimiter(limit=1, window_seconds=60)
        await limiter.check("key")
        reset_at, count = limiter._windows["key"]
        limiter._windows["key"] = (reset_at - timedelta(seconds=61), count)

        assert (await limiter.check("key")).allowed is True

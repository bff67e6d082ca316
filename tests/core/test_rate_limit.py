"""
Unit tests for the rate limiter (in-memory fallback and decorator).
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import Request

from classhub.core import rate_limit
from classhub.core.rate_limit import (
    RateLimitExceeded,
    _check_rate_limit_memory,
    check_rate_limit,
    client_ip_key,
)


def _request(path: str = "/api/v1/auth/login", host: str = "10.0.0.1") -> Request:
    return Request(
        {
            "type": "http",
            "method": "POST",
            "path": path,
            "headers": [],
            "query_string": b"",
            "client": (host, 1234),
            "server": ("test", 80),
            "scheme": "http",
        }
    )


class TestMemoryRateLimit:
    def test_allows_up_to_limit_then_blocks(self):
        key = "rate_limit:test:memory"
        results = [_check_rate_limit_memory(key, limit=3, window_seconds=60) for _ in range(4)]
        assert results == [True, True, True, False]

    def test_old_entries_leave_the_window(self):
        key = "rate_limit:test:window"
        with patch("classhub.core.rate_limit.time.time", return_value=1000.0):
            assert _check_rate_limit_memory(key, limit=1, window_seconds=60)
            assert not _check_rate_limit_memory(key, limit=1, window_seconds=60)
        with patch("classhub.core.rate_limit.time.time", return_value=1061.0):
            assert _check_rate_limit_memory(key, limit=1, window_seconds=60)

    def test_keys_are_independent(self):
        assert _check_rate_limit_memory("a", limit=1, window_seconds=60)
        assert _check_rate_limit_memory("b", limit=1, window_seconds=60)

    def test_idle_keys_are_evicted(self):
        with patch("classhub.core.rate_limit._last_sweep", 0.0):
            with patch("classhub.core.rate_limit.time.time", return_value=1000.0):
                assert _check_rate_limit_memory("rate_limit:10.0.0.1:/a", limit=5, window_seconds=60)
            with patch("classhub.core.rate_limit.time.time", return_value=1100.0):
                assert _check_rate_limit_memory("rate_limit:10.0.0.2:/a", limit=5, window_seconds=60)

        assert "rate_limit:10.0.0.1:/a" not in rate_limit._memory_store
        assert "rate_limit:10.0.0.1:/a" not in rate_limit._memory_expiry
        assert "rate_limit:10.0.0.2:/a" in rate_limit._memory_store

    def test_keys_inside_their_window_survive_a_sweep(self):
        with patch("classhub.core.rate_limit._last_sweep", 0.0):
            with patch("classhub.core.rate_limit.time.time", return_value=1000.0):
                assert _check_rate_limit_memory("slow", limit=1, window_seconds=300)
            with patch("classhub.core.rate_limit.time.time", return_value=1100.0):
                assert _check_rate_limit_memory("other", limit=1, window_seconds=60)
                assert not _check_rate_limit_memory("slow", limit=1, window_seconds=300)


class TestCheckRateLimit:
    @pytest.mark.asyncio
    async def test_uses_memory_without_redis(self):
        with patch("classhub.core.redis.redis_client", None):
            assert await check_rate_limit("k", limit=1, window_seconds=60)
            assert not await check_rate_limit("k", limit=1, window_seconds=60)
        assert "k" in rate_limit._memory_store


class TestClientIpKey:
    def test_key_combines_ip_and_path(self):
        assert client_ip_key(_request()) == "rate_limit:10.0.0.1:/api/v1/auth/login"


class TestRateLimitDecorator:
    @pytest.mark.asyncio
    async def test_raises_429_when_exceeded(self):
        @rate_limit.rate_limit(limit=2, window_seconds=60)
        async def endpoint(request: Request):
            return "ok"

        request = _request(path="/decorated")
        assert await endpoint(request=request) == "ok"
        assert await endpoint(request=request) == "ok"

        with pytest.raises(RateLimitExceeded) as exc_info:
            await endpoint(request=request)

        assert exc_info.value.status_code == 429
        assert exc_info.value.detail["error"] == "RATE_LIMIT_EXCEEDED"
        assert exc_info.value.headers["Retry-After"] == "60"

    @pytest.mark.asyncio
    async def test_passes_through_without_request(self):
        inner = MagicMock(return_value="ok")

        @rate_limit.rate_limit(limit=1, window_seconds=60)
        async def endpoint():
            return inner()

        assert await endpoint() == "ok"
        assert await endpoint() == "ok"

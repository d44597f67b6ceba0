"""
Tests for the rate-limited Shopify client.
"""

import asyncio
import time

import httpx
import pytest

from conftest import make_client
from qcsync.shopify import (
    RateLimiter,
    ShopifyAuthError,
    ShopifyClientError,
    ShopifyRateLimitError,
    ShopifyServerError,
)


class Sequence:
    """Handler returning queued responses, then 200 {} forever."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = 0

    def __call__(self, request):
        self.calls += 1
        if self.responses:
            return self.responses.pop(0)
        return httpx.Response(200, json={"ok": True})


class TestRateLimiter:
    """Tests for RateLimiter."""

    def test_dispatches_are_spaced_by_min_gap(self):
        gap = 0.05

        async def scenario():
            limiter = RateLimiter(min_gap=gap)
            starts = []

            async def call(i):
                async with limiter.slot():
                    starts.append((i, time.monotonic()))

            await asyncio.gather(*(call(i) for i in range(6)))
            return starts

        starts = asyncio.run(scenario())

        assert [i for i, _ in starts] == list(range(6))
        times = [t for _, t in starts]
        gaps = [b - a for a, b in zip(times, times[1:])]
        assert all(g >= gap * 0.9 for g in gaps), gaps

    def test_caller_is_not_held_for_the_gap(self):
        async def scenario():
            limiter = RateLimiter(min_gap=1.0)
            started = time.monotonic()
            async with limiter.slot():
                pass
            elapsed = time.monotonic() - started
            return elapsed, limiter.busy

        elapsed, busy = asyncio.run(scenario())

        assert elapsed < 0.5
        assert busy

    def test_zero_gap_releases_immediately(self):
        async def scenario():
            limiter = RateLimiter(min_gap=0)
            async with limiter.slot():
                pass
            return limiter.busy

        assert asyncio.run(scenario()) is False

    def test_negative_gap_rejected(self):
        with pytest.raises(ValueError):
            RateLimiter(min_gap=-1)

    def test_slot_released_after_error(self):
        async def scenario():
            limiter = RateLimiter(min_gap=0)
            with pytest.raises(RuntimeError):
                async with limiter.slot():
                    raise RuntimeError("boom")
            async with limiter.slot():
                return True

        assert asyncio.run(scenario())


class TestShopifyClient:
    """Tests for ShopifyClient.request retry behaviour."""

    def test_domain_is_normalised(self):
        client = make_client(Sequence())
        assert client.shop_domain == "test-shop.myshopify.com"
        assert client.base_url == "https://test-shop.myshopify.com/admin/api/2025-01"

    def test_sends_token_header(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"shop": {}})

        client = make_client(handler)
        asyncio.run(client.get("/shop.json"))

        assert seen[0].headers["X-Shopify-Access-Token"] == "shpat_test"
        assert str(seen[0].url) == "https://test-shop.myshopify.com/admin/api/2025-01/shop.json"

    def test_throttled_without_retry_after_uses_linear_backoff(self):
        handler = Sequence(httpx.Response(429), httpx.Response(429))
        client = make_client(handler)

        result = asyncio.run(client.get("/orders.json"))

        assert result == {"ok": True}
        assert handler.calls == 3
        assert client.sleeps == [2.0, 4.0]

    def test_retry_after_header_is_respected(self):
        handler = Sequence(httpx.Response(429, headers={"Retry-After": "1.5"}))
        client = make_client(handler)

        asyncio.run(client.get("/orders.json"))

        assert client.sleeps == [1.5]

    def test_server_errors_retried(self):
        handler = Sequence(httpx.Response(502), httpx.Response(503))
        client = make_client(handler)

        asyncio.run(client.get("/orders.json"))

        assert handler.calls == 3

    def test_gives_up_after_max_attempts(self):
        handler = Sequence(*[httpx.Response(500, text="oops") for _ in range(10)])
        client = make_client(handler)

        with pytest.raises(ShopifyServerError) as exc_info:
            asyncio.run(client.get("/orders.json"))

        assert handler.calls == client.MAX_ATTEMPTS == 5
        assert client.sleeps == [2.0, 4.0, 6.0, 8.0]
        assert exc_info.value.status_code == 500
        assert "500 Internal Server Error - oops" in str(exc_info.value)

    def test_still_throttled_raises_rate_limit_error(self):
        handler = Sequence(*[httpx.Response(429) for _ in range(5)])
        client = make_client(handler)

        with pytest.raises(ShopifyRateLimitError) as exc_info:
            asyncio.run(client.get("/orders.json"))

        assert exc_info.value.status_code == 429

    def test_backoff_is_capped(self):
        client = make_client(Sequence())
        assert client.retry_delay(None, 3) == 6.0
        assert client.retry_delay(None, 9) == client.MAX_RETRY_DELAY

    def test_non_numeric_retry_after_falls_back(self):
        client = make_client(Sequence())
        response = httpx.Response(429, headers={"Retry-After": "soon"})
        assert client.retry_delay(response, 1) == 2.0

    def test_client_error_fails_immediately(self):
        handler = Sequence(httpx.Response(404, text='{"errors":"Not Found"}'))
        client = make_client(handler)

        with pytest.raises(ShopifyClientError) as exc_info:
            asyncio.run(client.get("/orders/1/metafields.json"))

        assert handler.calls == 1
        assert client.sleeps == []
        assert exc_info.value.status_code == 404
        assert str(exc_info.value) == (
            'Shopify GET /orders/1/metafields.json failed: 404 Not Found - {"errors":"Not Found"}'
        )

    def test_auth_error(self):
        client = make_client(Sequence(httpx.Response(401, text="bad token")))

        with pytest.raises(ShopifyAuthError):
            asyncio.run(client.get("/shop.json"))

    def test_transport_errors_retried_then_raised(self):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)

        with pytest.raises(ShopifyClientError, match="request error"):
            asyncio.run(client.get("/shop.json"))

        assert len(calls) == 5
        assert len(client.sleeps) == 4

    @pytest.mark.parametrize("header", ["inf", "Infinity", "nan", "-inf"])
    def test_non_finite_retry_after_falls_back(self, header):
        client = make_client(Sequence())
        response = httpx.Response(429, headers={"Retry-After": header})
        assert client.retry_delay(response, 2) == 4.0

    def test_non_finite_retry_after_does_not_stall_retries(self):
        handler = Sequence(httpx.Response(503, headers={"Retry-After": "inf"}))
        client = make_client(handler)

        asyncio.run(client.get("/orders.json"))

        assert handler.calls == 2
        assert client.sleeps == [2.0]

    def test_invalid_json_body_raises_client_error(self):
        client = make_client(Sequence(httpx.Response(200, text="<html>maintenance</html>")))

        with pytest.raises(ShopifyClientError, match="invalid JSON") as exc_info:
            asyncio.run(client.get("/shop.json"))

        assert exc_info.value.status_code == 200

    def test_max_attempts_override(self):
        handler = Sequence(*[httpx.Response(503) for _ in range(5)])
        client = make_client(handler)

        with pytest.raises(ShopifyServerError):
            asyncio.run(client.request("GET", "/shop.json", max_attempts=1))

        assert handler.calls == 1
        assert client.sleeps == []

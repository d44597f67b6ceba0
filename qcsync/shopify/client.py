"""
Shopify Admin REST API client.
"""

import asyncio
import logging
import math
from typing import Any, Dict, Optional

import httpx

from qcsync.shopify.throttle import RateLimiter

logger = logging.getLogger(__name__)


class ShopifyClientError(Exception):
    """Base exception for Shopify client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ShopifyAuthError(ShopifyClientError):
    """Authentication error."""
    pass


class ShopifyRateLimitError(ShopifyClientError):
    """Rate limit still exceeded after all retries."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = 429,
        retry_after: Optional[float] = None,
    ):
        super().__init__(message, status_code)
        self.retry_after = retry_after


class ShopifyServerError(ShopifyClientError):
    """Shopify kept answering with 5xx after all retries."""
    pass


class ShopifyClient:
    """
    Async HTTP client for the Shopify Admin REST API.

    Every attempt goes through one RateLimiter, so all callers sharing a
    client share the same request spacing. Throttling and server errors are
    retried with backoff.
    """

    DEFAULT_API_VERSION = "2025-01"
    MAX_ATTEMPTS = 5
    BASE_RETRY_DELAY = 2.0  # seconds, multiplied by the attempt number
    MAX_RETRY_DELAY = 10.0  # seconds

    def __init__(
        self,
        shop_domain: str,
        access_token: str,
        api_version: str = DEFAULT_API_VERSION,
        rate_limiter: Optional[RateLimiter] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize Shopify client.

        Args:
            shop_domain: Store domain (e.g., "mystore.myshopify.com")
            access_token: Admin API access token
            api_version: Admin API version, e.g. "2025-01"
            rate_limiter: Gate shared by every request of this client
            transport: Optional httpx transport (tests use MockTransport)
        """
        # Clean domain
        domain = shop_domain
        if domain.startswith("https://"):
            domain = domain[8:]
        elif domain.startswith("http://"):
            domain = domain[7:]
        domain = domain.rstrip("/")

        self.shop_domain = domain
        self.access_token = access_token
        self.api_version = api_version
        self.base_url = f"https://{domain}/admin/api/{api_version}"
        self.rate_limiter = rate_limiter or RateLimiter()

        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=httpx.Timeout(60.0, connect=10.0),
                headers={
                    "Content-Type": "application/json",
                    "X-Shopify-Access-Token": self.access_token,
                },
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _sleep(self, delay: float) -> None:
        await asyncio.sleep(delay)

    def retry_delay(self, response: Optional[httpx.Response], attempt: int) -> float:
        """
        Seconds to wait before the next attempt.

        Uses the Retry-After header when Shopify sends one, otherwise a
        linear backoff capped at MAX_RETRY_DELAY.
        """
        if response is not None:
            header = response.headers.get("Retry-After")
            if header:
                try:
                    seconds = float(header)
                except ValueError:
                    seconds = None
                if seconds is not None and math.isfinite(seconds):
                    return max(seconds, 0.0)
                logger.debug(f"Ignoring unusable Retry-After: {header!r}")
        return min(self.BASE_RETRY_DELAY * attempt, self.MAX_RETRY_DELAY)

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        max_attempts: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Send a request with throttling and retry logic.

        Args:
            method: HTTP method
            path: Path below the versioned Admin API root, e.g. "/shop.json"
            params: Query parameters (url-encoded by httpx)
            json: Optional JSON body
            max_attempts: Override MAX_ATTEMPTS for this request

        Returns:
            The decoded JSON response body

        Raises:
            ShopifyAuthError: On 401/403
            ShopifyRateLimitError: If still throttled after MAX_ATTEMPTS
            ShopifyServerError: If still failing with 5xx after MAX_ATTEMPTS
            ShopifyClientError: For any other error
        """
        client = await self._get_client()
        label = f"Shopify {method} {path}"
        attempts = max_attempts or self.MAX_ATTEMPTS

        for attempt in range(1, attempts + 1):
            try:
                async with self.rate_limiter.slot():
                    response = await client.request(method, path, params=params, json=json)
            except httpx.RequestError as e:
                if attempt >= attempts:
                    raise ShopifyClientError(f"{label} failed: request error: {e}") from e
                delay = self.retry_delay(None, attempt)
                logger.warning(
                    f"Request error on {label}, retrying in {delay:.1f}s "
                    f"(attempt {attempt}/{attempts}): {e}"
                )
                await self._sleep(delay)
                continue

            status = response.status_code
            transient = status == 429 or 500 <= status < 600

            if transient and attempt < attempts:
                delay = self.retry_delay(response, attempt)
                logger.warning(
                    f"Shopify {status}. Retrying in {delay:.1f}s "
                    f"(attempt {attempt}/{attempts})"
                )
                await self._sleep(delay)
                continue

            if response.is_success:
                try:
                    return response.json()
                except ValueError as e:
                    raise ShopifyClientError(f"{label} returned invalid JSON: {e}", status) from e

            message = (
                f"{label} failed: {status} {response.reason_phrase} - {response.text}"
            )
            if status == 429:
                raise ShopifyRateLimitError(
                    message, retry_after=self.retry_delay(response, attempt)
                )
            if transient:
                raise ShopifyServerError(message, status)
            if status in (401, 403):
                raise ShopifyAuthError(message, status)
            raise ShopifyClientError(message, status)

        # Loop always returns or raises; kept for type checkers
        raise ShopifyClientError(f"{label} failed: max attempts exceeded")

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """GET a JSON resource."""
        return await self.request("GET", path, params=params)

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

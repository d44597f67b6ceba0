"""
Shopify API module.
"""

from qcsync.shopify.client import (
    ShopifyClient,
    ShopifyClientError,
    ShopifyAuthError,
    ShopifyRateLimitError,
    ShopifyServerError,
)
from qcsync.shopify.orders import OrderResolver, OrderNotFoundError
from qcsync.shopify.throttle import RateLimiter

__all__ = [
    "ShopifyClient",
    "ShopifyClientError",
    "ShopifyAuthError",
    "ShopifyRateLimitError",
    "ShopifyServerError",
    "OrderResolver",
    "OrderNotFoundError",
    "RateLimiter",
]

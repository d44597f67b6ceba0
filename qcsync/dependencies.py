"""
Process-wide collaborators.
One Shopify client (and so one rate limiter) is shared by every run.
"""

from typing import Optional

from .config import Settings
from .db import RunLog
from .sheets import SheetsClient
from .shopify import OrderResolver, RateLimiter, ShopifyClient


# Global instances (initialized on startup)
_settings: Optional[Settings] = None
_shopify: Optional[ShopifyClient] = None
_resolver: Optional[OrderResolver] = None
_sheets: Optional[SheetsClient] = None
_run_log: Optional[RunLog] = None


async def init_dependencies(settings: Settings):
    """Initialize global dependencies. Called on app startup."""
    global _settings, _shopify, _resolver, _sheets, _run_log

    _settings = settings
    _shopify = ShopifyClient(
        settings.shopify_domain,
        settings.shopify_admin_token,
        api_version=settings.shopify_api_version,
        rate_limiter=RateLimiter(settings.shopify_min_gap_seconds),
    )
    _resolver = OrderResolver(_shopify)
    _sheets = SheetsClient(
        settings.sheet_doc_id,
        service_account_email=settings.google_service_account_email,
        private_key=settings.google_private_key,
    )
    _run_log = RunLog(settings.run_log_path)


async def close_dependencies():
    """Close global dependencies. Called on app shutdown."""
    global _shopify
    if _shopify:
        await _shopify.close()
        _shopify = None


def get_settings() -> Settings:
    """Get the loaded settings."""
    if _settings is None:
        raise RuntimeError("Settings not initialized")
    return _settings


def get_shopify() -> ShopifyClient:
    """Get the shared Shopify client."""
    if _shopify is None:
        raise RuntimeError("Shopify client not initialized")
    return _shopify


def get_resolver() -> OrderResolver:
    """Get the order resolver."""
    if _resolver is None:
        raise RuntimeError("Order resolver not initialized")
    return _resolver


def get_sheets() -> SheetsClient:
    """Get the Sheets client."""
    if _sheets is None:
        raise RuntimeError("Sheets client not initialized")
    return _sheets


def get_run_log() -> RunLog:
    """Get the run log."""
    if _run_log is None:
        raise RuntimeError("Run log not initialized")
    return _run_log

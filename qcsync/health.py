"""
Best-effort connectivity checks run at startup.
"""

import logging
from enum import Enum
from typing import Dict

from .sheets import SheetsClient, SheetsClientError
from .shopify import ShopifyClient, ShopifyClientError

logger = logging.getLogger(__name__)


class HealthStatus(str, Enum):
    """Result of a connectivity check."""
    OK = "ok"
    UNREACHABLE = "unreachable"


async def check_shopify(client: ShopifyClient) -> HealthStatus:
    """Fetch /shop.json once, without retries; never raises."""
    try:
        data = await client.request("GET", "/shop.json", max_attempts=1)
        shop = (data.get("shop") or {}).get("name", client.shop_domain)
    except ShopifyClientError as e:
        logger.warning(f"Shopify check failed: {e}")
        return HealthStatus.UNREACHABLE
    except Exception as e:
        logger.warning(f"Shopify check failed with unexpected error: {e!r}")
        return HealthStatus.UNREACHABLE
    logger.info(f"[shopify] connectivity ok ({shop})")
    return HealthStatus.OK


async def check_sheets(sheets: SheetsClient) -> HealthStatus:
    """Fetch the spreadsheet title; never raises."""
    try:
        title = await sheets.get_title()
    except SheetsClientError as e:
        logger.warning(f"Google Sheets check failed: {e}")
        return HealthStatus.UNREACHABLE
    except Exception as e:
        logger.warning(f"Google Sheets check failed with unexpected error: {e!r}")
        return HealthStatus.UNREACHABLE
    logger.info(f"[google] sheets connectivity ok ({title})")
    return HealthStatus.OK


async def run_startup_checks(sheets: SheetsClient, client: ShopifyClient, checks: Dict[str, HealthStatus]) -> None:
    """Run both checks and record their results into ``checks``."""
    checks["sheets"] = await check_sheets(sheets)
    checks["shopify"] = await check_shopify(client)

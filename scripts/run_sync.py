#!/usr/bin/env python3
"""
Run one QC sheet sync from the command line and print the summary.
Add to crontab: 0 7 * * * cd /path/to/app && /path/to/venv/bin/python scripts/run_sync.py

This runs the sync as a standalone script, without the Slack front end.
"""

import asyncio
import logging
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from qcsync.config import ConfigError, load_settings
from qcsync.db import RunLog
from qcsync.health import HealthStatus, check_sheets, check_shopify
from qcsync.processor import run_once
from qcsync.sheets import SheetsClient
from qcsync.shopify import OrderResolver, RateLimiter, ShopifyClient

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

logger = logging.getLogger(__name__)


async def main():
    try:
        settings = load_settings()
    except ConfigError as e:
        logger.error(str(e))
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    logger.info("Starting QC sheet sync...")

    sheets = SheetsClient(
        settings.sheet_doc_id,
        service_account_email=settings.google_service_account_email,
        private_key=settings.google_private_key,
    )

    async with ShopifyClient(
        settings.shopify_domain,
        settings.shopify_admin_token,
        api_version=settings.shopify_api_version,
        rate_limiter=RateLimiter(settings.shopify_min_gap_seconds),
    ) as client:
        if "--check" in sys.argv[1:]:
            results = [await check_sheets(sheets), await check_shopify(client)]
            sys.exit(0 if all(r is HealthStatus.OK for r in results) else 1)

        result = await run_once(
            sheets,
            OrderResolver(client),
            RunLog(settings.run_log_path),
            tab_name=settings.sheet_tab_name,
            prefix=settings.order_prefix,
        )

    print(result.message)
    if not result.success:
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())

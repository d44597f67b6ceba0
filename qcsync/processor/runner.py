"""
Runner for executing one sync and turning its outcome into a message.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..db import RunLog, SyncReport
from ..sheets import SheetsClient, SheetsClientError
from ..shopify import OrderResolver
from .summary import render_failure, render_summary
from .sync import run_sync

logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Result of a sync run."""
    report: Optional[SyncReport]
    message: str
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


async def run_once(
    sheets: SheetsClient,
    resolver: OrderResolver,
    run_log: Optional[RunLog],
    *,
    tab_name: str = "Customer",
    prefix: str = "C",
) -> SyncResult:
    """Run one sync with error handling; always yields a message to report."""
    try:
        report = await run_sync(sheets, resolver, run_log, tab_name=tab_name, prefix=prefix)
        return SyncResult(report=report, message=render_summary(report, prefix))
    except SheetsClientError as e:
        logger.error(f"Sync failed reading the sheet: {e}")
        return SyncResult(report=None, message=render_failure(e), error=str(e))
    except Exception as e:
        logger.exception("Unexpected error during sync")
        return SyncResult(report=None, message=render_failure(e), error=f"Unexpected error: {e}")

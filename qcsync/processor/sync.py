"""
Sync processor: one pass over the sheet.
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from ..db import RowUpdate, RunFailure, RunLog, RunLogEntry, SheetRow, SyncReport, utcnow_iso
from ..sheets import SheetsClient
from ..shopify import OrderResolver, ShopifyClientError
from .reader import read_order_rows
from .rules import transform_metafields
from .writer import BatchWriteError, write_updates

logger = logging.getLogger(__name__)


async def resolve_row(resolver: OrderResolver, row: SheetRow) -> RowUpdate:
    """Look up one order and build its D-G values."""
    order = await resolver.find_order_by_name(row.order_name)
    metafields = await resolver.fetch_order_metafields(order.id)
    return RowUpdate(row_index=row.row_index, values=transform_metafields(metafields))


async def resolve_rows(
    resolver: OrderResolver,
    rows: List[SheetRow],
) -> Tuple[List[RowUpdate], List[RunFailure]]:
    """
    Resolve rows one at a time, in sheet order.

    A failing row is recorded and skipped; it never stops the others.
    """
    updates: List[RowUpdate] = []
    failures: List[RunFailure] = []

    for i, row in enumerate(rows, start=1):
        try:
            updates.append(await resolve_row(resolver, row))
        except ShopifyClientError as e:
            logger.warning(f"Row {row.row_index} ({row.order_name}): {e}")
            failures.append(RunFailure(row_index=row.row_index, order_name=row.order_name, error=str(e)))
        except Exception as e:
            logger.exception(f"Unexpected error on row {row.row_index} ({row.order_name})")
            failures.append(RunFailure(
                row_index=row.row_index,
                order_name=row.order_name,
                error=f"Unexpected error: {e}",
            ))

        if i % 50 == 0 or i == len(rows):
            logger.info(f"Progress: {i}/{len(rows)} orders ({int(i / len(rows) * 100)}%)")

    return updates, failures


async def run_sync(
    sheets: SheetsClient,
    resolver: OrderResolver,
    run_log: Optional[RunLog],
    *,
    tab_name: str = "Customer",
    prefix: str = "C",
) -> SyncReport:
    """
    Run the complete sync: read sheet, resolve orders, write D-G, log the run.

    Returns an empty report (and writes no log entry) when the sheet has no
    order numbers.
    """
    started_at = utcnow_iso()

    # Step 1: Find order numbers in the sheet
    rows = await read_order_rows(sheets, tab_name, prefix)
    if not rows:
        logger.info("No order numbers found, nothing to do")
        return SyncReport()

    order_names = {r.row_index: r.order_name for r in rows}

    # Step 2: Resolve each order sequentially
    logger.info(f"Resolving {len(rows)} orders...")
    updates, failures = await resolve_rows(resolver, rows)

    # Step 3: Write all successful rows
    logger.info(f"Applying {len(updates)} row updates...")
    try:
        rows_written = await write_updates(sheets, updates, tab_name)
    except BatchWriteError as e:
        rows_written = e.rows_written
        for update, error in e.failed:
            failures.append(RunFailure(
                row_index=update.row_index,
                order_name=order_names[update.row_index],
                error=f"Sheet write failed: {error}",
            ))
        failures.sort(key=lambda f: f.row_index)

    # Step 4: Persist the run log
    entry = RunLogEntry(
        at=started_at,
        orders_seen=len(rows),
        rows_written=rows_written,
        failures=failures,
    )
    if run_log is not None:
        try:
            await asyncio.to_thread(run_log.append, entry)
        except OSError:
            logger.exception(f"Could not save run log to {run_log.path}")

    logger.info(
        f"Sync completed: {len(rows)} orders, {rows_written} rows written, "
        f"{len(failures)} failures"
    )

    return SyncReport(
        orders_seen=len(rows),
        rows_written=rows_written,
        failures=failures,
    )

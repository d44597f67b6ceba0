"""
Batch writer: put D-G values back on their sheet rows.
"""

import logging
from typing import List, Sequence, Tuple

from ..db import RowUpdate
from ..sheets import SheetsClient, SheetsClientError, a1_row_range

logger = logging.getLogger(__name__)

OUTPUT_FIRST_COLUMN = "D"
OUTPUT_LAST_COLUMN = "G"

# Stay well under the Sheets API payload limits
WRITE_CHUNK_SIZE = 400


class BatchWriteError(Exception):
    """One or more write chunks failed; earlier chunks stay written."""

    def __init__(self, failed: List[Tuple[RowUpdate, str]], rows_written: int):
        self.failed = failed
        self.rows_written = rows_written
        super().__init__(
            f"{len(failed)} row(s) failed to write, {rows_written} row(s) written"
        )


def build_write_data(updates: Sequence[RowUpdate], tab_name: str) -> List[dict]:
    """One range/values block per update."""
    return [
        {
            "range": a1_row_range(tab_name, OUTPUT_FIRST_COLUMN, OUTPUT_LAST_COLUMN, u.row_index),
            "values": [list(u.values)],
        }
        for u in updates
    ]


async def write_updates(
    sheets: SheetsClient,
    updates: Sequence[RowUpdate],
    tab_name: str,
    chunk_size: int = WRITE_CHUNK_SIZE,
) -> int:
    """
    Write all updates in chunks of ``chunk_size`` ranges per batchUpdate.

    A failed chunk does not stop the remaining chunks.

    Returns:
        Number of rows written

    Raises:
        BatchWriteError: If any chunk failed, after all chunks were tried
    """
    if not updates:
        return 0

    data = build_write_data(updates, tab_name)
    written = 0
    failed: List[Tuple[RowUpdate, str]] = []

    for start in range(0, len(data), chunk_size):
        chunk = data[start:start + chunk_size]
        chunk_updates = updates[start:start + chunk_size]
        try:
            await sheets.batch_write(chunk, value_input_option="RAW")
            written += len(chunk)
        except SheetsClientError as e:
            logger.error(f"Sheet write failed for rows {start + 1}-{start + len(chunk)} of batch: {e}")
            failed.extend((u, str(e)) for u in chunk_updates)
        except Exception as e:
            logger.exception(f"Unexpected error writing rows {start + 1}-{start + len(chunk)} of batch")
            failed.extend((u, f"Unexpected error: {e}") for u in chunk_updates)

    logger.info(f"Wrote {OUTPUT_FIRST_COLUMN}-{OUTPUT_LAST_COLUMN} on {written} row(s)")

    if failed:
        raise BatchWriteError(failed, written)
    return written

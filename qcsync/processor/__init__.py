"""
Processor package for sync operations.
"""

from .reader import (
    read_order_rows,
    extract_order_rows,
    order_name_pattern,
    ORDER_COLUMN
)
from .rules import (
    packing_slip_notes_from_third_line,
    transform_metafields,
    OUTPUT_KEYS
)
from .writer import (
    write_updates,
    build_write_data,
    BatchWriteError,
    WRITE_CHUNK_SIZE,
    OUTPUT_FIRST_COLUMN,
    OUTPUT_LAST_COLUMN
)
from .summary import render_summary, render_failure, MAX_FAILURE_LINES
from .sync import run_sync, resolve_rows, resolve_row
from .runner import run_once, SyncResult

__all__ = [
    "read_order_rows",
    "extract_order_rows",
    "order_name_pattern",
    "ORDER_COLUMN",
    "packing_slip_notes_from_third_line",
    "transform_metafields",
    "OUTPUT_KEYS",
    "write_updates",
    "build_write_data",
    "BatchWriteError",
    "WRITE_CHUNK_SIZE",
    "OUTPUT_FIRST_COLUMN",
    "OUTPUT_LAST_COLUMN",
    "render_summary",
    "render_failure",
    "MAX_FAILURE_LINES",
    "run_sync",
    "resolve_rows",
    "resolve_row",
    "run_once",
    "SyncResult",
]

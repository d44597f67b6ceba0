"""
Data model and run log persistence.
"""

from .models import (
    SheetRow, OrderRecord, RowUpdate, RunFailure, RunLogEntry, SyncReport,
    utcnow_iso
)
from .run_log import RunLog

__all__ = [
    "RunLog",
    "SheetRow",
    "OrderRecord",
    "RowUpdate",
    "RunFailure",
    "RunLogEntry",
    "SyncReport",
    "utcnow_iso",
]

"""
Pydantic models for sheet rows, order data and run log entries.
"""

from datetime import datetime, timezone
from typing import List, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


def utcnow_iso() -> str:
    """Current UTC time as an ISO-8601 string (millisecond precision)."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class SheetRow(BaseModel):
    """An order number found in the sheet, with its 1-based row number."""
    model_config = ConfigDict(frozen=True)

    row_index: int = Field(ge=1)
    order_name: str


class OrderRecord(BaseModel):
    """A Shopify order matched by name."""
    id: Union[int, str]
    name: str


class RowUpdate(BaseModel):
    """Values for columns D-G of one sheet row."""
    model_config = ConfigDict(frozen=True)

    row_index: int = Field(ge=1)
    values: Tuple[str, str, str, str]


class RunFailure(BaseModel):
    """A row that could not be resolved, transformed or written."""
    row_index: int
    order_name: str
    error: str


class RunLogEntry(BaseModel):
    """One persisted record of a sync run."""
    at: str = Field(default_factory=utcnow_iso)
    orders_seen: int = 0
    rows_written: int = 0
    failures: List[RunFailure] = Field(default_factory=list)


class SyncReport(BaseModel):
    """Outcome of one orchestrated run, used to render the summary."""
    orders_seen: int = 0
    rows_written: int = 0
    failures: List[RunFailure] = Field(default_factory=list)

    @property
    def empty(self) -> bool:
        """Nothing matched in the sheet, so nothing was attempted."""
        return self.orders_seen == 0

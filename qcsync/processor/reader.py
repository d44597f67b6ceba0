"""
Sheet reader: find order numbers in the order column.
"""

import logging
import re
from typing import List, Pattern

from ..db import SheetRow
from ..sheets import SheetsClient, a1_column_range

logger = logging.getLogger(__name__)

ORDER_COLUMN = "B"


def order_name_pattern(prefix: str = "C") -> Pattern[str]:
    """Regex for order numbers like C#1234 or C#12345."""
    return re.compile(rf"^{re.escape(prefix)}#\d{{4,5}}$")


def extract_order_rows(rows: List[list], pattern: Pattern[str]) -> List[SheetRow]:
    """
    Pick matching cells out of a single-column range.

    Row numbers are 1-based sheet rows; non-matching rows are skipped, not
    renumbered.
    """
    found: List[SheetRow] = []
    for i, row in enumerate(rows):
        cell = row[0] if row else ""
        value = ("" if cell is None else str(cell)).strip()
        if pattern.match(value):
            found.append(SheetRow(row_index=i + 1, order_name=value))
    return found


async def read_order_rows(
    sheets: SheetsClient,
    tab_name: str,
    prefix: str = "C",
) -> List[SheetRow]:
    """Read the whole order column and return the rows holding order numbers."""
    range_spec = a1_column_range(tab_name, ORDER_COLUMN)
    rows = await sheets.read_range(range_spec)
    found = extract_order_rows(rows, order_name_pattern(prefix))
    logger.info(f"Read {len(rows)} rows from {range_spec}, {len(found)} order numbers")
    return found

"""
Google Sheets module.
"""

from qcsync.sheets.client import (
    SheetsClient,
    SheetsClientError,
    SheetsCredentialsError,
    SheetsApiResponseError,
    a1_column_range,
    a1_row_range,
    quote_title,
)

__all__ = [
    "SheetsClient",
    "SheetsClientError",
    "SheetsCredentialsError",
    "SheetsApiResponseError",
    "a1_column_range",
    "a1_row_range",
    "quote_title",
]

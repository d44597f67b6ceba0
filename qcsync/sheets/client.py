"""
Google Sheets client.

Thin async wrapper around the Sheets v4 values API: read one range and write
many ranges in a single batchUpdate. The googleapiclient calls are blocking,
so they run in a worker thread.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional, Sequence

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

SCOPES: Sequence[str] = ("https://www.googleapis.com/auth/spreadsheets",)
TOKEN_URI = "https://oauth2.googleapis.com/token"

# googleapiclient retries 429/5xx with exponential backoff
NUM_RETRIES = 3


class SheetsClientError(RuntimeError):
    """Base error raised for Sheets API failures."""


class SheetsCredentialsError(SheetsClientError):
    """Raised when the service account credentials are unusable."""


class SheetsApiResponseError(SheetsClientError):
    """Raised when the Google API returns an error response."""


def quote_title(title: str) -> str:
    """Return a worksheet title quoted according to A1 notation rules."""
    safe = (title or "").strip()
    if len(safe) >= 2 and safe[0] == safe[-1] and safe[0] in ("'", '"'):
        safe = safe[1:-1]
    if not safe:
        raise SheetsClientError("Worksheet title must not be empty")
    safe = safe.replace("'", "''")
    return f"'{safe}'"


def a1_column_range(title: str, column: str) -> str:
    """Whole-column range, e.g. 'Customer'!B:B."""
    return f"{quote_title(title)}!{column}:{column}"


def a1_row_range(title: str, first_column: str, last_column: str, row_index: int) -> str:
    """Single-row range spanning two columns, e.g. 'Customer'!D5:G5."""
    if row_index < 1:
        raise ValueError("Row index must be >= 1")
    return f"{quote_title(title)}!{first_column}{row_index}:{last_column}{row_index}"


def build_service(service_account_email: str, private_key: str):
    """Create a Sheets v4 service authorised as the given service account."""
    info = {
        "type": "service_account",
        "client_email": service_account_email,
        "private_key": private_key,
        "token_uri": TOKEN_URI,
    }
    try:
        credentials = service_account.Credentials.from_service_account_info(
            info, scopes=list(SCOPES)
        )
    except (ValueError, KeyError) as exc:
        raise SheetsCredentialsError(f"Invalid service account credentials: {exc}") from exc

    return build("sheets", "v4", credentials=credentials, cache_discovery=False)


class SheetsClient:
    """Reads and writes values of one spreadsheet."""

    def __init__(self, spreadsheet_id: str, *, service=None,
                 service_account_email: Optional[str] = None,
                 private_key: Optional[str] = None) -> None:
        self.spreadsheet_id = spreadsheet_id
        self._service = service
        self._service_account_email = service_account_email
        self._private_key = private_key

    @property
    def service(self):
        if self._service is None:
            self._service = build_service(self._service_account_email or "", self._private_key or "")
        return self._service

    async def get_title(self) -> str:
        """Fetch the spreadsheet title; a cheap connectivity check."""

        def _call() -> Dict[str, Any]:
            return (
                self.service.spreadsheets()
                .get(spreadsheetId=self.spreadsheet_id, fields="properties.title")
                .execute(num_retries=NUM_RETRIES)
            )

        response = await self._run(_call)
        return (response.get("properties") or {}).get("title", "")

    async def read_range(self, range_spec: str) -> List[List[Any]]:
        """Return the rows of ``range_spec``; trailing empty rows are omitted by the API."""

        def _call() -> Dict[str, Any]:
            return (
                self.service.spreadsheets()
                .values()
                .get(spreadsheetId=self.spreadsheet_id, range=range_spec)
                .execute(num_retries=NUM_RETRIES)
            )

        response = await self._run(_call)
        return response.get("values") or []

    async def batch_write(self, data: List[Dict[str, Any]], value_input_option: str = "RAW") -> Dict[str, Any]:
        """Write several ``{"range": ..., "values": [[...]]}`` blocks in one request."""
        logger.debug(f"batchUpdate with {len(data)} ranges on {self.spreadsheet_id}")

        def _call() -> Dict[str, Any]:
            return (
                self.service.spreadsheets()
                .values()
                .batchUpdate(
                    spreadsheetId=self.spreadsheet_id,
                    body={"valueInputOption": value_input_option, "data": data},
                )
                .execute(num_retries=NUM_RETRIES)
            )

        return await self._run(_call)

    async def _run(self, call):
        try:
            return await asyncio.to_thread(call)
        except HttpError as exc:
            raise SheetsApiResponseError(str(exc)) from exc
        except GoogleAuthError as exc:
            raise SheetsCredentialsError(str(exc)) from exc
        except (OSError, httplib2.HttpLib2Error) as exc:
            # transport failures left over once num_retries is used up
            raise SheetsApiResponseError(f"Sheets request failed: {exc}") from exc

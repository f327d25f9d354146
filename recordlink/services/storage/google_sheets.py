"""
Google Sheets Record Source

DESIGN DECISION: A tracker kept in Google Sheets stores one dataset per
worksheet, with a header row naming the fields and an `id` column.
Non-technical users can edit their data directly in Sheets and the resolver
can still read it.

TRADEOFFS:
- Whole worksheets are read at once (fine for personal-scale datasets)
- Values come back untyped (gspread numericises where it can)
"""

import asyncio
import threading
from typing import Any, Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from recordlink.config import GoogleSheetsSettings, get_settings
from recordlink.services.storage.interface import (
    ConnectionError,
    DatasetNotFoundError,
    RecordSourceInterface,
    StorageError,
)


SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets.readonly",
    "https://www.googleapis.com/auth/drive.readonly",
]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for connecting.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets
        self._lock = threading.Lock()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication.
        """
        if self._client is None:
            try:
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=SCOPES,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        with self._lock:
            if self._spreadsheet is None:
                client = self.connect()
                try:
                    self._spreadsheet = client.open_by_key(
                        self._settings.spreadsheet_id
                    )
                except gspread.SpreadsheetNotFound:
                    raise ConnectionError(
                        f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                    )
        return self._spreadsheet

    def sheet_title(self, dataset: str) -> str:
        return f"{self._settings.dataset_sheet_prefix}{dataset}"

    def get_dataset_sheet(self, dataset: str) -> gspread.Worksheet:
        """Get the worksheet holding a dataset."""
        spreadsheet = self.get_spreadsheet()
        try:
            return spreadsheet.worksheet(self.sheet_title(dataset))
        except gspread.WorksheetNotFound:
            raise DatasetNotFoundError(dataset)


class GoogleSheetsRecordSource(RecordSourceInterface):
    """
    Google Sheets implementation of the record source.

    Each row becomes a record keyed by the header row. Ids are returned as
    strings so they compare equal to the values typed into relation fields.
    """

    def __init__(
        self,
        client: Optional[GoogleSheetsClient] = None,
        id_column: str = "id",
    ):
        self._client = client or GoogleSheetsClient()
        self._id_column = id_column

    def _normalize_row(self, row: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Stringify the id column; rows without an id are skipped."""
        record_id = row.get(self._id_column)
        if record_id is None or str(record_id).strip() == "":
            return None
        record = dict(row)
        record[self._id_column] = str(record_id).strip()
        return record

    def _get_records_sync(self, dataset: str) -> list[dict[str, Any]]:
        """Blocking read of the dataset's worksheet (gspread is synchronous)."""
        try:
            sheet = self._client.get_dataset_sheet(dataset)
            rows = sheet.get_all_records()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read dataset {dataset}: {e}")

        records = []
        for row in rows:
            record = self._normalize_row(row)
            if record is not None:
                records.append(record)
        return records

    async def get_records(self, dataset: str) -> list[dict[str, Any]]:
        """
        Fetch all rows of the dataset's worksheet.

        The gspread calls, connect retries included, run in a worker thread.
        """
        return await asyncio.to_thread(self._get_records_sync, dataset)

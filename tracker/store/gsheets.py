"""
Google Sheets row store (gspread + service-account credentials).

Configuration (env vars, read by tracker.config):
    GOOGLE_SPREADSHEET_ID          — key of the spreadsheet holding every sheet
    GOOGLE_SERVICE_ACCOUNT_EMAIL   — service account client_email
    GOOGLE_PRIVATE_KEY             — PEM key; literal "\\n" sequences are unescaped

Every call goes to the API: rows are fetched wholesale per request and
nothing is cached apart from the authorised client handle.
"""

import logging

import gspread
from google.auth.exceptions import GoogleAuthError
from google.oauth2.service_account import Credentials
from gspread.exceptions import APIError, WorksheetNotFound
from gspread.utils import rowcol_to_a1

from tracker.core.exceptions import RowStoreError
from tracker.store.base import FIRST_DATA_ROW, RowStore

logger = logging.getLogger(__name__)

SCOPES = [
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/drive",
]
TOKEN_URI = "https://oauth2.googleapis.com/token"


class GoogleSheetsRowStore(RowStore):
    backend = "gsheets"

    def __init__(self, spreadsheet_id: str, service_account_email: str,
                 private_key: str, client: gspread.Client | None = None):
        super().__init__()
        if not spreadsheet_id:
            raise RowStoreError("GOOGLE_SPREADSHEET_ID is not configured")
        self.spreadsheet_id = spreadsheet_id
        self._service_account_email = service_account_email
        self._private_key = (private_key or "").replace("\\n", "\n")
        self._client = client
        self._spreadsheet = None

    # ── connection ──────────────────────────────────────────────────────

    def _get_client(self) -> gspread.Client:
        if self._client is None:
            if not self._service_account_email or not self._private_key:
                raise RowStoreError("Google service account credentials are not configured")
            creds = Credentials.from_service_account_info(
                {
                    "type": "service_account",
                    "client_email": self._service_account_email,
                    "private_key": self._private_key,
                    "token_uri": TOKEN_URI,
                },
                scopes=SCOPES,
            )
            self._client = gspread.authorize(creds)
        return self._client

    def _get_spreadsheet(self):
        if self._spreadsheet is None:
            self._spreadsheet = self._call(self._get_client().open_by_key, self.spreadsheet_id)
        return self._spreadsheet

    @staticmethod
    def _call(func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except APIError as exc:
            logger.error("Google Sheets API error in %s: %s", getattr(func, "__name__", func), exc)
            raise RowStoreError(f"Google Sheets API error: {exc}") from exc

    def _worksheet(self, sheet: str):
        try:
            return self._call(self._get_spreadsheet().worksheet, sheet)
        except WorksheetNotFound as exc:
            raise RowStoreError(f"Sheet '{sheet}' not found") from exc

    # ── primitives ──────────────────────────────────────────────────────

    def get_headers(self, sheet):
        return self._call(self._worksheet(sheet).row_values, 1)

    def get_rows(self, sheet):
        values = self._call(self._worksheet(sheet).get_all_values)
        return values[1:] if values else []

    def append_row(self, sheet, values):
        self._call(self._worksheet(sheet).append_row, values, value_input_option="RAW")

    def update_row(self, sheet, row_index, values):
        if row_index < FIRST_DATA_ROW:
            raise RowStoreError(f"Refusing to overwrite header row of '{sheet}'")
        end = rowcol_to_a1(row_index, max(len(values), 1))
        self._call(
            self._worksheet(sheet).update,
            range_name=f"A{row_index}:{end}",
            values=[values],
            value_input_option="RAW",
        )

    def delete_row(self, sheet, row_index):
        if row_index < FIRST_DATA_ROW:
            raise RowStoreError(f"Refusing to delete header row of '{sheet}'")
        self._call(self._worksheet(sheet).delete_rows, row_index)

    def clear_sheet(self, sheet):
        ws = self._worksheet(sheet)
        count = len(self._call(ws.get_all_values))
        if count >= FIRST_DATA_ROW:
            self._call(ws.delete_rows, FIRST_DATA_ROW, count)

    def ensure_sheets(self, layouts: dict[str, list[str]]) -> list[str]:
        """Create any missing worksheet and write its header row.

        Returns the titles that were created.
        """
        spreadsheet = self._get_spreadsheet()
        created = []
        for title, headers in layouts.items():
            try:
                ws = self._call(spreadsheet.worksheet, title)
                if not self._call(ws.row_values, 1):
                    self._call(ws.update, range_name="A1", values=[headers])
            except WorksheetNotFound:
                ws = self._call(spreadsheet.add_worksheet, title=title, rows=1000,
                                cols=max(len(headers), 26))
                self._call(ws.update, range_name="A1", values=[headers])
                created.append(title)
                logger.info("Created worksheet %s", title)
        return created

    def check_connection(self):
        try:
            spreadsheet = self._get_spreadsheet()
            return {
                "connected": True,
                "spreadsheetId": self.spreadsheet_id,
                "title": spreadsheet.title,
                "sheetCount": len(self._call(spreadsheet.worksheets)),
                "error": None,
            }
        except (RowStoreError, GoogleAuthError, ValueError) as exc:
            logger.warning("Row store connection check failed: %s", exc)
            return {
                "connected": False,
                "spreadsheetId": self.spreadsheet_id,
                "title": None,
                "sheetCount": 0,
                "error": str(exc),
            }

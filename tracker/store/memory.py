"""In-process row store used by the test suite and by local development
when no spreadsheet is configured."""

import copy
import threading

from tracker.core.exceptions import RowStoreError
from tracker.store.base import FIRST_DATA_ROW, RowStore
from tracker.store.schema import SHEET_HEADERS


class MemoryRowStore(RowStore):
    backend = "memory"

    def __init__(self, headers: dict[str, list[str]] | None = None):
        super().__init__()
        self._headers = {
            name: list(cols) for name, cols in (headers or SHEET_HEADERS).items()
        }
        self._rows: dict[str, list[list[str]]] = {name: [] for name in self._headers}
        self._data_lock = threading.Lock()

    def _require(self, sheet: str) -> None:
        if sheet not in self._headers:
            raise RowStoreError(f"Sheet '{sheet}' not found")

    def _position(self, sheet: str, row_index: int) -> int:
        pos = row_index - FIRST_DATA_ROW
        if pos < 0 or pos >= len(self._rows[sheet]):
            raise RowStoreError(f"Row {row_index} out of range in sheet '{sheet}'")
        return pos

    def get_headers(self, sheet):
        self._require(sheet)
        return list(self._headers[sheet])

    def get_rows(self, sheet):
        self._require(sheet)
        with self._data_lock:
            return copy.deepcopy(self._rows[sheet])

    def append_row(self, sheet, values):
        self._require(sheet)
        with self._data_lock:
            self._rows[sheet].append(["" if v is None else str(v) for v in values])

    def update_row(self, sheet, row_index, values):
        self._require(sheet)
        with self._data_lock:
            pos = self._position(sheet, row_index)
            self._rows[sheet][pos] = ["" if v is None else str(v) for v in values]

    def delete_row(self, sheet, row_index):
        self._require(sheet)
        with self._data_lock:
            pos = self._position(sheet, row_index)
            del self._rows[sheet][pos]

    def clear_sheet(self, sheet):
        self._require(sheet)
        with self._data_lock:
            self._rows[sheet] = []

    def reset(self):
        """Drop every data row in every sheet."""
        with self._data_lock:
            for name in self._rows:
                self._rows[name] = []

    def check_connection(self):
        return {
            "connected": True,
            "spreadsheetId": None,
            "title": "in-memory",
            "sheetCount": len(self._headers),
            "error": None,
        }

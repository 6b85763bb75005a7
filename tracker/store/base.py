"""
Row store contract shared by the Google Sheets and in-memory backends.

A backend implements the raw primitives (headers, rows, append, update,
delete); everything object-shaped is built here on top of them:

    get_all_as_objects(sheet)               -> [dict, ...]
    find_row_by_column(sheet, col, value)   -> RowMatch | None
    append_object / update_object           -> write a dict through the headers
    allocate_and_append(sheet, prefix, fn)  -> sequential id + append, atomically

``row_index`` is always the 1-based sheet row (header is row 1, so the
first record lives at row 2).
"""

import logging
import re
import threading
from contextlib import contextmanager
from typing import Callable, NamedTuple

from tracker.core.exceptions import RowStoreError

logger = logging.getLogger(__name__)

FIRST_DATA_ROW = 2


class RowMatch(NamedTuple):
    row_index: int
    data: dict


class RowStore:
    """Abstract row store.  Subclasses override the raw primitives."""

    backend = "base"

    def __init__(self):
        self._locks: dict[str, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    # ── raw primitives ──────────────────────────────────────────────────

    def get_headers(self, sheet: str) -> list[str]:
        raise NotImplementedError

    def get_rows(self, sheet: str) -> list[list[str]]:
        """All data rows (header excluded), each a list of cell strings."""
        raise NotImplementedError

    def append_row(self, sheet: str, values: list[str]) -> None:
        raise NotImplementedError

    def update_row(self, sheet: str, row_index: int, values: list[str]) -> None:
        raise NotImplementedError

    def delete_row(self, sheet: str, row_index: int) -> None:
        raise NotImplementedError

    def clear_sheet(self, sheet: str) -> None:
        """Remove every data row, keeping the header."""
        raise NotImplementedError

    def check_connection(self) -> dict:
        raise NotImplementedError

    # ── locking ─────────────────────────────────────────────────────────

    @contextmanager
    def lock(self, sheet: str):
        """Serialise read-modify-write sequences on one sheet.

        Re-entrant, so a service holding the lock may call helpers that
        take it again.
        """
        with self._locks_guard:
            sheet_lock = self._locks.setdefault(sheet, threading.RLock())
        with sheet_lock:
            yield

    # ── object mapping ──────────────────────────────────────────────────

    @staticmethod
    def object_to_row(headers: list[str], obj: dict) -> list[str]:
        """Order ``obj`` values by ``headers``; booleans become TRUE/FALSE."""
        row = []
        for header in headers:
            value = obj.get(header)
            if value is None:
                row.append("")
            elif isinstance(value, bool):
                row.append("TRUE" if value else "FALSE")
            else:
                row.append(str(value))
        return row

    @staticmethod
    def row_to_object(headers: list[str], row: list[str]) -> dict:
        return {
            header: (row[i] if i < len(row) and row[i] is not None else "")
            for i, header in enumerate(headers)
            if header
        }

    def get_all_as_objects(self, sheet: str) -> list[dict]:
        headers = self.get_headers(sheet)
        return [self.row_to_object(headers, row) for row in self.get_rows(sheet)]

    def get_all_with_index(self, sheet: str) -> list[RowMatch]:
        headers = self.get_headers(sheet)
        return [
            RowMatch(FIRST_DATA_ROW + i, self.row_to_object(headers, row))
            for i, row in enumerate(self.get_rows(sheet))
        ]

    def find_row_by_column(self, sheet: str, column: str, value) -> RowMatch | None:
        """Return the first row whose ``column`` equals ``value``.

        Raises RowStoreError when the sheet has no such column.
        """
        headers = self.get_headers(sheet)
        if column not in headers:
            raise RowStoreError(f"Column '{column}' not found in sheet '{sheet}'")
        col_index = headers.index(column)
        target = str(value)
        for i, row in enumerate(self.get_rows(sheet)):
            if col_index < len(row) and row[col_index] == target:
                return RowMatch(FIRST_DATA_ROW + i, self.row_to_object(headers, row))
        return None

    def find_rows_by_column(self, sheet: str, column: str, value) -> list[RowMatch]:
        target = str(value)
        return [m for m in self.get_all_with_index(sheet) if m.data.get(column) == target]

    def append_object(self, sheet: str, obj: dict) -> dict:
        self.append_row(sheet, self.object_to_row(self.get_headers(sheet), obj))
        return obj

    def update_object(self, sheet: str, row_index: int, obj: dict) -> dict:
        self.update_row(sheet, row_index, self.object_to_row(self.get_headers(sheet), obj))
        return obj

    # ── sequential ids ──────────────────────────────────────────────────

    def next_sequence_id(self, sheet: str, prefix: str, width: int = 3,
                         column: str = "id") -> str:
        """``prefix`` + (max numeric suffix among ids with that prefix) + 1.

        Callers that go on to insert should hold ``lock(sheet)`` or use
        ``allocate_and_append``.
        """
        pattern = re.compile(rf"^{re.escape(prefix)}(\d+)$")
        max_num = 0
        for obj in self.get_all_as_objects(sheet):
            match = pattern.match(obj.get(column, ""))
            if match:
                max_num = max(max_num, int(match.group(1)))
        return f"{prefix}{max_num + 1:0{width}d}"

    def allocate_and_append(self, sheet: str, prefix: str,
                            build: Callable[[str], dict], width: int = 3) -> dict:
        """Allocate the next id and append the record built from it.

        The scan and the append happen under the sheet lock, so two
        concurrent creators never receive the same id.
        """
        with self.lock(sheet):
            new_id = self.next_sequence_id(sheet, prefix, width)
            record = build(new_id)
            self.append_object(sheet, record)
        logger.debug("Appended %s to %s", new_id, sheet)
        return record

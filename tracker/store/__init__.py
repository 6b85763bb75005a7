"""
Row store: the spreadsheet-backed persistence layer.

Usage:
    from tracker.store import SHEET_NAMES, get_store

    store = get_store()
    projects = store.get_all_as_objects(SHEET_NAMES.PROJECTS)
"""

import logging

from flask import current_app

from tracker.store.base import RowMatch, RowStore
from tracker.store.memory import MemoryRowStore
from tracker.store.schema import SHEET_HEADERS, SHEET_NAMES

logger = logging.getLogger(__name__)

__all__ = [
    "RowMatch", "RowStore", "MemoryRowStore",
    "SHEET_HEADERS", "SHEET_NAMES", "get_store", "init_store",
]


def _build_store(app) -> RowStore:
    backend = app.config.get("ROW_STORE_BACKEND", "memory")
    if backend == "gsheets":
        from tracker.store.gsheets import GoogleSheetsRowStore

        return GoogleSheetsRowStore(
            spreadsheet_id=app.config.get("GOOGLE_SPREADSHEET_ID"),
            service_account_email=app.config.get("GOOGLE_SERVICE_ACCOUNT_EMAIL"),
            private_key=app.config.get("GOOGLE_PRIVATE_KEY"),
        )
    if backend == "memory":
        return MemoryRowStore()
    raise RuntimeError(f"Unknown ROW_STORE_BACKEND '{backend}'")


def init_store(app, store: RowStore | None = None) -> RowStore:
    """Attach a row store to ``app.extensions['row_store']``."""
    store = store or _build_store(app)
    app.extensions["row_store"] = store
    logger.info("Row store initialised (backend=%s)", store.backend)
    return store


def get_store() -> RowStore:
    """Return the row store bound to the current app."""
    return current_app.extensions["row_store"]

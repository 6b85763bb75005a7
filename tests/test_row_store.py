"""
Tests for the row store contract on the in-memory backend.

Covers:
  - header-ordered object mapping and TRUE/FALSE booleans
  - find_row_by_column row indices and the missing-column error
  - sequential id allocation, including under concurrent creators
  - delete/update shift and bounds
"""

import threading

import pytest

from tracker.core.exceptions import RowStoreError
from tracker.store import SHEET_NAMES, MemoryRowStore, RowStore


def test_object_to_row_orders_by_header_and_normalises_booleans():
    row = RowStore.object_to_row(["id", "flag", "missing", "n"], {"id": "A", "flag": True, "n": 3})
    assert row == ["A", "TRUE", "", "3"]
    assert RowStore.object_to_row(["flag"], {"flag": False}) == ["FALSE"]


def test_find_row_by_column_returns_sheet_row_index():
    store = MemoryRowStore()
    store.append_object(SHEET_NAMES.FAVORITES, {"id": "FAV-001", "userId": "u1", "projectId": "P1"})
    store.append_object(SHEET_NAMES.FAVORITES, {"id": "FAV-002", "userId": "u2", "projectId": "P2"})

    match = store.find_row_by_column(SHEET_NAMES.FAVORITES, "id", "FAV-002")

    assert match.row_index == 3  # header is row 1
    assert match.data["userId"] == "u2"
    assert store.find_row_by_column(SHEET_NAMES.FAVORITES, "id", "nope") is None


def test_find_row_by_unknown_column_raises():
    store = MemoryRowStore()
    with pytest.raises(RowStoreError):
        store.find_row_by_column(SHEET_NAMES.FAVORITES, "colour", "red")


def test_unknown_sheet_raises():
    with pytest.raises(RowStoreError):
        MemoryRowStore().get_rows("Nope")


def test_next_sequence_id_uses_max_suffix_for_prefix():
    store = MemoryRowStore()
    for rid in ("CMT-001", "CMT-007", "OTHER-999"):
        store.append_object(SHEET_NAMES.COMMENTS, {"id": rid})
    assert store.next_sequence_id(SHEET_NAMES.COMMENTS, "CMT-") == "CMT-008"
    assert store.next_sequence_id(SHEET_NAMES.COMMENTS, "NEW-") == "NEW-001"


def test_allocate_and_append_is_unique_under_concurrency():
    store = MemoryRowStore()
    ids = []
    ids_lock = threading.Lock()

    def worker():
        record = store.allocate_and_append(
            SHEET_NAMES.COMMENTS, "CMT-", lambda new_id: {"id": new_id, "content": "x"}
        )
        with ids_lock:
            ids.append(record["id"])

    threads = [threading.Thread(target=worker) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(ids) == 20
    assert len(set(ids)) == 20
    assert sorted(ids)[-1] == "CMT-020"


def test_update_and_delete_rows():
    store = MemoryRowStore()
    store.append_object(SHEET_NAMES.SETTINGS, {"key": "a", "value": "1"})
    store.append_object(SHEET_NAMES.SETTINGS, {"key": "b", "value": "2"})

    store.update_object(SHEET_NAMES.SETTINGS, 3, {"key": "b", "value": "22"})
    store.delete_row(SHEET_NAMES.SETTINGS, 2)

    rows = store.get_all_as_objects(SHEET_NAMES.SETTINGS)
    assert [r["value"] for r in rows] == ["22"]
    with pytest.raises(RowStoreError):
        store.delete_row(SHEET_NAMES.SETTINGS, 5)


def test_reset_clears_every_sheet():
    store = MemoryRowStore()
    store.append_object(SHEET_NAMES.USERS, {"id": "u"})
    store.reset()
    assert store.get_rows(SHEET_NAMES.USERS) == []

"""Saved Search Service — named search filter sets, private to their owner."""

import json
import logging

from tracker.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import now_iso, parse_json

logger = logging.getLogger(__name__)


def _to_response(row: dict) -> dict:
    return {
        "id": row["id"],
        "userId": row.get("userId", ""),
        "name": row.get("name", ""),
        "filters": parse_json(row.get("filtersJson"), {}),
        "createdAt": row.get("createdAt", ""),
    }


def list_saved_searches(user_id: str) -> list[dict]:
    rows = [
        r for r in get_store().get_all_as_objects(SHEET_NAMES.SAVED_SEARCHES)
        if r.get("userId") == user_id
    ]
    rows.sort(key=lambda r: r.get("createdAt", ""), reverse=True)
    return [_to_response(r) for r in rows]


def create_saved_search(user_id: str, data: dict) -> dict:
    if not data.get("name") or not data.get("filters"):
        raise ValidationError("name and filters are required")
    if not isinstance(data["filters"], dict):
        raise ValidationError("filters must be an object")

    row = get_store().allocate_and_append(
        SHEET_NAMES.SAVED_SEARCHES,
        "SS-",
        lambda new_id: {
            "id": new_id,
            "userId": user_id,
            "name": data["name"],
            "filtersJson": json.dumps(data["filters"], ensure_ascii=False),
            "createdAt": now_iso(),
        },
    )
    return _to_response(row)


def delete_saved_search(search_id: str, user_id: str) -> None:
    store = get_store()
    with store.lock(SHEET_NAMES.SAVED_SEARCHES):
        match = store.find_row_by_column(SHEET_NAMES.SAVED_SEARCHES, "id", search_id)
        if not match:
            raise NotFoundError("SavedSearch", search_id)
        if match.data.get("userId") != user_id:
            raise PermissionDeniedError("You can only delete your own saved searches")
        store.delete_row(SHEET_NAMES.SAVED_SEARCHES, match.row_index)
    logger.info("Saved search %s deleted by %s", search_id, user_id)

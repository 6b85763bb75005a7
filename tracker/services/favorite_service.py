"""Favorite Service — per-user starred projects (unique per user + project)."""

import logging

from tracker.core.exceptions import ConflictError, NotFoundError, ValidationError
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import now_iso

logger = logging.getLogger(__name__)


def list_favorites(user_id: str) -> list[dict]:
    favs = [
        f for f in get_store().get_all_as_objects(SHEET_NAMES.FAVORITES)
        if f.get("userId") == user_id
    ]
    favs.sort(key=lambda f: f.get("createdAt", ""), reverse=True)
    return favs


def favorite_project_ids(user_id: str) -> set[str]:
    return {f["projectId"] for f in list_favorites(user_id)}


def add_favorite(user_id: str, project_id: str) -> dict:
    if not project_id:
        raise ValidationError("projectId is required")
    store = get_store()
    if not store.find_row_by_column(SHEET_NAMES.PROJECTS, "id", project_id):
        raise ValidationError(f"Project '{project_id}' does not exist")

    with store.lock(SHEET_NAMES.FAVORITES):
        duplicate = any(
            f.get("userId") == user_id and f.get("projectId") == project_id
            for f in store.get_all_as_objects(SHEET_NAMES.FAVORITES)
        )
        if duplicate:
            raise ConflictError("Favorite", "projectId", project_id)
        favorite = store.allocate_and_append(
            SHEET_NAMES.FAVORITES,
            "FAV-",
            lambda new_id: {
                "id": new_id,
                "userId": user_id,
                "projectId": project_id,
                "createdAt": now_iso(),
            },
        )
    logger.info("User %s favorited %s", user_id, project_id)
    return favorite


def remove_favorite(user_id: str, project_id: str) -> None:
    if not project_id:
        raise ValidationError("projectId is required")
    store = get_store()
    with store.lock(SHEET_NAMES.FAVORITES):
        match = next(
            (
                m for m in store.get_all_with_index(SHEET_NAMES.FAVORITES)
                if m.data.get("userId") == user_id and m.data.get("projectId") == project_id
            ),
            None,
        )
        if not match:
            raise NotFoundError("Favorite", project_id)
        store.delete_row(SHEET_NAMES.FAVORITES, match.row_index)

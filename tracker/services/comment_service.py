"""
Comment Service — executive comments on projects, answered by engineers.

Threads are one level deep: a top-level comment (no parentId) and its
replies.  Executives/admins open threads; engineers/admins reply.
"""

import logging

from tracker.auth import is_admin
from tracker.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from tracker.services.user_service import user_name_map
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import now_iso

logger = logging.getLogger(__name__)

REPLY_ROLES = frozenset({"engineer", "admin", "sysadmin"})
THREAD_ROLES = frozenset({"executive", "admin", "sysadmin"})


def _public(comment: dict) -> dict:
    return {
        "id": comment["id"],
        "projectId": comment.get("projectId", ""),
        "authorId": comment.get("authorId", ""),
        "parentId": comment.get("parentId") or None,
        "content": comment.get("content", ""),
        "createdAt": comment.get("createdAt", ""),
    }


def _replies_to(comments, parent_id):
    replies = [c for c in comments if c.get("parentId") == parent_id]
    replies.sort(key=lambda c: c.get("createdAt", ""))
    return [_public(r) for r in replies]


def list_threads(project_id: str) -> list[dict]:
    if not project_id:
        raise ValidationError("projectId is required")
    comments = [
        c for c in get_store().get_all_as_objects(SHEET_NAMES.COMMENTS)
        if c.get("projectId") == project_id
    ]
    names = user_name_map()
    threads = [
        {
            "comment": _public(parent),
            "replies": _replies_to(comments, parent["id"]),
            "authorName": names.get(parent.get("authorId"), parent.get("authorId", "")),
        }
        for parent in comments
        if not parent.get("parentId")
    ]
    threads.sort(key=lambda t: t["comment"]["createdAt"], reverse=True)
    return threads


def count_top_level(project_id: str, comments=None) -> int:
    if comments is None:
        comments = get_store().get_all_as_objects(SHEET_NAMES.COMMENTS)
    return sum(1 for c in comments if c.get("projectId") == project_id and not c.get("parentId"))


def get_comment(comment_id: str) -> dict:
    comments = get_store().get_all_as_objects(SHEET_NAMES.COMMENTS)
    comment = next((c for c in comments if c.get("id") == comment_id), None)
    if not comment:
        raise NotFoundError("Comment", comment_id)
    names = user_name_map()
    result = _public(comment)
    result["replies"] = _replies_to(comments, comment_id)
    result["authorName"] = names.get(comment.get("authorId"), comment.get("authorId", ""))
    return result


def create_comment(data: dict, user: dict) -> dict:
    if not data.get("projectId") or not data.get("content"):
        raise ValidationError("projectId and content are required")

    store = get_store()
    parent_id = data.get("parentId") or ""
    if parent_id:
        if user["role"] not in REPLY_ROLES:
            raise PermissionDeniedError("You are not allowed to reply to comments")
        if not store.find_row_by_column(SHEET_NAMES.COMMENTS, "id", parent_id):
            raise ValidationError(f"Parent comment '{parent_id}' does not exist")
    elif user["role"] not in THREAD_ROLES:
        raise PermissionDeniedError("You are not allowed to write comments")

    comment = store.allocate_and_append(
        SHEET_NAMES.COMMENTS,
        "CMT-",
        lambda new_id: {
            "id": new_id,
            "projectId": data["projectId"],
            "authorId": user["id"],
            "parentId": parent_id,
            "content": data["content"],
            "createdAt": now_iso(),
        },
    )
    logger.info("Comment %s on %s by %s", comment["id"], comment["projectId"], user["id"])
    return _public(comment)


def delete_comment(comment_id: str, user: dict) -> int:
    """Delete a comment and its replies.  Returns the number of rows removed."""
    store = get_store()
    with store.lock(SHEET_NAMES.COMMENTS):
        rows = store.get_all_with_index(SHEET_NAMES.COMMENTS)
        target = next((m for m in rows if m.data.get("id") == comment_id), None)
        if not target:
            raise NotFoundError("Comment", comment_id)
        if target.data.get("authorId") != user["id"] and not is_admin(user["role"]):
            raise PermissionDeniedError("Only the author or admins may delete this comment")

        doomed = [m.row_index for m in rows if m.data.get("parentId") == comment_id]
        doomed.append(target.row_index)
        # bottom-up so earlier deletions don't shift later row indices
        for row_index in sorted(doomed, reverse=True):
            store.delete_row(SHEET_NAMES.COMMENTS, row_index)
    logger.info("Comment %s deleted by %s (%d rows)", comment_id, user["id"], len(doomed))
    return len(doomed)

"""
Meeting Minutes Service.

Attendees are stored as a JSON array in ``attendeesJson`` and exposed as
``attendees`` (list of ``{department, position, name}``).
"""

import json
import logging

from tracker.auth import is_admin
from tracker.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from tracker.services.user_service import user_name_map
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import now_iso, parse_json, require_fields

logger = logging.getLogger(__name__)

LIST_FIELDS = (
    "id", "projectId", "title", "hostDepartment", "location",
    "meetingDate", "createdById", "createdAt",
)
REPLACE_IF_NONEMPTY = ("title", "hostDepartment", "location", "meetingDate")
REPLACE_IF_PRESENT = ("agenda", "discussion", "decisions", "nextSteps")


def _attendees_json(attendees) -> str:
    if not isinstance(attendees, list):
        raise ValidationError("attendees must be a list")
    return json.dumps(attendees, ensure_ascii=False)


def _detail(row: dict, names: dict) -> dict:
    out = {k: v for k, v in row.items() if k != "attendeesJson"}
    attendees = parse_json(row.get("attendeesJson"), [])
    out["attendees"] = attendees if isinstance(attendees, list) else []
    out["createdByName"] = names.get(row.get("createdById"), row.get("createdById", ""))
    return out


def list_minutes(project_id: str) -> list[dict]:
    if not project_id:
        raise ValidationError("projectId is required")
    names = user_name_map()
    items = [
        {
            **{field: m.get(field, "") for field in LIST_FIELDS},
            "createdByName": names.get(m.get("createdById"), m.get("createdById", "")),
        }
        for m in get_store().get_all_as_objects(SHEET_NAMES.MEETING_MINUTES)
        if m.get("projectId") == project_id
    ]
    items.sort(key=lambda m: m["meetingDate"], reverse=True)
    return items


def get_minutes(minutes_id: str) -> dict:
    match = get_store().find_row_by_column(SHEET_NAMES.MEETING_MINUTES, "id", minutes_id)
    if not match:
        raise NotFoundError("MeetingMinutes", minutes_id)
    return _detail(match.data, user_name_map())


def create_minutes(data: dict, user: dict) -> dict:
    missing = require_fields(data, "projectId", "title", "meetingDate")
    if missing:
        raise ValidationError(
            "Missing required fields (projectId, title, meetingDate)",
            details={"missing": missing},
        )
    attendees_json = _attendees_json(data.get("attendees") or [])
    now = now_iso()
    row = get_store().allocate_and_append(
        SHEET_NAMES.MEETING_MINUTES,
        "MTG-",
        lambda new_id: {
            "id": new_id,
            "projectId": data["projectId"],
            "title": data["title"],
            "hostDepartment": data.get("hostDepartment") or "",
            "location": data.get("location") or "",
            "meetingDate": data["meetingDate"],
            "attendeesJson": attendees_json,
            "agenda": data.get("agenda") or "",
            "discussion": data.get("discussion") or "",
            "decisions": data.get("decisions") or "",
            "nextSteps": data.get("nextSteps") or "",
            "createdById": user["id"],
            "createdAt": now,
            "updatedAt": now,
        },
    )
    logger.info("Meeting minutes %s created by %s", row["id"], user["id"])
    return _detail(row, user_name_map())


def update_minutes(minutes_id: str, data: dict) -> dict:
    store = get_store()
    with store.lock(SHEET_NAMES.MEETING_MINUTES):
        match = store.find_row_by_column(SHEET_NAMES.MEETING_MINUTES, "id", minutes_id)
        if not match:
            raise NotFoundError("MeetingMinutes", minutes_id)
        row = dict(match.data)
        for field in REPLACE_IF_NONEMPTY:
            if data.get(field):
                row[field] = data[field]
        for field in REPLACE_IF_PRESENT:
            if data.get(field) is not None:
                row[field] = data[field]
        if data.get("attendees") is not None:
            row["attendeesJson"] = _attendees_json(data["attendees"])
        row["updatedAt"] = now_iso()
        store.update_object(SHEET_NAMES.MEETING_MINUTES, match.row_index, row)
    return _detail(row, user_name_map())


def can_delete(minutes: dict, user: dict) -> bool:
    if minutes.get("createdById") == user["id"] or is_admin(user["role"]):
        return True
    if user["role"] == "engineer":
        project = get_store().find_row_by_column(SHEET_NAMES.PROJECTS, "id", minutes.get("projectId", ""))
        return bool(project and project.data.get("teamLeaderId") == user["id"])
    return False


def delete_minutes(minutes_id: str, user: dict) -> None:
    store = get_store()
    with store.lock(SHEET_NAMES.MEETING_MINUTES):
        match = store.find_row_by_column(SHEET_NAMES.MEETING_MINUTES, "id", minutes_id)
        if not match:
            raise NotFoundError("MeetingMinutes", minutes_id)
        if not can_delete(match.data, user):
            raise PermissionDeniedError("You are not allowed to delete these meeting minutes")
        store.delete_row(SHEET_NAMES.MEETING_MINUTES, match.row_index)
    logger.info("Meeting minutes %s deleted by %s", minutes_id, user["id"])

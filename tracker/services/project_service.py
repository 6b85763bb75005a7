"""
Project Service — business logic for the Projects sheet and its history.

Projects are the hub every other resource hangs off: schedules, worklogs,
favorites, comments and meeting minutes all reference ``projectId``.

Audit trail: changes to status, currentStage and teamLeaderId append a
ProjectHistory row (``PH-NNN``), as does deletion.
"""

import json
import logging

from tracker.auth import is_admin
from tracker.constants import (
    DEFAULT_CATEGORY,
    DEFAULT_DIVISION,
    DEFAULT_STAGE,
    STATUS_ACTIVE,
)
from tracker.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import (
    now_iso,
    parse_json,
    require_fields,
    split_csv,
    today_kst,
)

logger = logging.getLogger(__name__)

TRACKED_FIELDS = ("status", "currentStage", "teamLeaderId")

UPDATABLE_FIELDS = (
    "status", "customer", "division", "category", "model", "item", "partNo",
    "teamLeaderId", "teamMembers", "currentStage", "stages", "progress",
    "issues", "scheduleStart", "scheduleEnd", "note",
)


# ── Filtering (shared with the export service) ──────────────────────────


def filter_projects(projects, *, search="", status=None, division=None,
                    stage=None, team_leader_id=None, category=None,
                    project_ids=None):
    """Apply the project-list query filters.

    ``search`` is a case-insensitive substring match on customer, item or
    id; the rest are exact matches.  ``project_ids`` restricts to a set
    (used for favorites).
    """
    needle = (search or "").lower()
    result = []
    for p in projects:
        if needle and not any(
            needle in (p.get(field) or "").lower() for field in ("customer", "item", "id")
        ):
            continue
        if status and p.get("status") != status:
            continue
        if division and p.get("division") != division:
            continue
        if category and p.get("category") != category:
            continue
        if stage and p.get("currentStage") != stage:
            continue
        if team_leader_id and p.get("teamLeaderId") != team_leader_id:
            continue
        if project_ids is not None and p.get("id") not in project_ids:
            continue
        result.append(p)
    return result


def list_projects(**filters) -> list[dict]:
    projects = filter_projects(get_store().get_all_as_objects(SHEET_NAMES.PROJECTS), **filters)
    projects.sort(key=lambda p: p.get("createdAt", ""), reverse=True)
    return projects


def project_map() -> dict[str, dict]:
    return {p["id"]: p for p in get_store().get_all_as_objects(SHEET_NAMES.PROJECTS)}


# ── Permissions ─────────────────────────────────────────────────────────


def is_project_member(project: dict, user_id: str) -> bool:
    return project.get("teamLeaderId") == user_id or user_id in split_csv(project.get("teamMembers"))


def can_edit_project(project: dict, user: dict) -> bool:
    return is_admin(user["role"]) or is_project_member(project, user["id"])


# ── CRUD ────────────────────────────────────────────────────────────────


def get_project(project_id: str) -> dict:
    match = get_store().find_row_by_column(SHEET_NAMES.PROJECTS, "id", project_id)
    if not match:
        raise NotFoundError("Project", project_id)
    return match.data


def _join_list(value) -> str:
    return ",".join(split_csv(value))


def create_project(data: dict, user: dict) -> dict:
    """Validate and append a new project (``PRJ-YYYY-NNN``)."""
    missing = require_fields(data, "customer", "item", "teamLeaderId", "scheduleStart", "scheduleEnd")
    if missing:
        raise ValidationError(
            "Missing required fields (customer, item, teamLeaderId, scheduleStart, scheduleEnd)",
            details={"missing": missing},
        )
    stages = split_csv(data.get("stages"))
    if not stages:
        raise ValidationError("At least one stage is required")

    store = get_store()
    if not store.find_row_by_column(SHEET_NAMES.USERS, "id", data["teamLeaderId"]):
        raise ValidationError(f"Team leader '{data['teamLeaderId']}' does not exist")

    now = now_iso()
    current_stage = stages[0] or DEFAULT_STAGE

    def build(new_id):
        return {
            "id": new_id,
            "status": STATUS_ACTIVE,
            "customer": data["customer"],
            "division": data.get("division") or DEFAULT_DIVISION,
            "category": data.get("category") or DEFAULT_CATEGORY,
            "model": data.get("model") or "",
            "item": data["item"],
            "partNo": data.get("partNo") or "",
            "teamLeaderId": data["teamLeaderId"],
            "teamMembers": _join_list(data.get("teamMembers")),
            "currentStage": current_stage,
            "stages": ",".join(stages),
            "stageHistory": json.dumps({current_stage: today_kst().isoformat()}, ensure_ascii=False),
            "progress": "",
            "issues": "",
            "scheduleStart": data["scheduleStart"],
            "scheduleEnd": data["scheduleEnd"],
            "note": data.get("note") or "",
            "createdAt": now,
            "updatedAt": now,
        }

    prefix = f"PRJ-{today_kst().year}-"
    project = store.allocate_and_append(SHEET_NAMES.PROJECTS, prefix, build)
    logger.info("Project %s created by %s", project["id"], user["id"])
    return project


def update_project(project_id: str, data: dict, user: dict) -> dict:
    store = get_store()
    with store.lock(SHEET_NAMES.PROJECTS):
        match = store.find_row_by_column(SHEET_NAMES.PROJECTS, "id", project_id)
        if not match:
            raise NotFoundError("Project", project_id)
        existing = match.data
        if not can_edit_project(existing, user):
            raise PermissionDeniedError("Only the team leader, team members or admins may edit this project")

        updated = dict(existing)
        for field in UPDATABLE_FIELDS:
            if field not in data or data[field] is None:
                continue
            value = data[field]
            if field in ("stages", "teamMembers"):
                value = _join_list(value)
            updated[field] = value

        if updated.get("currentStage") != existing.get("currentStage"):
            history = parse_json(existing.get("stageHistory"), {})
            if not isinstance(history, dict):
                history = {}
            history[updated["currentStage"]] = today_kst().isoformat()
            updated["stageHistory"] = json.dumps(history, ensure_ascii=False)

        updated["updatedAt"] = now_iso()
        store.update_object(SHEET_NAMES.PROJECTS, match.row_index, updated)

    for field in TRACKED_FIELDS:
        old, new = existing.get(field, ""), updated.get(field, "")
        if old != new:
            record_history(project_id, field, old, new, user["id"])
    return updated


def delete_project(project_id: str, user: dict) -> None:
    store = get_store()
    with store.lock(SHEET_NAMES.PROJECTS):
        match = store.find_row_by_column(SHEET_NAMES.PROJECTS, "id", project_id)
        if not match:
            raise NotFoundError("Project", project_id)
        record_history(project_id, "deleted", "", "true", user["id"])
        store.delete_row(SHEET_NAMES.PROJECTS, match.row_index)
    logger.info("Project %s deleted by %s", project_id, user["id"])


# ── History ─────────────────────────────────────────────────────────────


def record_history(project_id, field, old_value, new_value, changed_by) -> dict:
    return get_store().allocate_and_append(
        SHEET_NAMES.PROJECT_HISTORY,
        "PH-",
        lambda new_id: {
            "id": new_id,
            "projectId": project_id,
            "changedField": field,
            "oldValue": old_value or "",
            "newValue": new_value or "",
            "changedById": changed_by,
            "changedAt": now_iso(),
        },
    )


def list_history(project_id: str) -> list[dict]:
    rows = [
        h for h in get_store().get_all_as_objects(SHEET_NAMES.PROJECT_HISTORY)
        if h.get("projectId") == project_id
    ]
    rows.sort(key=lambda h: h.get("changedAt", ""), reverse=True)
    return rows

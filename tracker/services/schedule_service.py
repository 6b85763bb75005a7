"""
Schedule Service — detailed task rows (ProjectSchedules) and the gantt view.

Each schedule item belongs to a project and carries planned and actual
date ranges.  ``order`` is per project: a new item goes after the last one.
"""

import logging

from tracker.auth import is_admin
from tracker.constants import SCHEDULE_PLANNED
from tracker.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from tracker.services import metrics
from tracker.services.favorite_service import favorite_project_ids
from tracker.services.project_service import filter_projects, get_project
from tracker.services.user_service import user_name_map
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import require_fields, split_csv, to_int

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    "stage", "taskName", "category", "responsibility", "plannedStart",
    "plannedEnd", "status", "note", "order",
)
ACTUAL_FIELDS = ("actualStart", "actualEnd")


def _sort_key(schedule):
    return to_int(schedule.get("order"), 0)


def list_schedules(project_id: str) -> list[dict]:
    if not project_id:
        raise ValidationError("projectId is required")
    items = [
        s for s in get_store().get_all_as_objects(SHEET_NAMES.PROJECT_SCHEDULES)
        if s.get("projectId") == project_id
    ]
    items.sort(key=_sort_key)
    return items


def get_schedule(schedule_id: str) -> dict:
    match = get_store().find_row_by_column(SHEET_NAMES.PROJECT_SCHEDULES, "id", schedule_id)
    if not match:
        raise NotFoundError("Schedule", schedule_id)
    return match.data


def create_schedule(data: dict, user: dict) -> dict:
    missing = require_fields(data, "projectId", "taskName", "plannedStart", "plannedEnd")
    if missing:
        raise ValidationError(
            "Missing required fields (projectId, taskName, plannedStart, plannedEnd)",
            details={"missing": missing},
        )
    project = get_project(data["projectId"])
    store = get_store()

    with store.lock(SHEET_NAMES.PROJECT_SCHEDULES):
        siblings = [
            s for s in store.get_all_as_objects(SHEET_NAMES.PROJECT_SCHEDULES)
            if s.get("projectId") == project["id"]
        ]
        next_order = max((_sort_key(s) for s in siblings), default=0) + 1

        schedule = store.allocate_and_append(
            SHEET_NAMES.PROJECT_SCHEDULES,
            "PS-",
            lambda new_id: {
                "id": new_id,
                "projectId": project["id"],
                "stage": data.get("stage") or project.get("currentStage", ""),
                "taskName": data["taskName"],
                "category": data.get("category") or "",
                "responsibility": data.get("responsibility") or "",
                "plannedStart": data["plannedStart"],
                "plannedEnd": data["plannedEnd"],
                "actualStart": "",
                "actualEnd": "",
                "status": SCHEDULE_PLANNED,
                "note": data.get("note") or "",
                "order": next_order,
            },
        )
    logger.info("Schedule %s added to %s by %s", schedule["id"], project["id"], user["id"])
    return schedule


def update_schedule(schedule_id: str, data: dict, user: dict) -> dict:
    touches_actual = any(field in data for field in ACTUAL_FIELDS)
    if touches_actual and not is_admin(user["role"]):
        raise PermissionDeniedError("Only admins may change actual dates")

    store = get_store()
    with store.lock(SHEET_NAMES.PROJECT_SCHEDULES):
        match = store.find_row_by_column(SHEET_NAMES.PROJECT_SCHEDULES, "id", schedule_id)
        if not match:
            raise NotFoundError("Schedule", schedule_id)
        schedule = dict(match.data)
        for field in UPDATABLE_FIELDS + ACTUAL_FIELDS:
            if field in data and data[field] is not None:
                schedule[field] = data[field]
        store.update_object(SHEET_NAMES.PROJECT_SCHEDULES, match.row_index, schedule)
    return schedule


def delete_schedule(schedule_id: str, user: dict) -> None:
    store = get_store()
    with store.lock(SHEET_NAMES.PROJECT_SCHEDULES):
        match = store.find_row_by_column(SHEET_NAMES.PROJECT_SCHEDULES, "id", schedule_id)
        if not match:
            raise NotFoundError("Schedule", schedule_id)
        if not is_admin(user["role"]):
            project = store.find_row_by_column(SHEET_NAMES.PROJECTS, "id", match.data["projectId"])
            if not project or project.data.get("teamLeaderId") != user["id"]:
                raise PermissionDeniedError("Only the team leader or admins may delete schedule items")
        store.delete_row(SHEET_NAMES.PROJECT_SCHEDULES, match.row_index)
    logger.info("Schedule %s deleted by %s", schedule_id, user["id"])


def gantt(user: dict, *, favorites_only=False, status=None, division=None, category=None) -> dict:
    """Projects with a full schedule window, for the gantt chart."""
    projects = [
        p for p in get_store().get_all_as_objects(SHEET_NAMES.PROJECTS)
        if p.get("scheduleStart") and p.get("scheduleEnd")
    ]
    fav_ids = favorite_project_ids(user["id"])
    projects = filter_projects(
        projects,
        status=status,
        division=division,
        category=category,
        project_ids=fav_ids if favorites_only else None,
    )
    projects.sort(key=lambda p: p["scheduleStart"])

    names = user_name_map()
    items = []
    for p in projects:
        items.append({
            "id": p["id"],
            "customer": p.get("customer", ""),
            "item": p.get("item", ""),
            "partNo": p.get("partNo", ""),
            "status": p.get("status", ""),
            "division": p.get("division", ""),
            "category": p.get("category", ""),
            "currentStage": p.get("currentStage", ""),
            "stages": split_csv(p.get("stages")),
            "teamLeaderId": p.get("teamLeaderId", ""),
            "teamLeaderName": names.get(p.get("teamLeaderId"), ""),
            "scheduleStart": p["scheduleStart"],
            "scheduleEnd": p["scheduleEnd"],
            "progress": metrics.stage_progress(p.get("status"), p.get("currentStage"), p.get("stages")),
            "isFavorite": p["id"] in fav_ids,
        })

    date_range = {
        "start": min((i["scheduleStart"] for i in items), default=None),
        "end": max((i["scheduleEnd"] for i in items), default=None),
    }
    return {"items": items, "dateRange": date_range, "totalCount": len(items)}

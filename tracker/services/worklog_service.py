"""
Worklog Service — daily work entries and their effect on projects/schedules.

Writing a worklog is not isolated to the WorkLogs sheet:
    create  → prepends "[date] stage: content" to project.progress
    create/update → syncs project.issues with the log's open issue,
                    optionally advances project.currentStage,
                    and stamps actual dates on the linked schedule item
"""

import logging

from tracker.constants import ISSUE_OPEN, ISSUE_RESOLVED, SCHEDULE_IN_PROGRESS, SCHEDULE_PLANNED
from tracker.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import now_iso, require_fields, split_csv, to_bool

logger = logging.getLogger(__name__)

PROGRESS_SEPARATOR = "\n---\n"


def filter_worklogs(worklogs, *, start_date="", end_date="", project_id="",
                    assignee_id="", stage="", keyword="",
                    keyword_fields=("content", "plan", "item", "customer")):
    """Date range (inclusive string compare), exact ids/stage, keyword substring."""
    needle = (keyword or "").lower()
    result = []
    for log in worklogs:
        date = log.get("date", "")
        if start_date and date < start_date:
            continue
        if end_date and date > end_date:
            continue
        if project_id and log.get("projectId") != project_id:
            continue
        if assignee_id and log.get("assigneeId") != assignee_id:
            continue
        if stage and log.get("stage") != stage:
            continue
        if needle and not any(needle in (log.get(f) or "").lower() for f in keyword_fields):
            continue
        result.append(log)
    return result


def sort_newest_first(worklogs):
    # two stable passes: createdAt desc, then date desc
    worklogs.sort(key=lambda w: w.get("createdAt", ""), reverse=True)
    worklogs.sort(key=lambda w: w.get("date", ""), reverse=True)
    return worklogs


def list_worklogs(**filters) -> list[dict]:
    logs = filter_worklogs(get_store().get_all_as_objects(SHEET_NAMES.WORKLOGS), **filters)
    return sort_newest_first(logs)


def get_worklog(worklog_id: str) -> dict:
    match = get_store().find_row_by_column(SHEET_NAMES.WORKLOGS, "id", worklog_id)
    if not match:
        raise NotFoundError("WorkLog", worklog_id)
    return match.data


def _require_project(project_id):
    match = get_store().find_row_by_column(SHEET_NAMES.PROJECTS, "id", project_id)
    if not match:
        raise ValidationError(f"Project '{project_id}' does not exist")
    return match.data


# ── Side effects ────────────────────────────────────────────────────────


def _prepend_progress(project_id, entry):
    store = get_store()
    with store.lock(SHEET_NAMES.PROJECTS):
        match = store.find_row_by_column(SHEET_NAMES.PROJECTS, "id", project_id)
        if not match:
            return
        project = dict(match.data)
        existing = project.get("progress") or ""
        project["progress"] = entry + (PROGRESS_SEPARATOR + existing if existing else "")
        project["updatedAt"] = now_iso()
        store.update_object(SHEET_NAMES.PROJECTS, match.row_index, project)


def _sync_project_issue_and_stage(project_id, issue, issue_status, stage, update_stage):
    store = get_store()
    with store.lock(SHEET_NAMES.PROJECTS):
        match = store.find_row_by_column(SHEET_NAMES.PROJECTS, "id", project_id)
        if not match:
            return
        project = dict(match.data)
        if issue and issue_status == ISSUE_OPEN:
            project["issues"] = issue
        elif issue_status == ISSUE_RESOLVED:
            project["issues"] = ""
        if update_stage and stage and project.get("currentStage") != stage:
            project["currentStage"] = stage
        project["updatedAt"] = now_iso()
        store.update_object(SHEET_NAMES.PROJECTS, match.row_index, project)


def _stamp_schedule_actuals(schedule_id, worklog_date):
    store = get_store()
    with store.lock(SHEET_NAMES.PROJECT_SCHEDULES):
        match = store.find_row_by_column(SHEET_NAMES.PROJECT_SCHEDULES, "id", schedule_id)
        if not match:
            logger.info("Linked schedule %s not found; actual dates not stamped", schedule_id)
            return
        schedule = dict(match.data)
        if not schedule.get("actualStart"):
            schedule["actualStart"] = worklog_date
        schedule["actualEnd"] = worklog_date
        if schedule.get("status") == SCHEDULE_PLANNED:
            schedule["status"] = SCHEDULE_IN_PROGRESS
        store.update_object(SHEET_NAMES.PROJECT_SCHEDULES, match.row_index, schedule)


# ── CRUD ────────────────────────────────────────────────────────────────


def create_worklog(data: dict, user: dict) -> dict:
    missing = require_fields(data, "date", "projectId", "stage", "content")
    if missing:
        raise ValidationError(
            "Missing required fields (date, projectId, stage, content)",
            details={"missing": missing},
        )
    project = _require_project(data["projectId"])
    issue = data.get("issue") or ""
    now = now_iso()

    prefix = f"WL-{data['date'].replace('-', '')[:8]}-"
    worklog = get_store().allocate_and_append(
        SHEET_NAMES.WORKLOGS,
        prefix,
        lambda new_id: {
            "id": new_id,
            "date": data["date"],
            "projectId": project["id"],
            "item": project.get("item", ""),
            "customer": project.get("customer", ""),
            "stage": data["stage"],
            "assigneeId": user["id"],
            "participants": ",".join(split_csv(data.get("participants"))),
            "plan": data.get("plan") or "",
            "content": data["content"],
            "issue": issue,
            "issueStatus": (data.get("issueStatus") or ISSUE_OPEN) if issue else "",
            "issueResolvedAt": "",
            "scheduleId": data.get("scheduleId") or "",
            "createdAt": now,
            "updatedAt": now,
        },
    )
    logger.info("Worklog %s created by %s for %s", worklog["id"], user["id"], project["id"])

    _prepend_progress(project["id"], f"[{worklog['date']}] {worklog['stage']}: {worklog['content']}")
    _sync_project_issue_and_stage(
        project["id"], issue, worklog["issueStatus"], worklog["stage"],
        to_bool(data.get("updateProjectStage")),
    )
    if worklog["scheduleId"]:
        _stamp_schedule_actuals(worklog["scheduleId"], worklog["date"])
    return worklog


def update_worklog(worklog_id: str, data: dict, user: dict) -> dict:
    store = get_store()
    with store.lock(SHEET_NAMES.WORKLOGS):
        match = store.find_row_by_column(SHEET_NAMES.WORKLOGS, "id", worklog_id)
        if not match:
            raise NotFoundError("WorkLog", worklog_id)
        existing = match.data
        if existing.get("assigneeId") != user["id"]:
            raise PermissionDeniedError("Only the author may edit this worklog")

        updated = dict(existing)
        new_project_id = data.get("projectId")
        if new_project_id and new_project_id != existing.get("projectId"):
            project = _require_project(new_project_id)
            updated["projectId"] = new_project_id
            updated["item"] = project.get("item", "")
            updated["customer"] = project.get("customer", "")

        for field in ("date", "stage", "plan", "content", "issue", "scheduleId"):
            if data.get(field) is not None:
                updated[field] = data[field]
        if data.get("participants") is not None:
            updated["participants"] = ",".join(split_csv(data["participants"]))

        now = now_iso()
        if data.get("issue"):
            updated["issueStatus"] = data.get("issueStatus") or existing.get("issueStatus") or ISSUE_OPEN
        elif "issue" in data:
            updated["issueStatus"] = ""
        elif data.get("issueStatus") and updated.get("issue"):
            updated["issueStatus"] = data["issueStatus"]
        if updated["issueStatus"] == ISSUE_RESOLVED and existing.get("issueStatus") != ISSUE_RESOLVED:
            updated["issueResolvedAt"] = now
        updated["updatedAt"] = now
        store.update_object(SHEET_NAMES.WORKLOGS, match.row_index, updated)

    _sync_project_issue_and_stage(
        updated["projectId"], updated.get("issue"), updated.get("issueStatus"),
        updated.get("stage"), to_bool(data.get("updateProjectStage")),
    )
    if updated.get("scheduleId"):
        _stamp_schedule_actuals(updated["scheduleId"], updated["date"])
    return updated


def delete_worklog(worklog_id: str, user: dict) -> None:
    store = get_store()
    with store.lock(SHEET_NAMES.WORKLOGS):
        match = store.find_row_by_column(SHEET_NAMES.WORKLOGS, "id", worklog_id)
        if not match:
            raise NotFoundError("WorkLog", worklog_id)
        if match.data.get("assigneeId") != user["id"]:
            raise PermissionDeniedError("Only the author may delete this worklog")
        store.delete_row(SHEET_NAMES.WORKLOGS, match.row_index)
    logger.info("Worklog %s deleted by %s", worklog_id, user["id"])

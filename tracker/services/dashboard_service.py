"""
Dashboard Service — read-only aggregates over projects, worklogs and
favorites.

    dashboard()            — team dashboard (any logged-in user)
    executive_dashboard()  — favorite projects with health + recent meetings
    comparison()           — plan-vs-actual month grid per project
"""

import calendar
import logging
from datetime import date, timedelta

from tracker.constants import (
    HEALTH_COMPLETED,
    HEALTH_DELAYED,
    HEALTH_NORMAL,
    STAGES,
    STATUS_ACTIVE,
    STATUS_HOLD,
)
from tracker.services import metrics
from tracker.services.comment_service import count_top_level
from tracker.services.favorite_service import favorite_project_ids
from tracker.services.user_service import user_name_map
from tracker.services.week_utils import current_week
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import parse_date, parse_json, split_csv, today_kst

logger = logging.getLogger(__name__)

RECENT_WORKLOG_DAYS = 7
RECENT_WORKLOG_LIMIT = 10
ISSUE_PROJECT_LIMIT = 5
RECENT_MEETING_LIMIT = 10


def _status_counts(projects, favorites: int) -> dict:
    return {
        "total": len(projects),
        "active": sum(1 for p in projects if p.get("status") == STATUS_ACTIVE),
        "hold": sum(1 for p in projects if p.get("status") == STATUS_HOLD),
        "favorites": favorites,
    }


def _stage_counts(projects) -> dict:
    active = [p for p in projects if p.get("status") == STATUS_ACTIVE]
    return {stage: sum(1 for p in active if p.get("currentStage") == stage) for stage in STAGES}


def dashboard(user_id: str, today: date | None = None) -> dict:
    today = today or today_kst()
    store = get_store()
    projects = store.get_all_as_objects(SHEET_NAMES.PROJECTS)
    worklogs = store.get_all_as_objects(SHEET_NAMES.WORKLOGS)

    fav_ids = favorite_project_ids(user_id)
    fav_projects = [p for p in projects if p["id"] in fav_ids]

    cutoff = today - timedelta(days=RECENT_WORKLOG_DAYS)
    recent = [w for w in worklogs if (parse_date(w.get("date")) or date.min) >= cutoff]
    recent.sort(key=lambda w: w.get("date", ""), reverse=True)
    latest_per_project = {}
    for w in recent:
        latest_per_project.setdefault(w.get("projectId"), w)

    recent_worklogs = [
        {
            "id": w["id"],
            "projectId": w.get("projectId", ""),
            "date": w.get("date", ""),
            "customer": w.get("customer", ""),
            "item": w.get("item", ""),
            "stage": w.get("stage", ""),
            "assigneeId": w.get("assigneeId", ""),
        }
        for w in list(latest_per_project.values())[:RECENT_WORKLOG_LIMIT]
    ]

    issue_projects = [
        {"id": p["id"], "customer": p.get("customer", ""), "item": p.get("item", ""), "issues": p["issues"]}
        for p in projects
        if p.get("status") == STATUS_ACTIVE and (p.get("issues") or "").strip()
    ][:ISSUE_PROJECT_LIMIT]

    return {
        "statusCounts": _status_counts(projects, len(fav_ids)),
        "favoriteStatusCounts": _status_counts(fav_projects, len(fav_projects)),
        "stageCounts": _stage_counts(projects),
        "favoriteStageCounts": _stage_counts(fav_projects),
        "recentWorklogs": recent_worklogs,
        "issueProjects": issue_projects,
        "favoriteProjectIds": sorted(fav_ids),
    }


# ── Executive ───────────────────────────────────────────────────────────


def _one_month_before(day: date) -> date:
    year, month = (day.year, day.month - 1) if day.month > 1 else (day.year - 1, 12)
    return date(year, month, min(day.day, calendar.monthrange(year, month)[1]))


def executive_dashboard(user_id: str, today: date | None = None) -> dict:
    today = today or today_kst()
    store = get_store()
    projects = store.get_all_as_objects(SHEET_NAMES.PROJECTS)
    comments = store.get_all_as_objects(SHEET_NAMES.COMMENTS)
    minutes = store.get_all_as_objects(SHEET_NAMES.MEETING_MINUTES)
    names = user_name_map()
    fav_ids = favorite_project_ids(user_id)

    favorite_projects = []
    for p in projects:
        if p["id"] not in fav_ids:
            continue
        progress = metrics.time_progress(p.get("status"), p.get("scheduleStart"), p.get("scheduleEnd"), today)
        stage_history = parse_json(p.get("stageHistory"), {})
        favorite_projects.append({
            "id": p["id"],
            "customer": p.get("customer", ""),
            "item": p.get("item", ""),
            "division": p.get("division", ""),
            "category": p.get("category", ""),
            "currentStage": p.get("currentStage", ""),
            "stages": split_csv(p.get("stages")),
            "stageHistory": stage_history if isinstance(stage_history, dict) else {},
            "status": p.get("status", ""),
            "scheduleStart": p.get("scheduleStart", ""),
            "scheduleEnd": p.get("scheduleEnd", ""),
            "teamLeaderId": p.get("teamLeaderId", ""),
            "teamLeaderName": names.get(p.get("teamLeaderId"), p.get("teamLeaderId", "")),
            "issues": p.get("issues", ""),
            "progress": progress,
            "healthStatus": metrics.health_status(
                p.get("status"), p.get("scheduleStart"), p.get("scheduleEnd"), progress, today
            ),
            "commentCount": count_top_level(p["id"], comments),
        })

    summary = {HEALTH_NORMAL: 0, HEALTH_DELAYED: 0, HEALTH_COMPLETED: 0}
    for p in favorite_projects:
        summary[p["healthStatus"]] += 1

    project_names = {p["id"]: f"{p.get('customer', '')} {p.get('item', '')}" for p in projects}
    since = _one_month_before(today)
    recent_minutes = [
        {
            "id": m["id"],
            "projectId": m.get("projectId", ""),
            "projectName": project_names.get(m.get("projectId"), m.get("projectId", "")),
            "title": m.get("title", ""),
            "hostDepartment": m.get("hostDepartment", ""),
            "location": m.get("location", ""),
            "meetingDate": m.get("meetingDate", ""),
            "createdByName": names.get(m.get("createdById"), m.get("createdById", "")),
        }
        for m in minutes
        if m.get("projectId") in fav_ids and (parse_date(m.get("meetingDate")) or date.min) >= since
    ]
    recent_minutes.sort(key=lambda m: m["meetingDate"], reverse=True)

    return {
        "favoriteProjects": favorite_projects,
        "statusSummary": summary,
        "recentMeetingMinutes": recent_minutes[:RECENT_MEETING_LIMIT],
        "currentWeek": current_week(today),
    }


def _overlaps(start, end, month_start, month_end) -> bool:
    return bool(start and end and start <= month_end and end >= month_start)


def monthly_data(project: dict, schedules, year: int, today: date) -> list[dict]:
    """Per-month plan/actual presence for one project in ``year``."""
    proj_start, proj_end = parse_date(project.get("scheduleStart")), parse_date(project.get("scheduleEnd"))
    planned = [(parse_date(s.get("plannedStart")), parse_date(s.get("plannedEnd"))) for s in schedules]
    actual = [
        (parse_date(s.get("actualStart")), parse_date(s.get("actualEnd")) or today)
        for s in schedules
        if s.get("actualStart")
    ]

    months = []
    for month in range(1, 13):
        month_start = date(year, month, 1)
        month_end = date(year, month, calendar.monthrange(year, month)[1])
        has_plan = _overlaps(proj_start, proj_end, month_start, month_end) or any(
            _overlaps(s, e, month_start, month_end) for s, e in planned
        )
        has_actual = any(_overlaps(s, e, month_start, month_end) for s, e in actual)
        months.append({
            "month": month,
            "hasPlan": has_plan,
            "hasActual": has_actual,
            "planProgress": 100,
            "actualProgress": 100 if has_actual else 0,
        })
    return months


def comparison(user_id: str, *, year: int | None = None, favorites_only: bool = True,
               today: date | None = None) -> dict:
    today = today or today_kst()
    year = year or today.year
    store = get_store()
    projects = store.get_all_as_objects(SHEET_NAMES.PROJECTS)
    schedules = store.get_all_as_objects(SHEET_NAMES.PROJECT_SCHEDULES)
    names = user_name_map()

    if favorites_only:
        fav_ids = favorite_project_ids(user_id)
        projects = [p for p in projects if p["id"] in fav_ids]

    by_project = {}
    for s in schedules:
        by_project.setdefault(s.get("projectId"), []).append(s)

    result = []
    for p in projects:
        progress = metrics.stage_progress(p.get("status"), p.get("currentStage"), p.get("stages"))
        result.append({
            "id": p["id"],
            "customer": p.get("customer", ""),
            "item": p.get("item", ""),
            "currentStage": p.get("currentStage", ""),
            "status": p.get("status", ""),
            "scheduleStart": p.get("scheduleStart", ""),
            "scheduleEnd": p.get("scheduleEnd", ""),
            "teamLeaderName": names.get(p.get("teamLeaderId"), p.get("teamLeaderId", "")),
            "healthStatus": metrics.health_status(
                p.get("status"), p.get("scheduleStart"), p.get("scheduleEnd"), progress, today
            ),
            "progress": progress,
            "monthlyData": monthly_data(p, by_project.get(p["id"], []), year, today),
        })
    return {"projects": result, "year": year, "favoritesOnly": favorites_only}

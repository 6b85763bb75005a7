"""
Weekly Report Service — report lines bucketed by (year, month, week).

Reports are soft-deleted (``isDeleted``) and can be excluded from the
printed report without deletion (``isIncluded``).  ``order`` is per week;
reordering either writes explicit values or swaps with a neighbour.

Each week may also carry one notice (``WRN-YYYY-MM-W``), upserted.
"""

import logging

from tracker.auth import is_admin
from tracker.core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.helpers import now_iso, require_fields, to_bool, to_int

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = (
    "year", "month", "week", "weekStart", "weekEnd",
    "categoryId", "customer", "item", "content",
)
UPDATABLE_FIELDS = ("categoryId", "customer", "item", "projectId", "content", "order")

DIRECTION_UP = "up"
DIRECTION_DOWN = "down"


def to_response(report: dict) -> dict:
    """Typed view of a sheet row: ints for week keys/order, JSON booleans."""
    out = dict(report)
    for field in ("year", "month", "week", "order"):
        out[field] = to_int(report.get(field), 0)
    out["isIncluded"] = to_bool(report.get("isIncluded"), default=True)
    out["isDeleted"] = to_bool(report.get("isDeleted"), default=False)
    return out


def _same_week(report, year, month, week) -> bool:
    return (
        to_int(report.get("year")) == to_int(year)
        and to_int(report.get("month")) == to_int(month)
        and to_int(report.get("week")) == to_int(week)
    )


def _is_live(report) -> bool:
    return not to_bool(report.get("isDeleted"), default=False)


def list_reports(*, year=None, month=None, week=None, category_id=None,
                 project_id=None, only_included=False) -> list[dict]:
    result = []
    for report in get_store().get_all_as_objects(SHEET_NAMES.WEEKLY_REPORTS):
        if not _is_live(report):
            continue
        if only_included and not to_bool(report.get("isIncluded"), default=True):
            continue
        if year and to_int(report.get("year")) != to_int(year):
            continue
        if month and to_int(report.get("month")) != to_int(month):
            continue
        if week and to_int(report.get("week")) != to_int(week):
            continue
        if category_id and report.get("categoryId") != category_id:
            continue
        if project_id and report.get("projectId") != project_id:
            continue
        result.append(to_response(report))
    result.sort(key=lambda r: r["order"])
    return result


def get_report(report_id: str) -> dict:
    match = get_store().find_row_by_column(SHEET_NAMES.WEEKLY_REPORTS, "id", report_id)
    if not match or not _is_live(match.data):
        raise NotFoundError("WeeklyReport", report_id)
    return to_response(match.data)


def create_report(data: dict, user: dict) -> dict:
    missing = require_fields(data, *REQUIRED_FIELDS)
    if missing:
        raise ValidationError("Missing required fields", details={"missing": missing})

    year, month, week = to_int(data["year"]), to_int(data["month"]), to_int(data["week"])
    if not (year and 1 <= month <= 12 and week >= 1):
        raise ValidationError("year, month and week must be positive numbers")

    store = get_store()
    now = now_iso()
    with store.lock(SHEET_NAMES.WEEKLY_REPORTS):
        next_order = max(
            (
                to_int(r.get("order"))
                for r in store.get_all_as_objects(SHEET_NAMES.WEEKLY_REPORTS)
                if _same_week(r, year, month, week)
            ),
            default=0,
        ) + 1
        report = store.allocate_and_append(
            SHEET_NAMES.WEEKLY_REPORTS,
            f"WR-{year}-{month:02d}-{week}-",
            lambda new_id: {
                "id": new_id,
                "year": year,
                "month": month,
                "week": week,
                "weekStart": data["weekStart"],
                "weekEnd": data["weekEnd"],
                "categoryId": data["categoryId"],
                "customer": data["customer"],
                "item": data["item"],
                "projectId": data.get("projectId") or "",
                "content": data["content"],
                "order": next_order,
                "createdById": user["id"],
                "createdAt": now,
                "updatedAt": now,
                "isIncluded": True,
                "isDeleted": False,
            },
        )
    logger.info("Weekly report %s created by %s", report["id"], user["id"])
    return to_response(report)


def update_report(report_id: str, data: dict, user: dict) -> dict:
    store = get_store()
    with store.lock(SHEET_NAMES.WEEKLY_REPORTS):
        match = store.find_row_by_column(SHEET_NAMES.WEEKLY_REPORTS, "id", report_id)
        if not match or not _is_live(match.data):
            raise NotFoundError("WeeklyReport", report_id)
        report = dict(match.data)
        if report.get("createdById") != user["id"] and not is_admin(user["role"]):
            raise PermissionDeniedError("Only the author or admins may edit this report")

        for field in UPDATABLE_FIELDS:
            if data.get(field) is not None:
                report[field] = data[field]
        report["isIncluded"] = to_bool(data.get("isIncluded", report.get("isIncluded")), default=True)
        report["isDeleted"] = to_bool(data.get("isDeleted", report.get("isDeleted")), default=False)
        report["updatedAt"] = now_iso()
        store.update_object(SHEET_NAMES.WEEKLY_REPORTS, match.row_index, report)
    return to_response(report)


def delete_report(report_id: str, user: dict) -> None:
    """Soft delete: the row stays with ``isDeleted=TRUE``."""
    store = get_store()
    with store.lock(SHEET_NAMES.WEEKLY_REPORTS):
        match = store.find_row_by_column(SHEET_NAMES.WEEKLY_REPORTS, "id", report_id)
        if not match or not _is_live(match.data):
            raise NotFoundError("WeeklyReport", report_id)
        report = dict(match.data)
        report["isIncluded"] = to_bool(report.get("isIncluded"), default=True)
        report["isDeleted"] = True
        report["updatedAt"] = now_iso()
        store.update_object(SHEET_NAMES.WEEKLY_REPORTS, match.row_index, report)
    logger.info("Weekly report %s soft-deleted by %s", report_id, user["id"])


# ── Reordering ──────────────────────────────────────────────────────────


def reorder(data: dict) -> list[dict]:
    """Dispatch on body shape: ``{items: [...]}`` or ``{id, direction}``."""
    if "items" in data:
        return reorder_items(data["items"])
    if data.get("id") and data.get("direction"):
        return move_report(data["id"], data["direction"])
    raise ValidationError("Provide either an items list or id and direction")


def reorder_items(items) -> list[dict]:
    """Write explicit ``order`` values; unknown or deleted ids are skipped."""
    if not isinstance(items, list):
        raise ValidationError("items must be a list")

    store = get_store()
    now = now_iso()
    updated = []
    with store.lock(SHEET_NAMES.WEEKLY_REPORTS):
        for item in items:
            if not isinstance(item, dict) or not item.get("id"):
                continue
            match = store.find_row_by_column(SHEET_NAMES.WEEKLY_REPORTS, "id", item["id"])
            if not match or not _is_live(match.data):
                logger.info("Reorder skipped unknown report %s", item["id"])
                continue
            report = dict(match.data)
            report["order"] = to_int(item.get("order"), to_int(report.get("order")))
            report["updatedAt"] = now
            store.update_object(SHEET_NAMES.WEEKLY_REPORTS, match.row_index, report)
            updated.append(to_response(report))
    return updated


def move_report(report_id: str, direction: str) -> list[dict]:
    """Swap ``order`` with the neighbouring report in the same week and category."""
    if direction not in (DIRECTION_UP, DIRECTION_DOWN):
        raise ValidationError("direction must be 'up' or 'down'")

    store = get_store()
    with store.lock(SHEET_NAMES.WEEKLY_REPORTS):
        rows = store.get_all_with_index(SHEET_NAMES.WEEKLY_REPORTS)
        target = next((m for m in rows if m.data.get("id") == report_id), None)
        if not target or not _is_live(target.data):
            raise NotFoundError("WeeklyReport", report_id)

        t = target.data
        group = [
            m for m in rows
            if _is_live(m.data)
            and _same_week(m.data, t.get("year"), t.get("month"), t.get("week"))
            and m.data.get("categoryId") == t.get("categoryId")
        ]
        group.sort(key=lambda m: to_int(m.data.get("order")))
        pos = next(i for i, m in enumerate(group) if m.data["id"] == report_id)
        neighbour_pos = pos - 1 if direction == DIRECTION_UP else pos + 1
        if neighbour_pos < 0 or neighbour_pos >= len(group):
            raise ValidationError(f"Cannot move {direction}: already at the edge")

        neighbour = group[neighbour_pos]
        moved, other = dict(t), dict(neighbour.data)
        moved["order"], other["order"] = other.get("order"), moved.get("order")
        now = now_iso()
        moved["updatedAt"] = other["updatedAt"] = now
        store.update_object(SHEET_NAMES.WEEKLY_REPORTS, target.row_index, moved)
        store.update_object(SHEET_NAMES.WEEKLY_REPORTS, neighbour.row_index, other)

    logger.info("Weekly report %s moved %s (swapped with %s)", report_id, direction, other["id"])
    return [to_response(moved), to_response(other)]


# ── Notices ─────────────────────────────────────────────────────────────


def notice_id(year, month, week) -> str:
    return f"WRN-{to_int(year)}-{to_int(month):02d}-{to_int(week)}"


def get_notice(year, month, week) -> dict | None:
    if not (year and month and week):
        raise ValidationError("year, month and week are required")
    match = get_store().find_row_by_column(
        SHEET_NAMES.WEEKLY_REPORT_NOTICES, "id", notice_id(year, month, week)
    )
    return match.data if match else None


def upsert_notice(data: dict, user: dict) -> tuple[dict, bool]:
    """Create or replace the week's notice.  Returns (notice, created)."""
    if not (data.get("year") and data.get("month") and data.get("week")):
        raise ValidationError("year, month and week are required")

    store = get_store()
    nid = notice_id(data["year"], data["month"], data["week"])
    now = now_iso()
    with store.lock(SHEET_NAMES.WEEKLY_REPORT_NOTICES):
        match = store.find_row_by_column(SHEET_NAMES.WEEKLY_REPORT_NOTICES, "id", nid)
        if match:
            notice = dict(match.data)
            notice.update(content=data.get("content") or "", createdById=user["id"], updatedAt=now)
            store.update_object(SHEET_NAMES.WEEKLY_REPORT_NOTICES, match.row_index, notice)
            return notice, False
        notice = {
            "id": nid,
            "year": to_int(data["year"]),
            "month": to_int(data["month"]),
            "week": to_int(data["week"]),
            "content": data.get("content") or "",
            "createdById": user["id"],
            "createdAt": now,
            "updatedAt": now,
        }
        store.append_object(SHEET_NAMES.WEEKLY_REPORT_NOTICES, notice)
    return notice, True

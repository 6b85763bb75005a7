"""
Weekly Report Blueprint — report lines and per-week notices.

Endpoints:
  GET    /api/weekly-reports            — list (year, month, week, categoryId, projectId, onlyIncluded)
  POST   /api/weekly-reports            — create (engineer, admin)
  PUT    /api/weekly-reports/reorder    — reorder (admin, sysadmin)
  GET    /api/weekly-reports/<id>       — detail
  PUT    /api/weekly-reports/<id>       — update (author, admin, sysadmin)
  DELETE /api/weekly-reports/<id>       — soft delete (admin, sysadmin)

  GET    /api/weekly-report-notices     — notice for year/month/week
  POST   /api/weekly-report-notices     — upsert (admin, sysadmin)
"""

from flask import Blueprint

from tracker.auth import current_user, require_role
from tracker.blueprints import arg, flag, json_body
from tracker.services import weekly_report_service
from tracker.services.week_utils import current_week
from tracker.utils.errors import api_ok

weekly_report_bp = Blueprint("weekly_reports", __name__, url_prefix="/api/weekly-reports")
notice_bp = Blueprint("weekly_report_notices", __name__, url_prefix="/api/weekly-report-notices")


# ═══════════════════════════════════════════════════════════════
# Reports
# ═══════════════════════════════════════════════════════════════
@weekly_report_bp.route("", methods=["GET"])
def list_reports():
    reports = weekly_report_service.list_reports(
        year=arg("year") or None,
        month=arg("month") or None,
        week=arg("week") or None,
        category_id=arg("categoryId") or None,
        project_id=arg("projectId") or None,
        only_included=flag("onlyIncluded"),
    )
    return api_ok(reports, total=len(reports))


@weekly_report_bp.route("", methods=["POST"])
@require_role("engineer", "admin", message="You are not allowed to write weekly reports")
def create_report():
    report = weekly_report_service.create_report(json_body(), current_user())
    return api_ok(report, status=201, message="Weekly report created")


@weekly_report_bp.route("/current-week", methods=["GET"])
def get_current_week():
    return api_ok(current_week())


@weekly_report_bp.route("/reorder", methods=["PUT"])
@require_role("admin", "sysadmin", message="Only admins may reorder weekly reports")
def reorder_reports():
    """
    Body: { "items": [{ "id", "order" }, ...] }
       or { "id": "...", "direction": "up" | "down" }
    """
    updated = weekly_report_service.reorder(json_body())
    return api_ok(updated, message="Order updated")


@weekly_report_bp.route("/<report_id>", methods=["GET"])
def get_report(report_id):
    return api_ok(weekly_report_service.get_report(report_id))


@weekly_report_bp.route("/<report_id>", methods=["PUT"])
def update_report(report_id):
    report = weekly_report_service.update_report(report_id, json_body(), current_user())
    return api_ok(report, message="Weekly report updated")


@weekly_report_bp.route("/<report_id>", methods=["DELETE"])
@require_role("admin", "sysadmin", message="Only admins may delete weekly reports")
def delete_report(report_id):
    weekly_report_service.delete_report(report_id, current_user())
    return api_ok(None, message="Weekly report deleted")


# ═══════════════════════════════════════════════════════════════
# Notices
# ═══════════════════════════════════════════════════════════════
@notice_bp.route("", methods=["GET"])
def get_notice():
    notice = weekly_report_service.get_notice(arg("year"), arg("month"), arg("week"))
    return api_ok(notice)


@notice_bp.route("", methods=["POST"])
@require_role("admin", "sysadmin", message="Only admins may edit notices")
def upsert_notice():
    notice, created = weekly_report_service.upsert_notice(json_body(), current_user())
    return api_ok(notice, message="Notice created" if created else "Notice updated")

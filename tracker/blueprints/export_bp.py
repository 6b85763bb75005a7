"""
Export Blueprint — xlsx downloads (openpyxl).

Endpoints:
  GET /api/export/projects                         — project list (+ favorites filter)
  GET /api/export/schedules?type=detail|gantt      — task detail (default) / schedule overview
  GET /api/export/worklogs                         — worklogs (list filters)

Every export needs at least the engineer role (``user`` is refused).
"""

from flask import Blueprint, request, send_file

from tracker.auth import current_user, require_min_role
from tracker.blueprints import arg, flag
from tracker.services import export_service

export_bp = Blueprint("export", __name__, url_prefix="/api/export")

_EXPORT_DENIED = "You are not allowed to export data"


def _download(result):
    buf, filename = result
    # Non-ASCII names go out as filename*=UTF-8''...
    return send_file(
        buf,
        as_attachment=True,
        download_name=filename,
        mimetype=export_service.XLSX_MIMETYPE,
    )


def _params() -> dict:
    params = request.args.to_dict()
    params["favorites"] = flag("favorites")
    return params


@export_bp.route("/projects", methods=["GET"])
@require_min_role("engineer", message=_EXPORT_DENIED)
def export_projects():
    return _download(export_service.export_projects(current_user()["id"], _params()))


@export_bp.route("/schedules", methods=["GET"])
@require_min_role("engineer", message=_EXPORT_DENIED)
def export_schedules():
    """type=gantt for the overview; anything else is the task detail[&projectId=]"""
    if arg("type", "detail") == "gantt":
        return _download(export_service.export_gantt(current_user()["id"], _params()))
    return _download(export_service.export_schedule_detail(arg("projectId")))


@export_bp.route("/worklogs", methods=["GET"])
@require_min_role("engineer", message=_EXPORT_DENIED)
def export_worklogs():
    return _download(export_service.export_worklogs(request.args.to_dict()))


"""
Schedule Blueprint — per-project task schedule and the gantt view.

Endpoints:
  GET    /api/schedules?projectId=   — items of one project
  POST   /api/schedules              — create (engineer, admin)
  GET    /api/schedules/gantt        — all projects with schedule windows
  GET    /api/schedules/<id>         — detail
  PUT    /api/schedules/<id>         — update (engineer, admin, sysadmin)
  DELETE /api/schedules/<id>         — delete (team leader, admin, sysadmin)
"""

from flask import Blueprint

from tracker.auth import current_user, require_role
from tracker.blueprints import arg, flag, json_body
from tracker.services import schedule_service
from tracker.utils.errors import api_ok

schedule_bp = Blueprint("schedules", __name__, url_prefix="/api/schedules")


@schedule_bp.route("", methods=["GET"])
def list_schedules():
    items = schedule_service.list_schedules(arg("projectId"))
    return api_ok(items, total=len(items))


@schedule_bp.route("", methods=["POST"])
@require_role("engineer", "admin", message="You are not allowed to add schedule items")
def create_schedule():
    schedule = schedule_service.create_schedule(json_body(), current_user())
    return api_ok(schedule, status=201, message="Schedule item created")


@schedule_bp.route("/gantt", methods=["GET"])
def gantt():
    """Query: favorites, status, division, category"""
    data = schedule_service.gantt(
        current_user(),
        favorites_only=flag("favorites"),
        status=arg("status") or None,
        division=arg("division") or None,
        category=arg("category") or None,
    )
    return api_ok(data)


@schedule_bp.route("/<schedule_id>", methods=["GET"])
def get_schedule(schedule_id):
    return api_ok(schedule_service.get_schedule(schedule_id))


@schedule_bp.route("/<schedule_id>", methods=["PUT"])
@require_role("engineer", "admin", "sysadmin", message="You are not allowed to edit schedule items")
def update_schedule(schedule_id):
    schedule = schedule_service.update_schedule(schedule_id, json_body(), current_user())
    return api_ok(schedule, message="Schedule item updated")


@schedule_bp.route("/<schedule_id>", methods=["DELETE"])
def delete_schedule(schedule_id):
    schedule_service.delete_schedule(schedule_id, current_user())
    return api_ok(None, message="Schedule item deleted")

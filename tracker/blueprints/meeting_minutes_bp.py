"""
Meeting Minutes Blueprint.

Endpoints:
  GET    /api/meeting-minutes?projectId=   — list for one project
  POST   /api/meeting-minutes              — create
  GET    /api/meeting-minutes/<id>         — detail with attendees
  PUT    /api/meeting-minutes/<id>         — update
  DELETE /api/meeting-minutes/<id>         — author, admin, or the engineer team leader
"""

from flask import Blueprint

from tracker.auth import current_user
from tracker.blueprints import arg, json_body
from tracker.services import meeting_minutes_service
from tracker.utils.errors import api_ok

meeting_minutes_bp = Blueprint("meeting_minutes", __name__, url_prefix="/api/meeting-minutes")


@meeting_minutes_bp.route("", methods=["GET"])
def list_minutes():
    items = meeting_minutes_service.list_minutes(arg("projectId"))
    return api_ok(items, total=len(items))


@meeting_minutes_bp.route("", methods=["POST"])
def create_minutes():
    minutes = meeting_minutes_service.create_minutes(json_body(), current_user())
    return api_ok(minutes, status=201, message="Meeting minutes created")


@meeting_minutes_bp.route("/<minutes_id>", methods=["GET"])
def get_minutes(minutes_id):
    return api_ok(meeting_minutes_service.get_minutes(minutes_id))


@meeting_minutes_bp.route("/<minutes_id>", methods=["PUT"])
def update_minutes(minutes_id):
    minutes = meeting_minutes_service.update_minutes(minutes_id, json_body())
    return api_ok(minutes, message="Meeting minutes updated")


@meeting_minutes_bp.route("/<minutes_id>", methods=["DELETE"])
def delete_minutes(minutes_id):
    meeting_minutes_service.delete_minutes(minutes_id, current_user())
    return api_ok(None, message="Meeting minutes deleted")

"""
Worklog Blueprint.

Endpoints:
  GET    /api/worklogs        — list (startDate, endDate, projectId, assigneeId, stage, keyword)
  POST   /api/worklogs        — create; updates project progress/issues and schedule actuals
  GET    /api/worklogs/<id>   — detail
  PUT    /api/worklogs/<id>   — update (author only)
  DELETE /api/worklogs/<id>   — delete (author only)
"""

from flask import Blueprint

from tracker.auth import current_user
from tracker.blueprints import arg, json_body
from tracker.services import worklog_service
from tracker.utils.errors import api_ok

worklog_bp = Blueprint("worklogs", __name__, url_prefix="/api/worklogs")


@worklog_bp.route("", methods=["GET"])
def list_worklogs():
    logs = worklog_service.list_worklogs(
        start_date=arg("startDate"),
        end_date=arg("endDate"),
        project_id=arg("projectId"),
        assignee_id=arg("assigneeId"),
        stage=arg("stage"),
        keyword=arg("keyword"),
    )
    return api_ok(logs, total=len(logs))


@worklog_bp.route("", methods=["POST"])
def create_worklog():
    worklog = worklog_service.create_worklog(json_body(), current_user())
    return api_ok(worklog, status=201, message="Worklog created")


@worklog_bp.route("/<worklog_id>", methods=["GET"])
def get_worklog(worklog_id):
    return api_ok(worklog_service.get_worklog(worklog_id))


@worklog_bp.route("/<worklog_id>", methods=["PUT"])
def update_worklog(worklog_id):
    worklog = worklog_service.update_worklog(worklog_id, json_body(), current_user())
    return api_ok(worklog, message="Worklog updated")


@worklog_bp.route("/<worklog_id>", methods=["DELETE"])
def delete_worklog(worklog_id):
    worklog_service.delete_worklog(worklog_id, current_user())
    return api_ok(None, message="Worklog deleted")

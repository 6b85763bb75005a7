"""
Project Blueprint — project CRUD and change history.

Endpoints:
  GET    /api/projects                 — list with filters
  POST   /api/projects                 — create (engineer, admin)
  GET    /api/projects/<id>            — detail
  PUT    /api/projects/<id>            — update (team leader/member, admin, sysadmin)
  DELETE /api/projects/<id>            — delete (admin, sysadmin)
  GET    /api/projects/<id>/history    — change history
"""

from flask import Blueprint

from tracker.auth import current_user, require_role
from tracker.blueprints import arg, json_body
from tracker.services import project_service
from tracker.utils.errors import api_ok

project_bp = Blueprint("projects", __name__, url_prefix="/api/projects")


# ═══════════════════════════════════════════════════════════════
# Collection
# ═══════════════════════════════════════════════════════════════
@project_bp.route("", methods=["GET"])
def list_projects():
    """
    Query: search, status, division, stage, teamLeaderId
    """
    projects = project_service.list_projects(
        search=arg("search"),
        status=arg("status") or None,
        division=arg("division") or None,
        stage=arg("stage") or None,
        team_leader_id=arg("teamLeaderId") or None,
    )
    return api_ok(projects, total=len(projects))


@project_bp.route("", methods=["POST"])
@require_role("engineer", "admin", message="You are not allowed to create projects")
def create_project():
    project = project_service.create_project(json_body(), current_user())
    return api_ok(project, status=201, message="Project created")


# ═══════════════════════════════════════════════════════════════
# Single project
# ═══════════════════════════════════════════════════════════════
@project_bp.route("/<project_id>", methods=["GET"])
def get_project(project_id):
    return api_ok(project_service.get_project(project_id))


@project_bp.route("/<project_id>", methods=["PUT"])
def update_project(project_id):
    project = project_service.update_project(project_id, json_body(), current_user())
    return api_ok(project, message="Project updated")


@project_bp.route("/<project_id>", methods=["DELETE"])
@require_role("admin", "sysadmin", message="Only admins may delete projects")
def delete_project(project_id):
    project_service.delete_project(project_id, current_user())
    return api_ok(None, message="Project deleted")


@project_bp.route("/<project_id>/history", methods=["GET"])
def project_history(project_id):
    history = project_service.list_history(project_id)
    return api_ok(history, total=len(history))

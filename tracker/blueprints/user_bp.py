"""
User Blueprint — account administration.

Endpoints:
  GET    /api/users         — list (any logged-in user)
  POST   /api/users         — create (sysadmin)
  GET    /api/users/<id>    — detail (sysadmin)
  PUT    /api/users/<id>    — update (sysadmin)
  DELETE /api/users/<id>    — deactivate (sysadmin)
"""

from flask import Blueprint, request

from tracker.auth import current_user, require_role
from tracker.blueprints import arg, json_body
from tracker.services import user_service
from tracker.utils.errors import api_ok

user_bp = Blueprint("users", __name__, url_prefix="/api/users")

_USER_ADMIN_MESSAGE = "Only system administrators may manage users"


@user_bp.route("", methods=["GET"])
def list_users():
    users = user_service.list_users(
        search=arg("search"),
        role=arg("role") or None,
        division=arg("division") or None,
        is_active=request.args.get("isActive") or None,
    )
    return api_ok(users, total=len(users))


@user_bp.route("", methods=["POST"])
@require_role("sysadmin", message=_USER_ADMIN_MESSAGE)
def create_user():
    return api_ok(user_service.create_user(json_body()), status=201)


@user_bp.route("/<user_id>", methods=["GET"])
@require_role("sysadmin", message=_USER_ADMIN_MESSAGE)
def get_user(user_id):
    return api_ok(user_service.get_user(user_id))


@user_bp.route("/<user_id>", methods=["PUT"])
@require_role("sysadmin", message=_USER_ADMIN_MESSAGE)
def update_user(user_id):
    return api_ok(user_service.update_user(user_id, json_body()))


@user_bp.route("/<user_id>", methods=["DELETE"])
@require_role("sysadmin", message=_USER_ADMIN_MESSAGE)
def deactivate_user(user_id):
    user = user_service.deactivate_user(user_id, acting_user_id=current_user()["id"])
    return api_ok(user, message="User deactivated")

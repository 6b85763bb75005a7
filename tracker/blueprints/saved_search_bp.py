"""
Saved Search Blueprint.

Endpoints:
  GET    /api/saved-searches         — the caller's saved searches
  POST   /api/saved-searches         — save { name, filters }
  DELETE /api/saved-searches/<id>    — delete (owner only)
"""

from flask import Blueprint

from tracker.auth import current_user
from tracker.blueprints import json_body
from tracker.services import saved_search_service
from tracker.utils.errors import api_ok

saved_search_bp = Blueprint("saved_searches", __name__, url_prefix="/api/saved-searches")


@saved_search_bp.route("", methods=["GET"])
def list_saved_searches():
    searches = saved_search_service.list_saved_searches(current_user()["id"])
    return api_ok(searches, total=len(searches))


@saved_search_bp.route("", methods=["POST"])
def create_saved_search():
    search = saved_search_service.create_saved_search(current_user()["id"], json_body())
    return api_ok(search, status=201, message="Search saved")


@saved_search_bp.route("/<search_id>", methods=["DELETE"])
def delete_saved_search(search_id):
    saved_search_service.delete_saved_search(search_id, current_user()["id"])
    return api_ok(None, message="Saved search deleted")

"""
Favorite Blueprint — per-user starred projects.

Endpoints:
  GET    /api/favorites[?userId]        — favorites (defaults to the session user)
  POST   /api/favorites                 — star a project
  DELETE /api/favorites?projectId=      — unstar
"""

from flask import Blueprint

from tracker.auth import current_user
from tracker.blueprints import arg, json_body
from tracker.services import favorite_service
from tracker.utils.errors import api_ok

favorite_bp = Blueprint("favorites", __name__, url_prefix="/api/favorites")


@favorite_bp.route("", methods=["GET"])
def list_favorites():
    user_id = arg("userId") or current_user()["id"]
    favorites = favorite_service.list_favorites(user_id)
    return api_ok(favorites, total=len(favorites))


@favorite_bp.route("", methods=["POST"])
def add_favorite():
    data = json_body()
    favorite = favorite_service.add_favorite(current_user()["id"], data.get("projectId") or "")
    return api_ok(favorite, status=201, message="Added to favorites")


@favorite_bp.route("", methods=["DELETE"])
def remove_favorite():
    favorite_service.remove_favorite(current_user()["id"], arg("projectId"))
    return api_ok(None, message="Removed from favorites")

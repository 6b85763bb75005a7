"""
Settings Blueprint — stage list and general settings (sysadmin).

Endpoints:
  GET /api/settings   — stored settings, falling back to defaults
  PUT /api/settings   — save { stages?, settings? }
"""

from flask import Blueprint

from tracker.auth import current_user, require_role
from tracker.blueprints import json_body
from tracker.services import settings_service
from tracker.utils.errors import api_ok

settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.route("", methods=["GET"])
@require_role("sysadmin", message="Only system administrators may view settings")
def get_settings():
    return api_ok(settings_service.get_settings())


@settings_bp.route("", methods=["PUT"])
@require_role("sysadmin", message="Only system administrators may change settings")
def save_settings():
    saved = settings_service.save_settings(json_body(), current_user()["id"])
    return api_ok(saved, message="Settings saved")

"""
Setup Blueprint — first-run helpers, registered only when SETUP_ENABLED.

Endpoints:
  GET  /api/setup                        — user count and ids
  POST /api/setup                        — seed test users into an empty Users sheet
  POST /api/setup/reset-password[?force] — re-hash passwords to the test password
"""

from flask import Blueprint

from tracker.blueprints import flag
from tracker.services import setup_service
from tracker.utils.errors import api_ok

setup_bp = Blueprint("setup", __name__, url_prefix="/api/setup")


@setup_bp.route("", methods=["GET"])
def setup_status():
    return api_ok(setup_service.setup_status())


@setup_bp.route("", methods=["POST"])
def seed_users():
    created = setup_service.seed_test_users()
    return api_ok(created, status=201, message=f"{len(created)} test users created")


@setup_bp.route("/reset-password", methods=["POST"])
def reset_passwords():
    updated = setup_service.reset_passwords(force=flag("force"))
    return api_ok(
        {"updated": updated, "defaultPassword": setup_service.DEFAULT_TEST_PASSWORD},
        message=f"{len(updated)} passwords reset",
    )

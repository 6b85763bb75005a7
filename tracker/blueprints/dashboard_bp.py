"""
Dashboard Blueprints — the home dashboard and the executive views.

Endpoints:
  GET /api/dashboard                              — status/stage counts, recent worklogs, issues
  GET /api/executive/dashboard                    — favorite projects with health/progress
  GET /api/executive/comparison?year&favoritesOnly — month-by-month plan vs actual
"""

from flask import Blueprint

from tracker.auth import current_user, require_role
from tracker.blueprints import arg, flag
from tracker.core.exceptions import ValidationError
from tracker.services import dashboard_service
from tracker.utils.errors import api_ok

dashboard_bp = Blueprint("dashboard", __name__, url_prefix="/api/dashboard")
executive_bp = Blueprint("executive", __name__, url_prefix="/api/executive")

_EXECUTIVE_ROLES = ("executive", "admin", "sysadmin")


@dashboard_bp.route("", methods=["GET"])
def dashboard():
    return api_ok(dashboard_service.dashboard(current_user()["id"]))


# ═══════════════════════════════════════════════════════════════
# Executive
# ═══════════════════════════════════════════════════════════════
@executive_bp.route("/dashboard", methods=["GET"])
@require_role(*_EXECUTIVE_ROLES, message="Executive views are restricted")
def executive_dashboard():
    return api_ok(dashboard_service.executive_dashboard(current_user()["id"]))


@executive_bp.route("/comparison", methods=["GET"])
@require_role(*_EXECUTIVE_ROLES, message="Executive views are restricted")
def comparison():
    year = arg("year")
    if year and not year.isdigit():
        raise ValidationError("year must be a number")
    data = dashboard_service.comparison(
        current_user()["id"],
        year=int(year) if year else None,
        favorites_only=flag("favoritesOnly", default=True),
    )
    return api_ok(data)

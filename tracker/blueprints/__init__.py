"""
Engineering Project Tracker
Blueprint registry and small request helpers shared by the blueprints.
"""

from flask import request

from tracker.utils.helpers import to_bool


def json_body() -> dict:
    """Request JSON as a dict; anything else (missing, invalid, a list) → {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def arg(name: str, default: str = "") -> str:
    """Stripped query-string value."""
    return (request.args.get(name) or default).strip()


def flag(name: str, default: bool = False) -> bool:
    """Boolean query-string value (``?favorites=true``)."""
    return to_bool(request.args.get(name), default=default)


def all_blueprints():
    """Every API blueprint, in registration order."""
    from tracker.blueprints.auth_bp import auth_bp
    from tracker.blueprints.comment_bp import comment_bp
    from tracker.blueprints.dashboard_bp import dashboard_bp, executive_bp
    from tracker.blueprints.export_bp import export_bp
    from tracker.blueprints.favorite_bp import favorite_bp
    from tracker.blueprints.health_bp import health_bp
    from tracker.blueprints.master_bp import master_bp
    from tracker.blueprints.meeting_minutes_bp import meeting_minutes_bp
    from tracker.blueprints.project_bp import project_bp
    from tracker.blueprints.saved_search_bp import saved_search_bp
    from tracker.blueprints.schedule_bp import schedule_bp
    from tracker.blueprints.search_bp import search_bp
    from tracker.blueprints.settings_bp import settings_bp
    from tracker.blueprints.user_bp import user_bp
    from tracker.blueprints.weekly_report_bp import notice_bp, weekly_report_bp
    from tracker.blueprints.worklog_bp import worklog_bp

    return [
        auth_bp, health_bp, user_bp, project_bp, schedule_bp, worklog_bp,
        weekly_report_bp, notice_bp, favorite_bp, saved_search_bp, search_bp,
        dashboard_bp, executive_bp, comment_bp, meeting_minutes_bp, export_bp,
        master_bp, settings_bp,
    ]

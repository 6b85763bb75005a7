"""
Health Blueprint — liveness plus a row store connectivity probe.

Endpoints:
  GET /api/health   — 200 when the row store answers, 503 otherwise
"""

from datetime import datetime, timezone

from flask import Blueprint, jsonify

from tracker.store import SHEET_HEADERS, get_store

health_bp = Blueprint("health", __name__, url_prefix="/api/health")


@health_bp.route("", methods=["GET"])
def health():
    store = get_store()
    probe = store.check_connection()
    connected = bool(probe.get("connected"))
    body = {
        "status": "healthy" if connected else "unhealthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "services": {
            "rowStore": {
                **probe,
                "backend": store.backend,
                "expectedSheets": len(SHEET_HEADERS),
            },
        },
    }
    return jsonify(body), 200 if connected else 503

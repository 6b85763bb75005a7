"""
Auth Blueprint — session token endpoints.

Endpoints:
  POST /api/auth/login     — id + password → session token (+ cookie)
  POST /api/auth/logout    — clear the session cookie
  GET  /api/auth/session   — current session user
"""

import logging

from flask import Blueprint, current_app, jsonify

from tracker.auth import generate_session_token, get_session
from tracker.blueprints import json_body
from tracker.core.exceptions import AuthenticationError
from tracker.services import user_service
from tracker.utils.errors import E, api_error, api_ok

logger = logging.getLogger(__name__)

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


# ═══════════════════════════════════════════════════════════════
# POST /api/auth/login
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/login", methods=["POST"])
def login():
    """
    Authenticate with id + password.

    Body: { "id": "...", "password": "..." }
    Returns: { token, expiresIn, user } and sets the session cookie.
    """
    data = json_body()
    user_id = (data.get("id") or "").strip()
    password = data.get("password") or ""
    if not user_id or not password:
        return api_error(E.VALIDATION_ERROR, "id and password are required")

    try:
        user = user_service.authenticate(user_id, password)
    except AuthenticationError as exc:
        return api_error(E.UNAUTHORIZED, str(exc))

    token, expires_in = generate_session_token(user)
    logger.info("User %s logged in (role=%s)", user["id"], user["role"])

    response = jsonify({
        "success": True,
        "data": {"token": token, "expiresIn": expires_in, "user": user},
    })
    response.set_cookie(
        current_app.config.get("SESSION_TOKEN_COOKIE", "session_token"),
        token,
        max_age=expires_in,
        httponly=True,
        samesite="Lax",
        secure=bool(current_app.config.get("SESSION_COOKIE_SECURE")),
    )
    return response, 200


# ═══════════════════════════════════════════════════════════════
# POST /api/auth/logout
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/logout", methods=["POST"])
def logout():
    """Tokens are stateless; logging out only drops the cookie."""
    response = jsonify({"success": True, "data": None})
    response.delete_cookie(current_app.config.get("SESSION_TOKEN_COOKIE", "session_token"))
    return response, 200


# ═══════════════════════════════════════════════════════════════
# GET /api/auth/session
# ═══════════════════════════════════════════════════════════════
@auth_bp.route("/session", methods=["GET"])
def session():
    current = get_session()
    if not current:
        return api_error(E.UNAUTHORIZED, "Authentication required")
    return api_ok(current["user"])

"""
Engineering Project Tracker
Session & role gate.

Provides:
    - Signed session tokens (PyJWT, HS256) issued at login, read from the
      ``Authorization: Bearer`` header or the ``session_token`` cookie
    - ``get_session()`` → ``{"user": {"id", "name", "role"}}`` or None
    - Role allow-list / minimum-role decorators for blueprints
    - A before_request hook that rejects unauthenticated /api/* calls

Roles (low → high): user < engineer < admin < executive < sysadmin.
Most handlers check explicit allow-lists rather than the hierarchy, since
e.g. executives may read everything but create very little.
"""

import functools
import logging
import uuid
from datetime import datetime, timedelta, timezone

import jwt
from flask import current_app, g, request

from tracker.core.exceptions import AuthenticationError
from tracker.utils.errors import E, api_error

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
DEFAULT_EXPIRES = 86400

# ── Roles ────────────────────────────────────────────────────────────────────

ROLES = ("user", "engineer", "admin", "executive", "sysadmin")

ROLE_HIERARCHY = {
    "user": 1,
    "engineer": 2,
    "admin": 3,
    "executive": 4,
    "sysadmin": 5,
}

ADMIN_ROLES = frozenset({"admin", "sysadmin"})

# Paths reachable without a session
PUBLIC_PREFIXES = (
    "/api/auth/",
    "/api/health",
    "/api/setup",
)


def has_min_role(role: str | None, minimum: str) -> bool:
    return ROLE_HIERARCHY.get(role or "", 0) >= ROLE_HIERARCHY[minimum]


def is_admin(role: str | None) -> bool:
    return role in ADMIN_ROLES


# ── Tokens ───────────────────────────────────────────────────────────────────

def _get_secret():
    return current_app.config["SECRET_KEY"]


def _get_expires():
    return int(current_app.config.get("SESSION_EXPIRES", DEFAULT_EXPIRES))


def generate_session_token(user: dict) -> tuple[str, int]:
    """Issue a session token for a user record. Returns (token, expires_in)."""
    now = datetime.now(timezone.utc)
    expires_in = _get_expires()
    payload = {
        "sub": user["id"],
        "name": user.get("name", ""),
        "role": user.get("role", "user"),
        "type": "session",
        "iat": now,
        "exp": now + timedelta(seconds=expires_in),
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(payload, _get_secret(), algorithm=ALGORITHM), expires_in


def decode_session_token(token: str) -> dict:
    """
    Decode and verify a session token.

    Raises jwt exceptions on failure (ExpiredSignatureError, InvalidTokenError).
    """
    payload = jwt.decode(token, _get_secret(), algorithms=[ALGORITHM])
    if payload.get("type") != "session":
        raise jwt.InvalidTokenError(f"Expected session token, got {payload.get('type')}")
    return payload


def _get_token_from_request() -> str | None:
    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header[7:].strip() or None
    cookie_name = current_app.config.get("SESSION_TOKEN_COOKIE", "session_token")
    return request.cookies.get(cookie_name) or None


def _resolve_session() -> dict | None:
    token = _get_token_from_request()
    if not token:
        return None
    try:
        payload = decode_session_token(token)
    except jwt.ExpiredSignatureError:
        logger.info("Expired session token on %s", request.path)
        return None
    except jwt.InvalidTokenError as exc:
        logger.warning("Invalid session token on %s: %s", request.path, exc)
        return None
    return {
        "user": {
            "id": payload.get("sub"),
            "name": payload.get("name", ""),
            "role": payload.get("role", "user"),
        }
    }


def get_session() -> dict | None:
    """Return ``{"user": {"id", "name", "role"}}`` for the request, or None."""
    if "session" not in g:
        g.session = _resolve_session()
    return g.session


def current_user() -> dict:
    """Session user dict; raises AuthenticationError when not logged in."""
    session = get_session()
    if not session:
        raise AuthenticationError("Authentication required")
    return session["user"]


# ── Decorators ───────────────────────────────────────────────────────────────

def require_role(*allowed_roles: str, message: str = "Insufficient permissions"):
    """
    Decorator: the session role must be one of ``allowed_roles``.

    Usage:
        @project_bp.route("/<pid>", methods=["DELETE"])
        @require_role("admin", "sysadmin")
        def delete_project(pid): ...
    """
    allowed = frozenset(allowed_roles)

    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            session = get_session()
            if not session:
                return api_error(E.UNAUTHORIZED, "Authentication required")
            role = session["user"]["role"]
            if role not in allowed:
                logger.warning(
                    "Access denied: role '%s' not in %s for %s %s",
                    role, sorted(allowed), request.method, request.path,
                )
                return api_error(E.FORBIDDEN, message)
            return f(*args, **kwargs)
        return decorated
    return decorator


def require_min_role(minimum_role: str, message: str = "Insufficient permissions"):
    """Decorator: the session role must rank at or above ``minimum_role``."""
    def decorator(f):
        @functools.wraps(f)
        def decorated(*args, **kwargs):
            session = get_session()
            if not session:
                return api_error(E.UNAUTHORIZED, "Authentication required")
            role = session["user"]["role"]
            if not has_min_role(role, minimum_role):
                logger.warning(
                    "Access denied: role '%s' below '%s' for %s %s",
                    role, minimum_role, request.method, request.path,
                )
                return api_error(E.FORBIDDEN, message)
            return f(*args, **kwargs)
        return decorated
    return decorator


# ── before_request hook installer ────────────────────────────────────────────

def init_auth(app):
    """
    Install the session gate on the Flask app.

    Every /api/* path outside PUBLIC_PREFIXES needs a valid session;
    OPTIONS pre-flight requests are let through for CORS.
    """
    @app.before_request
    def _before_request_auth():
        # g outlives the request when an outer app context is pushed
        g.pop("session", None)
        if not request.path.startswith("/api/"):
            return None
        if request.method == "OPTIONS":
            return None
        if request.path.startswith(PUBLIC_PREFIXES):
            return None
        if not get_session():
            return api_error(E.UNAUTHORIZED, "Authentication required")
        return None

    logger.info("Session gate installed (public=%s)", ", ".join(PUBLIC_PREFIXES))

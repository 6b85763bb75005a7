"""Standardised API error responses.

Usage
-----
    from tracker.utils.errors import api_error, E

    return api_error(E.NOT_FOUND, "Project not found")
    return api_error(E.VALIDATION_ERROR, "projectId is required")
"""

from __future__ import annotations

from flask import jsonify


# ── Error code constants ──────────────────────────────────────────────
class E:
    """Machine-readable error code constants carried in the ``code`` field."""

    # HTTP 401
    UNAUTHORIZED = "UNAUTHORIZED"

    # HTTP 403
    FORBIDDEN = "FORBIDDEN"

    # HTTP 404
    NOT_FOUND = "NOT_FOUND"

    # HTTP 400
    VALIDATION_ERROR = "VALIDATION_ERROR"
    DUPLICATE_ENTRY = "DUPLICATE_ENTRY"

    # HTTP 500
    SHEETS_API_ERROR = "SHEETS_API_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# ── Default HTTP status mapping ───────────────────────────────────────
_DEFAULT_STATUS: dict[str, int] = {
    E.UNAUTHORIZED: 401,
    E.FORBIDDEN: 403,
    E.NOT_FOUND: 404,
    E.VALIDATION_ERROR: 400,
    E.DUPLICATE_ENTRY: 400,
    E.SHEETS_API_ERROR: 500,
    E.INTERNAL_ERROR: 500,
}


def api_error(
    code: str,
    message: str,
    *,
    status: int | None = None,
    details: dict | None = None,
):
    """Return a standard JSON error envelope.

    Parameters
    ----------
    code : str
        Machine-readable error code (use ``E.*`` constants).
    message : str
        Human-readable explanation for the UI.
    status : int, optional
        HTTP status override.  Falls back to ``_DEFAULT_STATUS[code]``,
        then to ``400``.
    details : dict, optional
        Extra structured payload (field-level validation errors, etc.).

    Returns
    -------
    tuple[Response, int]
        ``(jsonify(body), http_status)`` – drop-in for Flask views.
    """

    http_status = status or _DEFAULT_STATUS.get(code, 400)

    body: dict = {
        "success": False,
        "error": message,
        "code": code,
    }
    if details:
        body["details"] = details

    return jsonify(body), http_status


def api_ok(data=None, *, status: int = 200, **extra):
    """Return the success envelope ``{"success": true, "data": ...}``.

    Extra keyword arguments (``total``, ``message``) are merged at the top level.
    """
    body: dict = {"success": True, "data": data}
    body.update(extra)
    return jsonify(body), status

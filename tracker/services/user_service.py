"""
User Service — accounts in the Users sheet.

Passwords are bcrypt hashes and never leave this module; every function
that returns a user returns the public view from ``to_public``.
"""

import logging

from tracker.auth import ROLES
from tracker.core.exceptions import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.crypto import hash_password, verify_password
from tracker.utils.helpers import now_iso, require_fields, to_bool

logger = logging.getLogger(__name__)


def to_public(user: dict) -> dict:
    """Strip the password hash and normalise isActive to a bool."""
    public = {k: v for k, v in user.items() if k != "password"}
    public["isActive"] = to_bool(user.get("isActive"), default=False)
    return public


def user_name_map() -> dict[str, str]:
    """{user id: display name} for joining names into responses."""
    return {u["id"]: u.get("name", "") for u in get_store().get_all_as_objects(SHEET_NAMES.USERS)}


def authenticate(user_id: str, password: str) -> dict:
    """Check credentials; return the public user or raise AuthenticationError."""
    match = get_store().find_row_by_column(SHEET_NAMES.USERS, "id", user_id)
    if not match:
        logger.info("Login failed: unknown user %s", user_id)
        raise AuthenticationError("Invalid id or password")
    user = match.data
    if not to_bool(user.get("isActive"), default=False):
        logger.info("Login refused: inactive user %s", user_id)
        raise AuthenticationError("Account is inactive")
    if not verify_password(password, user.get("password", "")):
        logger.info("Login failed: bad password for %s", user_id)
        raise AuthenticationError("Invalid id or password")
    return to_public(user)


def list_users(*, search="", role=None, division=None, is_active=None) -> list[dict]:
    users = get_store().get_all_as_objects(SHEET_NAMES.USERS)
    needle = (search or "").lower()
    result = []
    for user in users:
        if needle and not any(
            needle in (user.get(field) or "").lower() for field in ("id", "name", "email")
        ):
            continue
        if role and user.get("role") != role:
            continue
        if division and user.get("division") != division:
            continue
        if is_active is not None:
            if to_bool(user.get("isActive"), default=False) != to_bool(is_active):
                continue
        result.append(to_public(user))
    return result


def get_user(user_id: str) -> dict:
    match = get_store().find_row_by_column(SHEET_NAMES.USERS, "id", user_id)
    if not match:
        raise NotFoundError("User", user_id)
    return to_public(match.data)


def create_user(data: dict) -> dict:
    missing = require_fields(data, "id", "password", "name", "role", "division")
    if missing:
        raise ValidationError(
            "Missing required fields (id, password, name, role, division)",
            details={"missing": missing},
        )
    if data["role"] not in ROLES:
        raise ValidationError(f"Unknown role '{data['role']}'")

    store = get_store()
    with store.lock(SHEET_NAMES.USERS):
        if store.find_row_by_column(SHEET_NAMES.USERS, "id", data["id"]):
            raise ConflictError("User", "id", data["id"])
        now = now_iso()
        user = {
            "id": data["id"],
            "password": hash_password(data["password"]),
            "name": data["name"],
            "email": data.get("email") or "",
            "role": data["role"],
            "division": data["division"],
            "isActive": True,
            "createdAt": now,
            "updatedAt": now,
        }
        store.append_object(SHEET_NAMES.USERS, user)
    logger.info("User %s created (role=%s)", user["id"], user["role"])
    return to_public(user)


def update_user(user_id: str, data: dict) -> dict:
    if "role" in data and data["role"] not in ROLES:
        raise ValidationError(f"Unknown role '{data['role']}'")
    store = get_store()
    with store.lock(SHEET_NAMES.USERS):
        match = store.find_row_by_column(SHEET_NAMES.USERS, "id", user_id)
        if not match:
            raise NotFoundError("User", user_id)
        user = dict(match.data)
        for field in ("name", "email", "role", "division"):
            if data.get(field) is not None:
                user[field] = data[field]
        if data.get("isActive") is not None:
            user["isActive"] = to_bool(data["isActive"])
        else:
            user["isActive"] = to_bool(user.get("isActive"), default=False)
        if data.get("password"):
            user["password"] = hash_password(data["password"])
        user["updatedAt"] = now_iso()
        store.update_object(SHEET_NAMES.USERS, match.row_index, user)
    return to_public(user)


def deactivate_user(user_id: str, *, acting_user_id: str) -> dict:
    """Soft-delete: flip isActive off.  Users cannot deactivate themselves."""
    if user_id == acting_user_id:
        raise ValidationError("You cannot deactivate your own account")
    return update_user(user_id, {"isActive": False})

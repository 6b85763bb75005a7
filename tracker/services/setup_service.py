"""
Setup Service — first-run helpers for an empty spreadsheet.

Only reachable when SETUP_ENABLED is on (development/testing).
"""

import logging

from tracker.core.exceptions import ValidationError
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.crypto import hash_password, is_bcrypt_hash
from tracker.utils.helpers import now_iso, to_bool

logger = logging.getLogger(__name__)

DEFAULT_TEST_PASSWORD = "test1234"

TEST_USERS = [
    {"id": "admin", "password": "admin123", "name": "관리자",
     "email": "admin@company.com", "role": "admin", "division": "전장"},
    {"id": "engineer", "password": "engineer123", "name": "개발팀원",
     "email": "engineer@company.com", "role": "engineer", "division": "전장"},
    {"id": "user", "password": "user123", "name": "일반사용자",
     "email": "user@company.com", "role": "user", "division": "유압"},
]


def setup_status() -> dict:
    users = get_store().get_all_as_objects(SHEET_NAMES.USERS)
    return {
        "userCount": len(users),
        "users": [
            {
                "id": u.get("id", ""),
                "name": u.get("name", ""),
                "role": u.get("role", ""),
                "isActive": to_bool(u.get("isActive"), default=False),
            }
            for u in users
        ],
    }


def seed_test_users() -> list[dict]:
    store = get_store()
    with store.lock(SHEET_NAMES.USERS):
        existing = store.get_rows(SHEET_NAMES.USERS)
        if existing:
            raise ValidationError(
                "Users already exist", details={"existingCount": len(existing)}
            )
        now = now_iso()
        created = []
        for user in TEST_USERS:
            store.append_object(SHEET_NAMES.USERS, {
                **user,
                "password": hash_password(user["password"]),
                "isActive": True,
                "createdAt": now,
                "updatedAt": now,
            })
            created.append({
                "id": user["id"],
                "name": user["name"],
                "role": user["role"],
                "testPassword": user["password"],
            })
    logger.warning("Seeded %d test users", len(created))
    return created


def reset_passwords(force: bool = False) -> list[str]:
    """Re-hash plain-text passwords (or all, with ``force``) to DEFAULT_TEST_PASSWORD."""
    store = get_store()
    with store.lock(SHEET_NAMES.USERS):
        rows = store.get_all_with_index(SHEET_NAMES.USERS)
        if not rows:
            raise ValidationError("There are no users")
        hashed = hash_password(DEFAULT_TEST_PASSWORD)
        updated = []
        for match in rows:
            if force or not is_bcrypt_hash(match.data.get("password", "")):
                user = dict(match.data)
                user["password"] = hashed
                user["updatedAt"] = now_iso()
                store.update_object(SHEET_NAMES.USERS, match.row_index, user)
                updated.append(user["id"])
    logger.warning("Reset %d passwords (force=%s)", len(updated), force)
    return updated

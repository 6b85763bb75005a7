"""
Shared pytest fixtures for the Engineering Project Tracker test suite.

Provides:
    - app: Flask application on the in-memory row store (session-scoped)
    - session: Per-test app context with an emptied row store (autouse)
    - client: Flask test client (function-scoped)
    - make_user: insert a user row and return its public fields
    - auth_headers: bearer header for a user dict
    - make_project: create a project through the API
"""

import pytest

from tracker import create_app
from tracker.auth import generate_session_token
from tracker.store import SHEET_NAMES, get_store
from tracker.utils.crypto import hash_password
from tracker.utils.helpers import now_iso

DEFAULT_PASSWORD = "pass1234"


# ── App & store fixtures ─────────────────────────────────────────────────


@pytest.fixture(scope="session")
def app():
    """Create the Flask application once per test session."""
    return create_app("testing")


@pytest.fixture(autouse=True)
def session(app):
    """Per-test: open an app context on an empty row store."""
    with app.app_context():
        store = get_store()
        store.reset()
        yield store
        store.reset()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ── Users & tokens ───────────────────────────────────────────────────────


@pytest.fixture()
def make_user():
    """Insert a user row; returns ``{"id", "name", "role"}``."""

    def _make(user_id="engineer1", role="engineer", *, name=None,
              password=DEFAULT_PASSWORD, division="전장", is_active=True):
        now = now_iso()
        get_store().append_object(SHEET_NAMES.USERS, {
            "id": user_id,
            "password": hash_password(password),
            "name": name or user_id.title(),
            "email": f"{user_id}@example.com",
            "role": role,
            "division": division,
            "isActive": is_active,
            "createdAt": now,
            "updatedAt": now,
        })
        return {"id": user_id, "name": name or user_id.title(), "role": role}

    return _make


@pytest.fixture()
def auth_headers():
    """Bearer header for a user dict (as returned by ``make_user``)."""

    def _headers(user):
        token, _ = generate_session_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture()
def engineer(make_user):
    return make_user("engineer1", "engineer", name="김엔지")


@pytest.fixture()
def admin(make_user):
    return make_user("admin1", "admin", name="관리자")


@pytest.fixture()
def sysadmin(make_user):
    return make_user("sys1", "sysadmin", name="시스템")


@pytest.fixture()
def executive(make_user):
    return make_user("exec1", "executive", name="임원")


@pytest.fixture()
def plain_user(make_user):
    return make_user("user1", "user", name="일반")


# ── Convenience fixtures ─────────────────────────────────────────────────


@pytest.fixture()
def make_project(client, auth_headers):
    """Create a project via the API as ``user`` (team leader defaults to them)."""

    def _make(user, **overrides):
        body = {
            "customer": "대동",
            "item": "ECU",
            "teamLeaderId": user["id"],
            "stages": ["검토", "설계", "개발", "PROTO"],
            "scheduleStart": "2026-01-01",
            "scheduleEnd": "2026-12-31",
            "division": "전장",
            "category": "농기",
        }
        body.update(overrides)
        res = client.post("/api/projects", json=body, headers=auth_headers(user))
        assert res.status_code == 201, res.get_json()
        return res.get_json()["data"]

    return _make

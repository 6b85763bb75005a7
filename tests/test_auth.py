"""
Tests for login, the session gate and role gates.

Covers:
  - login success returns a token + cookie; bad password / inactive → 401
  - /api/* without a session → 401; public prefixes pass
  - bearer header and session cookie both authenticate
  - tampered tokens are rejected
  - allow-list decorators → 403 with the envelope
"""

from tracker.auth import has_min_role, is_admin


def _login(client, user_id, password="pass1234"):
    return client.post("/api/auth/login", json={"id": user_id, "password": password})


class TestLogin:
    def test_login_success(self, client, make_user):
        make_user("engineer1", "engineer", name="김엔지")
        res = _login(client, "engineer1")
        assert res.status_code == 200
        body = res.get_json()
        assert body["success"] is True
        assert body["data"]["token"]
        assert body["data"]["user"] == {
            "id": "engineer1",
            "name": "김엔지",
            "email": "engineer1@example.com",
            "role": "engineer",
            "division": "전장",
            "isActive": True,
            "createdAt": body["data"]["user"]["createdAt"],
            "updatedAt": body["data"]["user"]["updatedAt"],
        }
        assert "password" not in body["data"]["user"]
        assert "session_token=" in res.headers.get("Set-Cookie", "")

    def test_wrong_password(self, client, make_user):
        make_user("engineer1")
        res = _login(client, "engineer1", "wrong")
        assert res.status_code == 401
        assert res.get_json()["success"] is False
        assert res.get_json()["code"] == "UNAUTHORIZED"

    def test_unknown_user(self, client):
        assert _login(client, "ghost").status_code == 401

    def test_inactive_user(self, client, make_user):
        make_user("gone", is_active=False)
        res = _login(client, "gone")
        assert res.status_code == 401
        assert "inactive" in res.get_json()["error"]

    def test_missing_fields(self, client):
        res = client.post("/api/auth/login", json={"id": "x"})
        assert res.status_code == 400


class TestSessionGate:
    def test_api_requires_session(self, client):
        res = client.get("/api/projects")
        assert res.status_code == 401
        assert res.get_json() == {
            "success": False,
            "error": "Authentication required",
            "code": "UNAUTHORIZED",
        }

    def test_health_is_public(self, client):
        assert client.get("/api/health").status_code == 200

    def test_bearer_token(self, client, engineer, auth_headers):
        res = client.get("/api/auth/session", headers=auth_headers(engineer))
        assert res.status_code == 200
        assert res.get_json()["data"] == {"id": "engineer1", "name": "김엔지", "role": "engineer"}

    def test_cookie_from_login_authenticates(self, client, make_user):
        make_user("engineer1")
        assert _login(client, "engineer1").status_code == 200
        # the test client replays the session cookie
        assert client.get("/api/projects").status_code == 200

    def test_logout_clears_cookie(self, client, make_user):
        make_user("engineer1")
        _login(client, "engineer1")
        client.post("/api/auth/logout")
        assert client.get("/api/projects").status_code == 401

    def test_tampered_token(self, client, engineer, auth_headers):
        headers = auth_headers(engineer)
        headers["Authorization"] += "x"
        assert client.get("/api/projects", headers=headers).status_code == 401

    def test_session_does_not_leak_between_requests(self, client, engineer, auth_headers):
        assert client.get("/api/projects", headers=auth_headers(engineer)).status_code == 200
        assert client.get("/api/projects").status_code == 401


class TestRoleGates:
    def test_forbidden_envelope(self, client, plain_user, auth_headers):
        res = client.post("/api/projects", json={}, headers=auth_headers(plain_user))
        assert res.status_code == 403
        body = res.get_json()
        assert body["success"] is False
        assert body["code"] == "FORBIDDEN"

    def test_user_admin_is_sysadmin_only(self, client, admin, sysadmin, auth_headers):
        body = {"id": "new1", "password": "pw", "name": "신규", "role": "engineer", "division": "전장"}
        assert client.post("/api/users", json=body, headers=auth_headers(admin)).status_code == 403
        assert client.post("/api/users", json=body, headers=auth_headers(sysadmin)).status_code == 201


def test_role_helpers():
    assert has_min_role("admin", "engineer")
    assert not has_min_role("user", "engineer")
    assert has_min_role("executive", "admin")
    assert not has_min_role(None, "user")
    assert is_admin("sysadmin")
    assert not is_admin("executive")

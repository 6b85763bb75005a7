"""
Tests for executive comment threads and meeting minutes.

Covers:
  - who may open a thread vs reply
  - threads newest first, replies oldest first; delete cascades
  - minutes: required fields, attendees as a list, update rules,
    delete by author / admin / engineer team leader
"""

import pytest


def _comment(client, headers, project_id, content="검토 부탁드립니다", **extra):
    body = {"projectId": project_id, "content": content}
    body.update(extra)
    return client.post("/api/comments", json=body, headers=headers)


class TestComments:
    def test_thread_with_replies(self, client, engineer, executive, auth_headers, make_project):
        project = make_project(engineer)
        parent = _comment(client, auth_headers(executive), project["id"]).get_json()["data"]
        assert parent["id"] == "CMT-001"
        assert parent["parentId"] is None

        _comment(client, auth_headers(engineer), project["id"], "답변 1", parentId=parent["id"])
        _comment(client, auth_headers(engineer), project["id"], "답변 2", parentId=parent["id"])

        res = client.get(f"/api/comments?projectId={project['id']}", headers=auth_headers(executive))
        assert res.status_code == 200
        body = res.get_json()
        assert body["total"] == 1
        thread = body["data"][0]
        assert thread["authorName"] == "임원"
        assert [r["content"] for r in thread["replies"]] == ["답변 1", "답변 2"]

        detail = client.get(f"/api/comments/{parent['id']}", headers=auth_headers(engineer)).get_json()["data"]
        assert len(detail["replies"]) == 2

    def test_engineer_cannot_open_thread(self, client, engineer, auth_headers, make_project):
        project = make_project(engineer)
        assert _comment(client, auth_headers(engineer), project["id"]).status_code == 403

    def test_executive_cannot_reply(self, client, engineer, executive, auth_headers, make_project):
        project = make_project(engineer)
        parent = _comment(client, auth_headers(executive), project["id"]).get_json()["data"]
        res = _comment(client, auth_headers(executive), project["id"], "추가", parentId=parent["id"])
        assert res.status_code == 403

    def test_reply_to_unknown_parent(self, client, engineer, auth_headers, make_project):
        project = make_project(engineer)
        res = _comment(client, auth_headers(engineer), project["id"], "답변", parentId="CMT-999")
        assert res.status_code == 400

    def test_list_requires_project(self, client, executive, auth_headers):
        assert client.get("/api/comments", headers=auth_headers(executive)).status_code == 400

    def test_delete_removes_replies(self, client, engineer, executive, auth_headers, make_project):
        project = make_project(engineer)
        parent = _comment(client, auth_headers(executive), project["id"]).get_json()["data"]
        _comment(client, auth_headers(engineer), project["id"], "답변", parentId=parent["id"])
        other = _comment(client, auth_headers(executive), project["id"], "별도 스레드").get_json()["data"]

        assert client.delete(f"/api/comments/{parent['id']}", headers=auth_headers(engineer)).status_code == 403
        res = client.delete(f"/api/comments/{parent['id']}", headers=auth_headers(executive))
        assert res.status_code == 200
        assert res.get_json()["data"] == {"deleted": 2}

        threads = client.get(f"/api/comments?projectId={project['id']}", headers=auth_headers(executive)).get_json()["data"]
        assert [t["comment"]["id"] for t in threads] == [other["id"]]


def _minutes(client, headers, project_id, **overrides):
    body = {
        "projectId": project_id,
        "title": "설계 검토 회의",
        "meetingDate": "2026-07-01",
        "hostDepartment": "전장개발팀",
        "location": "본사 3층",
        "attendees": [{"department": "전장개발팀", "position": "책임", "name": "김엔지"}],
        "agenda": "회로 검토",
    }
    body.update(overrides)
    return client.post("/api/meeting-minutes", json=body, headers=headers)


class TestMeetingMinutes:
    def test_create_and_detail(self, client, engineer, auth_headers, make_project):
        project = make_project(engineer)
        res = _minutes(client, auth_headers(engineer), project["id"])
        assert res.status_code == 201
        created = res.get_json()["data"]
        assert created["id"] == "MTG-001"
        assert "attendeesJson" not in created

        detail = client.get(f"/api/meeting-minutes/{created['id']}", headers=auth_headers(engineer)).get_json()["data"]
        assert detail["attendees"] == [{"department": "전장개발팀", "position": "책임", "name": "김엔지"}]
        assert detail["createdByName"] == "김엔지"

    @pytest.mark.parametrize("missing", ["projectId", "title", "meetingDate"])
    def test_required_fields(self, client, engineer, auth_headers, missing):
        body = {"projectId": "PRJ-2026-001", "title": "회의", "meetingDate": "2026-07-01"}
        del body[missing]
        res = client.post("/api/meeting-minutes", json=body, headers=auth_headers(engineer))
        assert res.status_code == 400
        assert res.get_json()["details"]["missing"] == [missing]

    def test_attendees_must_be_list(self, client, engineer, auth_headers, make_project):
        project = make_project(engineer)
        res = _minutes(client, auth_headers(engineer), project["id"], attendees="김엔지")
        assert res.status_code == 400

    def test_list_newest_first(self, client, engineer, auth_headers, make_project):
        project = make_project(engineer)
        headers = auth_headers(engineer)
        _minutes(client, headers, project["id"], meetingDate="2026-06-01")
        _minutes(client, headers, project["id"], meetingDate="2026-07-15")
        data = client.get(f"/api/meeting-minutes?projectId={project['id']}", headers=headers).get_json()["data"]
        assert [m["meetingDate"] for m in data] == ["2026-07-15", "2026-06-01"]
        assert "agenda" not in data[0]

    def test_update_keeps_blank_title(self, client, engineer, auth_headers, make_project):
        project = make_project(engineer)
        headers = auth_headers(engineer)
        mid = _minutes(client, headers, project["id"]).get_json()["data"]["id"]
        res = client.put(
            f"/api/meeting-minutes/{mid}",
            json={"title": "", "agenda": "", "decisions": "PCB 2차 발주"},
            headers=headers,
        )
        data = res.get_json()["data"]
        assert data["title"] == "설계 검토 회의"
        assert data["agenda"] == ""
        assert data["decisions"] == "PCB 2차 발주"

    def test_delete_permissions(self, client, engineer, executive, make_user, auth_headers, make_project):
        other = make_user("other1", "engineer")
        project = make_project(engineer)
        mid = _minutes(client, auth_headers(executive), project["id"]).get_json()["data"]["id"]

        assert client.delete(f"/api/meeting-minutes/{mid}", headers=auth_headers(other)).status_code == 403
        # engineer1 leads the project
        assert client.delete(f"/api/meeting-minutes/{mid}", headers=auth_headers(engineer)).status_code == 200
        assert client.get(f"/api/meeting-minutes/{mid}", headers=auth_headers(engineer)).status_code == 404

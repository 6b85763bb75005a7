"""
Tests for schedule items and the gantt view.
"""


def _schedule(client, headers, project_id, **overrides):
    body = {
        "projectId": project_id,
        "taskName": "회로 설계",
        "stage": "설계",
        "plannedStart": "2026-02-01",
        "plannedEnd": "2026-03-31",
        "responsibility": "lead",
    }
    body.update(overrides)
    return client.post("/api/schedules", json=body, headers=headers)


class TestScheduleCrud:
    def test_create_assigns_order_per_project(self, client, engineer, auth_headers, make_project):
        p1 = make_project(engineer)
        p2 = make_project(engineer)
        headers = auth_headers(engineer)

        first = _schedule(client, headers, p1["id"]).get_json()["data"]
        second = _schedule(client, headers, p1["id"], taskName="시제품").get_json()["data"]
        other = _schedule(client, headers, p2["id"]).get_json()["data"]

        assert first["id"] == "PS-001"
        assert first["status"] == "planned"
        assert (first["order"], second["order"], other["order"]) == (1, 2, 1)

        items = client.get(f"/api/schedules?projectId={p1['id']}", headers=headers).get_json()["data"]
        assert [s["taskName"] for s in items] == ["회로 설계", "시제품"]

    def test_list_requires_project_id(self, client, engineer, auth_headers):
        assert client.get("/api/schedules", headers=auth_headers(engineer)).status_code == 400

    def test_create_roles(self, client, engineer, executive, auth_headers, make_project):
        project = make_project(engineer)
        assert _schedule(client, auth_headers(executive), project["id"]).status_code == 403

    def test_create_for_unknown_project(self, client, engineer, auth_headers):
        assert _schedule(client, auth_headers(engineer), "PRJ-1999-001").status_code == 404

    def test_actual_dates_are_admin_only(self, client, engineer, admin, auth_headers, make_project):
        project = make_project(engineer)
        sid = _schedule(client, auth_headers(engineer), project["id"]).get_json()["data"]["id"]

        res = client.put(f"/api/schedules/{sid}", json={"actualStart": "2026-02-03"}, headers=auth_headers(engineer))
        assert res.status_code == 403

        res = client.put(f"/api/schedules/{sid}", json={"actualStart": "2026-02-03"}, headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json()["data"]["actualStart"] == "2026-02-03"

    def test_engineer_updates_plan(self, client, engineer, auth_headers, make_project):
        project = make_project(engineer)
        sid = _schedule(client, auth_headers(engineer), project["id"]).get_json()["data"]["id"]
        res = client.put(f"/api/schedules/{sid}", json={"plannedEnd": "2026-04-15"}, headers=auth_headers(engineer))
        assert res.get_json()["data"]["plannedEnd"] == "2026-04-15"

    def test_delete_by_team_leader_only(self, client, engineer, make_user, auth_headers, make_project):
        other = make_user("other1", "engineer")
        project = make_project(engineer)
        sid = _schedule(client, auth_headers(engineer), project["id"]).get_json()["data"]["id"]

        assert client.delete(f"/api/schedules/{sid}", headers=auth_headers(other)).status_code == 403
        assert client.delete(f"/api/schedules/{sid}", headers=auth_headers(engineer)).status_code == 200
        assert client.get(f"/api/schedules/{sid}", headers=auth_headers(engineer)).status_code == 404


class TestGantt:
    def test_gantt_items_and_range(self, client, engineer, auth_headers, make_project):
        make_project(engineer, scheduleStart="2026-03-01", scheduleEnd="2026-09-30")
        make_project(engineer, scheduleStart="2026-01-15", scheduleEnd="2026-05-31")
        res = client.get("/api/schedules/gantt", headers=auth_headers(engineer))
        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data["totalCount"] == 2
        assert data["dateRange"] == {"start": "2026-01-15", "end": "2026-09-30"}
        first = data["items"][0]
        assert first["scheduleStart"] == "2026-01-15"
        assert first["teamLeaderName"] == "김엔지"
        assert first["stages"] == ["검토", "설계", "개발", "PROTO"]
        assert first["isFavorite"] is False

    def test_gantt_favorites_only(self, client, engineer, auth_headers, make_project):
        starred = make_project(engineer)
        make_project(engineer)
        headers = auth_headers(engineer)
        client.post("/api/favorites", json={"projectId": starred["id"]}, headers=headers)

        data = client.get("/api/schedules/gantt?favorites=true", headers=headers).get_json()["data"]
        assert [i["id"] for i in data["items"]] == [starred["id"]]
        assert data["items"][0]["isFavorite"] is True

    def test_empty_gantt(self, client, engineer, auth_headers):
        data = client.get("/api/schedules/gantt", headers=auth_headers(engineer)).get_json()["data"]
        assert data == {"items": [], "dateRange": {"start": None, "end": None}, "totalCount": 0}

"""
Tests for the home dashboard and the executive views.

Date-sensitive aggregates call the service with a fixed ``today``;
the HTTP layer is checked for role gates and envelope shape.
"""

from datetime import date

import pytest

from tracker.constants import STAGES
from tracker.services import dashboard_service

TODAY = date(2026, 7, 1)


def _star(client, headers, project_id):
    res = client.post("/api/favorites", json={"projectId": project_id}, headers=headers)
    assert res.status_code == 201


class TestDashboard:
    def test_counts(self, client, engineer, auth_headers, make_project):
        headers = auth_headers(engineer)
        a = make_project(engineer)
        b = make_project(engineer)
        make_project(engineer)
        client.put(f"/api/projects/{a['id']}", json={"currentStage": "설계"}, headers=headers)
        client.put(f"/api/projects/{b['id']}", json={"status": "보류"}, headers=headers)
        _star(client, headers, a["id"])

        res = client.get("/api/dashboard", headers=headers)
        assert res.status_code == 200
        data = res.get_json()["data"]
        assert data["statusCounts"] == {"total": 3, "active": 2, "hold": 1, "favorites": 1}
        assert data["favoriteStatusCounts"] == {"total": 1, "active": 1, "hold": 0, "favorites": 1}
        assert list(data["stageCounts"]) == list(STAGES)
        # held projects are not counted per stage
        assert data["stageCounts"]["검토"] == 1
        assert data["stageCounts"]["설계"] == 1
        assert data["favoriteStageCounts"]["설계"] == 1
        assert data["favoriteProjectIds"] == [a["id"]]

    def test_recent_worklogs_latest_per_project(self, client, engineer, auth_headers, make_project):
        headers = auth_headers(engineer)
        project = make_project(engineer)
        for day in ("2026-06-20", "2026-06-29", "2026-07-01"):
            client.post("/api/worklogs", json={
                "date": day, "projectId": project["id"], "stage": "검토", "content": day,
            }, headers=headers)

        data = dashboard_service.dashboard("engineer1", today=date(2026, 7, 5))
        assert [w["date"] for w in data["recentWorklogs"]] == ["2026-07-01"]

    def test_issue_projects(self, client, engineer, auth_headers, make_project):
        headers = auth_headers(engineer)
        project = make_project(engineer)
        client.post("/api/worklogs", json={
            "date": "2026-07-01", "projectId": project["id"], "stage": "검토",
            "content": "점검", "issue": "납기 지연", "issueStatus": "open",
        }, headers=headers)

        data = client.get("/api/dashboard", headers=headers).get_json()["data"]
        assert data["issueProjects"] == [
            {"id": project["id"], "customer": "대동", "item": "ECU", "issues": "납기 지연"}
        ]


@pytest.fixture()
def starred_portfolio(client, engineer, executive, auth_headers, make_project):
    """Three executive favorites: on track, on hold, completed."""
    eng = auth_headers(engineer)
    on_track = make_project(engineer, scheduleStart="2026-01-01", scheduleEnd="2026-12-31")
    on_hold = make_project(engineer, customer="LS", item="HMI")
    done = make_project(engineer, customer="TYM", item="VCU")
    make_project(engineer, customer="미등록")
    client.put(f"/api/projects/{on_hold['id']}", json={"status": "보류"}, headers=eng)
    client.put(f"/api/projects/{done['id']}", json={"status": "완료"}, headers=eng)
    for project in (on_track, on_hold, done):
        _star(client, auth_headers(executive), project["id"])
    return {"on_track": on_track, "on_hold": on_hold, "done": done}


class TestExecutiveDashboard:
    def test_role_gate(self, client, engineer, plain_user, executive, admin, auth_headers):
        for user in (engineer, plain_user):
            assert client.get("/api/executive/dashboard", headers=auth_headers(user)).status_code == 403
        for user in (executive, admin):
            assert client.get("/api/executive/dashboard", headers=auth_headers(user)).status_code == 200

    def test_favorite_projects_with_health(self, starred_portfolio):
        data = dashboard_service.executive_dashboard("exec1", today=TODAY)
        by_id = {p["id"]: p for p in data["favoriteProjects"]}
        assert set(by_id) == {p["id"] for p in starred_portfolio.values()}

        on_track = by_id[starred_portfolio["on_track"]["id"]]
        assert on_track["progress"] == 50
        assert on_track["healthStatus"] == "normal"
        assert on_track["teamLeaderName"] == "김엔지"
        assert on_track["stages"] == ["검토", "설계", "개발", "PROTO"]
        assert on_track["stageHistory"] == {"검토": on_track["stageHistory"]["검토"]}

        assert by_id[starred_portfolio["done"]["id"]]["progress"] == 100
        assert data["statusSummary"] == {"normal": 1, "delayed": 1, "completed": 1}
        assert data["currentWeek"]["year"] == 2026

    def test_comment_count_ignores_replies(self, client, engineer, executive, auth_headers, starred_portfolio):
        project_id = starred_portfolio["on_track"]["id"]
        parent = client.post(
            "/api/comments", json={"projectId": project_id, "content": "일정 확인 바랍니다"},
            headers=auth_headers(executive),
        ).get_json()["data"]
        client.post(
            "/api/comments", json={"projectId": project_id, "content": "확인했습니다", "parentId": parent["id"]},
            headers=auth_headers(engineer),
        )
        data = dashboard_service.executive_dashboard("exec1", today=TODAY)
        counts = {p["id"]: p["commentCount"] for p in data["favoriteProjects"]}
        assert counts[project_id] == 1

    def test_recent_meeting_minutes_window(self, client, executive, auth_headers, starred_portfolio):
        project_id = starred_portfolio["on_track"]["id"]
        headers = auth_headers(executive)
        for day in ("2026-05-15", "2026-06-01", "2026-06-25"):
            client.post("/api/meeting-minutes", json={
                "projectId": project_id, "title": f"회의 {day}", "meetingDate": day,
            }, headers=headers)

        data = dashboard_service.executive_dashboard("exec1", today=TODAY)
        minutes = data["recentMeetingMinutes"]
        assert [m["meetingDate"] for m in minutes] == ["2026-06-25", "2026-06-01"]
        assert minutes[0]["projectName"] == "대동 ECU"
        assert minutes[0]["createdByName"] == "임원"


class TestComparison:
    def test_monthly_plan_and_actual(self, client, engineer, executive, admin, auth_headers, make_project):
        project = make_project(engineer, scheduleStart="2026-03-01", scheduleEnd="2026-05-31")
        schedule = client.post("/api/schedules", json={
            "projectId": project["id"], "taskName": "시작품",
            "plannedStart": "2026-03-01", "plannedEnd": "2026-05-31",
        }, headers=auth_headers(engineer)).get_json()["data"]
        client.put(f"/api/schedules/{schedule['id']}", json={
            "actualStart": "2026-04-10", "actualEnd": "2026-04-20",
        }, headers=auth_headers(admin))
        _star(client, auth_headers(executive), project["id"])

        data = dashboard_service.comparison("exec1", year=2026, today=TODAY)
        assert data["favoritesOnly"] is True
        months = data["projects"][0]["monthlyData"]
        assert len(months) == 12
        assert [m["month"] for m in months if m["hasPlan"]] == [3, 4, 5]
        assert [m["month"] for m in months if m["hasActual"]] == [4]
        assert months[3]["actualProgress"] == 100
        assert months[0]["actualProgress"] == 0

    def test_favorites_only_flag(self, client, engineer, executive, auth_headers, make_project):
        make_project(engineer)
        headers = auth_headers(executive)
        data = client.get("/api/executive/comparison", headers=headers).get_json()["data"]
        assert data["projects"] == []
        data = client.get("/api/executive/comparison?favoritesOnly=false&year=2026", headers=headers).get_json()["data"]
        assert len(data["projects"]) == 1
        assert data["year"] == 2026

    def test_year_must_be_numeric(self, client, executive, auth_headers):
        res = client.get("/api/executive/comparison?year=twenty", headers=auth_headers(executive))
        assert res.status_code == 400

"""
Tests for weekly reports, reordering and per-week notices.
"""

import pytest

from tracker.store import SHEET_NAMES, get_store


def _report(client, headers, **overrides):
    body = {
        "year": 2026, "month": 7, "week": 2,
        "weekStart": "2026-07-13", "weekEnd": "2026-07-17",
        "categoryId": "electric", "customer": "대동", "item": "ECU",
        "content": "설계 검토 완료",
    }
    body.update(overrides)
    return client.post("/api/weekly-reports", json=body, headers=headers)


@pytest.fixture()
def three_reports(client, engineer, auth_headers):
    headers = auth_headers(engineer)
    return [
        _report(client, headers, content=text).get_json()["data"]
        for text in ("하나", "둘", "셋")
    ]


class TestCreateReport:
    def test_create_typed_response(self, client, engineer, auth_headers):
        res = _report(client, auth_headers(engineer))
        assert res.status_code == 201
        report = res.get_json()["data"]
        assert report["id"] == "WR-2026-07-2-001"
        assert (report["year"], report["month"], report["week"], report["order"]) == (2026, 7, 2, 1)
        assert report["isIncluded"] is True
        assert report["isDeleted"] is False

    def test_order_is_per_week(self, client, engineer, auth_headers):
        headers = auth_headers(engineer)
        _report(client, headers)
        second = _report(client, headers).get_json()["data"]
        next_week = _report(client, headers, week=3).get_json()["data"]
        assert second["order"] == 2
        assert next_week["order"] == 1
        assert next_week["id"] == "WR-2026-07-3-001"

    def test_roles(self, client, executive, plain_user, admin, auth_headers):
        assert _report(client, auth_headers(executive)).status_code == 403
        assert _report(client, auth_headers(plain_user)).status_code == 403
        assert _report(client, auth_headers(admin)).status_code == 201

    def test_missing_fields(self, client, engineer, auth_headers):
        res = _report(client, auth_headers(engineer), content="")
        assert res.status_code == 400
        assert res.get_json()["details"]["missing"] == ["content"]


class TestListAndUpdate:
    def test_list_filters_and_sorts_by_order(self, client, engineer, auth_headers, three_reports):
        headers = auth_headers(engineer)
        _report(client, headers, week=3, content="다른주")
        data = client.get("/api/weekly-reports?year=2026&month=7&week=2", headers=headers).get_json()["data"]
        assert [r["order"] for r in data] == [1, 2, 3]

    def test_only_included(self, client, engineer, auth_headers, three_reports):
        headers = auth_headers(engineer)
        client.put(f"/api/weekly-reports/{three_reports[0]['id']}", json={"isIncluded": False}, headers=headers)
        data = client.get("/api/weekly-reports?onlyIncluded=true", headers=headers).get_json()["data"]
        assert len(data) == 2

    def test_update_by_other_engineer_forbidden(self, client, make_user, auth_headers, three_reports):
        other = make_user("other1", "engineer")
        res = client.put(f"/api/weekly-reports/{three_reports[0]['id']}", json={"content": "x"}, headers=auth_headers(other))
        assert res.status_code == 403

    def test_soft_delete_hides_report(self, client, engineer, admin, auth_headers, three_reports):
        rid = three_reports[1]["id"]
        assert client.delete(f"/api/weekly-reports/{rid}", headers=auth_headers(engineer)).status_code == 403
        assert client.delete(f"/api/weekly-reports/{rid}", headers=auth_headers(admin)).status_code == 200
        assert client.get(f"/api/weekly-reports/{rid}", headers=auth_headers(admin)).status_code == 404
        data = client.get("/api/weekly-reports", headers=auth_headers(admin)).get_json()["data"]
        assert rid not in [r["id"] for r in data]


class TestReorder:
    def test_move_down_swaps_with_neighbour(self, client, admin, auth_headers, three_reports):
        first, second, _ = three_reports
        res = client.put(
            "/api/weekly-reports/reorder",
            json={"id": first["id"], "direction": "down"},
            headers=auth_headers(admin),
        )
        assert res.status_code == 200
        data = client.get("/api/weekly-reports?week=2", headers=auth_headers(admin)).get_json()["data"]
        assert [r["id"] for r in data][:2] == [second["id"], first["id"]]

    def test_move_past_edge_is_rejected(self, client, admin, auth_headers, three_reports):
        res = client.put(
            "/api/weekly-reports/reorder",
            json={"id": three_reports[0]["id"], "direction": "up"},
            headers=auth_headers(admin),
        )
        assert res.status_code == 400
        res = client.put(
            "/api/weekly-reports/reorder",
            json={"id": three_reports[2]["id"], "direction": "down"},
            headers=auth_headers(admin),
        )
        assert res.status_code == 400

    def test_explicit_items(self, client, admin, auth_headers, three_reports):
        items = [{"id": r["id"], "order": 3 - i} for i, r in enumerate(three_reports)]
        res = client.put("/api/weekly-reports/reorder", json={"items": items}, headers=auth_headers(admin))
        assert res.status_code == 200
        data = client.get("/api/weekly-reports", headers=auth_headers(admin)).get_json()["data"]
        assert [r["content"] for r in data] == ["셋", "둘", "하나"]

    def test_explicit_items_skip_deleted_report(self, client, admin, auth_headers, three_reports):
        headers = auth_headers(admin)
        deleted = three_reports[1]["id"]
        client.delete(f"/api/weekly-reports/{deleted}", headers=headers)
        before = get_store().find_row_by_column(SHEET_NAMES.WEEKLY_REPORTS, "id", deleted).data["order"]

        items = [{"id": three_reports[0]["id"], "order": 5}, {"id": deleted, "order": 99}]
        res = client.put("/api/weekly-reports/reorder", json={"items": items}, headers=headers)
        assert res.status_code == 200
        assert [r["id"] for r in res.get_json()["data"]] == [three_reports[0]["id"]]
        row = get_store().find_row_by_column(SHEET_NAMES.WEEKLY_REPORTS, "id", deleted).data
        assert row["order"] == before
        assert row["isDeleted"] == "TRUE"

    def test_items_must_be_list(self, client, admin, auth_headers):
        res = client.put("/api/weekly-reports/reorder", json={"items": "nope"}, headers=auth_headers(admin))
        assert res.status_code == 400

    def test_engineer_cannot_reorder(self, client, engineer, auth_headers, three_reports):
        res = client.put(
            "/api/weekly-reports/reorder",
            json={"id": three_reports[0]["id"], "direction": "down"},
            headers=auth_headers(engineer),
        )
        assert res.status_code == 403


class TestNotices:
    def test_get_requires_all_params(self, client, engineer, auth_headers):
        res = client.get("/api/weekly-report-notices?year=2026&month=7", headers=auth_headers(engineer))
        assert res.status_code == 400

    def test_missing_notice_is_null(self, client, engineer, auth_headers):
        res = client.get("/api/weekly-report-notices?year=2026&month=7&week=2", headers=auth_headers(engineer))
        assert res.status_code == 200
        assert res.get_json()["data"] is None

    def test_upsert(self, client, admin, engineer, auth_headers):
        body = {"year": 2026, "month": 7, "week": 2, "content": "휴가 일정 공유"}
        res = client.post("/api/weekly-report-notices", json=body, headers=auth_headers(admin))
        assert res.status_code == 200
        assert res.get_json()["data"]["id"] == "WRN-2026-07-2"

        body["content"] = "수정된 공지"
        client.post("/api/weekly-report-notices", json=body, headers=auth_headers(admin))
        notice = client.get(
            "/api/weekly-report-notices?year=2026&month=7&week=2", headers=auth_headers(engineer)
        ).get_json()["data"]
        assert notice["content"] == "수정된 공지"

        assert client.post("/api/weekly-report-notices", json=body, headers=auth_headers(engineer)).status_code == 403


def test_current_week_endpoint(client, engineer, auth_headers):
    data = client.get("/api/weekly-reports/current-week", headers=auth_headers(engineer)).get_json()["data"]
    assert set(data) == {"year", "month", "week", "weekStart", "weekEnd"}

"""
Unit tests for the pure helpers: derived metrics, week arithmetic,
boolean/int parsing and pagination.
"""

from datetime import date

import pytest

from tracker.services import metrics
from tracker.services.week_utils import (
    current_week,
    first_monday,
    total_weeks,
    week_of_month,
    week_range,
)
from tracker.utils.helpers import paginate, parse_date, split_csv, to_bool, to_int

TODAY = date(2026, 7, 1)


# ── time_progress ────────────────────────────────────────────────────────


class TestTimeProgress:
    def test_completed_is_always_100(self):
        assert metrics.time_progress("완료", "2026-01-01", "2026-12-31", TODAY) == 100

    def test_missing_dates_give_zero(self):
        assert metrics.time_progress("진행중", "", "2026-12-31", TODAY) == 0
        assert metrics.time_progress("진행중", "2026-01-01", None, TODAY) == 0

    def test_before_start_is_zero(self):
        assert metrics.time_progress("진행중", "2026-08-01", "2026-12-31", TODAY) == 0

    def test_after_end_is_100(self):
        assert metrics.time_progress("진행중", "2026-01-01", "2026-06-30", TODAY) == 100

    def test_midpoint_rounds(self):
        # 10 of 20 days elapsed
        assert metrics.time_progress("진행중", "2026-06-21", "2026-07-11", TODAY) == 50


# ── stage_progress ───────────────────────────────────────────────────────


class TestStageProgress:
    def test_index_over_length(self):
        assert metrics.stage_progress("진행중", "개발", "검토,설계,개발,PROTO") == 50

    def test_first_stage_is_zero(self):
        assert metrics.stage_progress("진행중", "검토", ["검토", "설계"]) == 0

    def test_unknown_stage_is_zero(self):
        assert metrics.stage_progress("진행중", "양산이관", "검토,설계") == 0

    def test_no_stages_is_zero(self):
        assert metrics.stage_progress("진행중", "검토", "") == 0

    def test_completed_is_100(self):
        assert metrics.stage_progress("완료", "검토", "검토,설계") == 100


# ── health_status ────────────────────────────────────────────────────────


class TestHealthStatus:
    def test_completed(self):
        assert metrics.health_status("완료", "2026-01-01", "2026-02-01", 0, TODAY) == "completed"

    def test_hold_is_delayed(self):
        assert metrics.health_status("보류", "2026-01-01", "2026-12-31", 90, TODAY) == "delayed"

    def test_past_end_is_delayed(self):
        assert metrics.health_status("진행중", "2026-01-01", "2026-06-30", 100, TODAY) == "delayed"

    def test_behind_expected_by_more_than_threshold(self):
        # expected 50%, actual 30%
        assert metrics.health_status("진행중", "2026-06-21", "2026-07-11", 30, TODAY) == "delayed"

    def test_within_threshold_is_normal(self):
        assert metrics.health_status("진행중", "2026-06-21", "2026-07-11", 45, TODAY) == "normal"


# ── Week arithmetic ──────────────────────────────────────────────────────


class TestWeekUtils:
    def test_first_monday_when_month_starts_on_monday(self):
        assert first_monday(2026, 6) == date(2026, 6, 1)

    def test_first_monday_when_month_starts_on_sunday(self):
        # 2026-03-01 is a Sunday
        assert first_monday(2026, 3) == date(2026, 3, 2)

    def test_first_monday_midweek(self):
        # 2026-07-01 is a Wednesday
        assert first_monday(2026, 7) == date(2026, 7, 6)

    def test_days_before_first_monday_are_week_one(self):
        assert week_of_month(date(2026, 7, 1)) == 1
        assert week_of_month(date(2026, 7, 6)) == 1
        assert week_of_month(date(2026, 7, 13)) == 2

    def test_week_range_is_monday_to_friday(self):
        assert week_range(2026, 7, 2) == (date(2026, 7, 13), date(2026, 7, 17))

    def test_total_weeks(self):
        assert total_weeks(2026, 6) == 5

    def test_current_week_shape(self):
        week = current_week(date(2026, 7, 15))
        assert week == {
            "year": 2026, "month": 7, "week": 2,
            "weekStart": "2026-07-13", "weekEnd": "2026-07-17",
        }


# ── Helpers ──────────────────────────────────────────────────────────────


@pytest.mark.parametrize("value, expected", [
    (True, True), ("TRUE", True), ("true", True), ("1", True),
    (False, False), ("FALSE", False), ("false", False), ("0", False),
])
def test_to_bool_recognised_values(value, expected):
    assert to_bool(value) is expected


def test_to_bool_empty_uses_default():
    assert to_bool("", default=True) is True
    assert to_bool(None) is False
    assert to_bool("maybe", default=True) is True


def test_to_int_lenient():
    assert to_int("3") == 3
    assert to_int("3.0") == 3
    assert to_int("", 7) == 7
    assert to_int("x") == 0


def test_parse_date_accepts_datetime_strings():
    assert parse_date("2026-07-01T09:30:00Z") == date(2026, 7, 1)
    assert parse_date("2026-07-01 14:00") == date(2026, 7, 1)
    assert parse_date("not a date") is None


def test_split_csv_trims_and_drops_empty():
    assert split_csv(" a, b,,c ") == ["a", "b", "c"]
    assert split_csv(["x", " ", "y"]) == ["x", "y"]


def test_paginate_second_page():
    page = paginate(list(range(45)), page=2, page_size=20)
    assert page["items"] == list(range(20, 40))
    assert page["totalPages"] == 3
    assert page["hasNext"] is True
    assert page["hasPrev"] is True


def test_paginate_last_page():
    page = paginate(list(range(45)), page=3, page_size=20)
    assert page["items"] == list(range(40, 45))
    assert page["total"] == 45
    assert page["totalPages"] == 3
    assert page["hasNext"] is False
    assert page["hasPrev"] is True


def test_paginate_empty():
    page = paginate([], page=1, page_size=20)
    assert page["totalPages"] == 0
    assert page["hasNext"] is False
    assert page["hasPrev"] is False

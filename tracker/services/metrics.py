"""
Derived project metrics.

Pure functions: no store access, ``today`` is always passed in (callers use
``today_kst()``), so dashboards and tests share the same arithmetic.

time_progress   — elapsed share of [scheduleStart, scheduleEnd], 0..100
stage_progress  — position of currentStage within the project's stage list
health_status   — normal / delayed / completed
"""

from datetime import date

from tracker.constants import (
    DELAY_THRESHOLD,
    HEALTH_COMPLETED,
    HEALTH_DELAYED,
    HEALTH_NORMAL,
    STATUS_DONE,
    STATUS_HOLD,
)
from tracker.utils.helpers import parse_date, split_csv


def _clamp(value: float, low: float = 0, high: float = 100) -> float:
    return max(low, min(high, value))


def time_progress(status: str, start, end, today: date) -> int:
    """Percentage of the schedule window elapsed at ``today``.

    - completed projects are always 100
    - missing or unparseable dates give 0
    - before start → 0, on/after end → 100
    """
    if status == STATUS_DONE:
        return 100
    start_d, end_d = parse_date(start), parse_date(end)
    if not start_d or not end_d:
        return 0
    if today < start_d:
        return 0
    if today >= end_d:
        return 100
    total = (end_d - start_d).days
    elapsed = (today - start_d).days
    return int(_clamp(round(elapsed / total * 100)))


def stage_progress(status: str, current_stage: str, stages) -> int:
    """Percentage of stages passed before ``current_stage``.

    ``stages`` may be a list or the comma-joined cell value.  An unknown
    current stage counts as 0.
    """
    if status == STATUS_DONE:
        return 100
    stage_list = split_csv(stages)
    if not stage_list or current_stage not in stage_list:
        return 0
    return int(_clamp(round(stage_list.index(current_stage) / len(stage_list) * 100)))


def expected_progress(start, end, today: date) -> float | None:
    """Elapsed-time progress clamped to 0..100, or None without a usable window."""
    start_d, end_d = parse_date(start), parse_date(end)
    if not start_d or not end_d:
        return None
    total = (end_d - start_d).days
    if total <= 0:
        return 100.0 if today >= end_d else 0.0
    return _clamp((today - start_d).days / total * 100)


def health_status(status: str, start, end, progress: float, today: date) -> str:
    """Classify schedule adherence.

    completed  — status is 완료, regardless of dates
    delayed    — status is 보류, the end date has passed, or ``progress``
                 trails expected elapsed-time progress by more than
                 DELAY_THRESHOLD points
    normal     — otherwise
    """
    if status == STATUS_DONE:
        return HEALTH_COMPLETED
    if status == STATUS_HOLD:
        return HEALTH_DELAYED
    end_d = parse_date(end)
    if end_d and today > end_d:
        return HEALTH_DELAYED
    expected = expected_progress(start, end, today)
    if expected is not None and progress < expected - DELAY_THRESHOLD:
        return HEALTH_DELAYED
    return HEALTH_NORMAL

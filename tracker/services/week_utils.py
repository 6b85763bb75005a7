"""
Week-of-month arithmetic for weekly reports (KST).

A month's weeks start on its first Monday; days before that Monday belong
to week 1.  A report week runs Monday through Friday.
"""

import calendar
from datetime import date, timedelta

from tracker.utils.helpers import today_kst


def first_monday(year: int, month: int) -> date:
    first = date(year, month, 1)
    # weekday(): Monday=0 .. Sunday=6
    dow = (first.weekday() + 1) % 7  # Sunday=0 .. Saturday=6
    if dow == 0:
        offset = 1
    elif dow == 1:
        offset = 0
    else:
        offset = 8 - dow
    return first + timedelta(days=offset)


def week_of_month(day: date) -> int:
    monday = first_monday(day.year, day.month)
    if day < monday:
        return 1
    return (day - monday).days // 7 + 1


def week_range(year: int, month: int, week: int) -> tuple[date, date]:
    """(Monday, Friday) of ``week`` in the month."""
    start = first_monday(year, month) + timedelta(weeks=week - 1)
    return start, start + timedelta(days=4)


def total_weeks(year: int, month: int) -> int:
    last_day = date(year, month, calendar.monthrange(year, month)[1])
    return max(1, (last_day - first_monday(year, month)).days // 7 + 1)


def current_week(today: date | None = None) -> dict:
    """The report week containing ``today`` (defaults to KST today)."""
    today = today or today_kst()
    week = week_of_month(today)
    start, end = week_range(today.year, today.month, week)
    return {
        "year": today.year,
        "month": today.month,
        "week": week,
        "weekStart": start.isoformat(),
        "weekEnd": end.isoformat(),
    }

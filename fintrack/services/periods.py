"""Predefined reporting periods as (start, end) calendar dates."""

import calendar
from datetime import date, timedelta

PERIODS: dict[str, str] = {
    "last_day": "Yesterday",
    "this_week": "This Week",
    "last_week": "Last Week",
    "this_month": "This Month",
    "last_month": "Last Month",
    "last_6_months": "Last 6 Months",
    "this_year": "This Year",
    "last_year": "Last Year",
}


def _month_start(day: date, months_back: int = 0) -> date:
    index = day.year * 12 + (day.month - 1) - months_back
    return date(index // 12, index % 12 + 1, 1)


def _month_end(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


def _week_start(day: date) -> date:
    return day - timedelta(days=day.weekday())  # Monday


def resolve_period(key: str, today: date | None = None) -> tuple[date, date]:
    """Return the inclusive date range for a period key.

    Weeks start on Monday. ``last_6_months`` is the current month plus the
    five before it.
    """
    today = today or date.today()

    if key == "last_day":
        yesterday = today - timedelta(days=1)
        return yesterday, yesterday
    if key == "this_week":
        start = _week_start(today)
        return start, start + timedelta(days=6)
    if key == "last_week":
        start = _week_start(today) - timedelta(days=7)
        return start, start + timedelta(days=6)
    if key == "this_month":
        return _month_start(today), _month_end(today)
    if key == "last_month":
        start = _month_start(today, 1)
        return start, _month_end(start)
    if key == "last_6_months":
        return _month_start(today, 5), _month_end(today)
    if key == "this_year":
        return date(today.year, 1, 1), date(today.year, 12, 31)
    if key == "last_year":
        return date(today.year - 1, 1, 1), date(today.year - 1, 12, 31)
    raise ValueError(f"Unknown period: {key}")

"""Calendar-date to UTC instant conversion for query filters."""

import re
from datetime import date, datetime, time, timezone

_CALENDAR_DATE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

START_OF_DAY = time(0, 0, 0, 0)
END_OF_DAY = time(23, 59, 59, 999000)


def format_instant(value: datetime) -> str:
    """Render an aware datetime as ISO-8601 UTC with millisecond precision."""
    utc = value.astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_calendar_date(value: str) -> date | None:
    """Return the date for a strict ``YYYY-MM-DD`` string, else None."""
    if not _CALENDAR_DATE.fullmatch(value):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def normalize_boundary(value: str | date, *, end: bool = False) -> str:
    """Convert a calendar date to the UTC instant of its start (or end).

    Strings that are not strict calendar dates are passed through untouched,
    so callers may also hand in ready-made instants.
    """
    if isinstance(value, datetime):
        return format_instant(value if value.tzinfo else value.replace(tzinfo=timezone.utc))
    if isinstance(value, date):
        day = value
    else:
        day = parse_calendar_date(value)
        if day is None:
            return value
    moment = datetime.combine(day, END_OF_DAY if end else START_OF_DAY, tzinfo=timezone.utc)
    return format_instant(moment)

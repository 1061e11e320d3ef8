"""Time-related utility functions."""

from datetime import date, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser


def utc_now() -> datetime:
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def today_in_timezone(tz_name: str = "America/New_York") -> date:
    """Return today's date in the given IANA timezone."""
    return datetime.now(ZoneInfo(tz_name)).date()


def parse_date(value) -> date:
    """
    Coerce a date, datetime or ISO string ("2025-06-15") to a date.

    Raises ValueError for anything that cannot be parsed.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value or not str(value).strip():
        raise ValueError("Empty date value")
    return date_parser.isoparse(str(value).strip()).date()


def time_to_minutes(value: str) -> int:
    """Parse an "HH:MM" string to minutes since midnight."""
    hours, _, minutes = value.strip().partition(":")
    return int(hours) * 60 + int(minutes or 0)


def minutes_to_time(minutes: int) -> str:
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def calculate_hours(start_time: str, end_time: str) -> float:
    """Decimal hours between two "HH:MM" times, rounded to 2 places."""
    minutes = time_to_minutes(end_time) - time_to_minutes(start_time)
    if minutes <= 0:
        raise ValueError(f"End time {end_time} must be after start time {start_time}")
    return round(minutes / 60, 2)


def week_dates(week_start: date) -> list[date]:
    """The 7 consecutive dates starting at week_start."""
    return [week_start + timedelta(days=i) for i in range(7)]


def labor_day(year: int) -> date:
    """First Monday of September."""
    first = date(year, 9, 1)
    return first + timedelta(days=(7 - first.weekday()) % 7)


def is_summer_period(value: date) -> bool:
    """True from June 1 up to (not including) Labor Day."""
    return date(value.year, 6, 1) <= value < labor_day(value.year)

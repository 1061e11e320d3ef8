from .time import (
    utc_now,
    today_in_timezone,
    parse_date,
    time_to_minutes,
    minutes_to_time,
    calculate_hours,
    week_dates,
    labor_day,
    is_summer_period,
)

__all__ = [
    "utc_now",
    "today_in_timezone",
    "parse_date",
    "time_to_minutes",
    "minutes_to_time",
    "calculate_hours",
    "week_dates",
    "labor_day",
    "is_summer_period",
]

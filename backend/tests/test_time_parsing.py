import pytest
from datetime import date, datetime, timezone

from utils import (
    calculate_hours,
    is_summer_period,
    labor_day,
    minutes_to_time,
    parse_date,
    time_to_minutes,
    utc_now,
    week_dates,
)


class TestTimeToMinutes:

    @pytest.mark.parametrize("value,expected", [
        ("00:00", 0),
        ("07:00", 420),
        ("15:30", 930),
        ("23:30", 1410),
    ])
    def test_parses_hh_mm(self, value, expected):
        assert time_to_minutes(value) == expected

    def test_minutes_to_time_pads(self):
        assert minutes_to_time(425) == "07:05"


class TestCalculateHours:

    def test_whole_hours(self):
        assert calculate_hours("09:00", "14:00") == 5.0

    def test_fractional_hours(self):
        assert calculate_hours("09:00", "13:30") == 4.5

    def test_rounded_to_two_places(self):
        assert calculate_hours("09:00", "09:20") == 0.33

    def test_end_before_start_raises(self):
        with pytest.raises(ValueError):
            calculate_hours("14:00", "09:00")

    def test_zero_length_raises(self):
        with pytest.raises(ValueError):
            calculate_hours("09:00", "09:00")


class TestParseDate:

    def test_iso_string(self):
        assert parse_date("2025-06-15") == date(2025, 6, 15)

    def test_datetime_is_truncated(self):
        assert parse_date(datetime(2025, 6, 15, 23, 59)) == date(2025, 6, 15)

    def test_date_passes_through(self):
        assert parse_date(date(2025, 6, 15)) == date(2025, 6, 15)

    @pytest.mark.parametrize("value", ["", "   ", None, "not-a-date"])
    def test_invalid_values_raise(self, value):
        with pytest.raises(ValueError):
            parse_date(value)


class TestWeeks:

    def test_week_dates(self):
        dates = week_dates(date(2025, 6, 8))

        assert len(dates) == 7
        assert dates[0] == date(2025, 6, 8)
        assert dates[-1] == date(2025, 6, 14)


class TestSummerPeriod:

    def test_labor_day_when_sept_1_is_monday(self):
        assert labor_day(2025) == date(2025, 9, 1)

    def test_labor_day_when_sept_1_is_sunday(self):
        assert labor_day(2024) == date(2024, 9, 2)

    @pytest.mark.parametrize("value,expected", [
        (date(2025, 5, 31), False),
        (date(2025, 6, 1), True),
        (date(2025, 8, 31), True),
        (date(2025, 9, 1), False),
        (date(2024, 9, 1), True),
        (date(2025, 12, 1), False),
    ])
    def test_summer_boundaries(self, value, expected):
        assert is_summer_period(value) is expected


def test_utc_now_is_timezone_aware():
    assert utc_now().tzinfo == timezone.utc

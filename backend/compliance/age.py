"""
Age arithmetic for compliance evaluation.

Age is always computed as of a specific work date, never "today", so that a
birthday in the middle of a week switches thresholds on the right day.
"""

from datetime import date

from utils import parse_date, week_dates

from .types import AgeBand, BirthdayInWeek


MINIMUM_EMPLOYMENT_AGE = 12


class AgeBelowMinimum(ValueError):
    """Raised when an age falls below the legal employment floor."""

    def __init__(self, age: int):
        super().__init__(f"Age {age} is below minimum employment age of {MINIMUM_EMPLOYMENT_AGE}")
        self.age = age


def age_as_of(date_of_birth, on_date) -> int:
    """
    Whole years between date_of_birth and on_date.

    A Feb 29 birthday has not occurred yet on Feb 28 of a non-leap year; the
    worker turns a year older on Mar 1.

    >>> age_as_of("2010-06-15", "2024-06-14")
    13
    >>> age_as_of("2010-06-15", "2024-06-15")
    14
    """
    dob = parse_date(date_of_birth)
    target = parse_date(on_date)
    age = target.year - dob.year
    if (target.month, target.day) < (dob.month, dob.day):
        age -= 1
    return age


def age_band(age: int) -> AgeBand:
    """Map an age to its regulatory bracket."""
    if age < MINIMUM_EMPLOYMENT_AGE:
        raise AgeBelowMinimum(age)
    if age <= 13:
        return AgeBand.AGES_12_13
    if age <= 15:
        return AgeBand.AGES_14_15
    if age <= 17:
        return AgeBand.AGES_16_17
    return AgeBand.ADULT


def birthday_within_week(date_of_birth, week_start) -> BirthdayInWeek:
    """Scan the 7 dates starting at week_start for the worker's birthday."""
    dob = parse_date(date_of_birth)
    for day in week_dates(parse_date(week_start)):
        if (day.month, day.day) == (dob.month, dob.day):
            return BirthdayInWeek(
                has_birthday=True,
                birthday_date=day,
                new_age=age_as_of(dob, day),
            )
    return BirthdayInWeek(has_birthday=False)


def weekly_ages(date_of_birth, week_start) -> dict[date, int]:
    """Age on each of the 7 dates of the week, in date order."""
    dob = parse_date(date_of_birth)
    return {day: age_as_of(dob, day) for day in week_dates(parse_date(week_start))}

"""Assembly of the immutable EvaluationContext for one worker-week."""

import logging
from collections import defaultdict
from datetime import date
from typing import Iterable

from utils import calculate_hours, parse_date

from .age import AgeBelowMinimum, age_band, birthday_within_week, weekly_ages
from .errors import InvalidTimeRange
from .types import (
    AgeBand,
    Document,
    EvaluationContext,
    WorkEntry,
    Worker,
    WorkWeek,
)

logger = logging.getLogger(__name__)


def validate_time_ranges(entries: Iterable[WorkEntry]):
    """Raise InvalidTimeRange for the first entry that does not end after it starts."""
    for entry in entries:
        try:
            calculate_hours(entry.start_time, entry.end_time)
        except ValueError as e:
            raise InvalidTimeRange(entry.id, entry.start_time, entry.end_time) from e


def build_context(
    worker: Worker,
    week: WorkWeek,
    documents: Iterable[Document],
    check_date,
) -> EvaluationContext:
    """
    Build the evaluation snapshot from already-loaded records.

    A week without entries is still a valid context: every per-date mapping is
    empty and the weekly total is 0.
    """
    check_date = parse_date(check_date)
    validate_time_ranges(week.entries)

    daily_ages = weekly_ages(worker.date_of_birth, week.week_start_date)
    daily_age_bands: dict[date, AgeBand] = {}
    below_minimum: list[date] = []
    for day, age in daily_ages.items():
        try:
            daily_age_bands[day] = age_band(age)
        except AgeBelowMinimum:
            # Strictest minor band; the minimum-age rule reports the violation
            daily_age_bands[day] = AgeBand.AGES_12_13
            below_minimum.append(day)

    entries = sorted(week.entries, key=lambda e: (e.work_date, e.start_time))

    grouped: dict[date, list[WorkEntry]] = defaultdict(list)
    for entry in entries:
        grouped[entry.work_date].append(entry)

    daily_entries = {day: tuple(items) for day, items in grouped.items()}
    daily_hours = {
        day: round(sum(e.hours for e in items), 2)
        for day, items in daily_entries.items()
    }
    school_days = tuple(
        day for day, items in daily_entries.items()
        if any(e.is_school_day for e in items)
    )
    work_days = tuple(daily_entries.keys())
    weekly_total = round(sum(daily_hours.values()), 2)

    birthday = birthday_within_week(worker.date_of_birth, week.week_start_date)
    if birthday.has_birthday:
        logger.info(
            "Worker %s turns %s on %s during week %s",
            worker.id, birthday.new_age, birthday.birthday_date, week.id,
        )

    return EvaluationContext(
        worker=worker,
        week=week,
        documents=tuple(documents),
        daily_ages=daily_ages,
        daily_age_bands=daily_age_bands,
        daily_hours=daily_hours,
        daily_entries=daily_entries,
        school_days=school_days,
        work_days=work_days,
        weekly_total=weekly_total,
        is_school_week=len(school_days) > 0,
        check_date=check_date,
        birthday=birthday,
        below_minimum_dates=tuple(below_minimum),
    )

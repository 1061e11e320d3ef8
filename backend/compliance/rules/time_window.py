"""
Time window rules: when in the day a minor may work.

Times are "HH:MM" strings compared as minutes since midnight. An entry
overlaps school hours unless it ends at or before school starts or begins at
or after school ends.
"""

from datetime import date, timedelta

from utils import is_summer_period, time_to_minutes

from ..types import AgeBand, EvaluationContext, RuleCategory, RuleResult, WorkEntry
from .base import BaseRule, unique_dates

# Sunday through Thursday, as date.weekday() values
SCHOOL_NIGHT_WEEKDAYS = (6, 0, 1, 2, 3)


def overlaps(entry: WorkEntry, window_start: str, window_end: str) -> bool:
    start = time_to_minutes(entry.start_time)
    end = time_to_minutes(entry.end_time)
    return not (end <= time_to_minutes(window_start) or start >= time_to_minutes(window_end))


def is_school_night(context: EvaluationContext, day: date) -> bool:
    """The next date has a school-day entry, or it is a school week and day is Sun-Thu."""
    if context.is_school_day(day + timedelta(days=1)):
        return True
    return context.is_school_week and day.weekday() in SCHOOL_NIGHT_WEEKDAYS


def _violation(day: date, entry: WorkEntry, **extra) -> dict:
    return {
        "date": day.isoformat(),
        "entry_id": entry.id,
        "start_time": entry.start_time,
        "end_time": entry.end_time,
        **extra,
    }


class TimeWindowRule(BaseRule):
    category = RuleCategory.TIME_WINDOW
    band: AgeBand

    def entries_in_band(self, context: EvaluationContext):
        """(date, entry) pairs on dates in this rule's band, in date order."""
        for day, entries in context.daily_entries.items():
            if context.daily_age_bands.get(day) != self.band:
                continue
            for entry in entries:
                yield day, entry

    def failed_with(self, violations: list[dict], **details) -> RuleResult:
        return self.failed(
            checked_values={"violations": violations, **details.pop("checked_values", {})},
            affected_dates=unique_dates(violations),
            affected_entries=[v["entry_id"] for v in violations],
            **details,
        )


class SchoolHoursRule(TimeWindowRule):
    """No work during school hours on a school day."""

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        window_start = self.thresholds.school_hours_start
        window_end = self.thresholds.school_hours_end
        window = {"window_start": window_start, "window_end": window_end}

        violations = [
            _violation(day, entry)
            for day, entry in self.entries_in_band(context)
            if context.is_school_day(day) and overlaps(entry, window_start, window_end)
        ]

        if not violations:
            return self.passed(checked_values=window)

        first = violations[0]
        return self.failed_with(
            violations,
            checked_values=window,
            threshold=f"{window_start}-{window_end}",
            actual_value=f"{first['start_time']}-{first['end_time']}",
        )


class SchoolHours12_13Rule(SchoolHoursRule):
    rule_id = "RULE-004"
    name = "Ages 12-13 School Hours Prohibition"
    description = "Ages 12-13 cannot work during school hours on school days"
    band = AgeBand.AGES_12_13
    applies_to_age_bands = (AgeBand.AGES_12_13,)


class SchoolHours14_15Rule(SchoolHoursRule):
    rule_id = "RULE-010"
    name = "Ages 14-15 School Hours Prohibition"
    description = "Ages 14-15 cannot work during school hours on school days"
    band = AgeBand.AGES_14_15
    applies_to_age_bands = (AgeBand.AGES_14_15,)


class SchoolHours16_17Rule(SchoolHoursRule):
    rule_id = "RULE-034"
    name = "Ages 16-17 School Hours Prohibition"
    description = "Ages 16-17 cannot work during school hours on school days"
    band = AgeBand.AGES_16_17
    applies_to_age_bands = (AgeBand.AGES_16_17,)


class WorkWindow14_15Rule(TimeWindowRule):
    rule_id = "RULE-011"
    name = "Ages 14-15 Work Window"
    description = "Ages 14-15 may only work 7 AM - 7 PM (9 PM summer)"
    band = AgeBand.AGES_14_15
    applies_to_age_bands = (AgeBand.AGES_14_15,)

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        t = self.thresholds
        violations = []
        for day, entry in self.entries_in_band(context):
            summer = is_summer_period(day)
            window_end = t.window_14_15_end_summer if summer else t.window_14_15_end
            if (time_to_minutes(entry.start_time) < time_to_minutes(t.window_14_15_start)
                    or time_to_minutes(entry.end_time) > time_to_minutes(window_end)):
                violations.append(_violation(
                    day, entry,
                    window_start=t.window_14_15_start,
                    window_end=window_end,
                    is_summer=summer,
                ))

        if not violations:
            return self.passed(checked_values={"window_start": t.window_14_15_start})

        first = violations[0]
        return self.failed_with(
            violations,
            threshold=f"{first['window_start']}-{first['window_end']}",
            actual_value=f"{first['start_time']}-{first['end_time']}",
        )


class SchoolNight16_17Rule(TimeWindowRule):
    rule_id = "RULE-016"
    name = "Ages 16-17 School Night Restriction"
    description = "Ages 16-17 cannot work past 10 PM on school nights"
    band = AgeBand.AGES_16_17
    applies_to_age_bands = (AgeBand.AGES_16_17,)

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        limit = self.thresholds.window_16_17_end_school_night
        violations = [
            _violation(day, entry)
            for day, entry in self.entries_in_band(context)
            if is_school_night(context, day)
            and time_to_minutes(entry.end_time) > time_to_minutes(limit)
        ]

        if not violations:
            return self.passed(threshold=limit)

        return self.failed_with(
            violations,
            threshold=limit,
            actual_value=violations[0]["end_time"],
        )


class WorkWindow16_17Rule(TimeWindowRule):
    """Never before the morning start; past the late end only matters on non-school nights."""

    rule_id = "RULE-017"
    name = "Ages 16-17 Work Window"
    description = "Ages 16-17 may only work 6 AM - 11:30 PM"
    band = AgeBand.AGES_16_17
    applies_to_age_bands = (AgeBand.AGES_16_17,)

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        t = self.thresholds
        start_limit = time_to_minutes(t.window_16_17_start)
        violations = []
        for day, entry in self.entries_in_band(context):
            school_night = is_school_night(context, day)
            window_end = t.window_16_17_end_school_night if school_night else t.window_16_17_end
            too_early = time_to_minutes(entry.start_time) < start_limit
            # School-night late ends are reported by the school night rule
            too_late = not school_night and time_to_minutes(entry.end_time) > time_to_minutes(window_end)
            if too_early or too_late:
                violations.append(_violation(
                    day, entry,
                    window_start=t.window_16_17_start,
                    window_end=window_end,
                ))

        if not violations:
            return self.passed(checked_values={"window_start": t.window_16_17_start})

        first = violations[0]
        return self.failed_with(
            violations,
            threshold=f"{first['window_start']}-{first['window_end']}",
            actual_value=f"{first['start_time']}-{first['end_time']}",
        )


TIME_WINDOW_RULES = (
    SchoolHours12_13Rule,
    SchoolHours14_15Rule,
    WorkWindow14_15Rule,
    SchoolNight16_17Rule,
    WorkWindow16_17Rule,
    SchoolHours16_17Rule,
)

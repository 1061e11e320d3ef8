"""
Hour limit rules.

Limits are applied per calendar date using the age band of that date, so a
birthday mid-week switches thresholds from the birthday onward. Weekly totals
only sum the dates that fall in the rule's age band.
"""

from datetime import date
from typing import Optional

from ..types import AgeBand, EvaluationContext, RuleCategory, RuleResult
from .base import BaseRule


class HourRule(BaseRule):
    category = RuleCategory.HOURS
    band: AgeBand

    def dates_in_band(self, context: EvaluationContext) -> list[date]:
        """Worked dates on which the worker is in this rule's band, in date order."""
        return [
            day for day in context.daily_hours
            if context.daily_age_bands.get(day) == self.band
        ]

    def entry_ids(self, context: EvaluationContext, days) -> list[str]:
        return [entry.id for day in days for entry in context.daily_entries.get(day, ())]


class DailyHourLimitRule(HourRule):
    """Fails on every date in the band whose hours exceed the limit."""

    limit_field: str
    # None checks every day; True only school days; False only non-school days
    school_days: Optional[bool] = None

    @property
    def limit(self) -> float:
        return getattr(self.thresholds, self.limit_field)

    def _selects(self, context: EvaluationContext, day: date) -> bool:
        if self.school_days is None:
            return True
        return context.is_school_day(day) == self.school_days

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        limit = self.limit
        checked = [day for day in self.dates_in_band(context) if self._selects(context, day)]
        violations = [
            {"date": day.isoformat(), "hours": context.daily_hours[day]}
            for day in checked
            if context.daily_hours[day] > limit
        ]

        if not violations:
            return self.passed(
                checked_values={"limit": limit, "days_checked": len(checked)},
                threshold=limit,
            )

        affected = [date.fromisoformat(v["date"]) for v in violations]
        return self.failed(
            checked_values={"violations": violations},
            threshold=limit,
            actual_value=violations[0]["hours"],
            affected_dates=[v["date"] for v in violations],
            affected_entries=self.entry_ids(context, affected),
        )


class WeeklyHourLimitRule(HourRule):
    """Fails when hours summed over the band's dates exceed the limit."""

    limit_field: str
    # None applies to every week; True only school weeks; False only non-school weeks
    school_week: Optional[bool] = None

    @property
    def limit(self) -> float:
        return getattr(self.thresholds, self.limit_field)

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        if self.school_week is not None and context.is_school_week != self.school_week:
            kind = "school" if self.school_week else "non-school"
            return self.not_applicable(
                description=f"{kind.capitalize()} week limit only applies during {kind} weeks",
                checked_values={"is_school_week": context.is_school_week},
            )

        limit = self.limit
        days = self.dates_in_band(context)
        total = round(sum(context.daily_hours[day] for day in days), 2)
        checked_values = {"total": total}
        if self.school_week is not None:
            checked_values["is_school_week"] = context.is_school_week

        if total <= limit:
            return self.passed(checked_values=checked_values, threshold=limit, actual_value=total)

        return self.failed(
            checked_values=checked_values,
            threshold=limit,
            actual_value=total,
            affected_dates=[day.isoformat() for day in days],
            affected_entries=self.entry_ids(context, days),
        )


class DailyLimit12_13Rule(DailyHourLimitRule):
    rule_id = "RULE-002"
    name = "Ages 12-13 Daily Hour Limit"
    description = "Daily hour limit for ages 12-13"
    band = AgeBand.AGES_12_13
    applies_to_age_bands = (AgeBand.AGES_12_13,)
    limit_field = "daily_limit_12_13"


class WeeklyLimit12_13Rule(WeeklyHourLimitRule):
    rule_id = "RULE-003"
    name = "Ages 12-13 Weekly Hour Limit"
    description = "Weekly hour limit for ages 12-13"
    band = AgeBand.AGES_12_13
    applies_to_age_bands = (AgeBand.AGES_12_13,)
    limit_field = "weekly_limit_12_13"


class SchoolDayLimit14_15Rule(DailyHourLimitRule):
    rule_id = "RULE-008"
    name = "Ages 14-15 School Day Limit"
    description = "School day hour limit for ages 14-15"
    band = AgeBand.AGES_14_15
    applies_to_age_bands = (AgeBand.AGES_14_15,)
    limit_field = "school_day_limit_14_15"
    school_days = True


class SchoolWeekLimit14_15Rule(WeeklyHourLimitRule):
    rule_id = "RULE-009"
    name = "Ages 14-15 School Week Limit"
    description = "School week hour limit for ages 14-15"
    band = AgeBand.AGES_14_15
    applies_to_age_bands = (AgeBand.AGES_14_15,)
    limit_field = "school_week_limit_14_15"
    school_week = True


class NonSchoolDayLimit14_15Rule(DailyHourLimitRule):
    rule_id = "RULE-032"
    name = "Ages 14-15 Non-School Day Limit"
    description = "Non-school day hour limit for ages 14-15"
    band = AgeBand.AGES_14_15
    applies_to_age_bands = (AgeBand.AGES_14_15,)
    limit_field = "non_school_day_limit_14_15"
    school_days = False


class NonSchoolWeekLimit14_15Rule(WeeklyHourLimitRule):
    rule_id = "RULE-033"
    name = "Ages 14-15 Non-School Week Limit"
    description = "Non-school week hour limit for ages 14-15"
    band = AgeBand.AGES_14_15
    applies_to_age_bands = (AgeBand.AGES_14_15,)
    limit_field = "non_school_week_limit_14_15"
    school_week = False


class DailyLimit16_17Rule(DailyHourLimitRule):
    rule_id = "RULE-014"
    name = "Ages 16-17 Daily Hour Limit"
    description = "Daily hour limit for ages 16-17"
    band = AgeBand.AGES_16_17
    applies_to_age_bands = (AgeBand.AGES_16_17,)
    limit_field = "daily_limit_16_17"


class WeeklyLimit16_17Rule(WeeklyHourLimitRule):
    rule_id = "RULE-015"
    name = "Ages 16-17 Weekly Hour Limit"
    description = "Weekly hour limit for ages 16-17"
    band = AgeBand.AGES_16_17
    applies_to_age_bands = (AgeBand.AGES_16_17,)
    limit_field = "weekly_limit_16_17"


class DayCountLimit16_17Rule(HourRule):
    rule_id = "RULE-018"
    name = "Ages 16-17 Day Count Limit"
    description = "Maximum worked days per week for ages 16-17"
    band = AgeBand.AGES_16_17
    applies_to_age_bands = (AgeBand.AGES_16_17,)

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        max_days = self.thresholds.max_days_16_17
        days = [day for day in context.work_days if context.daily_age_bands.get(day) == self.band]

        if len(days) <= max_days:
            return self.passed(
                checked_values={"days_worked": len(days)},
                threshold=max_days,
                actual_value=len(days),
            )

        return self.failed(
            checked_values={"days_worked": len(days)},
            threshold=max_days,
            actual_value=len(days),
            affected_dates=[day.isoformat() for day in days],
            affected_entries=self.entry_ids(context, days),
        )


HOUR_RULES = (
    DailyLimit12_13Rule,
    WeeklyLimit12_13Rule,
    SchoolDayLimit14_15Rule,
    SchoolWeekLimit14_15Rule,
    NonSchoolDayLimit14_15Rule,
    NonSchoolWeekLimit14_15Rule,
    DailyLimit16_17Rule,
    WeeklyLimit16_17Rule,
    DayCountLimit16_17Rule,
)

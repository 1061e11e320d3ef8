"""Break rules."""

from ..types import EvaluationContext, MINOR_AGE_BANDS, RuleCategory, RuleResult
from .base import BaseRule


class BreakRule(BaseRule):
    category = RuleCategory.BREAK
    applies_to_age_bands = MINOR_AGE_BANDS


class MealBreakRule(BreakRule):
    rule_id = "RULE-025"
    name = "Meal Break Required"
    description = "30-minute meal break required for minors working more than 6 hours"

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        if not context.has_minor_age_band:
            return self.not_applicable(checked_values={"is_minor": False})

        threshold = self.thresholds.meal_break_after_hours
        break_minutes = self.thresholds.meal_break_duration_minutes

        violations = []
        for day, hours in context.daily_hours.items():
            if context.daily_ages.get(day, 18) >= 18 or hours <= threshold:
                continue
            entries = context.daily_entries.get(day, ())
            if not any(e.meal_break_confirmed is True for e in entries):
                violations.append({
                    "date": day.isoformat(),
                    "hours": hours,
                    "entry_ids": [e.id for e in entries],
                })

        if not violations:
            return self.passed(
                checked_values={"break_minutes": break_minutes},
                threshold=threshold,
            )

        return self.failed(
            checked_values={"violations": violations, "break_minutes": break_minutes},
            threshold=threshold,
            actual_value=violations[0]["hours"],
            affected_dates=[v["date"] for v in violations],
            affected_entries=[entry_id for v in violations for entry_id in v["entry_ids"]],
        )


BREAK_RULES = (MealBreakRule,)

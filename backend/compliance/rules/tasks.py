"""
Task restriction rules.

Each entry is checked against its task code's attributes and the worker's age
on the entry's date. Only dates on which the worker is a minor are checked.
"""

from datetime import date

from ..types import (
    AgeBand,
    EvaluationContext,
    MINOR_AGE_BANDS,
    RuleCategory,
    RuleResult,
    SupervisorRequirement,
    WorkEntry,
)
from .base import BaseRule, unique_dates


def _violation(day: date, entry: WorkEntry, age: int, **extra) -> dict:
    return {
        "date": day.isoformat(),
        "entry_id": entry.id,
        "task_code": entry.task_code.code,
        "task_name": entry.task_code.name,
        "age": age,
        **extra,
    }


class TaskRule(BaseRule):
    category = RuleCategory.TASK
    applies_to_age_bands = MINOR_AGE_BANDS

    def minor_entries(self, context: EvaluationContext, below_age: int = 18):
        """(date, age, entry) for every entry on a date the worker is under below_age."""
        for day, entries in context.daily_entries.items():
            age = context.daily_ages.get(day)
            if age is None or age >= below_age:
                continue
            for entry in entries:
                yield day, age, entry

    def failed_with(self, violations: list[dict], **details) -> RuleResult:
        return self.failed(
            checked_values={"violations": violations},
            affected_dates=unique_dates(violations),
            affected_entries=[v["entry_id"] for v in violations if "entry_id" in v],
            **details,
        )


class MinimumEmploymentAgeRule(TaskRule):
    """Reports work on dates the worker is below the legal employment floor."""

    rule_id = "RULE-023"
    name = "Minimum Employment Age"
    description = "Workers must be at least the minimum employment age"
    applies_to_age_bands = (AgeBand.AGES_12_13,)

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        minimum = self.thresholds.minimum_employment_age
        violations = [
            _violation(day, entry, age)
            for day, age, entry in self.minor_entries(context, below_age=minimum)
        ]

        if not violations:
            return self.passed(threshold=minimum)

        return self.failed_with(violations, threshold=minimum, actual_value=violations[0]["age"])


class TaskAgeRestrictionRule(TaskRule):
    rule_id = "RULE-005"
    name = "Task Age Restriction"
    description = "Task codes have minimum age requirements"

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        violations = [
            _violation(day, entry, age, min_age=entry.task_code.min_age_allowed)
            for day, age, entry in self.minor_entries(context)
            if age < entry.task_code.min_age_allowed
        ]

        if not violations:
            return self.passed()

        first = violations[0]
        return self.failed_with(violations, threshold=first["min_age"], actual_value=first["age"])


class ProhibitedTaskRule(TaskRule):
    """Fails on any minor entry whose task code has the prohibited attribute set."""

    task_flag: str

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        violations = [
            _violation(day, entry, age)
            for day, age, entry in self.minor_entries(context)
            if getattr(entry.task_code, self.task_flag)
        ]

        if not violations:
            return self.passed()

        return self.failed_with(violations, actual_value=violations[0]["task_code"])


class PowerMachineryRule(ProhibitedTaskRule):
    rule_id = "RULE-020"
    name = "Power Machinery Prohibition"
    description = "Workers under 18 cannot operate power machinery"
    task_flag = "power_machinery"


class DrivingRule(ProhibitedTaskRule):
    rule_id = "RULE-021"
    name = "Driving Prohibition"
    description = "Workers under 18 cannot perform driving tasks"
    task_flag = "driving_required"


class HazardousTaskRule(ProhibitedTaskRule):
    rule_id = "RULE-024"
    name = "Hazardous Task Prohibition"
    description = "Workers under 18 cannot perform hazardous tasks"
    task_flag = "is_hazardous"


class SoloCashHandlingRule(TaskRule):
    rule_id = "RULE-022"
    name = "Solo Cash Handling Prohibition"
    description = "Workers under 14 cannot handle cash alone"
    applies_to_age_bands = (AgeBand.AGES_12_13,)

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        min_age = self.thresholds.solo_cash_handling_min_age
        violations = [
            _violation(day, entry, age)
            for day, age, entry in self.minor_entries(context, below_age=min_age)
            if entry.task_code.solo_cash_handling
        ]

        if not violations:
            return self.passed(threshold=min_age)

        return self.failed_with(violations, threshold=min_age, actual_value=violations[0]["age"])


class SupervisorAttestationRule(TaskRule):
    rule_id = "RULE-029"
    name = "Supervisor Attestation Required"
    description = "Tasks requiring supervision must record the supervisor present"

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        requiring = (SupervisorRequirement.ALWAYS, SupervisorRequirement.FOR_MINORS)
        violations = [
            _violation(day, entry, age, supervisor_required=entry.task_code.supervisor_required.value)
            for day, age, entry in self.minor_entries(context)
            if entry.task_code.supervisor_required in requiring
            and not (entry.supervisor_present_name or "").strip()
        ]

        if not violations:
            return self.passed(threshold="supervisor name recorded")

        return self.failed_with(violations, threshold="supervisor name recorded", actual_value="missing")


TASK_RULES = (
    MinimumEmploymentAgeRule,
    TaskAgeRestrictionRule,
    PowerMachineryRule,
    DrivingRule,
    SoloCashHandlingRule,
    HazardousTaskRule,
    SupervisorAttestationRule,
)

"""Compliance rule catalog, grouped by category."""

from .base import BaseRule
from .breaks import BREAK_RULES, BreakRule, MealBreakRule
from .documentation import (
    DOCUMENTATION_RULES,
    DocumentationRule,
    ParentalConsentNotRevokedRule,
    ParentalConsentRule,
    SafetyTrainingRule,
    WorkPermitNotExpiredRule,
    WorkPermitRequiredRule,
)
from .hours import (
    HOUR_RULES,
    DailyHourLimitRule,
    HourRule,
    WeeklyHourLimitRule,
)
from .tasks import TASK_RULES, ProhibitedTaskRule, TaskRule
from .time_window import TIME_WINDOW_RULES, TimeWindowRule, is_school_night

# Registration order
ALL_RULES = DOCUMENTATION_RULES + HOUR_RULES + TIME_WINDOW_RULES + TASK_RULES + BREAK_RULES

__all__ = [
    "ALL_RULES",
    "BaseRule",
    "BreakRule",
    "DailyHourLimitRule",
    "DocumentationRule",
    "HourRule",
    "MealBreakRule",
    "ParentalConsentNotRevokedRule",
    "ParentalConsentRule",
    "ProhibitedTaskRule",
    "SafetyTrainingRule",
    "TaskRule",
    "TimeWindowRule",
    "WeeklyHourLimitRule",
    "WorkPermitNotExpiredRule",
    "WorkPermitRequiredRule",
    "is_school_night",
]

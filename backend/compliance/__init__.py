"""Youth labor compliance engine for weekly timesheets."""

from .types import (
    AgeBand,
    AuditRecord,
    CheckResult,
    EvaluationContext,
    PreviewResult,
    RuleCategory,
    RuleOutcome,
    RuleResult,
    Violation,
)
from .age import AgeBelowMinimum, age_as_of, age_band, birthday_within_week
from .errors import ComplianceError, InvalidTimeRange, WeekNotFound, WorkerNotFound
from .thresholds import ComplianceThresholds
from .registry import RuleRegistry, build_default_registry
from .engine import ComplianceEngine, evaluate_rules
from .audit import AuditLogger
from .sources import ComplianceDataSource

__all__ = [
    "AgeBand",
    "AuditRecord",
    "CheckResult",
    "EvaluationContext",
    "PreviewResult",
    "RuleCategory",
    "RuleOutcome",
    "RuleResult",
    "Violation",
    "AgeBelowMinimum",
    "age_as_of",
    "age_band",
    "birthday_within_week",
    "ComplianceError",
    "InvalidTimeRange",
    "WeekNotFound",
    "WorkerNotFound",
    "ComplianceThresholds",
    "RuleRegistry",
    "build_default_registry",
    "ComplianceEngine",
    "evaluate_rules",
    "AuditLogger",
    "ComplianceDataSource",
]

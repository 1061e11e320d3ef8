"""Type definitions for the compliance module."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from utils import calculate_hours


class AgeBand(str, Enum):
    """Regulatory age brackets."""
    AGES_12_13 = "12-13"
    AGES_14_15 = "14-15"
    AGES_16_17 = "16-17"
    ADULT = "18+"


MINOR_AGE_BANDS = (AgeBand.AGES_12_13, AgeBand.AGES_14_15, AgeBand.AGES_16_17)


class RuleCategory(str, Enum):
    DOCUMENTATION = "documentation"
    HOURS = "hours"
    TIME_WINDOW = "time_window"
    TASK = "task"
    BREAK = "break"


class RuleOutcome(str, Enum):
    """Result of evaluating a single rule."""
    PASS = "pass"
    FAIL = "fail"
    NOT_APPLICABLE = "not_applicable"


class DocumentType(str, Enum):
    PARENTAL_CONSENT = "parental_consent"
    WORK_PERMIT = "work_permit"
    SAFETY_TRAINING = "safety_training"


class SupervisorRequirement(str, Enum):
    NONE = "none"
    FOR_MINORS = "for_minors"
    ALWAYS = "always"


class WeekStatus(str, Enum):
    OPEN = "open"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class Worker:
    """Worker data needed for compliance checks."""
    id: str
    name: str
    date_of_birth: date
    email: str = ""
    is_supervisor: bool = False


@dataclass(frozen=True)
class Document:
    """A compliance document on file for a worker."""
    id: str
    type: DocumentType
    uploaded_at: datetime
    expires_at: Optional[date] = None
    invalidated_at: Optional[datetime] = None

    def is_valid_on(self, on_date: date) -> bool:
        """Not invalidated, and not expired before on_date."""
        if self.invalidated_at is not None:
            return False
        return self.expires_at is None or self.expires_at >= on_date


@dataclass(frozen=True)
class TaskCode:
    code: str
    name: str
    min_age_allowed: int = 12
    is_hazardous: bool = False
    power_machinery: bool = False
    driving_required: bool = False
    solo_cash_handling: bool = False
    supervisor_required: SupervisorRequirement = SupervisorRequirement.NONE


@dataclass(frozen=True)
class WorkEntry:
    """A single block of recorded work."""
    id: str
    work_date: date
    task_code: TaskCode
    start_time: str  # HH:MM
    end_time: str  # HH:MM
    is_school_day: bool = False
    supervisor_present_name: Optional[str] = None
    meal_break_confirmed: Optional[bool] = None

    @property
    def hours(self) -> float:
        """Decimal hours, always derived from start and end time."""
        return calculate_hours(self.start_time, self.end_time)


@dataclass(frozen=True)
class WorkWeek:
    """A worker's timesheet for one Sunday-to-Saturday week."""
    id: str
    worker_id: str
    week_start_date: date
    status: WeekStatus = WeekStatus.OPEN
    entries: tuple[WorkEntry, ...] = ()


@dataclass(frozen=True)
class EvaluationContext:
    """
    Immutable snapshot of one worker-week, built once per check.

    Per-date mappings are ordered by date. Ages below the employment floor are
    banded as 12-13 and listed in below_minimum_dates.
    """
    worker: Worker
    week: WorkWeek
    documents: tuple[Document, ...]
    daily_ages: Mapping[date, int]
    daily_age_bands: Mapping[date, AgeBand]
    daily_hours: Mapping[date, float]
    daily_entries: Mapping[date, tuple[WorkEntry, ...]]
    school_days: tuple[date, ...]
    work_days: tuple[date, ...]
    weekly_total: float
    is_school_week: bool
    check_date: date
    birthday: "BirthdayInWeek"
    below_minimum_dates: tuple[date, ...] = ()

    def __post_init__(self):
        for name in ("daily_ages", "daily_age_bands", "daily_hours", "daily_entries"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))

    @property
    def age_bands_in_week(self) -> set[AgeBand]:
        return set(self.daily_age_bands.values())

    @property
    def has_minor_age_band(self) -> bool:
        return any(band != AgeBand.ADULT for band in self.daily_age_bands.values())

    @property
    def age_at_week_start(self) -> int:
        return self.daily_ages.get(self.week.week_start_date, 0)

    def is_school_day(self, day: date) -> bool:
        return any(entry.is_school_day for entry in self.daily_entries.get(day, ()))


@dataclass(frozen=True)
class BirthdayInWeek:
    has_birthday: bool
    birthday_date: Optional[date] = None
    new_age: Optional[int] = None


@dataclass
class RuleDetails:
    """Structured detail about a rule evaluation, stored in the audit trail."""
    rule_description: str
    checked_values: dict = field(default_factory=dict)
    threshold: Optional[Any] = None
    actual_value: Optional[Any] = None
    affected_dates: Optional[list[str]] = None  # ISO date strings, date order
    affected_entries: Optional[list[str]] = None
    message: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "rule_description": self.rule_description,
            "checked_values": self.checked_values,
        }
        for key in ("threshold", "actual_value", "affected_dates", "affected_entries", "message"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass
class RuleResult:
    """Result of evaluating a single compliance rule."""
    rule_id: str
    rule_name: str
    result: RuleOutcome
    details: RuleDetails
    error_message: Optional[str] = None
    remediation_guidance: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.result == RuleOutcome.FAIL

    def to_dict(self) -> dict:
        return {
            "rule_id": self.rule_id,
            "rule_name": self.rule_name,
            "result": self.result.value,
            "details": self.details.to_dict(),
            "error_message": self.error_message,
            "remediation_guidance": self.remediation_guidance,
        }


@dataclass
class Violation:
    """Worker-facing projection of a failed rule."""
    rule_id: str
    rule_name: str
    message: str
    remediation: str
    affected_dates: Optional[list[str]] = None
    affected_entries: Optional[list[str]] = None

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "rule_id": self.rule_id,
            "rule_name": self.rule_name,
            "message": self.message,
            "remediation": self.remediation,
            "affected_dates": self.affected_dates,
            "affected_entries": self.affected_entries,
        }


@dataclass
class CheckResult:
    """Aggregate outcome of all rules for one week."""
    passed: bool
    week_id: str
    worker_id: str
    checked_at: datetime
    results: list[RuleResult] = field(default_factory=list)
    failed_rules: list[RuleResult] = field(default_factory=list)
    passed_rules: list[RuleResult] = field(default_factory=list)
    not_applicable_rules: list[RuleResult] = field(default_factory=list)
    violations: list[Violation] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary for API response."""
        return {
            "passed": self.passed,
            "week_id": self.week_id,
            "worker_id": self.worker_id,
            "checked_at": self.checked_at.isoformat(),
            "results": [r.to_dict() for r in self.results],
            "failed_count": len(self.failed_rules),
            "passed_count": len(self.passed_rules),
            "not_applicable_count": len(self.not_applicable_rules),
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass
class PreviewResult:
    valid: bool
    violations: list[Violation] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "violations": [v.to_dict() for v in self.violations],
        }


@dataclass(frozen=True)
class AuditRecord:
    """One immutable rule outcome for one week."""
    week_id: str
    rule_id: str
    result: RuleOutcome
    details: dict
    checked_at: datetime
    worker_age_at_week_start: int

    def to_dict(self) -> dict:
        return {
            "week_id": self.week_id,
            "rule_id": self.rule_id,
            "result": self.result.value,
            "details": self.details,
            "checked_at": self.checked_at.isoformat(),
            "worker_age_at_week_start": self.worker_age_at_week_start,
        }

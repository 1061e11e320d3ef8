from datetime import datetime, date
from typing import Literal, Optional
from beanie import Document, Indexed
from pydantic import BaseModel, Field
from pymongo import IndexModel

from utils import utc_now


# Valid values mirrored from compliance.types enums
DocumentTypeValue = Literal["parental_consent", "work_permit", "safety_training"]
SupervisorRequiredValue = Literal["none", "for_minors", "always"]
WeekStatusValue = Literal["open", "submitted", "approved", "rejected"]
RuleOutcomeValue = Literal["pass", "fail", "not_applicable"]


class WorkerDoc(Document):
    name: str
    email: Indexed(str, unique=True)
    date_of_birth: date
    is_supervisor: bool = False
    disabled: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "workers"


class WorkerDocumentDoc(Document):
    """A compliance document on file (consent, permit, training). File storage lives elsewhere."""
    worker_id: Indexed(str)
    type: DocumentTypeValue
    uploaded_at: datetime = Field(default_factory=utc_now)
    expires_at: Optional[date] = None
    invalidated_at: Optional[datetime] = None  # Set on revocation; never deleted
    invalidated_by: Optional[str] = None

    class Settings:
        name = "worker_documents"
        indexes = [
            IndexModel([("worker_id", 1), ("type", 1)]),
        ]


class TaskCodeDoc(Document):
    code: Indexed(str, unique=True)  # "F1", "R2"
    name: str
    min_age_allowed: int = 12
    is_hazardous: bool = False
    power_machinery: bool = False
    driving_required: bool = False
    solo_cash_handling: bool = False
    supervisor_required: SupervisorRequiredValue = "none"
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "task_codes"


class TimesheetEntry(BaseModel):
    entry_id: str
    work_date: str  # ISO: "2025-06-10"
    task_code: str
    start_time: str  # "09:00"
    end_time: str  # "13:00"
    is_school_day: bool = False
    school_day_override_note: Optional[str] = None
    supervisor_present_name: Optional[str] = None
    meal_break_confirmed: Optional[bool] = None
    notes: Optional[str] = None


class TimesheetDoc(Document):
    """
    One worker's week, Sunday to Saturday.
    Keyed by (worker_id, week_start_date).
    """
    worker_id: Indexed(str)
    week_start_date: str  # ISO, always a Sunday
    status: WeekStatusValue = "open"
    entries: list[TimesheetEntry] = []
    submitted_at: Optional[datetime] = None
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    supervisor_notes: Optional[str] = None
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "timesheets"
        indexes = [
            IndexModel(
                [("worker_id", 1), ("week_start_date", 1)],
                unique=True,
                name="unique_worker_week",
            ),
            IndexModel([("status", 1)]),
        ]


class ComplianceRuleDoc(Document):
    """
    Jurisdiction-specific thresholds for youth labor rules.
    Unset fields fall back to the built-in defaults.
    """
    jurisdiction: Indexed(str, unique=True)  # "CA", "NY", "DEFAULT", etc.

    minimum_employment_age: Optional[int] = None

    # Ages 12-13
    daily_limit_12_13: Optional[float] = None
    weekly_limit_12_13: Optional[float] = None

    # Ages 14-15
    school_day_limit_14_15: Optional[float] = None
    non_school_day_limit_14_15: Optional[float] = None
    school_week_limit_14_15: Optional[float] = None
    non_school_week_limit_14_15: Optional[float] = None

    # Ages 16-17
    daily_limit_16_17: Optional[float] = None
    weekly_limit_16_17: Optional[float] = None
    max_days_16_17: Optional[int] = None

    # Time windows ("HH:MM")
    school_hours_start: Optional[str] = None
    school_hours_end: Optional[str] = None
    window_14_15_start: Optional[str] = None
    window_14_15_end: Optional[str] = None
    window_14_15_end_summer: Optional[str] = None
    window_16_17_start: Optional[str] = None
    window_16_17_end_school_night: Optional[str] = None
    window_16_17_end: Optional[str] = None

    solo_cash_handling_min_age: Optional[int] = None

    meal_break_after_hours: Optional[float] = None
    meal_break_duration_minutes: Optional[int] = None

    # Metadata
    source: Optional[str] = None  # "MANUAL", "DEFAULT"
    notes: Optional[str] = None  # Important caveats or exceptions
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    class Settings:
        name = "compliance_rules"


class ComplianceCheckLogDoc(Document):
    """
    One rule outcome of one compliance check.
    Append-only: records are inserted and never updated or deleted.
    """
    week_id: str
    rule_id: str
    result: RuleOutcomeValue
    details: dict = {}
    checked_at: datetime = Field(default_factory=utc_now)
    worker_age_at_week_start: int

    class Settings:
        name = "compliance_check_logs"
        indexes = [
            IndexModel([("week_id", 1), ("checked_at", -1)]),
            IndexModel([("rule_id", 1)]),
        ]

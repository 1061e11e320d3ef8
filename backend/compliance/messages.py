"""
Worker-facing messages and remediation guidance for compliance rules.

Every template is a pure function of RuleDetails so it can be rendered again
from an audit record. Messages are written for young workers (ages 12+): say
what went wrong and how to fix it.
"""

from typing import Callable, NamedTuple, Optional

from utils import parse_date, time_to_minutes

from .types import RuleDetails


GENERIC_ERROR_MESSAGE = "An error occurred while checking compliance. Please contact your supervisor."
GENERIC_ERROR_REMEDIATION = "This may be a system issue. Please try again or contact support."
DEFAULT_MESSAGE = "Compliance check failed."
DEFAULT_REMEDIATION = "Please review and correct this issue."


class MessageTemplate(NamedTuple):
    message: Callable[[RuleDetails], str]
    remediation: Callable[[RuleDetails], str]


def format_date(value) -> str:
    """e.g. "Monday, January 15"."""
    day = parse_date(value)
    return f"{day:%A, %B} {day.day}"


def format_time(value: str) -> str:
    """e.g. "3:30 PM"."""
    minutes = time_to_minutes(value)
    hour, minute = divmod(minutes, 60)
    period = "PM" if 12 <= hour < 24 else "AM"
    display_hour = hour % 12 or 12
    return f"{display_hour}:{minute:02d} {period}"


def format_hours(value) -> str:
    return f"{float(value):.1f}"


def format_limit(value) -> str:
    value = float(value)
    return str(int(value)) if value.is_integer() else f"{value:g}"


def _first(details: RuleDetails) -> dict:
    violations = details.checked_values.get("violations") or [{}]
    return violations[0]


def _first_date(details: RuleDetails) -> str:
    return format_date(details.affected_dates[0])


def _daily_limit(label: str, day_kind: str = "per day", remediation_suffix: str = " for that day") -> MessageTemplate:
    return MessageTemplate(
        message=lambda d: (
            f"Daily hour limit exceeded: {label} may work a maximum of {format_limit(d.threshold)} hours "
            f"{day_kind}. "
            f"You entered {format_hours(d.actual_value)} hours on {_first_date(d)}."
        ),
        remediation=lambda d: f"Please reduce hours to {format_limit(d.threshold)} or less{remediation_suffix}.",
    )


def _weekly_limit(label: str, week_kind: str = "per week") -> MessageTemplate:
    return MessageTemplate(
        message=lambda d: (
            f"Weekly hour limit exceeded: {label} may work a maximum of {format_limit(d.threshold)} hours "
            f"{week_kind}. Your total is {format_hours(d.actual_value)} hours."
        ),
        remediation=lambda d: f"Please reduce your total weekly hours to {format_limit(d.threshold)} or less.",
    )


def _school_hours(label: str) -> MessageTemplate:
    def message(d: RuleDetails) -> str:
        first = _first(d)
        window = f"{format_time(d.checked_values['window_start'])} - {format_time(d.checked_values['window_end'])}"
        return (
            f"School hours violation: {label} cannot work during school hours ({window}) on school days. "
            f"You logged work from {format_time(first['start_time'])} to {format_time(first['end_time'])} "
            f"on {format_date(first['date'])}."
        )

    def remediation(d: RuleDetails) -> str:
        window = f"{format_time(d.checked_values['window_start'])} - {format_time(d.checked_values['window_end'])}"
        return (
            f"Please adjust start/end times to be outside {window}, "
            "or mark this as a non-school day with an explanatory note."
        )

    return MessageTemplate(message, remediation)


def _task(heading: str, description: str, remediation: str) -> MessageTemplate:
    return MessageTemplate(
        message=lambda d: (
            f"{heading}: Task {_first(d)['task_code']} ({_first(d)['task_name']}) {description}"
        ),
        remediation=lambda d: remediation,
    )


# ============================================================================
# Documentation Rules
# ============================================================================

RULE_001_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"Parental consent required: {d.checked_values.get('worker_name', 'This worker')} is under 18 and "
        "requires a valid parental consent form on file before submitting timesheets."
    ),
    remediation=lambda d: "Please contact your supervisor to upload the parental consent form.",
)

RULE_007_MESSAGE = MessageTemplate(
    message=lambda d: (
        "Parental consent has been revoked. Timesheets cannot be submitted until new consent is provided."
    ),
    remediation=lambda d: "Please have your parent/guardian provide new consent to your supervisor.",
)

RULE_027_MESSAGE = MessageTemplate(
    message=lambda d: (
        "Work permit required: state law requires a youth employment permit for workers ages 14-17. "
        f"You are currently {d.checked_values.get('age')} years old."
    ),
    remediation=lambda d: (
        "Please obtain a work permit from your school and have your supervisor upload it before submitting."
    ),
)

RULE_028_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"Work permit expired: Your work permit expired on {format_date(d.checked_values['expires_at'])}. "
        "You cannot submit timesheets until a valid permit is on file."
    ),
    remediation=lambda d: "Please obtain a new work permit from your school and have your supervisor upload it.",
)

RULE_030_MESSAGE = MessageTemplate(
    message=lambda d: (
        "Safety training required: You must complete safety training before submitting your timesheet."
    ),
    remediation=lambda d: "Please contact your supervisor to complete and document your safety training.",
)

# ============================================================================
# Hour Limit Rules
# ============================================================================

RULE_002_MESSAGE = _daily_limit("Ages 12-13")
RULE_003_MESSAGE = _weekly_limit("Ages 12-13")
RULE_008_MESSAGE = _daily_limit(
    "Ages 14-15",
    "on school days",
    remediation_suffix=", or verify this is not a school day and update the school day designation with a note",
)
RULE_009_MESSAGE = _weekly_limit("Ages 14-15", "during school weeks")
RULE_014_MESSAGE = _daily_limit("Ages 16-17")
RULE_015_MESSAGE = _weekly_limit("Ages 16-17")
RULE_032_MESSAGE = _daily_limit("Ages 14-15", "on non-school days")
RULE_033_MESSAGE = _weekly_limit("Ages 14-15", "during non-school weeks")

RULE_018_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"Day count limit exceeded: Ages 16-17 may work a maximum of {d.threshold} days per week. "
        f"You have entries on {d.actual_value} days."
    ),
    remediation=lambda d: f"Please remove entries so you work no more than {d.threshold} days this week.",
)

# ============================================================================
# Time Window Rules
# ============================================================================

RULE_004_MESSAGE = _school_hours("Ages 12-13")
RULE_010_MESSAGE = _school_hours("Ages 14-15")
RULE_034_MESSAGE = _school_hours("Ages 16-17")

RULE_011_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"Work window violation: Ages 14-15 may only work between {format_time(_first(d)['window_start'])} "
        f"and {format_time(_first(d)['window_end'])}{' (summer hours)' if _first(d)['is_summer'] else ''}. "
        f"You logged work from {format_time(_first(d)['start_time'])} to {format_time(_first(d)['end_time'])} "
        f"on {format_date(_first(d)['date'])}."
    ),
    remediation=lambda d: (
        f"Please adjust your times to be between {format_time(_first(d)['window_start'])} "
        f"and {format_time(_first(d)['window_end'])}."
    ),
)

RULE_016_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"School night violation: Ages 16-17 cannot work past {format_time(d.threshold)} on nights before "
        f"school days. You logged work ending at {format_time(_first(d)['end_time'])} "
        f"on {format_date(_first(d)['date'])}."
    ),
    remediation=lambda d: f"Please adjust your end time to be before {format_time(d.threshold)}.",
)

RULE_017_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"Work window violation: Ages 16-17 may only work between {format_time(_first(d)['window_start'])} "
        f"and {format_time(_first(d)['window_end'])}. You logged work from "
        f"{format_time(_first(d)['start_time'])} to {format_time(_first(d)['end_time'])} "
        f"on {format_date(_first(d)['date'])}."
    ),
    remediation=lambda d: (
        f"Please adjust your times to be between {format_time(_first(d)['window_start'])} "
        f"and {format_time(_first(d)['window_end'])}."
    ),
)

# ============================================================================
# Task Restriction Rules
# ============================================================================

RULE_005_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"Task age restriction: Task {_first(d)['task_code']} ({_first(d)['task_name']}) requires a minimum "
        f"age of {_first(d)['min_age']}. You were {_first(d)['age']} years old on {format_date(_first(d)['date'])}."
    ),
    remediation=lambda d: (
        "Please remove this task from your timesheet or speak with your supervisor about reassignment."
    ),
)

RULE_020_MESSAGE = _task(
    "Power machinery restriction",
    "involves power machinery, which is prohibited for workers under 18.",
    "Please remove this task from your timesheet. Power machinery work is not permitted for minors.",
)

RULE_021_MESSAGE = _task(
    "Driving restriction",
    "requires driving, which is prohibited for workers under 18.",
    "Please remove this task from your timesheet. Driving tasks are not permitted for minors.",
)

RULE_022_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"Cash handling restriction: Task {_first(d)['task_code']} ({_first(d)['task_name']}) involves solo "
        f"cash handling, which is prohibited for workers under {d.threshold}. "
        f"You are {_first(d)['age']} years old."
    ),
    remediation=lambda d: (
        "Please remove this task from your timesheet or speak with your supervisor about supervised cash handling."
    ),
)

RULE_023_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"Minimum age not met: Workers must be at least {d.threshold} years old. "
        f"You were {_first(d)['age']} years old on {format_date(_first(d)['date'])}."
    ),
    remediation=lambda d: "Please remove these entries and speak with your supervisor.",
)

RULE_024_MESSAGE = _task(
    "Hazardous task restriction",
    "is classified as hazardous and prohibited for workers under 18.",
    "Please remove this task from your timesheet. Hazardous work is not permitted for minors.",
)

RULE_029_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"Supervisor attestation required: Task {_first(d)['task_code']} ({_first(d)['task_name']}) on "
        f"{format_date(_first(d)['date'])} requires a supervisor to be present. No supervisor name was recorded."
    ),
    remediation=lambda d: (
        "Please edit the entry and add the name of the supervisor who was present during this task."
    ),
)

# ============================================================================
# Break Rules
# ============================================================================

RULE_025_MESSAGE = MessageTemplate(
    message=lambda d: (
        f"Meal break required: You worked {format_hours(d.actual_value)} hours on {_first_date(d)}. "
        f"Workers under 18 must take a {d.checked_values.get('break_minutes', 30)}-minute meal break "
        f"when working more than {format_limit(d.threshold)} hours."
    ),
    remediation=lambda d: (
        f"Please confirm that you took a {d.checked_values.get('break_minutes', 30)}-minute meal break by "
        "checking the meal break confirmation box for that day."
    ),
)


MESSAGES: dict[str, MessageTemplate] = {
    "RULE-001": RULE_001_MESSAGE,
    "RULE-002": RULE_002_MESSAGE,
    "RULE-003": RULE_003_MESSAGE,
    "RULE-004": RULE_004_MESSAGE,
    "RULE-005": RULE_005_MESSAGE,
    "RULE-007": RULE_007_MESSAGE,
    "RULE-008": RULE_008_MESSAGE,
    "RULE-009": RULE_009_MESSAGE,
    "RULE-010": RULE_010_MESSAGE,
    "RULE-011": RULE_011_MESSAGE,
    "RULE-014": RULE_014_MESSAGE,
    "RULE-015": RULE_015_MESSAGE,
    "RULE-016": RULE_016_MESSAGE,
    "RULE-017": RULE_017_MESSAGE,
    "RULE-018": RULE_018_MESSAGE,
    "RULE-020": RULE_020_MESSAGE,
    "RULE-021": RULE_021_MESSAGE,
    "RULE-022": RULE_022_MESSAGE,
    "RULE-023": RULE_023_MESSAGE,
    "RULE-024": RULE_024_MESSAGE,
    "RULE-025": RULE_025_MESSAGE,
    "RULE-027": RULE_027_MESSAGE,
    "RULE-028": RULE_028_MESSAGE,
    "RULE-029": RULE_029_MESSAGE,
    "RULE-030": RULE_030_MESSAGE,
    "RULE-032": RULE_032_MESSAGE,
    "RULE-033": RULE_033_MESSAGE,
    "RULE-034": RULE_034_MESSAGE,
}


def render(rule_id: str, details: RuleDetails) -> Optional[tuple[str, str]]:
    """(message, remediation) for a rule, or None if the rule has no template."""
    template = MESSAGES.get(rule_id)
    if template is None:
        return None
    return template.message(details), template.remediation(details)

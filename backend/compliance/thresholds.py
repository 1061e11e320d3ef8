"""Jurisdiction thresholds injected into the rule catalog at build time."""

from dataclasses import asdict, dataclass, fields


@dataclass(frozen=True)
class ComplianceThresholds:
    """Active regulatory limits for a jurisdiction."""
    jurisdiction: str = "DEFAULT"

    minimum_employment_age: int = 12

    # Ages 12-13
    daily_limit_12_13: float = 4.0
    weekly_limit_12_13: float = 24.0

    # Ages 14-15
    school_day_limit_14_15: float = 3.0
    non_school_day_limit_14_15: float = 8.0
    school_week_limit_14_15: float = 18.0
    non_school_week_limit_14_15: float = 40.0

    # Ages 16-17
    daily_limit_16_17: float = 9.0
    weekly_limit_16_17: float = 48.0
    max_days_16_17: int = 6

    # Time windows (HH:MM)
    school_hours_start: str = "07:00"
    school_hours_end: str = "15:00"
    window_14_15_start: str = "07:00"
    window_14_15_end: str = "19:00"
    window_14_15_end_summer: str = "21:00"
    window_16_17_start: str = "06:00"
    window_16_17_end_school_night: str = "22:00"
    window_16_17_end: str = "23:30"

    # Tasks
    solo_cash_handling_min_age: int = 14

    # Breaks
    meal_break_after_hours: float = 6.0
    meal_break_duration_minutes: int = 30

    @classmethod
    def from_doc(cls, doc) -> "ComplianceThresholds":
        """Create from a ComplianceRuleDoc, keeping defaults for unset fields."""
        values = {}
        for f in fields(cls):
            value = getattr(doc, f.name, None)
            if value is not None:
                values[f.name] = value
        return cls(**values)

    def to_dict(self) -> dict:
        return asdict(self)

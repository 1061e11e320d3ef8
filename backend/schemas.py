from pydantic import BaseModel
from typing import Any


class ViolationSchema(BaseModel):
    """Worker-facing explanation of a failed rule."""
    rule_id: str
    rule_name: str
    message: str
    remediation: str
    affected_dates: list[str] | None = None  # ISO date strings, date order
    affected_entries: list[str] | None = None


class RuleResultSchema(BaseModel):
    rule_id: str
    rule_name: str
    result: str  # "pass", "fail", "not_applicable"
    details: dict[str, Any]
    error_message: str | None = None
    remediation_guidance: str | None = None


class CheckResultResponse(BaseModel):
    passed: bool
    week_id: str
    worker_id: str
    checked_at: str
    results: list[RuleResultSchema]
    failed_count: int
    passed_count: int
    not_applicable_count: int
    violations: list[ViolationSchema]


class PreviewResponse(BaseModel):
    valid: bool
    violations: list[ViolationSchema] = []


class AuditRecordSchema(BaseModel):
    week_id: str
    rule_id: str
    result: str
    details: dict[str, Any]
    checked_at: str
    worker_age_at_week_start: int


class AuditLogResponse(BaseModel):
    week_id: str
    records: list[AuditRecordSchema]


class SubmitResponse(BaseModel):
    week_id: str
    status: str
    submitted_at: str


class RuleCatalogEntry(BaseModel):
    rule_id: str
    name: str
    category: str
    description: str
    applies_to_age_bands: list[str]


class RuleCatalogResponse(BaseModel):
    jurisdiction: str
    thresholds: dict[str, Any]
    rules: list[RuleCatalogEntry]


class BirthdayResponse(BaseModel):
    worker_id: str
    week_start: str
    has_birthday: bool
    birthday_date: str | None = None
    new_age: int | None = None

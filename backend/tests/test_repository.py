"""Tests for converting stored documents into engine types."""

import asyncio
from datetime import date, datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from compliance.errors import ComplianceError
from compliance.thresholds import ComplianceThresholds
from compliance.types import DocumentType, RuleOutcome, SupervisorRequirement, WeekStatus
from db.repository import (
    document_from_doc,
    load_thresholds,
    record_from_doc,
    task_code_from_doc,
    week_from_doc,
    worker_from_doc,
)


@pytest.fixture
def task_doc():
    return SimpleNamespace(
        code="S1",
        name="Stocking",
        min_age_allowed=14,
        is_hazardous=False,
        power_machinery=False,
        driving_required=False,
        solo_cash_handling=False,
        supervisor_required="for_minors",
    )


def entry_doc(**overrides):
    values = dict(
        entry_id="e1",
        work_date="2025-06-10",
        task_code="S1",
        start_time="16:00",
        end_time="19:30",
        is_school_day=True,
        supervisor_present_name=None,
        meal_break_confirmed=None,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestConversions:

    def test_worker(self):
        doc = SimpleNamespace(
            id="665f1c", name="Jamie", email="jamie@example.com",
            date_of_birth=date(2011, 6, 12), is_supervisor=False,
        )

        worker = worker_from_doc(doc)

        assert worker.id == "665f1c"
        assert worker.date_of_birth == date(2011, 6, 12)

    def test_document(self):
        doc = SimpleNamespace(
            id="d1", type="work_permit",
            uploaded_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
            expires_at=date(2025, 12, 31), invalidated_at=None,
        )

        document = document_from_doc(doc)

        assert document.type == DocumentType.WORK_PERMIT
        assert document.is_valid_on(date(2025, 12, 31)) is True

    def test_task_code(self, task_doc):
        task = task_code_from_doc(task_doc)

        assert task.supervisor_required == SupervisorRequirement.FOR_MINORS
        assert task.min_age_allowed == 14

    def test_week_hours_derived_from_times(self, task_doc):
        doc = SimpleNamespace(
            id="t1", worker_id="w1", week_start_date="2025-06-08",
            status="open", entries=[entry_doc()],
        )

        week = week_from_doc(doc, {"S1": task_code_from_doc(task_doc)})

        assert week.status == WeekStatus.OPEN
        assert week.week_start_date == date(2025, 6, 8)
        assert week.entries[0].work_date == date(2025, 6, 10)
        assert week.entries[0].hours == 3.5

    def test_unknown_task_code(self):
        doc = SimpleNamespace(
            id="t1", worker_id="w1", week_start_date="2025-06-08",
            status="open", entries=[entry_doc(task_code="ZZ")],
        )

        with pytest.raises(ComplianceError) as exc_info:
            week_from_doc(doc, {})

        assert exc_info.value.code == "TASK_CODE_NOT_FOUND"

    def test_audit_record(self):
        doc = SimpleNamespace(
            week_id="t1", rule_id="RULE-002", result="fail", details={"threshold": 4.0},
            checked_at=datetime(2025, 6, 20, tzinfo=timezone.utc), worker_age_at_week_start=13,
        )

        record = record_from_doc(doc)

        assert record.result == RuleOutcome.FAIL
        assert record.to_dict()["checked_at"] == "2025-06-20T00:00:00+00:00"


class TestThresholds:

    def test_from_doc_keeps_defaults_for_unset_fields(self):
        doc = SimpleNamespace(jurisdiction="CA", daily_limit_12_13=3.0, weekly_limit_12_13=None)

        thresholds = ComplianceThresholds.from_doc(doc)

        assert thresholds.jurisdiction == "CA"
        assert thresholds.daily_limit_12_13 == 3.0
        assert thresholds.weekly_limit_12_13 == 24.0

    def test_load_falls_back_to_default_jurisdiction(self):
        default_doc = SimpleNamespace(jurisdiction="DEFAULT", max_days_16_17=5)

        with patch("db.repository.ComplianceRuleDoc") as mock_rules:
            mock_rules.find_one = AsyncMock(side_effect=[None, default_doc])
            thresholds = asyncio.run(load_thresholds("NY"))

        assert mock_rules.find_one.await_count == 2
        assert thresholds.jurisdiction == "DEFAULT"
        assert thresholds.max_days_16_17 == 5

    def test_load_without_any_rules_uses_built_in_values(self):
        with patch("db.repository.ComplianceRuleDoc") as mock_rules:
            mock_rules.find_one = AsyncMock(return_value=None)
            thresholds = asyncio.run(load_thresholds("TX"))

        assert thresholds == ComplianceThresholds(jurisdiction="TX")


class TestTimeRangeValidation:

    @pytest.mark.parametrize("start_time,end_time", [("18:00", "02:00"), ("16:00", "16:00")])
    def test_invalid_range_rejected(self, task_doc, start_time, end_time):
        doc = SimpleNamespace(
            id="t1", worker_id="w1", week_start_date="2025-06-08",
            status="open", entries=[entry_doc(start_time=start_time, end_time=end_time)],
        )

        with pytest.raises(ComplianceError) as exc_info:
            week_from_doc(doc, {"S1": task_code_from_doc(task_doc)})

        assert exc_info.value.code == "INVALID_TIME_RANGE"

import itertools
from datetime import date, datetime, timezone

import pytest

from compliance.audit import AuditLogger
from compliance.context import build_context
from compliance.sources import ComplianceDataSource
from compliance.types import (
    Document,
    DocumentType,
    SupervisorRequirement,
    TaskCode,
    WeekStatus,
    WorkEntry,
    Worker,
    WorkWeek,
)
from utils import minutes_to_time, parse_date, time_to_minutes


# Sunday 2025-06-08 through Saturday 2025-06-14
WEEK_START = date(2025, 6, 8)
CHECK_DATE = date(2025, 6, 20)
FIXED_NOW = datetime(2025, 6, 20, 12, 0, tzinfo=timezone.utc)


# ============================================================================
# In-memory collaborators
# ============================================================================


class InMemoryDataSource(ComplianceDataSource):
    def __init__(self, weeks=(), workers=(), documents=None):
        self.weeks = {w.id: w for w in weeks}
        self.workers = {w.id: w for w in workers}
        self.documents = documents or {}
        self.loads = 0

    async def load_week_with_entries(self, week_id):
        self.loads += 1
        return self.weeks.get(week_id)

    async def load_worker(self, worker_id):
        return self.workers.get(worker_id)

    async def load_documents(self, worker_id):
        return list(self.documents.get(worker_id, []))


class InMemoryAuditLogger(AuditLogger):
    def __init__(self, failures: int = 0):
        self.records = []
        self.failures = failures
        self.attempts = 0

    async def append(self, records):
        self.attempts += 1
        if self.failures > 0:
            self.failures -= 1
            raise ConnectionError("audit store unavailable")
        self.records.extend(records)

    async def list_for_week(self, week_id):
        return [r for r in reversed(self.records) if r.week_id == week_id]


# ============================================================================
# Task codes
# ============================================================================


@pytest.fixture
def basic_task():
    return TaskCode(code="R1", name="Customer Service")


@pytest.fixture
def tasks(basic_task):
    return {
        "basic": basic_task,
        "hazardous": TaskCode(code="H1", name="Fryer", is_hazardous=True),
        "machinery": TaskCode(code="M1", name="Meat Slicer", power_machinery=True),
        "driving": TaskCode(code="D1", name="Delivery", driving_required=True),
        "cash": TaskCode(code="C1", name="Register", solo_cash_handling=True),
        "supervised": TaskCode(
            code="S1", name="Stocking", supervisor_required=SupervisorRequirement.FOR_MINORS,
        ),
        "always_supervised": TaskCode(
            code="S2", name="Ladder Work", supervisor_required=SupervisorRequirement.ALWAYS,
        ),
        "deli": TaskCode(code="T16", name="Deli Counter", min_age_allowed=16),
    }


# ============================================================================
# Factories
# ============================================================================


@pytest.fixture
def make_worker():
    def _make_worker(date_of_birth, worker_id="w1", name="Jamie Rivera"):
        return Worker(id=worker_id, name=name, date_of_birth=parse_date(date_of_birth))

    return _make_worker


@pytest.fixture
def make_entry(basic_task):
    counter = itertools.count(1)

    def _make_entry(
        work_date,
        start_time="09:00",
        end_time=None,
        hours=None,
        task=None,
        is_school_day=False,
        supervisor_present_name=None,
        meal_break_confirmed=None,
        entry_id=None,
    ):
        if end_time is None:
            end_time = minutes_to_time(time_to_minutes(start_time) + round((hours or 1) * 60))
        return WorkEntry(
            id=entry_id or f"e{next(counter)}",
            work_date=parse_date(work_date),
            task_code=task or basic_task,
            start_time=start_time,
            end_time=end_time,
            is_school_day=is_school_day,
            supervisor_present_name=supervisor_present_name,
            meal_break_confirmed=meal_break_confirmed,
        )

    return _make_entry


@pytest.fixture
def make_week():
    def _make_week(entries=(), week_start=WEEK_START, week_id="week-1", worker_id="w1",
                   status=WeekStatus.OPEN):
        return WorkWeek(
            id=week_id,
            worker_id=worker_id,
            week_start_date=parse_date(week_start),
            status=status,
            entries=tuple(entries),
        )

    return _make_week


@pytest.fixture
def make_document():
    counter = itertools.count(1)

    def _make_document(doc_type, expires_at=None, invalidated_at=None,
                       uploaded_at=datetime(2025, 1, 10, tzinfo=timezone.utc)):
        return Document(
            id=f"doc{next(counter)}",
            type=DocumentType(doc_type),
            uploaded_at=uploaded_at,
            expires_at=parse_date(expires_at) if expires_at else None,
            invalidated_at=invalidated_at,
        )

    return _make_document


@pytest.fixture
def valid_documents(make_document):
    return [
        make_document(DocumentType.PARENTAL_CONSENT),
        make_document(DocumentType.WORK_PERMIT, expires_at="2026-01-01"),
        make_document(DocumentType.SAFETY_TRAINING),
    ]


@pytest.fixture
def make_context(make_worker, make_week, valid_documents):
    """Build an EvaluationContext from a date of birth and entries."""
    def _make_context(date_of_birth, entries=(), week_start=WEEK_START, documents=None,
                      check_date=CHECK_DATE):
        worker = make_worker(date_of_birth)
        week = make_week(entries, week_start=week_start)
        docs = valid_documents if documents is None else documents
        return build_context(worker, week, docs, check_date)

    return _make_context


# ============================================================================
# Workers by age during WEEK_START
# ============================================================================


AGE_11_DOB = "2014-01-15"
AGE_13_DOB = "2012-01-15"
AGE_15_DOB = "2010-01-15"
AGE_17_DOB = "2008-01-15"
ADULT_DOB = "2000-01-15"


@pytest.fixture
def data_source_factory(make_worker):
    def _factory(week, date_of_birth, documents=()):
        worker = make_worker(date_of_birth, worker_id=week.worker_id)
        return InMemoryDataSource(
            weeks=[week],
            workers=[worker],
            documents={worker.id: list(documents)},
        )

    return _factory

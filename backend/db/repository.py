"""
Beanie-backed collaborators for the compliance engine.

Converts stored documents into the engine's immutable dataclasses and persists
audit records.
"""

import logging
from datetime import datetime
from typing import Optional

from beanie.operators import In
from bson import ObjectId

from compliance.audit import AuditLogger
from compliance.context import validate_time_ranges
from compliance.errors import ComplianceError, WeekNotFound
from compliance.sources import ComplianceDataSource
from compliance.thresholds import ComplianceThresholds
from compliance.types import (
    AuditRecord,
    Document,
    DocumentType,
    RuleOutcome,
    SupervisorRequirement,
    TaskCode,
    WeekStatus,
    WorkEntry,
    Worker,
    WorkWeek,
)
from utils import parse_date

from .models import (
    ComplianceCheckLogDoc,
    ComplianceRuleDoc,
    TaskCodeDoc,
    TimesheetDoc,
    WorkerDoc,
    WorkerDocumentDoc,
)

logger = logging.getLogger(__name__)


# ============================================================================
# Document -> dataclass conversion
# ============================================================================


def worker_from_doc(doc) -> Worker:
    return Worker(
        id=str(doc.id),
        name=doc.name,
        email=doc.email or "",
        date_of_birth=parse_date(doc.date_of_birth),
        is_supervisor=doc.is_supervisor,
    )


def document_from_doc(doc) -> Document:
    return Document(
        id=str(doc.id),
        type=DocumentType(doc.type),
        uploaded_at=doc.uploaded_at,
        expires_at=parse_date(doc.expires_at) if doc.expires_at else None,
        invalidated_at=doc.invalidated_at,
    )


def task_code_from_doc(doc) -> TaskCode:
    return TaskCode(
        code=doc.code,
        name=doc.name,
        min_age_allowed=doc.min_age_allowed,
        is_hazardous=doc.is_hazardous,
        power_machinery=doc.power_machinery,
        driving_required=doc.driving_required,
        solo_cash_handling=doc.solo_cash_handling,
        supervisor_required=SupervisorRequirement(doc.supervisor_required),
    )


def week_from_doc(doc, task_codes: dict[str, TaskCode]) -> WorkWeek:
    """Build a WorkWeek; every entry needs a known task code and must end after it starts."""
    entries = []
    for entry in doc.entries:
        task_code = task_codes.get(entry.task_code)
        if task_code is None:
            raise ComplianceError(
                f"Task code {entry.task_code} not found for timesheet {doc.id}",
                code="TASK_CODE_NOT_FOUND",
            )
        entries.append(WorkEntry(
            id=entry.entry_id,
            work_date=parse_date(entry.work_date),
            task_code=task_code,
            start_time=entry.start_time,
            end_time=entry.end_time,
            is_school_day=entry.is_school_day,
            supervisor_present_name=entry.supervisor_present_name,
            meal_break_confirmed=entry.meal_break_confirmed,
        ))
    validate_time_ranges(entries)

    return WorkWeek(
        id=str(doc.id),
        worker_id=doc.worker_id,
        week_start_date=parse_date(doc.week_start_date),
        status=WeekStatus(doc.status),
        entries=tuple(entries),
    )


def record_from_doc(doc) -> AuditRecord:
    return AuditRecord(
        week_id=doc.week_id,
        rule_id=doc.rule_id,
        result=RuleOutcome(doc.result),
        details=doc.details,
        checked_at=doc.checked_at,
        worker_age_at_week_start=doc.worker_age_at_week_start,
    )


def record_to_doc(record: AuditRecord) -> ComplianceCheckLogDoc:
    return ComplianceCheckLogDoc(
        week_id=record.week_id,
        rule_id=record.rule_id,
        result=record.result.value,
        details=record.details,
        checked_at=record.checked_at,
        worker_age_at_week_start=record.worker_age_at_week_start,
    )


# ============================================================================
# Queries
# ============================================================================


async def get_by_id(model, doc_id: str):
    """Fetch a document by id; malformed ids are treated as missing."""
    if not ObjectId.is_valid(doc_id):
        return None
    return await model.get(ObjectId(doc_id))


async def load_thresholds(jurisdiction: str = "DEFAULT") -> ComplianceThresholds:
    """Thresholds for a jurisdiction, falling back to DEFAULT and then to built-in values."""
    rules_doc = await ComplianceRuleDoc.find_one(ComplianceRuleDoc.jurisdiction == jurisdiction)
    if not rules_doc and jurisdiction != "DEFAULT":
        logger.info("No compliance rules for %s, using DEFAULT", jurisdiction)
        rules_doc = await ComplianceRuleDoc.find_one(ComplianceRuleDoc.jurisdiction == "DEFAULT")

    if not rules_doc:
        return ComplianceThresholds(jurisdiction=jurisdiction)
    return ComplianceThresholds.from_doc(rules_doc)


class BeanieComplianceDataSource(ComplianceDataSource):

    async def load_week_with_entries(self, week_id: str) -> Optional[WorkWeek]:
        doc = await get_by_id(TimesheetDoc, week_id)
        if doc is None:
            return None

        codes = sorted({entry.task_code for entry in doc.entries})
        task_docs = await TaskCodeDoc.find(In(TaskCodeDoc.code, codes)).to_list() if codes else []
        task_codes = {t.code: task_code_from_doc(t) for t in task_docs}
        return week_from_doc(doc, task_codes)

    async def load_worker(self, worker_id: str) -> Optional[Worker]:
        doc = await get_by_id(WorkerDoc, worker_id)
        return worker_from_doc(doc) if doc else None

    async def load_documents(self, worker_id: str) -> list[Document]:
        docs = await WorkerDocumentDoc.find(WorkerDocumentDoc.worker_id == worker_id).to_list()
        return [document_from_doc(d) for d in docs]


class BeanieAuditLogger(AuditLogger):

    async def append(self, records: list[AuditRecord]) -> None:
        await ComplianceCheckLogDoc.insert_many([record_to_doc(r) for r in records])

    async def list_for_week(self, week_id: str) -> list[AuditRecord]:
        """Audit records for a week, newest first."""
        docs = await ComplianceCheckLogDoc.find(
            ComplianceCheckLogDoc.week_id == week_id
        ).sort(-ComplianceCheckLogDoc.checked_at).to_list()
        return [record_from_doc(d) for d in docs]


class BeanieTimesheetStore:
    """Status transitions for timesheets. Compliance gating happens in the caller."""

    async def mark_submitted(self, week_id: str, submitted_at: datetime) -> None:
        doc = await get_by_id(TimesheetDoc, week_id)
        if doc is None:
            raise WeekNotFound(week_id)
        doc.status = WeekStatus.SUBMITTED.value
        doc.submitted_at = submitted_at
        doc.updated_at = submitted_at
        await doc.save()

from .database import init_db, close_db
from .models import (
    WorkerDoc,
    WorkerDocumentDoc,
    TaskCodeDoc,
    TimesheetDoc,
    TimesheetEntry,
    ComplianceRuleDoc,
    ComplianceCheckLogDoc,
)
from .repository import (
    BeanieAuditLogger,
    BeanieComplianceDataSource,
    BeanieTimesheetStore,
    get_by_id,
    load_thresholds,
)

__all__ = [
    "init_db",
    "close_db",
    "WorkerDoc",
    "WorkerDocumentDoc",
    "TaskCodeDoc",
    "TimesheetDoc",
    "TimesheetEntry",
    "ComplianceRuleDoc",
    "ComplianceCheckLogDoc",
    "BeanieAuditLogger",
    "BeanieComplianceDataSource",
    "BeanieTimesheetStore",
    "get_by_id",
    "load_thresholds",
]

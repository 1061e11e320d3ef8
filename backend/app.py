import logging
from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware

from compliance import (
    ComplianceEngine,
    ComplianceError,
    WeekNotFound,
    WorkerNotFound,
    birthday_within_week,
    build_default_registry,
)
from compliance.config import COMPLIANCE_JURISDICTION, LOG_LEVEL
from compliance.types import WeekStatus
from db import (
    init_db,
    close_db,
    BeanieAuditLogger,
    BeanieComplianceDataSource,
    BeanieTimesheetStore,
    load_thresholds,
)
from schemas import (
    AuditLogResponse,
    BirthdayResponse,
    CheckResultResponse,
    PreviewResponse,
    RuleCatalogResponse,
    SubmitResponse,
)
from utils import parse_date, utc_now

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "This timesheet could not be checked. Please contact your supervisor."
INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please contact your supervisor."


@asynccontextmanager
async def lifespan(app: FastAPI):
    await init_db()
    thresholds = await load_thresholds(COMPLIANCE_JURISDICTION)
    app.state.audit_logger = BeanieAuditLogger()
    app.state.engine = ComplianceEngine(
        data_source=BeanieComplianceDataSource(),
        audit_logger=app.state.audit_logger,
        registry=build_default_registry(thresholds),
    )
    app.state.timesheets = BeanieTimesheetStore()
    logger.info("Compliance engine ready for jurisdiction %s", thresholds.jurisdiction)
    yield
    await close_db()


def get_engine(request: Request) -> ComplianceEngine:
    return request.app.state.engine


def get_audit_logger(request: Request) -> BeanieAuditLogger:
    return request.app.state.audit_logger


def get_timesheet_store(request: Request) -> BeanieTimesheetStore:
    return request.app.state.timesheets


app = FastAPI(title="youthCompliance", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _raise_for_compliance_error(e: ComplianceError):
    """Workers get a generic message; the code goes to the log for operators."""
    if isinstance(e, (WeekNotFound, WorkerNotFound)):
        logger.warning("Compliance check not found: %s (%s)", e.code, e)
        raise HTTPException(status_code=404, detail={"message": NOT_FOUND_MESSAGE, "code": e.code})
    logger.error("Compliance check failed: %s (%s)", e.code, e)
    raise HTTPException(status_code=500, detail={"message": INTERNAL_ERROR_MESSAGE, "code": e.code})


@app.post("/timesheets/{week_id}/compliance/check", response_model=CheckResultResponse)
async def run_compliance_check(
    week_id: str,
    stop_on_first_failure: bool = False,
    engine: ComplianceEngine = Depends(get_engine),
):
    try:
        result = await engine.run_check(week_id, stop_on_first_failure=stop_on_first_failure)
    except ComplianceError as e:
        _raise_for_compliance_error(e)
    return result.to_dict()


@app.get("/timesheets/{week_id}/compliance/preview", response_model=PreviewResponse)
async def preview_compliance(week_id: str, engine: ComplianceEngine = Depends(get_engine)):
    try:
        preview = await engine.validate_compliance(week_id)
    except ComplianceError as e:
        _raise_for_compliance_error(e)
    return preview.to_dict()


@app.get("/timesheets/{week_id}/compliance/logs", response_model=AuditLogResponse)
async def get_compliance_logs(week_id: str, audit_logger=Depends(get_audit_logger)):
    records = await audit_logger.list_for_week(week_id)
    return {"week_id": week_id, "records": [r.to_dict() for r in records]}


@app.post("/timesheets/{week_id}/submit", response_model=SubmitResponse)
async def submit_timesheet(
    week_id: str,
    engine: ComplianceEngine = Depends(get_engine),
    timesheets=Depends(get_timesheet_store),
):
    try:
        week = await engine.data_source.load_week_with_entries(week_id)
        if week is None:
            raise WeekNotFound(week_id)
        if week.status != WeekStatus.OPEN:
            raise HTTPException(
                status_code=409,
                detail=f"Timesheet is {week.status.value}; only open timesheets can be submitted",
            )

        result = await engine.run_check(week_id)
        if not result.passed:
            raise HTTPException(
                status_code=422,
                detail={
                    "message": "Timesheet has compliance violations",
                    "violations": [v.to_dict() for v in result.violations],
                },
            )

        submitted_at = utc_now()
        await timesheets.mark_submitted(week_id, submitted_at)
    except ComplianceError as e:
        _raise_for_compliance_error(e)

    logger.info("Timesheet %s submitted", week_id)
    return {
        "week_id": week_id,
        "status": WeekStatus.SUBMITTED.value,
        "submitted_at": submitted_at.isoformat(),
    }


@app.get("/compliance/rules", response_model=RuleCatalogResponse)
async def get_rule_catalog(engine: ComplianceEngine = Depends(get_engine)):
    rules = list(engine.registry)
    thresholds = rules[0].thresholds if rules else None
    return {
        "jurisdiction": thresholds.jurisdiction if thresholds else COMPLIANCE_JURISDICTION,
        "thresholds": thresholds.to_dict() if thresholds else {},
        "rules": engine.registry.catalog(),
    }


@app.get("/workers/{worker_id}/birthday", response_model=BirthdayResponse)
async def get_birthday_in_week(
    worker_id: str,
    week_start: str,
    engine: ComplianceEngine = Depends(get_engine),
):
    try:
        start = parse_date(week_start)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid date format. Use YYYY-MM-DD")

    worker = await engine.data_source.load_worker(worker_id)
    if worker is None:
        raise HTTPException(status_code=404, detail="Worker not found")

    birthday = birthday_within_week(worker.date_of_birth, start)
    return {
        "worker_id": worker_id,
        "week_start": start.isoformat(),
        "has_birthday": birthday.has_birthday,
        "birthday_date": birthday.birthday_date.isoformat() if birthday.birthday_date else None,
        "new_age": birthday.new_age,
    }

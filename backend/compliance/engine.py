"""Compliance engine: builds the context, runs the rules, records the outcome."""

import logging
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from utils import today_in_timezone, utc_now

from .audit import AuditLogger, build_audit_records
from .config import AUDIT_WRITE_ATTEMPTS, COMPLIANCE_TIMEZONE
from .context import build_context
from .errors import WeekNotFound, WorkerNotFound
from .formatter import to_violations
from .messages import GENERIC_ERROR_MESSAGE, GENERIC_ERROR_REMEDIATION
from .registry import RuleRegistry, build_default_registry
from .rules import BaseRule
from .sources import ComplianceDataSource
from .types import (
    CheckResult,
    EvaluationContext,
    PreviewResult,
    RuleDetails,
    RuleOutcome,
    RuleResult,
)

logger = logging.getLogger(__name__)


def filter_applicable_rules(context: EvaluationContext, rules: Iterable[BaseRule]) -> list[BaseRule]:
    """Rules relevant to at least one age band present in the week, in order."""
    bands = context.age_bands_in_week
    return [rule for rule in rules if rule.applies_to(bands)]


def _evaluate_safely(rule: BaseRule, context: EvaluationContext) -> RuleResult:
    try:
        return rule.evaluate(context)
    except Exception as e:
        logger.exception("Rule %s raised while evaluating week %s", rule.rule_id, context.week.id)
        return RuleResult(
            rule_id=rule.rule_id,
            rule_name=rule.name,
            result=RuleOutcome.FAIL,
            details=RuleDetails(
                rule_description=rule.get_description(),
                checked_values={"error": type(e).__name__},
                message=GENERIC_ERROR_MESSAGE,
            ),
            error_message=GENERIC_ERROR_MESSAGE,
            remediation_guidance=GENERIC_ERROR_REMEDIATION,
        )


def evaluate_rules(
    context: EvaluationContext,
    rules: Iterable[BaseRule],
    stop_on_first_failure: bool = False,
    checked_at: Optional[datetime] = None,
) -> CheckResult:
    """
    Evaluate rules against a context.

    Rules run in registration order. A rule that raises is converted to a
    failing result and the remaining rules still run. With
    stop_on_first_failure, rules after the first failure are not evaluated.
    """
    result = CheckResult(
        passed=True,
        week_id=context.week.id,
        worker_id=context.worker.id,
        checked_at=checked_at or utc_now(),
    )

    for rule in filter_applicable_rules(context, rules):
        rule_result = _evaluate_safely(rule, context)
        result.results.append(rule_result)

        if rule_result.result == RuleOutcome.FAIL:
            result.failed_rules.append(rule_result)
        elif rule_result.result == RuleOutcome.PASS:
            result.passed_rules.append(rule_result)
        else:
            result.not_applicable_rules.append(rule_result)

        if stop_on_first_failure and rule_result.failed:
            break

    result.passed = not result.failed_rules
    result.violations = to_violations(result.failed_rules)
    return result


class ComplianceEngine:
    """
    Runs compliance checks for one worker-week at a time.

    The registry is read-only and the engine keeps no per-check state, so one
    engine serves concurrent requests.
    """

    def __init__(
        self,
        data_source: ComplianceDataSource,
        audit_logger: Optional[AuditLogger] = None,
        registry: Optional[RuleRegistry] = None,
        clock: Optional[Callable[[], date]] = None,
        now: Callable[[], datetime] = utc_now,
        audit_attempts: int = AUDIT_WRITE_ATTEMPTS,
    ):
        self.data_source = data_source
        self.audit_logger = audit_logger
        self.registry = registry if registry is not None else build_default_registry()
        self.clock = clock or (lambda: today_in_timezone(COMPLIANCE_TIMEZONE))
        self.now = now
        self.audit_attempts = max(1, audit_attempts)

    async def build_context(self, week_id: str) -> EvaluationContext:
        """Load the week, worker and documents and build the evaluation snapshot."""
        week = await self.data_source.load_week_with_entries(week_id)
        if week is None:
            raise WeekNotFound(week_id)

        worker = await self.data_source.load_worker(week.worker_id)
        if worker is None:
            raise WorkerNotFound(week.worker_id)

        documents = await self.data_source.load_documents(worker.id)
        return build_context(worker, week, documents, self.clock())

    async def run_check(self, week_id: str, stop_on_first_failure: bool = False) -> CheckResult:
        """Full check: evaluates every applicable rule and records each outcome."""
        context = await self.build_context(week_id)
        logger.info("Running compliance check for week %s (worker %s)", week_id, context.worker.id)

        result = evaluate_rules(
            context,
            self.registry,
            stop_on_first_failure=stop_on_first_failure,
            checked_at=self.now(),
        )

        await self._write_audit(build_audit_records(week_id, result.results, context, result.checked_at))

        logger.info(
            "Compliance check for week %s: passed=%s failed=%d passed_rules=%d not_applicable=%d",
            week_id, result.passed, len(result.failed_rules),
            len(result.passed_rules), len(result.not_applicable_rules),
        )
        return result

    async def validate_compliance(self, week_id: str) -> PreviewResult:
        """Side-effect-free preview of run_check; nothing is written to the audit trail."""
        context = await self.build_context(week_id)
        result = evaluate_rules(context, self.registry, checked_at=self.now())
        return PreviewResult(valid=result.passed, violations=result.violations)

    async def _write_audit(self, records) -> None:
        if self.audit_logger is None or not records:
            return

        for attempt in range(1, self.audit_attempts + 1):
            try:
                await self.audit_logger.append(records)
                return
            except Exception as e:
                if attempt < self.audit_attempts:
                    logger.warning(
                        "Audit write for week %s failed (attempt %d/%d): %s",
                        records[0].week_id, attempt, self.audit_attempts, e,
                    )
                else:
                    logger.error(
                        "Audit write for week %s failed after %d attempts; %d records not persisted",
                        records[0].week_id, self.audit_attempts, len(records),
                        exc_info=True,
                    )

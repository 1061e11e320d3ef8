"""Append-only audit trail of rule outcomes."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Iterable

from .types import AuditRecord, EvaluationContext, RuleResult


class AuditLogger(ABC):
    """Durable store for audit records. There is no update or delete path."""

    @abstractmethod
    async def append(self, records: list[AuditRecord]) -> None:
        """Persist a batch of records for one check."""


def build_audit_records(
    week_id: str,
    results: Iterable[RuleResult],
    context: EvaluationContext,
    checked_at: datetime,
) -> list[AuditRecord]:
    """One record per rule outcome, stamped with the worker's age at week start."""
    age = context.age_at_week_start
    return [
        AuditRecord(
            week_id=week_id,
            rule_id=result.rule_id,
            result=result.result,
            details=result.details.to_dict(),
            checked_at=checked_at,
            worker_age_at_week_start=age,
        )
        for result in results
    ]

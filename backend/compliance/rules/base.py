"""Base class for compliance rules."""

from abc import ABC, abstractmethod
from collections.abc import Iterable

from ..messages import render
from ..thresholds import ComplianceThresholds
from ..types import (
    AgeBand,
    EvaluationContext,
    RuleCategory,
    RuleDetails,
    RuleOutcome,
    RuleResult,
)


class BaseRule(ABC):
    """
    A pure predicate over an EvaluationContext.

    Subclasses declare rule_id, name, category and the age bands they are
    relevant to (empty means always relevant). Thresholds are injected when
    the registry is built; evaluate() must not perform I/O.
    """

    rule_id: str = ""
    name: str = ""
    category: RuleCategory
    description: str = ""
    applies_to_age_bands: tuple[AgeBand, ...] = ()

    def __init__(self, thresholds: ComplianceThresholds | None = None):
        self.thresholds = thresholds or ComplianceThresholds()

    @abstractmethod
    def evaluate(self, context: EvaluationContext) -> RuleResult:
        """Evaluate the rule against the context."""

    def applies_to(self, age_bands: Iterable[AgeBand]) -> bool:
        if not self.applies_to_age_bands:
            return True
        return any(band in self.applies_to_age_bands for band in age_bands)

    def get_description(self) -> str:
        return self.description

    def passed(self, **details) -> RuleResult:
        return RuleResult(
            rule_id=self.rule_id,
            rule_name=self.name,
            result=RuleOutcome.PASS,
            details=RuleDetails(rule_description=self.get_description(), **details),
        )

    def not_applicable(self, description: str | None = None, **details) -> RuleResult:
        return RuleResult(
            rule_id=self.rule_id,
            rule_name=self.name,
            result=RuleOutcome.NOT_APPLICABLE,
            details=RuleDetails(rule_description=description or self.get_description(), **details),
        )

    def failed(self, **details) -> RuleResult:
        """Build a failing result and render its worker-facing text from the details."""
        rule_details = RuleDetails(rule_description=self.get_description(), **details)
        rendered = render(self.rule_id, rule_details)
        message, remediation = rendered if rendered else (None, None)
        rule_details.message = message
        return RuleResult(
            rule_id=self.rule_id,
            rule_name=self.name,
            result=RuleOutcome.FAIL,
            details=rule_details,
            error_message=message,
            remediation_guidance=remediation,
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.rule_id}>"


def unique_dates(violations: list[dict]) -> list[str]:
    """Distinct ISO dates of a violation list, in first-seen order."""
    return list(dict.fromkeys(v["date"] for v in violations))

"""Projection of failed rule results into worker-facing violations."""

from typing import Iterable

from .messages import DEFAULT_MESSAGE, DEFAULT_REMEDIATION, render
from .types import RuleResult, Violation


def to_violation(result: RuleResult) -> Violation:
    """
    Build the Violation for a failed result.

    Text comes from the result when the rule already rendered it, otherwise it
    is rendered again from the details.
    """
    message = result.error_message or result.details.message
    remediation = result.remediation_guidance
    if message is None or remediation is None:
        rendered = None
        try:
            rendered = render(result.rule_id, result.details)
        except (KeyError, IndexError, TypeError, ValueError):
            # Details from a failure boundary carry no template fields
            rendered = None
        if rendered is not None:
            message = message or rendered[0]
            remediation = remediation or rendered[1]

    return Violation(
        rule_id=result.rule_id,
        rule_name=result.rule_name,
        message=message or DEFAULT_MESSAGE,
        remediation=remediation or DEFAULT_REMEDIATION,
        affected_dates=result.details.affected_dates,
        affected_entries=result.details.affected_entries,
    )


def to_violations(results: Iterable[RuleResult]) -> list[Violation]:
    """Violations for the failed results, in the given order."""
    return [to_violation(result) for result in results if result.failed]

"""Immutable, ordered rule registry."""

from typing import Iterable, Iterator, Optional

from .rules import ALL_RULES, BaseRule
from .thresholds import ComplianceThresholds


class RuleRegistry:
    """
    An ordered, read-only collection of rules.

    Registration order is evaluation order. Instances hold no mutable state and
    can be shared between concurrent checks.
    """

    def __init__(self, rules: Iterable[BaseRule] = ()):
        rules = tuple(rules)
        seen = set()
        for rule in rules:
            if rule.rule_id in seen:
                raise ValueError(f"Duplicate rule id: {rule.rule_id}")
            seen.add(rule.rule_id)
        self._rules = rules

    def __iter__(self) -> Iterator[BaseRule]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, rule_id: str) -> bool:
        return self.get(rule_id) is not None

    @property
    def rules(self) -> tuple[BaseRule, ...]:
        return self._rules

    @property
    def rule_ids(self) -> list[str]:
        return [rule.rule_id for rule in self._rules]

    def get(self, rule_id: str) -> Optional[BaseRule]:
        for rule in self._rules:
            if rule.rule_id == rule_id:
                return rule
        return None

    def with_rules(self, *rules: BaseRule) -> "RuleRegistry":
        """A new registry with extra rules appended."""
        return RuleRegistry(self._rules + rules)

    def catalog(self) -> list[dict]:
        return [
            {
                "rule_id": rule.rule_id,
                "name": rule.name,
                "category": rule.category.value,
                "description": rule.get_description(),
                "applies_to_age_bands": [band.value for band in rule.applies_to_age_bands],
            }
            for rule in self._rules
        ]


def build_default_registry(thresholds: Optional[ComplianceThresholds] = None) -> RuleRegistry:
    """The full rule catalog bound to a jurisdiction's thresholds."""
    thresholds = thresholds or ComplianceThresholds()
    return RuleRegistry(rule_cls(thresholds) for rule_cls in ALL_RULES)

"""
Documentation rules: required documents on file for minors.

Consent and safety training must be valid on the check date. A work permit is
split in two rules: one for "on file" and one for "not expired", so an expired
permit produces a specific message.

A failing gate reports the document it wanted as the threshold, what was found
("missing", "revoked" or "expired") as the actual value, and the minor work
dates and entries it blocks.
"""

from typing import Optional

from ..types import (
    AgeBand,
    Document,
    DocumentType,
    EvaluationContext,
    MINOR_AGE_BANDS,
    RuleCategory,
    RuleResult,
)
from .base import BaseRule


def _find_valid(context: EvaluationContext, doc_type: DocumentType) -> Optional[Document]:
    for doc in context.documents:
        if doc.type == doc_type and doc.is_valid_on(context.check_date):
            return doc
    return None


def _on_file(context: EvaluationContext, doc_type: DocumentType) -> list[Document]:
    """Non-revoked documents of a type, regardless of expiry."""
    return [
        doc for doc in context.documents
        if doc.type == doc_type and doc.invalidated_at is None
    ]


def _find_on_file(context: EvaluationContext, doc_type: DocumentType) -> Optional[Document]:
    """Latest non-revoked document of a type, regardless of expiry."""
    candidates = _on_file(context, doc_type)
    if not candidates:
        return None
    return max(candidates, key=lambda d: d.uploaded_at)


def _missing_status(context: EvaluationContext, doc_type: DocumentType) -> str:
    """Why no document of a type is valid: expired, revoked or missing."""
    if _on_file(context, doc_type):
        return "expired"
    if any(doc.type == doc_type for doc in context.documents):
        return "revoked"
    return "missing"


def _requires_work_permit(context: EvaluationContext) -> bool:
    return any(14 <= age < 18 for age in context.daily_ages.values())


class DocumentationRule(BaseRule):
    category = RuleCategory.DOCUMENTATION
    applies_to_age_bands = MINOR_AGE_BANDS

    # Youngest age the document is required for
    min_age = 0

    def blocked_work(self, context: EvaluationContext) -> tuple[list[str], list[str]]:
        """ISO dates and entry ids worked at an age that requires the document."""
        dates, entry_ids = [], []
        for day, entries in context.daily_entries.items():
            age = context.daily_ages.get(day)
            if age is None or not self.min_age <= age < 18:
                continue
            dates.append(day.isoformat())
            entry_ids.extend(entry.id for entry in entries)
        return dates, entry_ids

    def failed_gate(
        self,
        context: EvaluationContext,
        doc_type: DocumentType,
        actual_value: str,
        **checked_values,
    ) -> RuleResult:
        dates, entry_ids = self.blocked_work(context)
        return self.failed(
            checked_values=checked_values,
            threshold=f"valid {doc_type.value} on {context.check_date.isoformat()}",
            actual_value=actual_value,
            affected_dates=dates,
            affected_entries=entry_ids,
        )


class ParentalConsentRule(DocumentationRule):
    rule_id = "RULE-001"
    name = "Parental Consent Required"
    description = "Parental consent required for workers under 18"

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        if not context.has_minor_age_band:
            return self.not_applicable(checked_values={"is_minor": False})

        consent = _find_valid(context, DocumentType.PARENTAL_CONSENT)
        if consent is None:
            return self.failed_gate(
                context,
                DocumentType.PARENTAL_CONSENT,
                _missing_status(context, DocumentType.PARENTAL_CONSENT),
                has_consent=False,
                worker_name=context.worker.name,
            )

        return self.passed(
            checked_values={
                "has_consent": True,
                "document_id": consent.id,
                "uploaded_at": consent.uploaded_at.isoformat(),
            },
        )


class ParentalConsentNotRevokedRule(DocumentationRule):
    rule_id = "RULE-007"
    name = "Parental Consent Not Revoked"
    description = "Parental consent must not be revoked"

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        if not context.has_minor_age_band:
            return self.not_applicable(checked_values={"is_minor": False})

        revoked = [
            doc for doc in context.documents
            if doc.type == DocumentType.PARENTAL_CONSENT and doc.invalidated_at is not None
        ]
        valid = _find_valid(context, DocumentType.PARENTAL_CONSENT)

        if revoked and valid is None:
            latest = max(revoked, key=lambda d: d.invalidated_at)
            return self.failed_gate(
                context,
                DocumentType.PARENTAL_CONSENT,
                "revoked",
                revoked_at=latest.invalidated_at.isoformat(),
                has_valid_replacement=False,
            )

        return self.passed(checked_values={"has_valid_consent": valid is not None})


class WorkPermitRequiredRule(DocumentationRule):
    rule_id = "RULE-027"
    name = "Work Permit Required"
    description = "Work permit required for workers ages 14-17"
    applies_to_age_bands = (AgeBand.AGES_14_15, AgeBand.AGES_16_17)
    min_age = 14

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        if not _requires_work_permit(context):
            return self.not_applicable(checked_values={"requires_permit": False})

        permit = _find_on_file(context, DocumentType.WORK_PERMIT)
        if permit is None:
            return self.failed_gate(
                context,
                DocumentType.WORK_PERMIT,
                _missing_status(context, DocumentType.WORK_PERMIT),
                has_permit=False,
                age=max(context.daily_ages.values()),
            )

        return self.passed(checked_values={"has_permit": True, "document_id": permit.id})


class WorkPermitNotExpiredRule(DocumentationRule):
    rule_id = "RULE-028"
    name = "Work Permit Not Expired"
    description = "Work permit must not be expired"
    applies_to_age_bands = (AgeBand.AGES_14_15, AgeBand.AGES_16_17)
    min_age = 14

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        if not _requires_work_permit(context):
            return self.not_applicable(checked_values={"requires_permit": False})

        # A missing permit is reported by the "on file" rule
        permits = _on_file(context, DocumentType.WORK_PERMIT)
        if not permits:
            return self.not_applicable(checked_values={"has_permit": False})

        valid = _find_valid(context, DocumentType.WORK_PERMIT)
        if valid is None:
            # Every non-revoked permit that is not valid has an expiry date
            latest = max(permits, key=lambda d: d.expires_at)
            return self.failed_gate(
                context,
                DocumentType.WORK_PERMIT,
                latest.expires_at.isoformat(),
                expires_at=latest.expires_at.isoformat(),
                check_date=context.check_date.isoformat(),
            )

        return self.passed(
            checked_values={
                "document_id": valid.id,
                "expires_at": valid.expires_at.isoformat() if valid.expires_at else None,
                "is_valid": True,
            },
        )


class SafetyTrainingRule(DocumentationRule):
    rule_id = "RULE-030"
    name = "Safety Training Required"
    description = "Safety training required for workers under 18"

    def evaluate(self, context: EvaluationContext) -> RuleResult:
        if not context.has_minor_age_band:
            return self.not_applicable(checked_values={"is_minor": False})

        training = _find_valid(context, DocumentType.SAFETY_TRAINING)
        if training is None:
            return self.failed_gate(
                context,
                DocumentType.SAFETY_TRAINING,
                _missing_status(context, DocumentType.SAFETY_TRAINING),
                has_training=False,
            )

        return self.passed(checked_values={"has_training": True, "document_id": training.id})


DOCUMENTATION_RULES = (
    ParentalConsentRule,
    ParentalConsentNotRevokedRule,
    WorkPermitRequiredRule,
    WorkPermitNotExpiredRule,
    SafetyTrainingRule,
)

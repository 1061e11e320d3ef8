"""Tests for consent, work permit and safety training gates."""

from datetime import date, datetime, timezone

import pytest

from compliance.rules.documentation import (
    ParentalConsentNotRevokedRule,
    ParentalConsentRule,
    SafetyTrainingRule,
    WorkPermitNotExpiredRule,
    WorkPermitRequiredRule,
)
from compliance.types import DocumentType, RuleOutcome
from conftest import ADULT_DOB, AGE_13_DOB, AGE_15_DOB

REVOKED_AT = datetime(2025, 5, 1, tzinfo=timezone.utc)
JANUARY = datetime(2025, 1, 10, tzinfo=timezone.utc)
FEBRUARY = datetime(2025, 2, 10, tzinfo=timezone.utc)

ALL_RULES = (
    ParentalConsentRule,
    ParentalConsentNotRevokedRule,
    WorkPermitRequiredRule,
    WorkPermitNotExpiredRule,
    SafetyTrainingRule,
)


class TestDocumentValidity:

    def test_expiry_date_itself_is_valid(self, make_document):
        doc = make_document(DocumentType.WORK_PERMIT, expires_at="2025-06-20")

        assert doc.is_valid_on(date(2025, 6, 20)) is True
        assert doc.is_valid_on(date(2025, 6, 21)) is False

    def test_invalidated_document_is_never_valid(self, make_document):
        doc = make_document(DocumentType.PARENTAL_CONSENT, invalidated_at=REVOKED_AT)

        assert doc.is_valid_on(date(2025, 1, 1)) is False


class TestCompleteDocumentation:

    def test_all_documents_valid(self, make_context):
        context = make_context(AGE_15_DOB)

        for rule_cls in ALL_RULES:
            assert rule_cls().evaluate(context).result == RuleOutcome.PASS, rule_cls.rule_id

    def test_adult_week_not_applicable(self, make_context):
        context = make_context(ADULT_DOB, documents=[])

        for rule_cls in ALL_RULES:
            assert rule_cls().evaluate(context).result == RuleOutcome.NOT_APPLICABLE, rule_cls.rule_id


class TestParentalConsent:

    def test_missing_consent_fails(self, make_context, make_document):
        documents = [make_document(DocumentType.SAFETY_TRAINING)]
        context = make_context(AGE_13_DOB, documents=documents)

        result = ParentalConsentRule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert result.error_message.startswith("Parental consent required: Jamie Rivera is under 18")

    def test_expired_consent_fails(self, make_context, make_document):
        documents = [make_document(DocumentType.PARENTAL_CONSENT, expires_at="2025-06-01")]
        context = make_context(AGE_13_DOB, documents=documents)

        assert ParentalConsentRule().evaluate(context).result == RuleOutcome.FAIL
        assert ParentalConsentNotRevokedRule().evaluate(context).result == RuleOutcome.PASS

    def test_revoked_consent_fails_both_rules(self, make_context, make_document):
        documents = [make_document(DocumentType.PARENTAL_CONSENT, invalidated_at=REVOKED_AT)]
        context = make_context(AGE_13_DOB, documents=documents)

        revoked = ParentalConsentNotRevokedRule().evaluate(context)

        assert ParentalConsentRule().evaluate(context).result == RuleOutcome.FAIL
        assert revoked.result == RuleOutcome.FAIL
        assert revoked.error_message.startswith("Parental consent has been revoked.")

    def test_revoked_consent_with_replacement_passes(self, make_context, make_document):
        documents = [
            make_document(DocumentType.PARENTAL_CONSENT, invalidated_at=REVOKED_AT),
            make_document(DocumentType.PARENTAL_CONSENT),
        ]
        context = make_context(AGE_13_DOB, documents=documents)

        assert ParentalConsentRule().evaluate(context).result == RuleOutcome.PASS
        assert ParentalConsentNotRevokedRule().evaluate(context).result == RuleOutcome.PASS


class TestWorkPermit:

    def test_missing_permit_fails(self, make_context, make_document):
        documents = [make_document(DocumentType.PARENTAL_CONSENT)]
        context = make_context(AGE_15_DOB, documents=documents)

        result = WorkPermitRequiredRule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert "You are currently 15 years old." in result.error_message
        assert WorkPermitNotExpiredRule().evaluate(context).result == RuleOutcome.NOT_APPLICABLE

    def test_expired_permit(self, make_context, make_document):
        documents = [make_document(DocumentType.WORK_PERMIT, expires_at="2025-06-10")]
        context = make_context(AGE_15_DOB, documents=documents)

        result = WorkPermitNotExpiredRule().evaluate(context)

        assert WorkPermitRequiredRule().evaluate(context).result == RuleOutcome.PASS
        assert result.result == RuleOutcome.FAIL
        assert result.details.actual_value == "2025-06-10"
        assert "expired on Tuesday, June 10" in result.error_message

    def test_not_required_under_fourteen(self, make_context):
        context = make_context(AGE_13_DOB, documents=[])

        assert WorkPermitRequiredRule().evaluate(context).result == RuleOutcome.NOT_APPLICABLE

    def test_revoked_permit_counts_as_missing(self, make_context, make_document):
        documents = [make_document(DocumentType.WORK_PERMIT, invalidated_at=REVOKED_AT)]
        context = make_context(AGE_15_DOB, documents=documents)

        assert WorkPermitRequiredRule().evaluate(context).result == RuleOutcome.FAIL

    def test_valid_older_permit_with_expired_newer_passes(self, make_context, make_document):
        documents = [
            make_document(DocumentType.WORK_PERMIT, expires_at="2026-06-01", uploaded_at=JANUARY),
            make_document(DocumentType.WORK_PERMIT, expires_at="2025-03-01", uploaded_at=FEBRUARY),
        ]
        context = make_context(AGE_15_DOB, documents=documents)

        result = WorkPermitNotExpiredRule().evaluate(context)

        assert result.result == RuleOutcome.PASS
        assert result.details.checked_values["expires_at"] == "2026-06-01"

    def test_all_permits_expired_reports_latest_expiry(self, make_context, make_document):
        documents = [
            make_document(DocumentType.WORK_PERMIT, expires_at="2025-06-10", uploaded_at=JANUARY),
            make_document(DocumentType.WORK_PERMIT, expires_at="2025-03-01", uploaded_at=FEBRUARY),
        ]
        context = make_context(AGE_15_DOB, documents=documents)

        result = WorkPermitNotExpiredRule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert result.details.actual_value == "2025-06-10"
        assert result.details.threshold == "valid work_permit on 2025-06-20"


class TestSafetyTraining:

    def test_missing_training_fails(self, make_context, make_document):
        context = make_context(AGE_15_DOB, documents=[make_document(DocumentType.PARENTAL_CONSENT)])

        result = SafetyTrainingRule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert result.remediation_guidance == (
            "Please contact your supervisor to complete and document your safety training."
        )


class TestGateFailureDetails:

    @pytest.fixture
    def entries(self, make_entry):
        return [
            make_entry("2025-06-10", entry_id="tue"),
            make_entry("2025-06-14", entry_id="sat-am"),
            make_entry("2025-06-14", start_time="13:00", entry_id="sat-pm"),
        ]

    @pytest.mark.parametrize("rule_cls,doc_type", [
        (ParentalConsentRule, DocumentType.PARENTAL_CONSENT),
        (WorkPermitRequiredRule, DocumentType.WORK_PERMIT),
        (SafetyTrainingRule, DocumentType.SAFETY_TRAINING),
    ])
    def test_missing_document_reports_blocked_work(self, make_context, entries, rule_cls, doc_type):
        context = make_context(AGE_15_DOB, entries, documents=[])

        result = rule_cls().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert result.details.threshold == f"valid {doc_type.value} on 2025-06-20"
        assert result.details.actual_value == "missing"
        assert result.details.affected_dates == ["2025-06-10", "2025-06-14"]
        assert result.details.affected_entries == ["tue", "sat-am", "sat-pm"]

    def test_revoked_consent_reported_as_revoked(self, make_context, make_document, entries):
        documents = [make_document(DocumentType.PARENTAL_CONSENT, invalidated_at=REVOKED_AT)]
        context = make_context(AGE_13_DOB, entries, documents=documents)

        consent = ParentalConsentRule().evaluate(context)
        revoked = ParentalConsentNotRevokedRule().evaluate(context)

        assert consent.details.actual_value == "revoked"
        assert revoked.details.actual_value == "revoked"
        assert revoked.details.affected_entries == ["tue", "sat-am", "sat-pm"]

    def test_expired_training_reported_as_expired(self, make_context, make_document, entries):
        documents = [make_document(DocumentType.SAFETY_TRAINING, expires_at="2025-06-01")]
        context = make_context(AGE_15_DOB, entries, documents=documents)

        result = SafetyTrainingRule().evaluate(context)

        assert result.details.actual_value == "expired"
        assert result.details.affected_dates == ["2025-06-10", "2025-06-14"]

    def test_week_without_entries_has_no_blocked_work(self, make_context):
        context = make_context(AGE_15_DOB, documents=[])

        result = ParentalConsentRule().evaluate(context)

        assert result.result == RuleOutcome.FAIL
        assert result.details.affected_dates == []
        assert result.details.affected_entries == []

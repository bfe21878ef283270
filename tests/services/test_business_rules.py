"""
Tests for the registration business rules.

The transition validators are pure functions over a Registration, so these
run against unsaved model instances with no database:
- Ticket issuance (rejected, already issued, verification required)
- Admin override (role and reason length)
- Face verification attempt cap
- Check-in eligibility
- Manual status changes
"""

from datetime import datetime, timezone

import pytest

from app.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyIssuedError,
    InvalidIdFormatError,
    InvalidOverrideReasonError,
    InvalidStateError,
    MaxAttemptsExceededError,
    NotEligibleError,
    PermissionDeniedError,
    VerificationRequiredError,
)
from app.models.registration import Registration
from app.services.registration import business_rules
from app.utils.validators import validate_event_id, validate_user_id
from tests.utils.auth import make_token_payload


def make_registration(**overrides) -> Registration:
    fields = dict(
        id="reg_0123456789ab",
        user_id="usr_0123456789ab",
        event_id="evt_0123456789ab",
        status="pending",
        waiting_status="queued",
        face_verification_status="pending",
        ticket_availability_status="pending",
        verification_attempts=0,
        ticket_issued=False,
        ticket_issued_date=None,
        check_in_time=None,
        admin_booked=False,
        admin_override_reason=None,
    )
    fields.update(overrides)
    return Registration(**fields)


class TestIdentifierFormat:
    def test_well_formed_ids_pass(self):
        assert validate_user_id("usr_abc123def456") == "usr_abc123def456"
        assert validate_event_id("evt_abc123def456") == "evt_abc123def456"

    @pytest.mark.parametrize(
        "user_id", ["", "abc", "usr_short", "evt_abc123def456", "usr_ABC123DEF456"]
    )
    def test_malformed_user_id(self, user_id):
        with pytest.raises(InvalidIdFormatError) as exc_info:
            validate_user_id(user_id)
        assert exc_info.value.field == "user_id"

    def test_malformed_event_id(self):
        with pytest.raises(InvalidIdFormatError):
            validate_event_id("507f1f77bcf86cd799439011")


class TestTicketIssuanceRules:
    def test_rejected_registration_always_refused(self):
        # Even with every other field permissive
        registration = make_registration(
            status="rejected",
            face_verification_status="success",
            admin_booked=True,
            ticket_issued=True,
        )
        with pytest.raises(InvalidStateError):
            business_rules.validate_ticket_issuance_rules(registration)

    def test_pending_verification_requires_verification(self):
        with pytest.raises(VerificationRequiredError):
            business_rules.validate_ticket_issuance_rules(make_registration())

    def test_failed_verification_requires_verification(self):
        registration = make_registration(face_verification_status="failed")
        with pytest.raises(VerificationRequiredError):
            business_rules.validate_ticket_issuance_rules(registration)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"face_verification_status": "success"},
            {"admin_booked": True},
            {"status": "verified"},
        ],
    )
    def test_verified_or_overridden_may_issue(self, overrides):
        business_rules.validate_ticket_issuance_rules(make_registration(**overrides))

    def test_already_issued_without_verification_is_refused(self):
        registration = make_registration(
            ticket_issued=True, ticket_issued_date=datetime.now(timezone.utc)
        )
        with pytest.raises(AlreadyIssuedError):
            business_rules.validate_ticket_issuance_rules(registration)

    def test_reissue_allowed_when_verified(self):
        registration = make_registration(
            status="verified",
            ticket_issued=True,
            ticket_issued_date=datetime.now(timezone.utc),
        )
        business_rules.validate_ticket_issuance_rules(registration)

    def test_reissue_refused_when_policy_disabled(self, monkeypatch):
        monkeypatch.setattr(business_rules, "ALLOW_REISSUE_WHEN_VERIFIED", False)
        registration = make_registration(
            status="verified",
            ticket_issued=True,
            ticket_issued_date=datetime.now(timezone.utc),
        )
        with pytest.raises(AlreadyIssuedError):
            business_rules.validate_ticket_issuance_rules(registration)


class TestAdminOverrideRules:
    def test_admin_with_valid_reason(self):
        admin = make_token_payload(role="admin")
        business_rules.validate_admin_override(admin, "manually approved by support")

    @pytest.mark.parametrize("reason", [None, "", "too short", "   padded   "])
    def test_short_or_missing_reason(self, reason):
        admin = make_token_payload(role="admin")
        with pytest.raises(InvalidOverrideReasonError):
            business_rules.validate_admin_override(admin, reason)

    def test_reason_of_exactly_minimum_length(self):
        admin = make_token_payload(role="admin")
        business_rules.validate_admin_override(admin, "0123456789")

    def test_non_admin_refused(self):
        user = make_token_payload(role="attendee")
        with pytest.raises(PermissionDeniedError):
            business_rules.validate_admin_override(user, "manually approved by support")

    def test_anonymous_refused(self):
        with pytest.raises(PermissionDeniedError):
            business_rules.validate_admin_override(None, "manually approved by support")


class TestFaceVerificationAttemptRules:
    def test_first_attempt_allowed(self):
        business_rules.validate_face_verification_attempt(make_registration())

    def test_cap_reached(self):
        registration = make_registration(verification_attempts=3)
        with pytest.raises(MaxAttemptsExceededError):
            business_rules.validate_face_verification_attempt(registration)

    def test_already_successful(self):
        registration = make_registration(
            face_verification_status="success", verification_attempts=1
        )
        with pytest.raises(InvalidStateError):
            business_rules.validate_face_verification_attempt(registration)

    def test_completion_issuing_ticket_on_rejected(self):
        registration = make_registration(status="rejected")
        with pytest.raises(InvalidStateError):
            business_rules.validate_face_verification_completion(
                registration, success=True, ticket_available=True
            )
        # A failed outcome is still recorded
        business_rules.validate_face_verification_completion(
            registration, success=False, ticket_available=True
        )


class TestCheckInRules:
    def test_pending_not_eligible(self):
        with pytest.raises(NotEligibleError):
            business_rules.validate_check_in_eligibility(make_registration())

    def test_verified_eligible(self):
        business_rules.validate_check_in_eligibility(make_registration(status="verified"))

    def test_admin_booked_eligible(self):
        business_rules.validate_check_in_eligibility(make_registration(admin_booked=True))

    def test_second_check_in_refused(self):
        registration = make_registration(
            status="verified", check_in_time=datetime.now(timezone.utc)
        )
        with pytest.raises(AlreadyCheckedInError):
            business_rules.validate_check_in_eligibility(registration)


class TestManualStatusChange:
    def test_reject_before_ticket(self):
        business_rules.validate_manual_status_change(make_registration(), "rejected")

    def test_reject_after_ticket_refused(self):
        registration = make_registration(
            status="verified",
            ticket_issued=True,
            ticket_issued_date=datetime.now(timezone.utc),
        )
        with pytest.raises(InvalidStateError):
            business_rules.validate_manual_status_change(registration, "rejected")

    def test_same_status_is_a_no_op(self):
        registration = make_registration(
            status="rejected", check_in_time=datetime.now(timezone.utc)
        )
        business_rules.validate_manual_status_change(registration, "rejected")

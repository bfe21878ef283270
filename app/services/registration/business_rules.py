# app/services/registration/business_rules.py
"""
Registration business rules.

Every precondition of the registration lifecycle lives here, once. The
lifecycle service calls these validators before mutating a registration;
nothing else re-implements them.

Guards that read the database (duplicate, capacity) take a session; the
rest are pure functions over a Registration instance.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from app.constants.registration import FaceVerificationStatus, RegistrationStatus
from app.core.config import settings
from app.core.exceptions import (
    AlreadyCheckedInError,
    AlreadyIssuedError,
    DuplicateRegistrationError,
    EventFullError,
    InvalidOverrideReasonError,
    InvalidStateError,
    MaxAttemptsExceededError,
    NotEligibleError,
    NotFoundError,
    PermissionDeniedError,
    VerificationRequiredError,
)
from app.crud import crud_event, crud_registration
from app.models.event import Event
from app.models.registration import Registration
from app.schemas.token import TokenPayload
from app.utils.validators import validate_event_id, validate_user_id

logger = logging.getLogger(__name__)

# A ticket that was already issued may be issued again when the
# registration is verified, admin-booked or passed face verification.
ALLOW_REISSUE_WHEN_VERIFIED = True


# ========================================
# Admission guards
# ========================================


def check_duplicate(db: Session, user_id: str, event_id: str) -> None:
    """DuplicateGuard: one registration per (user, event) pair."""
    existing = crud_registration.registration.get_by_user_and_event(
        db, user_id=user_id, event_id=event_id
    )
    if existing:
        logger.info(
            f"Duplicate registration rejected: user={user_id}, event={event_id}"
        )
        raise DuplicateRegistrationError(user_id, event_id)


def check_capacity(db: Session, event: Event) -> None:
    """
    CapacityGuard: fails once the event holds as many registrations as its
    capacity. Call with the event row locked so the count stays valid until
    the insert commits.
    """
    capacity = crud_event.event.get_capacity(
        event, default=settings.DEFAULT_EVENT_CAPACITY
    )
    current_count = crud_registration.registration.get_count_by_event(
        db, event_id=event.id
    )
    if current_count >= capacity:
        logger.info(
            f"Registration rejected - event {event.id} at capacity "
            f"({current_count}/{capacity})"
        )
        raise EventFullError(event.id, capacity)


def validate_registration_integrity(db: Session, user_id: str, event_id: str) -> None:
    """Id formats first, then the duplicate pre-check."""
    validate_user_id(user_id)
    validate_event_id(event_id)
    check_duplicate(db, user_id, event_id)


def validate_event_capacity(db: Session, event_id: str) -> Event:
    """
    Locks the event and applies the capacity guard.

    Returns the locked event so the caller can insert within the same
    transaction.
    """
    event = crud_event.event.lock(db, event_id=event_id)
    if event is None:
        raise NotFoundError("event", event_id)
    check_capacity(db, event)
    return event


# ========================================
# Transition rules
# ========================================


def _verified_or_overridden(registration: Registration) -> bool:
    return (
        registration.face_verification_status == FaceVerificationStatus.SUCCESS
        or registration.admin_booked
        or registration.status == RegistrationStatus.VERIFIED
    )


def validate_ticket_issuance_rules(registration: Registration) -> None:
    if registration.status == RegistrationStatus.REJECTED:
        raise InvalidStateError(
            "Cannot issue ticket for rejected registration", registration.id
        )

    if registration.ticket_issued:
        if not (ALLOW_REISSUE_WHEN_VERIFIED and _verified_or_overridden(registration)):
            raise AlreadyIssuedError(registration.id)

    if not _verified_or_overridden(registration):
        raise VerificationRequiredError(registration.id)


def is_admin(user: Optional[TokenPayload]) -> bool:
    return user is not None and user.role in settings.ADMIN_ROLES


def validate_admin_override(admin_user: Optional[TokenPayload], reason: Optional[str]) -> None:
    """
    The caller must hold an admin role, and the justification must reach
    the configured minimum length once surrounding whitespace is dropped.
    """
    if not is_admin(admin_user):
        logger.warning(
            f"Admin override refused for non-admin caller "
            f"{admin_user.sub if admin_user else None}"
        )
        raise PermissionDeniedError()

    min_length = settings.MIN_OVERRIDE_REASON_LENGTH
    if not reason or len(reason.strip()) < min_length:
        raise InvalidOverrideReasonError(min_length)


def validate_face_verification_attempt(registration: Registration) -> None:
    max_attempts = settings.MAX_VERIFICATION_ATTEMPTS

    if registration.verification_attempts >= max_attempts:
        raise MaxAttemptsExceededError(registration.id, max_attempts)

    if registration.face_verification_status == FaceVerificationStatus.SUCCESS:
        raise InvalidStateError(
            "Face verification already completed successfully", registration.id
        )


def validate_face_verification_completion(
    registration: Registration, success: bool, ticket_available: bool
) -> None:
    # Completing with an available ticket issues it
    if (
        success
        and ticket_available
        and registration.status == RegistrationStatus.REJECTED
    ):
        raise InvalidStateError(
            "Cannot issue ticket for rejected registration", registration.id
        )


def validate_check_in_eligibility(registration: Registration) -> None:
    if registration.status != RegistrationStatus.VERIFIED and not registration.admin_booked:
        raise NotEligibleError(registration.id)

    if registration.check_in_time:
        raise AlreadyCheckedInError(registration.id)


def validate_manual_status_change(registration: Registration, new_status: str) -> None:
    """Status can only be changed by hand before a ticket or check-in exists."""
    if new_status == registration.status:
        return
    if registration.ticket_issued or registration.check_in_time:
        raise InvalidStateError(
            "Cannot change status after a ticket was issued or the attendee checked in",
            registration.id,
        )

# app/services/registration/lifecycle_service.py
"""
Registration Lifecycle Service

Owns every state change of a registration:
- Creation behind the duplicate and capacity guards
- Face verification start / completion
- Ticket issuance
- Admin override
- Check-in
- Manual status updates and deletion

Each transition locks the registration row, validates through
business_rules, mutates and commits in one transaction. A failed
validation rolls back, so the row is never left half-updated.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.constants.registration import (
    FaceVerificationStatus,
    RegistrationStatus,
    TicketAvailabilityStatus,
    WaitingStatus,
)
from app.core.exceptions import (
    DuplicateRegistrationError,
    NotFoundError,
    RegistrationServiceError,
)
from app.crud import crud_registration, crud_user
from app.models.registration import Registration
from app.schemas.registration import RegistrationCreate, RegistrationUpdate
from app.schemas.token import TokenPayload
from app.services.registration import business_rules
from app.utils.validators import is_registration_id

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _mark_ticket_issued(registration: Registration, now: datetime) -> None:
    # The issue date is written once, on the first issuance only
    if not registration.ticket_issued:
        registration.ticket_issued = True
        registration.ticket_issued_date = now


class RegistrationLifecycleService:
    """Service for the per-user, per-event registration state machine."""

    # ========================================
    # Lookups
    # ========================================

    def get_registration(self, db: Session, registration_id: str) -> Registration:
        registration = None
        if is_registration_id(registration_id):
            registration = crud_registration.registration.get(db, registration_id)
        if registration is None:
            raise NotFoundError("registration", registration_id)
        return registration

    @contextmanager
    def _transition(self, db: Session, registration_id: str) -> Iterator[Registration]:
        """Yield the locked registration; commit on success, roll back on error."""
        registration = None
        if is_registration_id(registration_id):
            registration = crud_registration.registration.get_for_update(
                db, registration_id
            )
        if registration is None:
            db.rollback()
            raise NotFoundError("registration", registration_id)

        try:
            yield registration
        except RegistrationServiceError as exc:
            db.rollback()
            logger.warning(
                f"Registration {registration_id} transition refused: "
                f"{exc.error_code} - {exc.message}"
            )
            raise

        crud_registration.registration.save(db, db_obj=registration)

    # ========================================
    # Creation / deletion
    # ========================================

    def create_registration(
        self,
        db: Session,
        obj_in: RegistrationCreate,
        current_user: Optional[TokenPayload] = None,
    ) -> Registration:
        """Register a user for an event behind the duplicate and capacity guards."""
        business_rules.validate_registration_integrity(
            db, obj_in.user_id, obj_in.event_id
        )
        if obj_in.admin_booked:
            business_rules.validate_admin_override(
                current_user, obj_in.admin_override_reason
            )

        if crud_user.user.get(db, obj_in.user_id) is None:
            raise NotFoundError("user", obj_in.user_id)

        try:
            business_rules.validate_event_capacity(db, obj_in.event_id)
            registration = crud_registration.registration.create_for_user(
                db, obj_in=obj_in
            )
        except IntegrityError:
            # Lost the race against a concurrent insert for the same pair
            db.rollback()
            existing = crud_registration.registration.get_by_user_and_event(
                db, user_id=obj_in.user_id, event_id=obj_in.event_id
            )
            if existing is None:
                raise
            logger.info(
                f"Concurrent duplicate registration rejected: "
                f"user={obj_in.user_id}, event={obj_in.event_id}"
            )
            raise DuplicateRegistrationError(obj_in.user_id, obj_in.event_id)
        except RegistrationServiceError:
            db.rollback()
            raise

        logger.info(
            f"Registration {registration.id} created: user={registration.user_id}, "
            f"event={registration.event_id}, admin_booked={registration.admin_booked}"
        )
        return registration

    def delete_registration(self, db: Session, registration_id: str) -> None:
        registration = self.get_registration(db, registration_id)
        crud_registration.registration.remove(db, id=registration.id)
        logger.info(f"Registration {registration_id} deleted")

    def update_registration(
        self, db: Session, registration_id: str, obj_in: RegistrationUpdate
    ) -> Registration:
        """Manual admin update, limited to status and waiting status."""
        with self._transition(db, registration_id) as registration:
            if obj_in.status is not None:
                business_rules.validate_manual_status_change(
                    registration, obj_in.status.value
                )
                registration.status = obj_in.status.value
            if obj_in.waiting_status is not None:
                registration.waiting_status = obj_in.waiting_status.value

        logger.info(
            f"Registration {registration_id} updated: status={registration.status}, "
            f"waiting_status={registration.waiting_status}"
        )
        return registration

    # ========================================
    # Face verification
    # ========================================

    def start_face_verification(
        self,
        db: Session,
        registration_id: str,
        verification_ref: Optional[str] = None,
    ) -> Registration:
        with self._transition(db, registration_id) as registration:
            business_rules.validate_face_verification_attempt(registration)

            registration.face_verification_status = FaceVerificationStatus.PROCESSING
            registration.verification_attempts = registration.verification_attempts + 1
            registration.last_verification_attempt = _now()
            registration.waiting_status = WaitingStatus.PROCESSING
            if verification_ref:
                registration.face_verification_ref = verification_ref

        logger.info(
            f"Face verification started for registration {registration_id} "
            f"(attempt {registration.verification_attempts})"
        )
        return registration

    def complete_face_verification(
        self,
        db: Session,
        registration_id: str,
        success: bool,
        ticket_available: bool = False,
    ) -> Registration:
        """
        Record the verification outcome. A successful verification with a
        ticket available issues the ticket and verifies the registration in
        the same step.
        """
        with self._transition(db, registration_id) as registration:
            business_rules.validate_face_verification_completion(
                registration, success, ticket_available
            )

            registration.face_verification_status = (
                FaceVerificationStatus.SUCCESS if success else FaceVerificationStatus.FAILED
            )
            registration.ticket_availability_status = (
                TicketAvailabilityStatus.AVAILABLE
                if success and ticket_available
                else TicketAvailabilityStatus.UNAVAILABLE
            )
            registration.waiting_status = (
                WaitingStatus.COMPLETE if success else WaitingStatus.QUEUED
            )

            if success and ticket_available:
                _mark_ticket_issued(registration, _now())
                registration.status = RegistrationStatus.VERIFIED

        logger.info(
            f"Face verification for registration {registration_id} "
            f"{'succeeded' if success else 'failed'}; "
            f"ticket_issued={registration.ticket_issued}"
        )
        return registration

    # ========================================
    # Tickets / override / check-in
    # ========================================

    def issue_ticket(self, db: Session, registration_id: str) -> Registration:
        with self._transition(db, registration_id) as registration:
            business_rules.validate_ticket_issuance_rules(registration)

            _mark_ticket_issued(registration, _now())
            registration.ticket_availability_status = TicketAvailabilityStatus.AVAILABLE
            registration.status = RegistrationStatus.VERIFIED

        logger.info(f"Ticket issued for registration {registration_id}")
        return registration

    def admin_override(
        self,
        db: Session,
        registration_id: str,
        admin_user: Optional[TokenPayload],
        override_reason: Optional[str],
        issue_ticket: bool = False,
    ) -> Registration:
        with self._transition(db, registration_id) as registration:
            business_rules.validate_admin_override(admin_user, override_reason)

            registration.admin_booked = True
            registration.admin_override_reason = override_reason
            registration.status = RegistrationStatus.VERIFIED
            registration.waiting_status = WaitingStatus.COMPLETE

            if issue_ticket:
                _mark_ticket_issued(registration, _now())
                registration.ticket_availability_status = (
                    TicketAvailabilityStatus.AVAILABLE
                )

        logger.info(
            f"Admin override applied to registration {registration_id} by "
            f"{admin_user.sub}; issue_ticket={issue_ticket}"
        )
        return registration

    def check_in(self, db: Session, registration_id: str) -> Registration:
        with self._transition(db, registration_id) as registration:
            business_rules.validate_check_in_eligibility(registration)

            registration.status = RegistrationStatus.VERIFIED
            registration.check_in_time = _now()
            registration.waiting_status = WaitingStatus.COMPLETE

        logger.info(f"Registration {registration_id} checked in")
        return registration


registration_lifecycle_service = RegistrationLifecycleService()

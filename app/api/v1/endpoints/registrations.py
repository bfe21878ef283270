#app/api/v1/endpoints/registrations.py
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.crud import crud_registration
from app.schemas.registration import (
    AdminOverride,
    FaceVerificationComplete,
    FaceVerificationStart,
    Registration,
    RegistrationCreate,
    RegistrationStats,
    RegistrationStatus,
    RegistrationUpdate,
)
from app.schemas.token import TokenPayload
from app.services.registration import registration_lifecycle_service as lifecycle

router = APIRouter(prefix="/registrations", tags=["Registrations"])


@router.post("", response_model=Registration, status_code=status.HTTP_201_CREATED)
def create_registration(
    registration_in: RegistrationCreate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Register a user for an event.

    Rejects a second registration for the same user and event, and
    registrations beyond the event's capacity. `admin_booked` requires an
    admin caller and an override reason.
    """
    return lifecycle.create_registration(db, registration_in, current_user)


@router.get("", response_model=List[Registration])
def list_registrations(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return crud_registration.registration.get_multi(db, skip=skip, limit=limit)


# Fixed paths must be declared before /{registration_id}


@router.get("/stats", response_model=RegistrationStats)
def get_registration_stats(
    event_id: Optional[str] = None,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Registration counts by status and face verification status, plus
    ticket totals. Pass `event_id` to scope the numbers to one event.
    """
    return crud_registration.registration.get_stats(db, event_id=event_id)


@router.get("/status/{registration_status}", response_model=List[Registration])
def list_registrations_by_status(
    registration_status: RegistrationStatus,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Registrations in the given status, newest first."""
    return crud_registration.registration.get_multi_by_status(
        db, status=registration_status.value, skip=skip, limit=limit
    )


@router.get("/event/{event_id}", response_model=List[Registration])
def list_event_registrations(
    event_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return crud_registration.registration.get_multi_by_event(
        db, event_id=event_id, skip=skip, limit=limit
    )


@router.get("/user/{user_id}", response_model=List[Registration])
def list_user_registrations(
    user_id: str,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return crud_registration.registration.get_multi_by_user(
        db, user_id=user_id, skip=skip, limit=limit
    )


@router.get("/{registration_id}", response_model=Registration)
def get_registration(
    registration_id: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return lifecycle.get_registration(db, registration_id)


@router.put("/{registration_id}", response_model=Registration)
def update_registration(
    registration_id: str,
    registration_in: RegistrationUpdate,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_admin),
):
    """
    Manually set `status` (pending or rejected) or `waiting_status`.

    Ticket, verification and check-in fields only change through their
    dedicated transitions.
    """
    return lifecycle.update_registration(db, registration_id, registration_in)


@router.delete("/{registration_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_registration(
    registration_id: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_admin),
):
    lifecycle.delete_registration(db, registration_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/{registration_id}/checkin", response_model=Registration)
def check_in(
    registration_id: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """Check in a verified or admin-booked registration. Only once."""
    return lifecycle.check_in(db, registration_id)


@router.put(
    "/{registration_id}/face-verification/start", response_model=Registration
)
def start_face_verification(
    registration_id: str,
    verification_in: Optional[FaceVerificationStart] = None,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    verification_ref = (
        verification_in.face_verification_id if verification_in else None
    )
    return lifecycle.start_face_verification(db, registration_id, verification_ref)


@router.put(
    "/{registration_id}/face-verification/complete", response_model=Registration
)
def complete_face_verification(
    registration_id: str,
    result_in: FaceVerificationComplete,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Record the verification outcome. `success` with `ticket_available`
    also issues the ticket and verifies the registration.
    """
    return lifecycle.complete_face_verification(
        db, registration_id, result_in.success, result_in.ticket_available
    )


@router.put("/{registration_id}/issue-ticket", response_model=Registration)
def issue_ticket(
    registration_id: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    return lifecycle.issue_ticket(db, registration_id)


@router.put("/{registration_id}/admin-override", response_model=Registration)
def admin_override(
    registration_id: str,
    override_in: AdminOverride,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
):
    """
    Verify a registration by hand. Requires an admin caller and a reason
    of at least 10 characters; optionally issues the ticket.
    """
    return lifecycle.admin_override(
        db,
        registration_id,
        current_user,
        override_in.override_reason,
        issue_ticket=override_in.issue_ticket,
    )

# app/core/exceptions.py
"""
Custom exception hierarchy for the registration lifecycle service.
All exceptions inherit from RegistrationServiceError for consistent handling.
"""

from typing import Optional

from fastapi import status


class RegistrationServiceError(Exception):
    """Base exception for all registration service errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST

    def __init__(
        self,
        message: str,
        error_code: str = "REGISTRATION_ERROR",
        details: Optional[dict] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


# ===========================================
# Input Exceptions
# ===========================================


class InvalidIdFormatError(RegistrationServiceError):
    """A user or event identifier is not well formed."""

    def __init__(self, field: str, value: str):
        self.field = field
        super().__init__(
            message=f"Invalid {field} format",
            error_code="INVALID_ID_FORMAT",
            details={"field": field, "value": value},
        )


class InvalidOverrideReasonError(RegistrationServiceError):
    """Admin override reason missing or too short."""

    def __init__(self, min_length: int):
        super().__init__(
            message=f"Admin override reason must be at least {min_length} characters",
            error_code="INVALID_OVERRIDE_REASON",
            details={"min_length": min_length},
        )


class PermissionDeniedError(RegistrationServiceError):
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, message: str = "Administrator role required"):
        super().__init__(message=message, error_code="PERMISSION_DENIED")


# ===========================================
# Lookup Exceptions
# ===========================================


class NotFoundError(RegistrationServiceError):
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, resource: str, resource_id: str):
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(
            message=f"No {resource} found with ID {resource_id}",
            error_code="NOT_FOUND",
            details={"resource": resource, "id": resource_id},
        )


# ===========================================
# Admission Exceptions
# ===========================================


class DuplicateRegistrationError(RegistrationServiceError):
    """A registration already exists for the (user, event) pair."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, user_id: str, event_id: str):
        super().__init__(
            message="User is already registered for this event",
            error_code="DUPLICATE_REGISTRATION",
            details={"user_id": user_id, "event_id": event_id},
        )


class EventFullError(RegistrationServiceError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, event_id: str, capacity: int):
        super().__init__(
            message="Event has reached maximum capacity",
            error_code="EVENT_FULL",
            details={"event_id": event_id, "capacity": capacity},
        )


# ===========================================
# State Transition Exceptions
# ===========================================


class InvalidStateError(RegistrationServiceError):
    """Operation attempted from a state that does not allow it."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, message: str, registration_id: Optional[str] = None):
        super().__init__(
            message=message,
            error_code="INVALID_STATE",
            details={"registration_id": registration_id} if registration_id else {},
        )


class AlreadyIssuedError(RegistrationServiceError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, registration_id: str):
        super().__init__(
            message="Ticket has already been issued for this registration",
            error_code="ALREADY_ISSUED",
            details={"registration_id": registration_id},
        )


class AlreadyCheckedInError(RegistrationServiceError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, registration_id: str):
        super().__init__(
            message="User has already checked in",
            error_code="ALREADY_CHECKED_IN",
            details={"registration_id": registration_id},
        )


class VerificationRequiredError(RegistrationServiceError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, registration_id: str):
        super().__init__(
            message=(
                "Face verification must be successful before issuing ticket "
                "(unless admin override)"
            ),
            error_code="VERIFICATION_REQUIRED",
            details={"registration_id": registration_id},
        )


class NotEligibleError(RegistrationServiceError):
    """Check-in attempted before the registration was verified."""

    status_code = status.HTTP_409_CONFLICT

    def __init__(self, registration_id: str):
        super().__init__(
            message="Registration must be verified before check-in",
            error_code="NOT_ELIGIBLE",
            details={"registration_id": registration_id},
        )


class MaxAttemptsExceededError(RegistrationServiceError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, registration_id: str, max_attempts: int):
        super().__init__(
            message="Maximum face verification attempts exceeded",
            error_code="MAX_ATTEMPTS_EXCEEDED",
            details={"registration_id": registration_id, "max_attempts": max_attempts},
        )

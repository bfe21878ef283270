# app/constants/registration.py
"""
Constants for registration lifecycle status values.

Provides type-safe constants to replace hardcoded strings throughout the codebase.
"""


class RegistrationStatus:
    """Overall admission outcome of a registration."""
    PENDING = "pending"
    VERIFIED = "verified"
    REJECTED = "rejected"

    @classmethod
    def all_values(cls) -> list[str]:
        """Return all valid status values."""
        return [cls.PENDING, cls.VERIFIED, cls.REJECTED]

    @classmethod
    def is_valid(cls, status: str) -> bool:
        """Check if a status value is valid."""
        return status in cls.all_values()


class WaitingStatus:
    """Coarse progress label, tracked independently of the status."""
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETE = "complete"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.QUEUED, cls.PROCESSING, cls.COMPLETE]


class FaceVerificationStatus:
    """Outcome of the external face verification step."""
    PENDING = "pending"
    PROCESSING = "processing"
    SUCCESS = "success"
    FAILED = "failed"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.PENDING, cls.PROCESSING, cls.SUCCESS, cls.FAILED]


class TicketAvailabilityStatus:
    PENDING = "pending"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.PENDING, cls.AVAILABLE, cls.UNAVAILABLE]

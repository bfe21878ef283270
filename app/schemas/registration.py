# app/schemas/registration.py
from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from typing import Dict, Optional
from enum import Enum
from datetime import datetime


class RegistrationStatus(str, Enum):
    pending = "pending"
    verified = "verified"
    rejected = "rejected"


class WaitingStatus(str, Enum):
    queued = "queued"
    processing = "processing"
    complete = "complete"


class FaceVerificationStatus(str, Enum):
    pending = "pending"
    processing = "processing"
    success = "success"
    failed = "failed"


class TicketAvailabilityStatus(str, Enum):
    pending = "pending"
    available = "available"
    unavailable = "unavailable"


class ManualRegistrationStatus(str, Enum):
    """Statuses an administrator may set through the generic update."""

    pending = "pending"
    rejected = "rejected"


# --- Requests ---


class RegistrationCreate(BaseModel):
    # The legacy `user` / `event` keys are still sent by older clients
    user_id: str = Field(
        validation_alias=AliasChoices("user_id", "user"),
        json_schema_extra={"example": "usr_1a2b3c4d5e6f"},
    )
    event_id: str = Field(
        validation_alias=AliasChoices("event_id", "event"),
        json_schema_extra={"example": "evt_1a2b3c4d5e6f"},
    )
    admin_booked: bool = False
    admin_override_reason: Optional[str] = None


class RegistrationUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    status: Optional[ManualRegistrationStatus] = None
    waiting_status: Optional[WaitingStatus] = None


class FaceVerificationStart(BaseModel):
    face_verification_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("face_verification_id", "faceVerificationId"),
    )


class FaceVerificationComplete(BaseModel):
    success: bool
    ticket_available: bool = Field(
        default=False,
        validation_alias=AliasChoices("ticket_available", "ticketAvailable"),
    )


class AdminOverride(BaseModel):
    override_reason: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("override_reason", "overrideReason"),
    )
    issue_ticket: bool = Field(
        default=False,
        validation_alias=AliasChoices("issue_ticket", "issueTicket"),
    )


# --- Responses ---


class UserSummary(BaseModel):
    id: str
    full_name: str
    email: str
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


class EventSummary(BaseModel):
    id: str
    name: str
    date: datetime
    location: Optional[str] = None

    model_config = {"from_attributes": True}


class Registration(BaseModel):
    id: str
    user_id: str
    event_id: str
    registration_date: datetime
    status: RegistrationStatus
    waiting_status: WaitingStatus
    face_verification_status: FaceVerificationStatus
    ticket_availability_status: TicketAvailabilityStatus
    verification_attempts: int
    last_verification_attempt: Optional[datetime] = None
    face_verification_ref: Optional[str] = None
    ticket_issued: bool
    ticket_issued_date: Optional[datetime] = None
    check_in_time: Optional[datetime] = None
    admin_booked: bool
    admin_override_reason: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    user: Optional[UserSummary] = None
    event: Optional[EventSummary] = None

    model_config = {"from_attributes": True}


class TicketStats(BaseModel):
    total_registrations: int = 0
    tickets_issued: int = 0
    admin_booked: int = 0


class RegistrationStats(BaseModel):
    status_counts: Dict[str, int]
    face_verification_counts: Dict[str, int]
    ticket_stats: TicketStats

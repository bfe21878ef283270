import uuid
from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship
from app.db.base_class import Base
from app.constants.registration import (
    FaceVerificationStatus,
    RegistrationStatus,
    TicketAvailabilityStatus,
    WaitingStatus,
)


class Registration(Base):
    __tablename__ = "registrations"
    __table_args__ = (
        # Storage-level duplicate protection; the application pre-check only
        # exists to produce a friendlier error in the common case.
        UniqueConstraint("event_id", "user_id", name="uq_registration_event_user"),
        Index("ix_registrations_status", "status"),
        Index("ix_registrations_face_verification_status", "face_verification_status"),
    )

    id = Column(
        String, primary_key=True, default=lambda: f"reg_{uuid.uuid4().hex[:12]}"
    )
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    event_id = Column(String, ForeignKey("events.id"), nullable=False, index=True)

    registration_date = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    status = Column(
        Enum(*RegistrationStatus.all_values(), name="registration_status_enum"),
        nullable=False,
        default=RegistrationStatus.PENDING,
    )
    waiting_status = Column(
        Enum(*WaitingStatus.all_values(), name="registration_waiting_status_enum"),
        nullable=False,
        default=WaitingStatus.QUEUED,
    )
    face_verification_status = Column(
        Enum(
            *FaceVerificationStatus.all_values(),
            name="face_verification_status_enum",
        ),
        nullable=False,
        default=FaceVerificationStatus.PENDING,
    )
    ticket_availability_status = Column(
        Enum(
            *TicketAvailabilityStatus.all_values(),
            name="ticket_availability_status_enum",
        ),
        nullable=False,
        default=TicketAvailabilityStatus.PENDING,
    )

    verification_attempts = Column(Integer, nullable=False, default=0)
    last_verification_attempt = Column(DateTime(timezone=True), nullable=True)
    # Reference handed over by the external verification job
    face_verification_ref = Column(String, nullable=True)

    ticket_issued = Column(Boolean, nullable=False, default=False)
    ticket_issued_date = Column(DateTime(timezone=True), nullable=True)
    check_in_time = Column(DateTime(timezone=True), nullable=True)

    admin_booked = Column(Boolean, nullable=False, default=False)
    admin_override_reason = Column(String, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    user = relationship("User", back_populates="registrations")
    event = relationship("Event", back_populates="registrations")
